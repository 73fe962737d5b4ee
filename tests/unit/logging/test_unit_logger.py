# tests/unit/logging/test_unit_logger.py - v1
"""Tests for logging/logger.py and logging/handlers.py."""

from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler

import pytest

from meshsearch.logging.context import clear_context, set_component_context, set_request_context
from meshsearch.logging.handlers import create_rotating_handler, parse_size
from meshsearch.logging.logger import (
    ROOT_LOGGER_NAME,
    JsonFormatter,
    TextFormatter,
    setup_logging,
)


def _record(msg: str = "Hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="meshsearch.test", level=logging.INFO, pathname="", lineno=0,
        msg=msg, args=(), exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_format_basic(self):
        parsed = json.loads(JsonFormatter().format(_record()))
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Hello"
        assert "timestamp" in parsed
        assert "context" not in parsed

    def test_context_and_data(self):
        set_request_context("req1", "w1")
        set_component_context("curator", "curate")
        parsed = json.loads(
            JsonFormatter().format(_record(data={"query": "¿quién juega?"}))
        )
        assert parsed["context"] == {
            "request_id": "req1", "workspace_id": "w1",
            "component": "curator", "stage": "curate",
        }
        assert parsed["data"]["query"] == "¿quién juega?"


class TestTextFormatter:
    def teardown_method(self):
        clear_context()

    def test_format_with_context(self):
        set_request_context("req1")
        set_component_context("summarizer", "enrich")
        output = TextFormatter().format(_record("Hello text"))
        assert "<req1>" in output
        assert "[summarizer]" in output
        assert "(enrich)" in output
        assert output.endswith("- Hello text")


class TestSetupLogging:
    def teardown_method(self):
        root = logging.getLogger(ROOT_LOGGER_NAME)
        for handler in root.handlers:
            handler.close()
        root.handlers.clear()

    def test_console_only(self):
        setup_logging(level="DEBUG", log_format="text")
        root = logging.getLogger(ROOT_LOGGER_NAME)
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, TextFormatter)

    def test_with_file(self, tmp_path):
        setup_logging(log_file=str(tmp_path / "logs" / "mesh.log"))
        root = logging.getLogger(ROOT_LOGGER_NAME)
        assert any(isinstance(h, RotatingFileHandler) for h in root.handlers)

    def test_reinit_no_duplicates(self):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger(ROOT_LOGGER_NAME).handlers) == 1


class TestHandlers:
    @pytest.mark.parametrize(
        "value,expected",
        [("10MB", 10 * 1024**2), ("512kb", 512 * 1024), ("1GB", 1024**3), ("2048", 2048)],
    )
    def test_parse_size(self, value, expected):
        assert parse_size(value) == expected

    @pytest.mark.parametrize("value", ["", "10 bytes", "MB"])
    def test_parse_size_invalid(self, value):
        with pytest.raises(ValueError):
            parse_size(value)

    def test_rotating_handler(self, tmp_path):
        handler = create_rotating_handler(str(tmp_path / "a" / "b.log"), "1KB", 3)
        try:
            assert handler.maxBytes == 1024
            assert handler.backupCount == 3
            assert (tmp_path / "a").is_dir()
        finally:
            handler.close()
