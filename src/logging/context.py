# src/logging/context.py - v1
"""Contextual logging support: attach request_id, workspace_id, component
and stage to every log record emitted while a search or indexing request
is being served.
"""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per request.
_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)
_workspace_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "workspace_id", default=None
)
_component: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "component", default=None
)
_stage: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "stage", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    request_id: str | None = None
    workspace_id: str | None = None
    component: str | None = None
    stage: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        request_id=_request_id.get(),
        workspace_id=_workspace_id.get(),
        component=_component.get(),
        stage=_stage.get(),
    )


def set_request_context(request_id: str, workspace_id: str | None = None) -> None:
    """Set request-level context (called once per incoming request)."""
    _request_id.set(request_id)
    _workspace_id.set(workspace_id)


def set_component_context(component: str, stage: str | None = None) -> None:
    """Set component-level context (curator, summarizer, indexer...)."""
    _component.set(component)
    _stage.set(stage)


def set_stage(stage: str | None) -> None:
    """Update only the pipeline stage, keeping the component."""
    _stage.set(stage)


def current_stage() -> str | None:
    return _stage.get()


def clear_context() -> None:
    """Reset all context variables."""
    _request_id.set(None)
    _workspace_id.set(None)
    _component.set(None)
    _stage.set(None)
