# tests/unit/storage/test_unit_postgres_sql.py - v1
"""Tests for pgvector helpers and SQL shape (no database required)."""

from __future__ import annotations

import pytest

from meshsearch.rag.vector_store import pgvector_store
from meshsearch.storage.postgres_database import (
    SCHEMA_STATEMENTS,
    parse_vector_literal,
    to_vector_literal,
)
from meshsearch.storage.profile_store import postgres_profile_store


class TestVectorLiteral:
    def test_format(self):
        assert to_vector_literal([1, 0.5, -2]) == "[1.0,0.5,-2.0]"

    def test_parse(self):
        assert parse_vector_literal("[1,0.5,-2]") == [1.0, 0.5, -2.0]

    def test_parse_empty(self):
        assert parse_vector_literal("[]") == []

    def test_roundtrip_precision(self):
        vector = [0.123456789012345, -0.987654321]
        assert parse_vector_literal(to_vector_literal(vector)) == pytest.approx(vector)


class TestSql:
    def test_schema_has_vector_extension_and_status_check(self):
        schema = "\n".join(SCHEMA_STATEMENTS)
        assert "CREATE EXTENSION IF NOT EXISTS vector" in schema
        assert "workspaces_users" in schema
        assert "'invited'" in schema and "'rejected'" in schema

    def test_search_is_strict_and_ordered(self):
        sql = pgvector_store.SEARCH_QUERY_IN_WORKSPACE
        assert "> $2" in sql
        assert "ORDER BY" in sql
        assert "workspaces_users" in sql

    def test_candidate_list_filters_status(self):
        assert "status = ANY" in postgres_profile_store.LIST_ELIGIBLE_IN_WORKSPACE

    def test_profile_source_hash_persisted(self):
        schema = "\n".join(SCHEMA_STATEMENTS)
        assert "ADD COLUMN IF NOT EXISTS source_hash" in schema
        assert "source_hash = EXCLUDED.source_hash" in postgres_profile_store.UPSERT_USER
        assert "u.source_hash" in postgres_profile_store.GET_BY_IDS
