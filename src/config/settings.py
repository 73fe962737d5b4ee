# src/config/settings.py - v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for all deployment-specific settings: LLM routing,
embeddings, the relational/vector database, search tuning and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


MAX_KEYWORDS = 5


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === LLM PROVIDERS ===
    llm_default_provider: str = "openai"
    llm_default_model: str = "gpt-4o"
    llm_default_temperature: float = 0.2
    llm_max_tokens: int = 2048

    # Provider API keys
    anthropic_api_key: str = ""
    openai_api_key: str = ""
    google_api_key: str = ""

    # Per-component LLM assignment ("provider:model", highest priority)
    llm_curator: str = ""
    llm_query_expander: str = ""
    llm_summarizer: str = ""
    llm_keyword_extractor: str = ""
    llm_profile_describer: str = ""

    # === EMBEDDINGS ===
    embedding_provider: str = "openai"
    embedding_model: str = "text-embedding-ada-002"
    embedding_dimensions: int = 1536

    # === Database ===
    database_backend: Literal["postgres", "memory"] = "memory"
    database_url: str = ""
    database_pool_min_size: int = 1
    database_pool_max_size: int = 5
    database_command_timeout: float = 15.0

    # === Search ===
    search_mode: Literal["context", "vector"] = "context"
    search_timeout_seconds: float = 30.0
    search_max_results: int = 5
    vector_min_similarity: float = 0.3
    vector_top_k: int = 8
    query_expansion_enabled: bool = True
    query_expansion_max: int = 3
    summary_max_chars: int = 150
    match_summary_max_chars: int = 400
    keyword_count: int = 5
    enrichment_concurrency: int = 5
    vector_include_gated: bool = False

    # === Profiles ===
    profile_rewrite_enabled: bool = False

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # === HTTP API ===
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    # --- Validators ---

    @field_validator(
        "search_max_results",
        "vector_top_k",
        "summary_max_chars",
        "match_summary_max_chars",
        "keyword_count",
        "enrichment_concurrency",
    )
    @classmethod
    def validate_positive(cls, v: int) -> int:  # noqa: N805
        if v <= 0:
            raise ValueError("must be > 0")
        return v

    @field_validator("keyword_count")
    @classmethod
    def validate_keyword_count(cls, v: int) -> int:  # noqa: N805
        """Matches carry at most 5 keyword badges."""
        if v > MAX_KEYWORDS:
            raise ValueError(f"keyword_count must be <= {MAX_KEYWORDS}")
        return v

    @field_validator("query_expansion_max")
    @classmethod
    def validate_expansion_max(cls, v: int) -> int:  # noqa: N805
        """Paraphrase count is bounded to 0..3."""
        if not 0 <= v <= 3:
            raise ValueError("query_expansion_max must be between 0 and 3")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.database_backend == "postgres" and not self.database_url:
            errors.append("DATABASE_BACKEND=postgres requires DATABASE_URL")

        if not 0.0 <= self.vector_min_similarity < 1.0:
            errors.append("VECTOR_MIN_SIMILARITY must be in [0, 1)")

        if self.database_pool_min_size > self.database_pool_max_size:
            errors.append(
                "DATABASE_POOL_MIN_SIZE must be <= DATABASE_POOL_MAX_SIZE"
            )

        if self.search_timeout_seconds <= 0:
            errors.append("SEARCH_TIMEOUT_SECONDS must be > 0")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or one-off CLI runs).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
