"""Centralized configuration for embedded-search using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


class Settings(BaseSettings):
    """Strictly typed index defaults loaded from environment variables.

    Every value can be overridden per index through ``DocumentIndex`` keyword
    arguments; the environment only supplies process-wide defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="EMBEDDED_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    # BM25 ranking constants
    bm25_k1: float = Field(default=1.2, ge=0.0, description="Term frequency saturation (k1)")
    bm25_b: float = Field(default=0.75, ge=0.0, le=1.0, description="Document length normalization (b)")

    # Prefix expansion
    expansion_discount: float = Field(
        default=0.5,
        gt=0.0,
        lt=1.0,
        description="Score multiplier applied to longer terms reached through prefix expansion",
    )

    # Fields
    default_field_boost: float = Field(default=1.0, ge=0.0, description="Boost used when add_field omits one")

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON log lines")

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return normalized


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
