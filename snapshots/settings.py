"""Configuration models for the snapshot ingestion service."""

from __future__ import annotations

import json
from functools import lru_cache
from typing import Any, List

from pydantic import Field, PositiveInt, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATABASE_URL = "sqlite:///./var/storage/twitter_trends.db"


class Settings(BaseSettings):
    """Environment-driven settings shared by ingestion, ranking and the web API."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    database_url: str = Field(
        DEFAULT_DATABASE_URL,
        alias="TRENDS_DATABASE_URL",
        description="SQLAlchemy DSN for the posts/links/snapshots store.",
    )
    redis_url: str = Field(
        "redis://localhost:6379/0",
        alias="TRENDS_REDIS_URL",
        description="Celery broker/backend Redis DSN.",
    )
    log_level: str = Field("INFO", alias="LOG_LEVEL", description="Root log level.")
    log_json: bool = Field(False, alias="LOG_JSON", description="Emit logs as JSON lines.")
    default_days: PositiveInt = Field(7, alias="TRENDS_DEFAULT_DAYS", description="Default look-back window (days).")
    max_limit: PositiveInt = Field(1000, alias="TRENDS_MAX_LIMIT", description="Upper bound for list endpoints.")
    snapshots_default_limit: PositiveInt = Field(
        50,
        alias="SNAPSHOTS_DEFAULT_LIMIT",
        description="Default page size for the snapshot listing.",
    )
    cors_allow_origins: List[str] = Field(
        default_factory=lambda: ["*"],
        alias="CORS_ALLOW_ORIGINS",
        description="JSON array of allowed CORS origins.",
    )
    celery_worker_concurrency: PositiveInt = Field(
        2,
        alias="CELERY_WORKER_CONCURRENCY",
        description="Celery worker concurrency.",
    )
    celery_task_soft_time_limit: PositiveInt = Field(
        120,
        alias="CELERY_TASK_SOFT_TIME_LIMIT",
        description="Celery task soft time limit (seconds).",
    )

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: Any) -> List[str]:
        if value in (None, "", []):
            return ["*"]
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
            except json.JSONDecodeError as exc:
                raise ValueError("CORS_ALLOW_ORIGINS must be a JSON array.") from exc
            return parsed
        if isinstance(value, list):
            return value
        raise ValueError("CORS_ALLOW_ORIGINS must be a list.")

    @field_validator("database_url")
    @classmethod
    def _validate_database_url(cls, value: str) -> str:
        if "://" not in value:
            raise ValueError("TRENDS_DATABASE_URL must be a valid DSN string.")
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"


@lru_cache()
def get_settings() -> Settings:
    """Return the Settings instance built from the environment."""
    try:
        return Settings()
    except ValidationError as exc:
        raise RuntimeError(f"Environment validation failed: {exc}") from exc


def reset_settings_cache() -> None:
    """Clear the Settings cache (used by tests)."""
    get_settings.cache_clear()  # type: ignore[attr-defined]
