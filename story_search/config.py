"""Runtime configuration based on environment variables."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AnyHttpUrl, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseModel):
    dsn: str = Field(
        default="sqlite+aiosqlite:///story_search.db",
        description="SQLAlchemy async DSN for the key/value store.",
    )
    echo: bool = False


class SearchApiSettings(BaseModel):
    base_url: AnyHttpUrl = Field(default="https://hn.algolia.com/api/v1")
    request_timeout_seconds: int = Field(default=10, ge=1, le=60)


class SearchSettings(BaseModel):
    default_query: str = "React"
    storage_key: str = Field(default="search", min_length=1)
    max_sessions: int = Field(default=1000, ge=1)


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    environment: Literal["dev", "staging", "prod"] = "dev"
    telegram_token: SecretStr | None = None
    telegram_proxy: str | None = None
    default_language: str = "en"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    api: SearchApiSettings = Field(default_factory=SearchApiSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)

    @field_validator("telegram_proxy", mode="before")
    @classmethod
    def _empty_str_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


@lru_cache
def get_settings() -> AppSettings:
    """Return cached settings instance."""

    return AppSettings()


__all__ = [
    "AppSettings",
    "DatabaseSettings",
    "SearchApiSettings",
    "SearchSettings",
    "get_settings",
]
