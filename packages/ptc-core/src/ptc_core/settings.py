"""Runtime settings and environment loading utilities."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from ptc_schemas.primitives import (
    DEFAULT_API_URL,
    DEFAULT_MAX_ROUNDS,
    DEFAULT_POLL_INTERVAL_S,
)

_ENV_PATH = Path(".env")


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    model_config = SettingsConfigDict(
        env_file=_ENV_PATH,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_url: str = Field(default=DEFAULT_API_URL, alias="PTC_API_URL")
    api_token: SecretStr | None = Field(default=None, alias="PTC_API_TOKEN")
    monitor_interval: float = Field(
        default=DEFAULT_POLL_INTERVAL_S, ge=0, alias="PTC_MONITOR_INTERVAL"
    )
    monitor_max_attempts: int = Field(
        default=DEFAULT_MAX_ROUNDS, ge=1, alias="PTC_MONITOR_MAX_ATTEMPTS"
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings loaded from the environment."""
    return Settings()
