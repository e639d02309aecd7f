"""Configuration schemas for ptc runs."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import urlparse

from pydantic import Field, SecretStr, field_validator

from ptc_schemas.base import BaseSchema
from ptc_schemas.primitives import (
    DEFAULT_API_URL,
    DEFAULT_MAX_ROUNDS,
    DEFAULT_POLL_INTERVAL_S,
)


def _validate_api_url(value: str) -> str:
    parsed = urlparse(value)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ValueError("api_url must be an absolute http(s) URL")
    if not value.endswith("/"):
        value = f"{value}/"
    return value


class ManifestEntry(BaseSchema):
    """One explicit source file entry from a config file."""

    file: str = Field(..., min_length=1, description="Source file path")
    output: str = Field(
        ..., min_length=1, description="Output path template with {{lang}}"
    )
    additional_translation_files: dict[str, str] | None = Field(
        None, description="Secondary artifact templates keyed by artifact kind"
    )


class ConfigFile(BaseSchema):
    """Contents of a YAML config file."""

    source_locale: str | None = Field(None, description="Source locale code")
    file_tag_name: str | None = Field(None, description="Grouping tag")
    api_url: str | None = Field(None, description="API base URL")
    api_token: SecretStr | None = Field(None, description="API bearer token")
    files: list[ManifestEntry] = Field(
        ..., min_length=1, description="Explicit source file entries"
    )

    @field_validator("api_url")
    @classmethod
    def _check_api_url(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _validate_api_url(value)


class RunConfig(BaseSchema):
    """Fully resolved configuration for a single run."""

    source_locale: str = Field(..., min_length=1, description="Source locale code")
    patterns: list[str] = Field(
        default_factory=list, description="File patterns containing {{lang}}"
    )
    manifest: list[ManifestEntry] | None = Field(
        None, description="Explicit file entries from a config file"
    )
    tag: str = Field(..., min_length=1, description="Grouping tag for the run")
    project_dir: Path = Field(..., description="Directory searched for files")
    base_dir: Path = Field(
        ..., description="Directory remote file paths are relative to"
    )
    api_url: str = Field(DEFAULT_API_URL, description="API base URL")
    api_token: SecretStr | None = Field(None, description="API bearer token")
    poll_interval: float = Field(
        DEFAULT_POLL_INTERVAL_S, ge=0, description="Seconds between status rounds"
    )
    max_rounds: int = Field(
        DEFAULT_MAX_ROUNDS, ge=1, description="Maximum status check rounds"
    )
    dry_run: bool = Field(False, description="Log actions without network calls")

    @field_validator("api_url")
    @classmethod
    def _check_api_url(cls, value: str) -> str:
        return _validate_api_url(value)

    @property
    def token_value(self) -> str | None:
        """Return the plain token, or None when unset or blank."""
        if self.api_token is None:
            return None
        token = self.api_token.get_secret_value().strip()
        return token or None
