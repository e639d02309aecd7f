"""YAML config file loading."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError

from ptc_core.ports.discovery import ConfigValidationError, DiscoveryErrorDetails
from ptc_core.util.logging import get_logger
from ptc_schemas.config import ConfigFile

logger = get_logger(__name__)

# Plain scalars such as `no` or `2024` stay strings, only nulls are resolved.
_TEXT_TAGS = frozenset({
    "tag:yaml.org,2002:bool",
    "tag:yaml.org,2002:int",
    "tag:yaml.org,2002:float",
    "tag:yaml.org,2002:timestamp",
})


class _ConfigLoader(yaml.SafeLoader):
    """Safe loader that leaves booleans, numbers and dates as text."""


_ConfigLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in _TEXT_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def load_config_file(path: Path) -> ConfigFile:
    """Load and validate a YAML config file.

    Args:
        path: Path to the config file.

    Returns:
        ConfigFile: Validated config file contents.

    Raises:
        ConfigValidationError: If the file is missing, is not valid YAML, or
            does not describe a valid config.
    """
    if not path.is_file():
        raise ConfigValidationError(
            f"Config file not found: {path}",
            details=DiscoveryErrorDetails(field="config_file", provided=str(path)),
        )
    logger.info("Reading configuration from: %s", path)
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = yaml.load(handle, Loader=_ConfigLoader)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigValidationError(
            f"Could not read config file {path}: {exc}",
            details=DiscoveryErrorDetails(field="config_file", provided=str(path)),
        ) from exc

    if not isinstance(payload, dict):
        raise ConfigValidationError(
            "Config file must contain a mapping",
            details=DiscoveryErrorDetails(field="config_file", provided=str(path)),
        )
    if not payload.get("files"):
        raise ConfigValidationError(
            "No file entries found in 'files' section",
            details=DiscoveryErrorDetails(field="files"),
        )
    try:
        return ConfigFile.model_validate(payload, strict=False)
    except ValidationError as exc:
        raise _config_error(exc) from exc


def _config_error(exc: ValidationError) -> ConfigValidationError:
    error = exc.errors()[0]
    loc = error.get("loc", ())
    entry_index: int | None = None
    field = ".".join(str(part) for part in loc) or None
    if len(loc) >= 2 and loc[0] == "files" and isinstance(loc[1], int):
        entry_index = loc[1] + 1
        field = ".".join(str(part) for part in loc[2:]) or None
    message = error.get("msg", "Invalid config")
    if field:
        message = f"{field}: {message}"
    return ConfigValidationError(
        message,
        details=DiscoveryErrorDetails(field=field, entry_index=entry_index),
    )
