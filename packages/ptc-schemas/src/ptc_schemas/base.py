"""Base schema configuration for ptc Pydantic models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base schema with strict validation defaults.

    Note: extra="ignore" lets API payloads grow new fields without breaking
    decoding of the fields we read. Required fields are still validated.
    """

    model_config = ConfigDict(
        extra="ignore",
        validate_assignment=True,
        validate_default=True,
        str_strip_whitespace=True,
        use_enum_values=True,
        strict=True,
    )
