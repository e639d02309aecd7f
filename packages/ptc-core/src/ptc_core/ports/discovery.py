"""Errors raised while validating inputs and discovering source files."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from ptc_schemas.base import BaseSchema
from ptc_schemas.responses import ErrorDetails, ErrorResponse


class DiscoveryErrorCode(StrEnum):
    """Categorized error codes for discovery failures."""

    CONFIG_VALIDATION = "config_validation"
    NO_FILES_FOUND = "no_files_found"


class DiscoveryErrorDetails(BaseSchema):
    """Detailed discovery error context."""

    field: str | None = Field(None, description="Config field associated with error")
    entry_index: int | None = Field(
        None, ge=1, description="1-based manifest entry number if applicable"
    )
    provided: str | None = Field(None, description="Provided value if available")
    patterns: list[str] | None = Field(None, description="Patterns that were searched")


class DiscoveryErrorInfo(BaseSchema):
    """Structured discovery error data."""

    code: DiscoveryErrorCode = Field(..., description="Discovery error code")
    message: str = Field(..., min_length=1, description="Error message")
    details: DiscoveryErrorDetails | None = Field(None, description="Error details")

    def to_error_response(self) -> ErrorResponse:
        """Convert discovery error info to the standard error response schema.

        Returns:
            ErrorResponse: Standard response error payload.
        """
        details: ErrorDetails | None = None
        message = self.message
        if self.details is not None:
            details = ErrorDetails(
                field=self.details.field, provided=self.details.provided
            )
            if self.details.entry_index is not None:
                message = f"Entry {self.details.entry_index}: {message}"
        code_value = getattr(self.code, "value", self.code)
        return ErrorResponse(code=str(code_value), message=message, details=details)


class DiscoveryError(Exception):
    """Discovery error with structured details."""

    def __init__(self, info: DiscoveryErrorInfo) -> None:
        """Initialize the discovery error.

        Args:
            info: Structured discovery error information.
        """
        super().__init__(info.message)
        self.info = info


class ConfigValidationError(DiscoveryError):
    """Malformed or contradictory invocation, reported before any network call."""

    def __init__(
        self, message: str, *, details: DiscoveryErrorDetails | None = None
    ) -> None:
        """Initialize the validation error.

        Args:
            message: Human readable description.
            details: Optional structured context.
        """
        super().__init__(
            DiscoveryErrorInfo(
                code=DiscoveryErrorCode.CONFIG_VALIDATION,
                message=message,
                details=details,
            )
        )


class NoFilesFoundError(DiscoveryError):
    """Discovery produced an empty set of files."""

    def __init__(self, patterns: list[str]) -> None:
        """Initialize the error.

        Args:
            patterns: Substituted patterns that matched nothing.
        """
        super().__init__(
            DiscoveryErrorInfo(
                code=DiscoveryErrorCode.NO_FILES_FOUND,
                message="No files found",
                details=DiscoveryErrorDetails(patterns=patterns),
            )
        )
