"""Error response schemas for CLI output and job reports."""

from __future__ import annotations

from pydantic import Field

from ptc_schemas.base import BaseSchema


class ErrorDetails(BaseSchema):
    """Detailed error context for responses."""

    field: str | None = Field(None, description="Field name if applicable")
    provided: str | None = Field(None, description="Provided value")
    file_path: str | None = Field(None, description="File the error relates to")
    tag: str | None = Field(None, description="File tag name if applicable")
    http_status: int | None = Field(None, description="HTTP status code if any")
    response_snippet: str | None = Field(
        None, description="Leading part of the response body"
    )


class ErrorResponse(BaseSchema):
    """Error information in response."""

    code: str = Field(..., min_length=1, description="Error code")
    message: str = Field(..., min_length=1, description="Error message")
    details: ErrorDetails | None = Field(None, description="Optional error details")
