"""Protocol definitions and errors for the remote transfer client."""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import Field

from ptc_schemas.api import StatusCheck
from ptc_schemas.base import BaseSchema
from ptc_schemas.job import Job
from ptc_schemas.primitives import RESPONSE_SNIPPET_LIMIT
from ptc_schemas.responses import ErrorDetails, ErrorResponse


class TransferErrorCode(StrEnum):
    """Categorized error codes for per-job transfer failures."""

    UPLOAD_FAILED = "upload_failed"
    PROCESSING_FAILED = "processing_failed"
    STATUS_CHECK_FAILED = "status_check_failed"
    NOT_FOUND = "not_found"
    DOWNLOAD_FAILED = "download_failed"
    EXTRACT_FAILED = "extract_failed"
    RELOCATE_FAILED = "relocate_failed"


class TransferErrorDetails(BaseSchema):
    """Detailed transfer error context."""

    file_path: str = Field(..., min_length=1, description="Remote file path")
    tag: str = Field(..., min_length=1, description="File tag name")
    http_status: int | None = Field(None, description="HTTP status code if any")
    response_snippet: str | None = Field(
        None, description="Leading part of the response body"
    )


class TransferErrorInfo(BaseSchema):
    """Structured transfer error data."""

    code: TransferErrorCode = Field(..., description="Transfer error code")
    message: str = Field(..., min_length=1, description="Error message")
    details: TransferErrorDetails | None = Field(None, description="Error details")

    def to_error_response(self) -> ErrorResponse:
        """Convert transfer error info to the standard error response schema.

        Returns:
            ErrorResponse: Standard response error payload.
        """
        details: ErrorDetails | None = None
        message = self.message
        if self.details is not None:
            details = ErrorDetails(
                file_path=self.details.file_path,
                tag=self.details.tag,
                http_status=self.details.http_status,
                response_snippet=self.details.response_snippet,
            )
            if self.details.http_status is not None:
                message = f"{message} (HTTP {self.details.http_status})"
        code_value = getattr(self.code, "value", self.code)
        return ErrorResponse(code=str(code_value), message=message, details=details)


class TransferError(Exception):
    """Per-job transfer error with structured details."""

    def __init__(self, info: TransferErrorInfo) -> None:
        """Initialize the transfer error.

        Args:
            info: Structured transfer error information.
        """
        super().__init__(info.message)
        self.info = info


def build_transfer_error(
    code: TransferErrorCode,
    message: str,
    job: Job,
    *,
    http_status: int | None = None,
    body: str | None = None,
) -> TransferError:
    """Build a transfer error for *job*.

    Args:
        code: Error category.
        message: Human readable description.
        job: Job the error belongs to.
        http_status: Optional HTTP status code.
        body: Optional response body, truncated to a snippet.

    Returns:
        TransferError: Error ready to raise.
    """
    snippet = body[:RESPONSE_SNIPPET_LIMIT] if body else None
    return TransferError(
        TransferErrorInfo(
            code=code,
            message=message,
            details=TransferErrorDetails(
                file_path=job.relative_path,
                tag=job.tag,
                http_status=http_status,
                response_snippet=snippet,
            ),
        )
    )


@runtime_checkable
class TransferClientProtocol(Protocol):
    """Protocol for the remote translation service client."""

    async def upload(self, job: Job) -> None:
        """Upload the job's source file.

        Raises:
            TransferError: If the service does not accept the upload.
        """
        raise NotImplementedError

    async def start_processing(self, job: Job) -> None:
        """Ask the service to start translating an uploaded file.

        Raises:
            TransferError: If the service refuses to start processing.
            MissingTokenError: If no API token is configured.
        """
        raise NotImplementedError

    async def get_status(self, job: Job) -> StatusCheck:
        """Poll the translation status of the job once."""
        raise NotImplementedError

    async def download(self, job: Job, base_dir: Path) -> list[Path]:
        """Download and unpack completed translations.

        Returns:
            list[Path]: Translation files placed in the project.

        Raises:
            TransferError: If download, extraction or relocation fails.
        """
        raise NotImplementedError
