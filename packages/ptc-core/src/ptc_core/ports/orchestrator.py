"""Protocol definitions and errors for run orchestration."""

from __future__ import annotations

from enum import StrEnum
from typing import Protocol, runtime_checkable

from pydantic import Field

from ptc_schemas.base import BaseSchema
from ptc_schemas.primitives import RunPhase
from ptc_schemas.responses import ErrorDetails, ErrorResponse
from ptc_schemas.results import RoundSnapshot


@runtime_checkable
class ProgressSinkProtocol(Protocol):
    """Protocol for receiving monitoring progress."""

    def emit_round(self, snapshot: RoundSnapshot) -> None:
        """Receive the state of all monitored jobs after a round."""
        raise NotImplementedError

    def finish(self) -> None:
        """Signal that monitoring is over."""
        raise NotImplementedError


class NoopProgressSink(ProgressSinkProtocol):
    """Progress sink that drops all updates."""

    def emit_round(self, snapshot: RoundSnapshot) -> None:
        """Ignore round snapshots."""
        return None

    def finish(self) -> None:
        """Nothing to finish."""
        return None


class OrchestrationErrorCode(StrEnum):
    """Categorized error codes for orchestration failures."""

    NO_UPLOADS_SUCCEEDED = "no_uploads_succeeded"
    NO_PROCESSING_SUCCEEDED = "no_processing_succeeded"
    MISSING_TOKEN = "missing_token"


class OrchestrationErrorDetails(BaseSchema):
    """Detailed orchestration error context."""

    phase: RunPhase | None = Field(None, description="Phase associated with error")
    attempted: int | None = Field(
        None, ge=0, description="Number of jobs attempted in the phase"
    )
    reason: str | None = Field(None, description="Additional error context")


class OrchestrationErrorInfo(BaseSchema):
    """Structured orchestration error data."""

    code: OrchestrationErrorCode = Field(..., description="Error code")
    message: str = Field(..., min_length=1, description="Error message")
    details: OrchestrationErrorDetails | None = Field(None, description="Error details")

    def to_error_response(self) -> ErrorResponse:
        """Convert orchestration error info to standard error response.

        Returns:
            ErrorResponse: Standard response error payload.
        """
        details: ErrorDetails | None = None
        if self.details is not None and self.details.phase is not None:
            details = ErrorDetails(field="phase", provided=str(self.details.phase))
        code_value = getattr(self.code, "value", self.code)
        return ErrorResponse(
            code=str(code_value), message=self.message, details=details
        )


class OrchestrationError(Exception):
    """Orchestration error with structured details."""

    def __init__(self, info: OrchestrationErrorInfo) -> None:
        """Initialize the orchestration error.

        Args:
            info: Structured orchestration error information.
        """
        super().__init__(info.message)
        self.info = info


class NoUploadsSucceededError(OrchestrationError):
    """Every upload in phase 1 failed."""

    def __init__(self, attempted: int) -> None:
        """Initialize the error.

        Args:
            attempted: Number of uploads attempted.
        """
        super().__init__(
            OrchestrationErrorInfo(
                code=OrchestrationErrorCode.NO_UPLOADS_SUCCEEDED,
                message="No files were uploaded successfully",
                details=OrchestrationErrorDetails(
                    phase=RunPhase.UPLOAD, attempted=attempted
                ),
            )
        )


class NoProcessingSucceededError(OrchestrationError):
    """Every start-processing request in phase 2 failed."""

    def __init__(self, attempted: int) -> None:
        """Initialize the error.

        Args:
            attempted: Number of processing requests attempted.
        """
        super().__init__(
            OrchestrationErrorInfo(
                code=OrchestrationErrorCode.NO_PROCESSING_SUCCEEDED,
                message="No files started processing successfully",
                details=OrchestrationErrorDetails(
                    phase=RunPhase.PROCESS, attempted=attempted
                ),
            )
        )


class MissingTokenError(OrchestrationError):
    """An authenticated call was attempted without an API token."""

    def __init__(self, operation: str, phase: RunPhase | None = None) -> None:
        """Initialize the error.

        Args:
            operation: Name of the refused operation.
            phase: Phase the operation belongs to.
        """
        super().__init__(
            OrchestrationErrorInfo(
                code=OrchestrationErrorCode.MISSING_TOKEN,
                message=f"API token required for {operation} (--api-token)",
                details=OrchestrationErrorDetails(phase=phase, reason=operation),
            )
        )
