"""Payload schemas for the remote translation API."""

from __future__ import annotations

from pydantic import Field

from ptc_schemas.base import BaseSchema
from ptc_schemas.primitives import RemoteStatus, StatusOutcome
from ptc_schemas.responses import ErrorResponse


class TranslationStatusPayload(BaseSchema):
    """Body of a translation status response."""

    status: str | None = Field(None, description="Raw translation status")
    completeness: float | None = Field(
        None, description="Translation completeness percentage"
    )

    @classmethod
    def from_body(cls, body: object) -> TranslationStatusPayload:
        """Build a payload from a decoded response body without rejecting it.

        A body that is not an object, or a status that is not a string, leaves
        the status unset. Completeness is read from numbers or numeric strings
        such as ``"100%"`` and is otherwise dropped.

        Args:
            body: Decoded JSON body, or None when the body was not JSON.

        Returns:
            TranslationStatusPayload: Payload with whatever could be read.
        """
        if not isinstance(body, dict):
            return cls()
        status = body.get("status")
        return cls(
            status=status if isinstance(status, str) else None,
            completeness=_parse_completeness(body.get("completeness")),
        )

    @property
    def remote_status(self) -> RemoteStatus:
        """Return the parsed status, UNKNOWN when absent or unrecognised."""
        return RemoteStatus.parse(self.status)

    @property
    def display_status(self) -> str:
        """Return the raw status string, or the unknown marker when absent."""
        if not self.status or self.status == "null":
            return RemoteStatus.UNKNOWN.value
        return self.status


class StatusCheck(BaseSchema):
    """Result of a single status poll for one job."""

    outcome: StatusOutcome = Field(..., description="Tri-state poll outcome")
    status: str | None = Field(None, description="Raw status string for display")
    completeness: float | None = Field(None, description="Completeness percentage")
    http_status: int | None = Field(None, description="HTTP status of the poll")
    error: ErrorResponse | None = Field(
        None, description="Error context when the poll failed"
    )


def _parse_completeness(value: object) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip().rstrip("%"))
        except ValueError:
            return None
    return None
