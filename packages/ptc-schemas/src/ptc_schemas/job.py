"""Translation job schema and lifecycle rules."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field

from ptc_schemas.base import BaseSchema
from ptc_schemas.primitives import (
    JOB_STATE_TRANSITIONS,
    TERMINAL_JOB_STATES,
    JobState,
)
from ptc_schemas.responses import ErrorResponse


class InvalidTransitionError(ValueError):
    """Raised when a job would move to a state it cannot reach."""

    def __init__(self, relative_path: str, current: JobState, target: JobState) -> None:
        """Initialize the transition error.

        Args:
            relative_path: Job identity used in the message.
            current: State the job is in.
            target: Rejected target state.
        """
        super().__init__(
            f"Job {relative_path} cannot move from {current.value} to {target.value}"
        )
        self.current = current
        self.target = target


class Job(BaseSchema):
    """One source file submitted for translation within a run."""

    source_path: Path = Field(
        ..., frozen=True, description="Absolute path to the source-locale file"
    )
    relative_path: str = Field(
        ...,
        min_length=1,
        frozen=True,
        description="Path relative to the base directory, the remote file identity",
    )
    output_pattern: str = Field(
        ...,
        min_length=1,
        frozen=True,
        description="Output path template containing the locale placeholder",
    )
    tag: str = Field(
        ..., min_length=1, frozen=True, description="Grouping label for the run"
    )
    additional_translation_files: dict[str, str] | None = Field(
        None,
        frozen=True,
        description="Secondary artifact templates keyed by artifact kind",
    )
    state: JobState = Field(JobState.UNKNOWN, description="Lifecycle state")
    remote_status: str | None = Field(
        None, description="Last raw status string reported by the remote service"
    )
    completeness: float | None = Field(
        None, description="Last completeness percentage reported by the service"
    )
    error: ErrorResponse | None = Field(
        None, description="Error that failed the job or blocked retrieval"
    )
    retrieved: bool | None = Field(
        None, description="Whether translated files were placed locally"
    )

    @property
    def is_terminal(self) -> bool:
        """Return True once the job reached a final state."""
        return JobState(self.state) in TERMINAL_JOB_STATES

    def transition_to(self, target: JobState) -> None:
        """Move the job forward to *target*.

        Args:
            target: Desired next state.

        Raises:
            InvalidTransitionError: If the move is not a forward transition.
        """
        current = JobState(self.state)
        target = JobState(target)
        if target not in JOB_STATE_TRANSITIONS[current]:
            raise InvalidTransitionError(self.relative_path, current, target)
        self.state = target
