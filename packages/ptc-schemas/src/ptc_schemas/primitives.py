"""Primitive types and enums shared across ptc schemas."""

from __future__ import annotations

from enum import StrEnum

LOCALE_PLACEHOLDER = "{{lang}}"
DEFAULT_API_URL = "https://app.ptc.wpml.org/api/v1/"
DEFAULT_POLL_INTERVAL_S = 5.0
DEFAULT_MAX_ROUNDS = 100
DEFAULT_TAG = "main"
RESPONSE_SNIPPET_LIMIT = 500

# Extensions relocated out of a downloaded translations archive.
TRANSLATION_FILE_EXTENSIONS = frozenset({".json", ".po", ".pot", ".mo"})


class JobState(StrEnum):
    """Lifecycle states of a single translation job."""

    UNKNOWN = "unknown"
    UPLOADED = "uploaded"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


TERMINAL_JOB_STATES = frozenset(
    {JobState.COMPLETED, JobState.FAILED, JobState.TIMED_OUT}
)

JOB_STATE_TRANSITIONS: dict[JobState, frozenset[JobState]] = {
    JobState.UNKNOWN: frozenset({JobState.UPLOADED, JobState.FAILED}),
    JobState.UPLOADED: frozenset({JobState.PROCESSING, JobState.FAILED}),
    JobState.PROCESSING: frozenset(TERMINAL_JOB_STATES),
    JobState.COMPLETED: frozenset(),
    JobState.FAILED: frozenset(),
    JobState.TIMED_OUT: frozenset(),
}


class RunPhase(StrEnum):
    """Ordered phases of a run."""

    UPLOAD = "upload"
    PROCESS = "process"
    MONITOR = "monitor"


class RemoteStatus(StrEnum):
    """Translation status values reported by the remote service."""

    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    ERROR = "error"
    UNKNOWN = "status_unknown"

    @classmethod
    def parse(cls, value: str | None) -> RemoteStatus:
        """Map a raw status string to a known status.

        Args:
            value: Raw status string, possibly empty or ``"null"``.

        Returns:
            RemoteStatus: Matching status, ``UNKNOWN`` for anything else.
        """
        if not value or value == "null":
            return cls.UNKNOWN
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class StatusOutcome(StrEnum):
    """Outcome of a single translation status check."""

    READY = "ready"
    PENDING = "pending"
    NOT_FOUND = "not_found"
    FAILED = "failed"
