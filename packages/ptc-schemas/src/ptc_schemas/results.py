"""Run progress snapshots and final run report schemas."""

from __future__ import annotations

from pydantic import Field

from ptc_schemas.base import BaseSchema
from ptc_schemas.job import Job
from ptc_schemas.primitives import JobState


def _in_state(jobs: list[Job], state: JobState) -> list[Job]:
    return [job for job in jobs if job.state == state]


class RoundSnapshot(BaseSchema):
    """State of every monitored job after one status round."""

    round: int = Field(..., ge=1, description="Round number, starting at 1")
    max_rounds: int = Field(..., ge=1, description="Configured round limit")
    jobs: list[Job] = Field(..., description="Monitored jobs in discovery order")

    @property
    def completed_count(self) -> int:
        """Return how many monitored jobs have completed."""
        return len(_in_state(self.jobs, JobState.COMPLETED))


class RunReport(BaseSchema):
    """Aggregate outcome of a run."""

    jobs: list[Job] = Field(..., description="All jobs in discovery order")
    rounds: int = Field(0, ge=0, description="Monitoring rounds consumed")
    dry_run: bool = Field(False, description="Whether no network calls were made")

    @property
    def completed(self) -> list[Job]:
        """Jobs whose translation completed on the remote side."""
        return _in_state(self.jobs, JobState.COMPLETED)

    @property
    def failed(self) -> list[Job]:
        """Jobs that failed in any phase."""
        return _in_state(self.jobs, JobState.FAILED)

    @property
    def timed_out(self) -> list[Job]:
        """Jobs still pending when the round limit was reached."""
        return _in_state(self.jobs, JobState.TIMED_OUT)

    @property
    def not_retrieved(self) -> list[Job]:
        """Completed jobs whose translations could not be placed locally."""
        return [job for job in self.completed if job.retrieved is False]

    @property
    def succeeded(self) -> bool:
        """Return True when at least one job completed."""
        return bool(self.completed)
