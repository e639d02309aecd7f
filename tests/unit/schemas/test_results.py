"""Unit tests for run reports and exit codes."""

from __future__ import annotations

from pathlib import Path

from ptc_schemas.exit_codes import ExitCode, exit_code_for_report
from ptc_schemas.job import Job
from ptc_schemas.primitives import JobState
from ptc_schemas.responses import ErrorResponse
from ptc_schemas.results import RoundSnapshot, RunReport


def _job(name: str, *states: JobState) -> Job:
    job = Job(
        source_path=Path(f"/project/{name}/en.json"),
        relative_path=f"{name}/en.json",
        output_pattern=f"{name}/{{{{lang}}}}.json",
        tag="main",
    )
    for state in states:
        job.transition_to(state)
    return job


_COMPLETED = (JobState.UPLOADED, JobState.PROCESSING, JobState.COMPLETED)
_TIMED_OUT = (JobState.UPLOADED, JobState.PROCESSING, JobState.TIMED_OUT)


def test_report_groups_jobs_by_state() -> None:
    """Report properties partition jobs by final state."""
    done = _job("a", *_COMPLETED)
    failed = _job("b", JobState.FAILED)
    waiting = _job("c", *_TIMED_OUT)
    report = RunReport(jobs=[done, failed, waiting], rounds=3)

    assert report.completed == [done]
    assert report.failed == [failed]
    assert report.timed_out == [waiting]
    assert report.not_retrieved == []
    assert report.succeeded


def test_output_pattern_placeholder() -> None:
    """Output templates keep the literal locale placeholder."""
    assert _job("a").output_pattern == "a/{{lang}}.json"


def test_not_retrieved_lists_completed_jobs_with_failed_download() -> None:
    """Completed jobs whose download failed are still completed."""
    job = _job("a", *_COMPLETED)
    job.retrieved = False
    job.error = ErrorResponse(code="download_failed", message="Download failed")
    report = RunReport(jobs=[job])
    assert report.completed == [job]
    assert report.not_retrieved == [job]
    assert report.succeeded


def test_exit_code_success_when_any_job_completed() -> None:
    """One completed job is enough for a successful exit."""
    report = RunReport(jobs=[_job("a", *_COMPLETED), _job("b", JobState.FAILED)])
    assert exit_code_for_report(report) is ExitCode.SUCCESS
    assert ExitCode.SUCCESS == 0


def test_exit_code_failure_when_nothing_completed() -> None:
    """Runs without completed jobs exit with 1."""
    report = RunReport(jobs=[_job("a", *_TIMED_OUT), _job("b", JobState.FAILED)])
    assert not report.succeeded
    assert exit_code_for_report(report) is ExitCode.FAILURE
    assert ExitCode.FAILURE == 1


def test_round_snapshot_counts_completed_jobs() -> None:
    """Snapshots report how many monitored jobs completed."""
    snapshot = RoundSnapshot(
        round=2,
        max_rounds=5,
        jobs=[_job("a", *_COMPLETED), _job("b", JobState.UPLOADED)],
    )
    assert snapshot.completed_count == 1
