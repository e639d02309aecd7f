"""Three-phase translation pipeline orchestration."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path
from typing import TypeAlias

from ptc_core.ports.orchestrator import (
    NoopProgressSink,
    NoProcessingSucceededError,
    NoUploadsSucceededError,
    ProgressSinkProtocol,
)
from ptc_core.ports.transfer import (
    TransferClientProtocol,
    TransferError,
    TransferErrorCode,
    build_transfer_error,
)
from ptc_core.util.logging import get_logger
from ptc_schemas.api import StatusCheck
from ptc_schemas.config import RunConfig
from ptc_schemas.job import Job
from ptc_schemas.primitives import (
    DEFAULT_MAX_ROUNDS,
    DEFAULT_POLL_INTERVAL_S,
    JobState,
    StatusOutcome,
)
from ptc_schemas.responses import ErrorResponse
from ptc_schemas.results import RoundSnapshot, RunReport

logger = get_logger(__name__)

SleepFn: TypeAlias = Callable[[float], Awaitable[None]]

DRY_RUN_PREFIX = "[DRY RUN]"


class TranslationOrchestrator:
    """Drive upload, processing and monitoring for a batch of jobs.

    Phases are barriers: every job finishes a phase before any job starts the
    next one. Network calls are awaited one at a time.
    """

    def __init__(
        self,
        client: TransferClientProtocol,
        *,
        base_dir: Path,
        poll_interval: float = DEFAULT_POLL_INTERVAL_S,
        max_rounds: int = DEFAULT_MAX_ROUNDS,
        dry_run: bool = False,
        progress_sink: ProgressSinkProtocol | None = None,
        sleep: SleepFn | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            client: Remote transfer client.
            base_dir: Directory downloaded translations are placed under.
            poll_interval: Seconds to wait between monitoring rounds.
            max_rounds: Maximum number of monitoring rounds.
            dry_run: Log intended actions without calling the client.
            progress_sink: Optional receiver of per-round snapshots.
            sleep: Optional coroutine used to wait between rounds.

        Raises:
            ValueError: If the interval is negative or rounds are not positive.
        """
        if poll_interval < 0:
            raise ValueError("poll_interval must not be negative")
        if max_rounds < 1:
            raise ValueError("max_rounds must be positive")
        self._client = client
        self._base_dir = base_dir
        self._poll_interval = poll_interval
        self._max_rounds = max_rounds
        self._dry_run = dry_run
        self._progress_sink = progress_sink or NoopProgressSink()
        self._sleep = sleep or asyncio.sleep
        self._jobs: dict[str, Job] = {}

    @classmethod
    def from_config(
        cls,
        client: TransferClientProtocol,
        config: RunConfig,
        *,
        progress_sink: ProgressSinkProtocol | None = None,
        sleep: SleepFn | None = None,
    ) -> TranslationOrchestrator:
        """Build an orchestrator from a resolved run configuration.

        Args:
            client: Remote transfer client.
            config: Resolved run configuration.
            progress_sink: Optional receiver of per-round snapshots.
            sleep: Optional coroutine used to wait between rounds.

        Returns:
            TranslationOrchestrator: Configured orchestrator.
        """
        return cls(
            client,
            base_dir=config.base_dir,
            poll_interval=config.poll_interval,
            max_rounds=config.max_rounds,
            dry_run=config.dry_run,
            progress_sink=progress_sink,
            sleep=sleep,
        )

    @property
    def jobs(self) -> list[Job]:
        """Jobs of the current run in discovery order."""
        return list(self._jobs.values())

    async def run(self, jobs: Sequence[Job]) -> RunReport:
        """Run all three phases for *jobs*.

        Args:
            jobs: Jobs in discovery order, all in the ``unknown`` state.

        Returns:
            RunReport: Final state of every job.

        Raises:
            NoUploadsSucceededError: If every upload failed.
            NoProcessingSucceededError: If every start-processing request failed.
            MissingTokenError: If the client refuses to run without a token.
        """
        self._jobs = {}
        for job in jobs:
            if job.relative_path in self._jobs:
                logger.warning("Skipping duplicate job: %s", job.relative_path)
                continue
            self._jobs[job.relative_path] = job

        await self._upload_phase()
        await self._processing_phase()
        rounds = await self._monitor_phase()
        report = RunReport(jobs=self.jobs, rounds=rounds, dry_run=self._dry_run)
        logger.info(
            "Run finished: %d completed, %d failed, %d timed out",
            len(report.completed),
            len(report.failed),
            len(report.timed_out),
        )
        return report

    async def _upload_phase(self) -> None:
        jobs = self._in_state(JobState.UNKNOWN)
        logger.info("Uploading %d file(s)", len(jobs))
        succeeded = 0
        for job in jobs:
            if self._dry_run:
                logger.info(
                    "%s Would upload: %s (output: %s, tag: %s)",
                    DRY_RUN_PREFIX,
                    job.relative_path,
                    job.output_pattern,
                    job.tag,
                )
            else:
                try:
                    await self._client.upload(job)
                except TransferError as exc:
                    self._fail(job, exc.info.to_error_response())
                    continue
                logger.info("Uploaded: %s", job.relative_path)
            job.transition_to(JobState.UPLOADED)
            succeeded += 1
        if not succeeded:
            raise NoUploadsSucceededError(len(jobs))
        logger.info("Uploaded %d of %d file(s)", succeeded, len(jobs))

    async def _processing_phase(self) -> None:
        jobs = self._in_state(JobState.UPLOADED)
        logger.info("Starting processing for %d file(s)", len(jobs))
        succeeded = 0
        for job in jobs:
            if self._dry_run:
                logger.info(
                    "%s Would start processing: %s", DRY_RUN_PREFIX, job.relative_path
                )
            else:
                try:
                    await self._client.start_processing(job)
                except TransferError as exc:
                    self._fail(job, exc.info.to_error_response())
                    continue
                logger.info("Processing started: %s", job.relative_path)
            job.transition_to(JobState.PROCESSING)
            succeeded += 1
        if not succeeded:
            raise NoProcessingSucceededError(len(jobs))

    async def _monitor_phase(self) -> int:
        monitored = self._in_state(JobState.PROCESSING)
        if self._dry_run:
            for job in monitored:
                logger.info(
                    "%s Would monitor translation status: %s",
                    DRY_RUN_PREFIX,
                    job.relative_path,
                )
                job.transition_to(JobState.COMPLETED)
            return 0

        logger.info(
            "Monitoring %d file(s), up to %d round(s) every %ss",
            len(monitored),
            self._max_rounds,
            self._poll_interval,
        )
        pending = list(monitored)
        rounds = 0
        try:
            for round_number in range(1, self._max_rounds + 1):
                if not pending:
                    break
                rounds = round_number
                logger.debug(
                    "Status round %d/%d: %d pending",
                    round_number,
                    self._max_rounds,
                    len(pending),
                )
                still_pending: list[Job] = []
                for job in pending:
                    if await self._check_job(job):
                        still_pending.append(job)
                pending = still_pending
                self._progress_sink.emit_round(
                    RoundSnapshot(
                        round=round_number,
                        max_rounds=self._max_rounds,
                        jobs=[job.model_copy() for job in monitored],
                    )
                )
                if pending and round_number < self._max_rounds:
                    await self._sleep(self._poll_interval)
        finally:
            self._progress_sink.finish()

        for job in pending:
            job.transition_to(JobState.TIMED_OUT)
            logger.warning(
                "Timed out waiting for %s (last status: %s)",
                job.relative_path,
                job.remote_status,
            )
        return rounds

    async def _check_job(self, job: Job) -> bool:
        """Poll one job once and apply the outcome.

        Returns:
            bool: True if the job is still pending.
        """
        try:
            check = await self._client.get_status(job)
        except TransferError as exc:
            self._fail(job, exc.info.to_error_response())
            return False
        job.remote_status = check.status
        job.completeness = check.completeness
        if check.outcome == StatusOutcome.PENDING:
            logger.debug("%s: %s", job.relative_path, check.status)
            return True
        if check.outcome == StatusOutcome.READY:
            await self._retrieve(job)
            return False
        self._fail(job, check.error or _status_error(job, check))
        return False

    async def _retrieve(self, job: Job) -> None:
        logger.info("Translation completed: %s", job.relative_path)
        try:
            placed = await self._client.download(job, self._base_dir)
        except TransferError as exc:
            job.error = exc.info.to_error_response()
            job.retrieved = False
            logger.error(
                "Could not retrieve translations for %s: %s",
                job.relative_path,
                job.error.message,
            )
            _log_response(job.error)
        else:
            job.retrieved = True
            logger.info(
                "Placed %d translation file(s) for %s", len(placed), job.relative_path
            )
        job.transition_to(JobState.COMPLETED)

    def _fail(self, job: Job, error: ErrorResponse) -> None:
        job.error = error
        job.transition_to(JobState.FAILED)
        logger.error("%s failed: %s", job.relative_path, error.message)
        _log_response(error)

    def _in_state(self, state: JobState) -> list[Job]:
        return [job for job in self._jobs.values() if job.state == state]


def _log_response(error: ErrorResponse) -> None:
    if error.details is not None and error.details.response_snippet:
        logger.error("Response: %s", error.details.response_snippet)


def _status_error(job: Job, check: StatusCheck) -> ErrorResponse:
    if check.outcome == StatusOutcome.NOT_FOUND:
        code = TransferErrorCode.NOT_FOUND
        message = "File not found on the server"
    else:
        code = TransferErrorCode.STATUS_CHECK_FAILED
        message = "Status check failed"
    error = build_transfer_error(code, message, job, http_status=check.http_status)
    return error.info.to_error_response()
