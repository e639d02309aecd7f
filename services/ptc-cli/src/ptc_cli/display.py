"""Rich rendering for run progress and results."""

from __future__ import annotations

from collections.abc import Callable

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ptc_core.ports.orchestrator import ProgressSinkProtocol
from ptc_schemas.job import Job
from ptc_schemas.primitives import JobState, RemoteStatus
from ptc_schemas.responses import ErrorResponse
from ptc_schemas.results import RoundSnapshot, RunReport

_UNKNOWN_MARK = ("U", "yellow")

_STATE_MARKS: dict[str, tuple[str, str]] = {
    JobState.COMPLETED: ("C", "green"),
    JobState.FAILED: ("F", "red"),
}

_REMOTE_MARKS: dict[str, tuple[str, str]] = {
    RemoteStatus.COMPLETED: ("C", "green"),
    RemoteStatus.QUEUED: ("Q", "blue"),
    RemoteStatus.IN_PROGRESS: ("P", "blue"),
    RemoteStatus.PROCESSING: ("P", "blue"),
    RemoteStatus.FAILED: ("F", "red"),
    RemoteStatus.ERROR: ("F", "red"),
}


def status_mark(job: Job) -> tuple[str, str]:
    """Return the one-letter status mark and its style for *job*."""
    if job.state in _STATE_MARKS:
        return _STATE_MARKS[job.state]
    return _REMOTE_MARKS.get(RemoteStatus.parse(job.remote_status), _UNKNOWN_MARK)


def format_status_line(snapshot: RoundSnapshot) -> Text:
    """Build the compact status line for one monitoring round.

    One letter per job in discovery order, followed by ``round/max``.
    """
    line = Text()
    for job in snapshot.jobs:
        mark, style = status_mark(job)
        line.append(mark, style=style)
    line.append(f" {snapshot.round}/{snapshot.max_rounds}")
    return line


class RichProgressSink(ProgressSinkProtocol):
    """Print one compact status line per monitoring round."""

    def __init__(self, console: Console) -> None:
        """Initialize the sink.

        Args:
            console: Console the status lines are printed on.
        """
        self._console = console
        self._rounds = 0

    def emit_round(self, snapshot: RoundSnapshot) -> None:
        """Print the status line for *snapshot*."""
        self._rounds += 1
        self._console.print(format_status_line(snapshot), soft_wrap=True)

    def finish(self) -> None:
        """Separate the status lines from the report."""
        if self._rounds:
            self._console.print()


def render_report(
    report: RunReport,
    console: Console,
    status_command: Callable[[Job], str],
) -> None:
    """Render the final run report.

    Args:
        report: Finished run report.
        console: Console to print on.
        status_command: Builds the manual status check command for a job.
    """
    if report.dry_run:
        console.print(
            Text(f"[DRY RUN] {len(report.jobs)} file(s) would be processed"),
            soft_wrap=True,
        )
        for job in report.jobs:
            console.print(
                Text(f"  {job.relative_path} -> {job.output_pattern}"),
                soft_wrap=True,
            )
        return

    table = Table.grid(padding=(0, 1))
    table.add_column(justify="right", style="bold")
    table.add_column()
    table.add_row("Completed", str(len(report.completed)))
    table.add_row("Failed", str(len(report.failed)))
    table.add_row("Timed out", str(len(report.timed_out)))
    table.add_row("Rounds", str(report.rounds))
    console.print(table)

    for job in report.completed:
        if job.retrieved is False:
            continue
        console.print(Text(f"✓ {job.relative_path}", style="green"), soft_wrap=True)
    for job in report.not_retrieved:
        reason = job.error.message if job.error else "download failed"
        console.print(
            Text(f"! {job.relative_path}: not retrieved ({reason})", style="yellow"),
            soft_wrap=True,
        )
    for job in report.failed:
        reason = job.error.message if job.error else "failed"
        console.print(
            Text(f"✗ {job.relative_path}: {reason}", style="red"), soft_wrap=True
        )
    if report.timed_out:
        console.print(
            Text(
                "⏱ Translation still in progress after the last status round. "
                "Check manually with:",
                style="yellow",
            ),
            soft_wrap=True,
        )
        for job in report.timed_out:
            status = job.remote_status or RemoteStatus.UNKNOWN.value
            console.print(
                Text(f"⏱ {job.relative_path} (last status: {status})"),
                soft_wrap=True,
            )
            console.print(Text(f"  {status_command(job)}"), soft_wrap=True)


def render_error(error: ErrorResponse, console: Console) -> None:
    """Print *error* as a red ``Error:`` line."""
    line = Text("Error:", style="red")
    line.append(f" {error.message}", style="default")
    console.print(line, soft_wrap=True)
