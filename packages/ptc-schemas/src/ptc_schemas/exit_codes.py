"""CLI exit codes.

A run exits 0 when at least one job completed, and 1 for every fatal
condition or a run in which nothing completed.
"""

from __future__ import annotations

from enum import IntEnum

from ptc_schemas.results import RunReport


class ExitCode(IntEnum):
    """CLI exit codes."""

    SUCCESS = 0
    FAILURE = 1


def exit_code_for_report(report: RunReport) -> ExitCode:
    """Resolve the exit code for a finished run.

    Args:
        report: Final run report.

    Returns:
        ExitCode: SUCCESS if any job completed, otherwise FAILURE.
    """
    return ExitCode.SUCCESS if report.succeeded else ExitCode.FAILURE
