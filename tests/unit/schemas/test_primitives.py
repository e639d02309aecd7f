"""Unit tests for primitive enums and status payloads."""

from __future__ import annotations

import pytest

from ptc_schemas.api import TranslationStatusPayload
from ptc_schemas.primitives import (
    JOB_STATE_TRANSITIONS,
    TERMINAL_JOB_STATES,
    JobState,
    RemoteStatus,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("completed", RemoteStatus.COMPLETED),
        ("in_progress", RemoteStatus.IN_PROGRESS),
        ("queued", RemoteStatus.QUEUED),
        ("processing", RemoteStatus.PROCESSING),
        ("error", RemoteStatus.ERROR),
        (None, RemoteStatus.UNKNOWN),
        ("", RemoteStatus.UNKNOWN),
        ("null", RemoteStatus.UNKNOWN),
        ("archived", RemoteStatus.UNKNOWN),
    ],
)
def test_remote_status_parse(raw: str | None, expected: RemoteStatus) -> None:
    """Raw status strings map onto known statuses."""
    assert RemoteStatus.parse(raw) is expected


def test_terminal_states_have_no_outgoing_transitions() -> None:
    """Terminal job states are final."""
    for state in TERMINAL_JOB_STATES:
        assert JOB_STATE_TRANSITIONS[state] == frozenset()


def test_every_state_has_a_transition_entry() -> None:
    """The transition table covers every job state."""
    assert set(JOB_STATE_TRANSITIONS) == set(JobState)


@pytest.mark.parametrize(
    ("payload", "display"),
    [
        ({"status": "in_progress", "completeness": 40}, "in_progress"),
        ({"status": None}, "status_unknown"),
        ({"status": "null"}, "status_unknown"),
        ({}, "status_unknown"),
    ],
)
def test_status_payload_display(payload: dict[str, object], display: str) -> None:
    """Missing statuses are displayed as unknown."""
    parsed = TranslationStatusPayload.model_validate(payload, strict=False)
    assert parsed.display_status == display


def test_status_payload_completed() -> None:
    """A completed payload parses to the completed status."""
    parsed = TranslationStatusPayload.model_validate(
        {"status": "completed", "completeness": 100}, strict=False
    )
    assert parsed.remote_status is RemoteStatus.COMPLETED
    assert parsed.completeness == 100
