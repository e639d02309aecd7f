"""Integration test configuration with shared BDD fixtures."""

from __future__ import annotations

import pytest
from typer.testing import CliRunner

# Apply integration marker to all tests in this directory
pytestmark = pytest.mark.integration


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Typer CLI runner for invoking commands."""
    return CliRunner()
