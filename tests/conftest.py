"""Common pytest configuration."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import TypeAlias

import httpx
import pytest

import ptc_cli.main as cli_main
from ptc_core.paths import derive_output_pattern
from ptc_core.settings import get_settings
from ptc_io import PtcApiClient
from ptc_schemas.config import RunConfig
from ptc_schemas.job import Job
from tests.helpers.fake_ptc import FakePtcServer

_PTC_ENV_VARS = (
    "PTC_API_URL",
    "PTC_API_TOKEN",
    "PTC_MONITOR_INTERVAL",
    "PTC_MONITOR_MAX_ATTEMPTS",
)

JobFactory: TypeAlias = Callable[..., Job]


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Clear ptc environment variables, cached settings and log handlers."""
    for name in _PTC_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    root = logging.getLogger()
    for handler in list(root.handlers):
        if (handler.get_name() or "").startswith("ptc-"):
            root.removeHandler(handler)
            handler.close()


@pytest.fixture
def make_job(tmp_path: Path) -> JobFactory:
    """Return a factory writing a source file under tmp_path and wrapping it.

    Returns:
        JobFactory: Builds jobs relative to ``tmp_path``.
    """

    def _make(
        relative: str = "locales/en.json",
        *,
        content: str = '{"hello": "Hello"}',
        tag: str = "main",
        output: str | None = None,
        additional: dict[str, str] | None = None,
    ) -> Job:
        source = tmp_path / relative
        source.parent.mkdir(parents=True, exist_ok=True)
        source.write_text(content, encoding="utf-8")
        return Job(
            source_path=source,
            relative_path=relative,
            output_pattern=output or derive_output_pattern(relative, "en"),
            tag=tag,
            additional_translation_files=additional,
        )

    return _make


@pytest.fixture
def ptc_server(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> FakePtcServer:
    """Route CLI runs in ``tmp_path`` to a fake PTC server.

    Returns:
        FakePtcServer: Server whose answers the test scripts.
    """
    server = FakePtcServer()

    def build_client(config: RunConfig) -> PtcApiClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(server.handler))
        return PtcApiClient(config.api_url, config.token_value, http_client=http_client)

    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(cli_main, "_build_client", build_client)
    monkeypatch.setattr(cli_main, "discover_base_directory", lambda start: start)
    monkeypatch.setattr(cli_main, "detect_git_branch", lambda start: "main")
    monkeypatch.setattr(cli_main, "_install_signal_handlers", lambda: None)
    return server
