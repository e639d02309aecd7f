"""CLI entry point - thin adapter over ptc-core."""

from __future__ import annotations

import asyncio
import signal
import threading
from pathlib import Path
from types import FrameType

import typer
from dotenv import load_dotenv
from pydantic import SecretStr, ValidationError
from rich import print as rprint
from rich.console import Console

from ptc_cli.display import RichProgressSink, render_error, render_report
from ptc_core import VERSION, build_jobs
from ptc_core.orchestrator import TranslationOrchestrator
from ptc_core.paths import detect_git_branch, discover_base_directory
from ptc_core.ports import (
    ConfigValidationError,
    DiscoveryError,
    DiscoveryErrorDetails,
    OrchestrationError,
)
from ptc_core.settings import Settings, get_settings
from ptc_core.util.logging import configure_logging, get_logger
from ptc_io import PtcApiClient, get_scratch_space, load_config_file
from ptc_io.api import build_status_check_command
from ptc_schemas.config import ConfigFile, RunConfig
from ptc_schemas.exit_codes import ExitCode, exit_code_for_report
from ptc_schemas.job import Job
from ptc_schemas.responses import ErrorResponse
from ptc_schemas.results import RunReport

logger = get_logger(__name__)

SOURCE_LOCALE_OPTION = typer.Option(
    None, "--source-locale", "-s", help="Source language (e.g. en, de, fr)"
)
PATTERNS_OPTION = typer.Option(
    None,
    "--patterns",
    "-p",
    help="Comma-separated file patterns containing {{lang}} (repeatable)",
)
CONFIG_FILE_OPTION = typer.Option(
    None, "--config-file", "-c", help="YAML config file listing source files"
)
FILE_TAG_NAME_OPTION = typer.Option(
    None,
    "--file-tag-name",
    "-t",
    help="File tag name (default: current git branch or 'main')",
)
PROJECT_DIR_OPTION = typer.Option(
    None, "--project-dir", "-d", help="Project directory (default: current directory)"
)
API_URL_OPTION = typer.Option(None, "--api-url", help="PTC API base URL")
API_TOKEN_OPTION = typer.Option(None, "--api-token", help="PTC API token")
MONITOR_INTERVAL_OPTION = typer.Option(
    None, "--monitor-interval", help="Seconds between status rounds (default: 5)"
)
MONITOR_MAX_ATTEMPTS_OPTION = typer.Option(
    None,
    "--monitor-max-attempts",
    help="Maximum number of status rounds (default: 100)",
)
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Verbose output")
DRY_RUN_OPTION = typer.Option(
    False, "--dry-run", "-n", help="Show what would be done without making requests"
)
LOG_FILE_OPTION = typer.Option(None, "--log-file", help="Write a debug log file")

app = typer.Typer(
    help="Upload translation files to PTC and download the translations",
    no_args_is_help=True,
)


@app.callback()
def main() -> None:
    """Ptc CLI."""


@app.command()
def version() -> None:
    """Display version information."""
    rprint(f"[bold]ptc[/bold] v{VERSION}")


@app.command()
def run(
    source_locale: str | None = SOURCE_LOCALE_OPTION,
    patterns: list[str] | None = PATTERNS_OPTION,
    config_file: Path | None = CONFIG_FILE_OPTION,
    file_tag_name: str | None = FILE_TAG_NAME_OPTION,
    project_dir: Path | None = PROJECT_DIR_OPTION,
    api_url: str | None = API_URL_OPTION,
    api_token: str | None = API_TOKEN_OPTION,
    monitor_interval: float | None = MONITOR_INTERVAL_OPTION,
    monitor_max_attempts: int | None = MONITOR_MAX_ATTEMPTS_OPTION,
    verbose: bool = VERBOSE_OPTION,
    dry_run: bool = DRY_RUN_OPTION,
    log_file: Path | None = LOG_FILE_OPTION,
) -> None:
    """Upload source files, start processing and download the translations.

    Raises:
        typer.Exit: With 0 when at least one file completed, 1 otherwise.
    """
    configure_logging(verbose=verbose, log_file=log_file)
    console = Console(stderr=True)
    _install_signal_handlers()
    try:
        config = _build_run_config(
            source_locale=source_locale,
            patterns=patterns,
            config_file=config_file,
            file_tag_name=file_tag_name,
            project_dir=project_dir,
            api_url=api_url,
            api_token=api_token,
            monitor_interval=monitor_interval,
            monitor_max_attempts=monitor_max_attempts,
            dry_run=dry_run,
        )
        jobs = build_jobs(config)
        report = asyncio.run(_run_async(config, jobs, console))
    except KeyboardInterrupt:
        get_scratch_space().cleanup()
        render_error(ErrorResponse(code="interrupted", message="Interrupted"), console)
        raise typer.Exit(code=int(ExitCode.FAILURE)) from None
    except Exception as exc:
        logger.debug("Run aborted", exc_info=True)
        render_error(_error_from_exception(exc), console)
        raise typer.Exit(code=int(ExitCode.FAILURE)) from exc

    def status_command(job: Job) -> str:
        return build_status_check_command(config.api_url, job)

    render_report(report, console, status_command)
    raise typer.Exit(code=int(exit_code_for_report(report)))


def _build_client(config: RunConfig) -> PtcApiClient:
    return PtcApiClient(config.api_url, config.token_value)


async def _run_async(
    config: RunConfig, jobs: list[Job], console: Console
) -> RunReport:
    async with _build_client(config) as client:
        orchestrator = TranslationOrchestrator.from_config(
            client, config, progress_sink=RichProgressSink(console)
        )
        return await orchestrator.run(jobs)


def _build_run_config(
    *,
    source_locale: str | None,
    patterns: list[str] | None,
    config_file: Path | None,
    file_tag_name: str | None,
    project_dir: Path | None,
    api_url: str | None,
    api_token: str | None,
    monitor_interval: float | None,
    monitor_max_attempts: int | None,
    dry_run: bool,
) -> RunConfig:
    """Merge flags, config file and environment into a run configuration.

    Explicit flags win over config file values, which win over settings from
    the environment or ``.env``.

    Raises:
        ConfigValidationError: If required values are missing or invalid.
    """
    _load_dotenv()
    settings = get_settings()

    project = (project_dir or Path.cwd()).resolve()
    if not project.is_dir():
        raise ConfigValidationError(
            f"Project directory does not exist: {project}",
            details=DiscoveryErrorDetails(field="project_dir", provided=str(project)),
        )

    file_config: ConfigFile | None = None
    if config_file is not None:
        file_config = load_config_file(config_file)

    locale = source_locale or (file_config.source_locale if file_config else None)
    if not locale:
        raise ConfigValidationError(
            "Source locale not specified (--source-locale)",
            details=DiscoveryErrorDetails(field="source_locale"),
        )

    base_dir = discover_base_directory(project)
    tag = (
        file_tag_name
        or (file_config.file_tag_name if file_config else None)
        or detect_git_branch(project)
    )
    logger.debug("Project directory: %s", project)
    logger.debug("Base directory: %s", base_dir)
    logger.debug("File tag name: %s", tag)

    return RunConfig(
        source_locale=locale,
        patterns=_split_patterns(patterns),
        manifest=file_config.files if file_config else None,
        tag=tag,
        project_dir=project,
        base_dir=base_dir,
        api_url=_resolve_api_url(api_url, file_config, settings),
        api_token=_resolve_api_token(api_token, file_config, settings),
        poll_interval=(
            float(monitor_interval)
            if monitor_interval is not None
            else settings.monitor_interval
        ),
        max_rounds=(
            monitor_max_attempts
            if monitor_max_attempts is not None
            else settings.monitor_max_attempts
        ),
        dry_run=dry_run,
    )


def _split_patterns(patterns: list[str] | None) -> list[str]:
    if not patterns:
        return []
    return [
        part.strip() for value in patterns for part in value.split(",") if part.strip()
    ]


def _resolve_api_url(
    api_url: str | None, file_config: ConfigFile | None, settings: Settings
) -> str:
    if api_url:
        return api_url
    if file_config is not None and file_config.api_url:
        return file_config.api_url
    return settings.api_url


def _resolve_api_token(
    api_token: str | None, file_config: ConfigFile | None, settings: Settings
) -> SecretStr | None:
    if api_token:
        return SecretStr(api_token)
    if file_config is not None and file_config.api_token is not None:
        return file_config.api_token
    return settings.api_token


def _load_dotenv() -> None:
    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(env_path, override=False)


def _install_signal_handlers() -> None:
    if threading.current_thread() is not threading.main_thread():
        return
    signal.signal(signal.SIGTERM, _handle_sigterm)


def _handle_sigterm(signum: int, frame: FrameType | None) -> None:
    get_scratch_space().cleanup()
    raise SystemExit(int(ExitCode.FAILURE))


def _error_from_exception(exc: Exception) -> ErrorResponse:
    if isinstance(exc, DiscoveryError):
        return exc.info.to_error_response()
    if isinstance(exc, OrchestrationError):
        return exc.info.to_error_response()
    if isinstance(exc, ValidationError):
        message = "Config validation failed"
        errors = exc.errors()
        if errors:
            first = errors[0]
            loc = first.get("loc", [])
            label = ".".join(str(part) for part in loc) if loc else ""
            detail = first.get("msg", "")
            if label and detail:
                message = f"Config validation failed: {label} - {detail}"
            elif detail:
                message = f"Config validation failed: {detail}"
        return ErrorResponse(code="config_validation", message=message, details=None)
    if isinstance(exc, ValueError):
        return ErrorResponse(
            code="validation_error", message=_describe(exc), details=None
        )
    return ErrorResponse(code="runtime_error", message=_describe(exc), details=None)


def _describe(exc: Exception) -> str:
    return str(exc) or type(exc).__name__


if __name__ == "__main__":
    app()
