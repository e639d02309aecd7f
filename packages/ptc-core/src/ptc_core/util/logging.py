"""Logging helpers for ptc."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

_CONSOLE_HANDLER = "ptc-console"
_FILE_HANDLER = "ptc-file"
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False, log_file: Path | None = None) -> None:
    """Configure global logging with console and optional file handlers.

    Calling this again replaces the handlers installed by a previous call, so
    the console handler always writes to the current ``sys.stderr``.

    Args:
        verbose: Log DEBUG records to the console instead of INFO.
        log_file: Optional path for a debug-level log file.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for handler in list(root.handlers):
        if handler.get_name() in {_CONSOLE_HANDLER, _FILE_HANDLER}:
            root.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.set_name(_CONSOLE_HANDLER)
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.set_name(_FILE_HANDLER)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    # Request-level chatter from the HTTP stack is noise even in verbose mode.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return a logger for *name*."""
    return logging.getLogger(name)
