"""Path normalization helpers.

Remote file identities are paths relative to a base directory (the git
work tree root, or the working directory outside git). Output templates are
derived from a source file name by swapping the source locale for the
locale placeholder.
"""

from __future__ import annotations

import re
import subprocess
from pathlib import Path

from ptc_core.util.logging import get_logger
from ptc_schemas.primitives import DEFAULT_TAG, LOCALE_PLACEHOLDER

logger = get_logger(__name__)

GLOB_CHARACTERS = frozenset("*?[")


def expand_pattern(pattern: str, source_locale: str) -> str:
    """Substitute every locale placeholder in *pattern* with *source_locale*."""
    return pattern.replace(LOCALE_PLACEHOLDER, source_locale)


def is_glob_pattern(pattern: str) -> bool:
    """Return True when *pattern* contains wildcard characters."""
    return any(char in GLOB_CHARACTERS for char in pattern)


def relative_path(path: Path, base_dir: Path) -> str:
    """Return *path* relative to *base_dir* in POSIX form.

    Files outside *base_dir* are returned as their absolute path; they are
    still submitted, under their full path.

    Args:
        path: File path to normalize.
        base_dir: Base directory remote paths are relative to.

    Returns:
        str: Relative POSIX path, or the absolute path for external files.
    """
    absolute = path.resolve()
    try:
        return absolute.relative_to(base_dir.resolve()).as_posix()
    except ValueError:
        logger.debug("File is outside base directory %s: %s", base_dir, absolute)
        return absolute.as_posix()


def replace_locale_token(name: str, source_locale: str) -> str:
    """Replace the source locale inside a file name with the placeholder.

    The last occurrence delimited by non-alphanumeric characters wins, so
    ``content-en.json`` becomes ``content-{{lang}}.json``. Without a delimited
    occurrence the last raw occurrence is replaced.

    Args:
        name: File base name.
        source_locale: Locale token to replace (case-sensitive).

    Returns:
        str: Name with one token replaced, or unchanged when absent.
    """
    if not source_locale:
        return name
    token = re.escape(source_locale)
    bounded = list(re.finditer(rf"(?<![A-Za-z0-9]){token}(?![A-Za-z0-9])", name))
    if bounded:
        start, end = bounded[-1].span()
    else:
        start = name.rfind(source_locale)
        if start < 0:
            return name
        end = start + len(source_locale)
    return f"{name[:start]}{LOCALE_PLACEHOLDER}{name[end:]}"


def derive_output_pattern(file_path: str, source_locale: str) -> str:
    """Derive the output template for a source file.

    Only the base name is rewritten; the directory part is kept as is.

    Args:
        file_path: Relative (or external absolute) POSIX path of the source file.
        source_locale: Source locale code.

    Returns:
        str: Output path template containing the locale placeholder.
    """
    directory, _, filename = file_path.rpartition("/")
    output_name = replace_locale_token(filename, source_locale)
    if output_name == filename:
        logger.warning(
            "Source locale '%s' not found in file name %s; output path is unchanged",
            source_locale,
            filename,
        )
    if directory:
        return f"{directory}/{output_name}"
    if file_path.startswith("/"):
        return f"/{output_name}"
    return output_name


def _run_git(args: list[str], cwd: Path) -> str | None:
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as exc:
        logger.debug("git %s failed in %s: %s", " ".join(args), cwd, exc)
        return None
    output = result.stdout.strip()
    return output or None


def discover_base_directory(start: Path) -> Path:
    """Return the git work tree root containing *start*, else the working directory."""
    toplevel = _run_git(["rev-parse", "--show-toplevel"], start)
    if toplevel is not None:
        return Path(toplevel)
    return Path.cwd()


def detect_git_branch(start: Path) -> str:
    """Return the current git branch name at *start*, or ``main``."""
    branch = _run_git(["branch", "--show-current"], start)
    if branch is None:
        branch = _run_git(["rev-parse", "--abbrev-ref", "HEAD"], start)
    return branch or DEFAULT_TAG
