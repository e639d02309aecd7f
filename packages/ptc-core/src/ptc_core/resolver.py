"""Source file discovery by pattern or explicit manifest."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from ptc_core.paths import (
    derive_output_pattern,
    expand_pattern,
    is_glob_pattern,
    relative_path,
)
from ptc_core.ports.discovery import (
    ConfigValidationError,
    DiscoveryErrorDetails,
    NoFilesFoundError,
)
from ptc_core.util.logging import get_logger
from ptc_schemas.config import ManifestEntry, RunConfig
from ptc_schemas.job import Job

logger = get_logger(__name__)


def validate_sources(
    patterns: Sequence[str], manifest: Sequence[ManifestEntry] | None
) -> None:
    """Ensure exactly one of patterns or manifest is provided.

    Raises:
        ConfigValidationError: If both or neither are given, or the manifest is
            empty.
    """
    has_patterns = any(pattern.strip() for pattern in patterns)
    if has_patterns and manifest is not None:
        raise ConfigValidationError(
            "Cannot use both --patterns and --config-file options together",
            details=DiscoveryErrorDetails(field="patterns"),
        )
    if not has_patterns and manifest is None:
        raise ConfigValidationError(
            "Either patterns (--patterns) or config file (--config-file) "
            "must be specified",
            details=DiscoveryErrorDetails(field="patterns"),
        )
    if manifest is not None and not manifest:
        raise ConfigValidationError(
            "No file entries found in 'files' section",
            details=DiscoveryErrorDetails(field="files"),
        )


def find_files_by_pattern(project_dir: Path, pattern: str) -> list[Path]:
    """Return files under *project_dir* matching an already expanded pattern.

    A pattern without wildcards is a direct relative path. A wildcard pattern
    may match at any depth below *project_dir*.

    Raises:
        ConfigValidationError: If a wildcard pattern is absolute.
    """
    if not is_glob_pattern(pattern):
        candidate = project_dir / pattern
        return [candidate.resolve()] if candidate.is_file() else []
    if Path(pattern).is_absolute():
        raise ConfigValidationError(
            "Wildcard patterns must be relative to the project directory",
            details=DiscoveryErrorDetails(field="patterns", provided=pattern),
        )
    return sorted(
        path.resolve() for path in project_dir.rglob(pattern) if path.is_file()
    )


def resolve_pattern_files(
    project_dir: Path, patterns: Sequence[str], source_locale: str
) -> list[Path]:
    """Expand patterns into the deduplicated union of matching files.

    Args:
        project_dir: Directory searched for files.
        patterns: Patterns containing the locale placeholder.
        source_locale: Locale substituted into each pattern.

    Returns:
        list[Path]: Absolute paths in discovery order.

    Raises:
        NoFilesFoundError: If no pattern matched any file.
    """
    logger.info("Starting file search for source locale: %s", source_locale)
    found: list[Path] = []
    seen: set[Path] = set()
    searched: list[str] = []
    for raw_pattern in patterns:
        raw_pattern = raw_pattern.strip()
        if not raw_pattern:
            continue
        pattern = expand_pattern(raw_pattern, source_locale)
        searched.append(pattern)
        logger.debug("Processing pattern: %s -> %s", raw_pattern, pattern)
        matches = find_files_by_pattern(project_dir, pattern)
        if not matches:
            logger.warning("No files found for pattern: %s", pattern)
            continue
        logger.info("Found %d file(s) for pattern: %s", len(matches), pattern)
        for path in matches:
            logger.debug("  - %s", path)
            if path not in seen:
                seen.add(path)
                found.append(path)
    if not found:
        raise NoFilesFoundError(searched)
    logger.info("Total found %d file(s)", len(found))
    return found


def resolve_manifest_files(
    project_dir: Path, manifest: Sequence[ManifestEntry]
) -> list[tuple[Path, ManifestEntry]]:
    """Resolve manifest entries to existing files.

    Args:
        project_dir: Directory relative entries are resolved against.
        manifest: Explicit file entries.

    Returns:
        list[tuple[Path, ManifestEntry]]: Absolute path and entry pairs.

    Raises:
        ConfigValidationError: If an entry's file does not exist.
    """
    resolved: list[tuple[Path, ManifestEntry]] = []
    seen: set[Path] = set()
    for index, entry in enumerate(manifest, start=1):
        candidate = Path(entry.file)
        if not candidate.is_absolute():
            candidate = project_dir / candidate
        if not candidate.is_file():
            raise ConfigValidationError(
                f"File not found: {entry.file}",
                details=DiscoveryErrorDetails(
                    field="file", entry_index=index, provided=entry.file
                ),
            )
        path = candidate.resolve()
        if path in seen:
            logger.warning(
                "Skipping duplicate manifest entry %d: %s", index, entry.file
            )
            continue
        seen.add(path)
        resolved.append((path, entry))
        logger.info("Found file: %s -> output: %s", entry.file, entry.output)
        if entry.additional_translation_files:
            logger.debug("Additional translation files specified for: %s", entry.file)
            for kind, template in entry.additional_translation_files.items():
                logger.debug("  %s: %s", kind, template)
    logger.info("Total specified %d file(s)", len(resolved))
    return resolved


def build_jobs(config: RunConfig) -> list[Job]:
    """Discover source files and build one job per file.

    Args:
        config: Resolved run configuration.

    Returns:
        list[Job]: Jobs in discovery order, all in the ``unknown`` state.

    Raises:
        ConfigValidationError: For contradictory or malformed inputs.
        NoFilesFoundError: If pattern discovery found nothing.
    """
    validate_sources(config.patterns, config.manifest)
    if config.manifest is not None:
        logger.info(
            "Processing files from config for source locale: %s", config.source_locale
        )
        return [
            Job(
                source_path=path,
                relative_path=relative_path(path, config.base_dir),
                output_pattern=entry.output,
                tag=config.tag,
                additional_translation_files=entry.additional_translation_files,
            )
            for path, entry in resolve_manifest_files(
                config.project_dir, config.manifest
            )
        ]

    jobs: list[Job] = []
    for path in resolve_pattern_files(
        config.project_dir, config.patterns, config.source_locale
    ):
        relative = relative_path(path, config.base_dir)
        jobs.append(
            Job(
                source_path=path,
                relative_path=relative,
                output_pattern=derive_output_pattern(relative, config.source_locale),
                tag=config.tag,
            )
        )
    return jobs
