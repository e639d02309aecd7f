"""Unpacking of downloaded translation archives."""

from __future__ import annotations

import atexit
import os
import shutil
import tempfile
import zipfile
from collections import Counter
from pathlib import Path

from ptc_core.ports.transfer import TransferErrorCode, build_transfer_error
from ptc_core.util.logging import get_logger
from ptc_schemas.job import Job
from ptc_schemas.primitives import TRANSLATION_FILE_EXTENSIONS

logger = get_logger(__name__)

ARCHIVE_PREFIX = "ptc_translations_"
EXTRACT_PREFIX = "ptc_extract_"


class ScratchSpace:
    """Unique temporary files and directories that are removed on cleanup."""

    def __init__(self, root: Path | None = None) -> None:
        """Initialize the scratch space.

        Args:
            root: Directory to create scratch paths in. Defaults to the
                system temporary directory.
        """
        self._root = root
        self._paths: list[Path] = []

    @property
    def active(self) -> list[Path]:
        """Scratch paths not yet released."""
        return list(self._paths)

    def archive_file(self) -> Path:
        """Create an empty, uniquely named archive file."""
        handle, name = tempfile.mkstemp(
            prefix=ARCHIVE_PREFIX, suffix=".zip", dir=self._root
        )
        os.close(handle)
        path = Path(name)
        self._paths.append(path)
        return path

    def extract_dir(self) -> Path:
        """Create an empty, uniquely named extraction directory."""
        path = Path(tempfile.mkdtemp(prefix=EXTRACT_PREFIX, dir=self._root))
        self._paths.append(path)
        return path

    def release(self, path: Path) -> None:
        """Delete one scratch path and stop tracking it."""
        if path.is_dir():
            shutil.rmtree(path, ignore_errors=True)
        else:
            path.unlink(missing_ok=True)
        if path in self._paths:
            self._paths.remove(path)

    def cleanup(self) -> None:
        """Delete every scratch path still tracked."""
        if self._paths:
            logger.debug("Removing %d scratch path(s)", len(self._paths))
        for path in list(self._paths):
            self.release(path)


_SCRATCH = ScratchSpace()
atexit.register(_SCRATCH.cleanup)


def get_scratch_space() -> ScratchSpace:
    """Return the process-wide scratch space cleaned up at exit."""
    return _SCRATCH


def destination_dir(job: Job, base_dir: Path) -> Path:
    """Return the directory translations for *job* are placed in.

    Files under the base directory receive translations next to the source
    file's relative location. External files use their own directory.
    """
    relative = Path(job.relative_path)
    if relative.is_absolute():
        return job.source_path.parent
    return base_dir / relative.parent


def extract_archive(archive_path: Path, target: Path, job: Job) -> list[Path]:
    """Extract *archive_path* into *target* and list the extracted files.

    Encrypted members and unsupported compression methods count as an
    unreadable archive.

    Raises:
        TransferError: With ``extract_failed`` if the archive is unreadable.
    """
    try:
        with zipfile.ZipFile(archive_path) as archive:
            archive.extractall(target)
    except (
        zipfile.BadZipFile,
        zipfile.LargeZipFile,
        OSError,
        EOFError,
        RuntimeError,
        ValueError,
    ) as exc:
        raise build_transfer_error(
            TransferErrorCode.EXTRACT_FAILED,
            f"Failed to extract translations archive: {exc}",
            job,
        ) from exc
    return sorted(path for path in target.rglob("*") if path.is_file())


def relocate_translations(
    files: list[Path], destination: Path, job: Job
) -> list[Path]:
    """Move translation files flat into *destination*.

    Only files with a translation extension are moved. An existing
    destination file is overwritten.

    Args:
        files: Extracted files.
        destination: Target directory, created when absent.
        job: Job the files belong to.

    Returns:
        list[Path]: Placed files.

    Raises:
        TransferError: With ``relocate_failed`` on name collisions, a
            directory in the way, or an OS error while moving.
    """
    translations = [
        path for path in files if path.suffix.lower() in TRANSLATION_FILE_EXTENSIONS
    ]
    collisions = sorted(
        name
        for name, count in Counter(path.name for path in translations).items()
        if count > 1
    )
    if collisions:
        raise build_transfer_error(
            TransferErrorCode.RELOCATE_FAILED,
            f"Archive contains several files named {', '.join(collisions)}",
            job,
        )

    placed: list[Path] = []
    try:
        destination.mkdir(parents=True, exist_ok=True)
        for path in translations:
            target = destination / path.name
            if target.is_dir():
                raise build_transfer_error(
                    TransferErrorCode.RELOCATE_FAILED,
                    f"Destination is a directory: {target}",
                    job,
                )
            if target.exists():
                logger.info("Overwriting existing file: %s", target)
            logger.debug("Moving %s to %s", path.name, target)
            shutil.move(path, target)
            placed.append(target)
    except OSError as exc:
        raise build_transfer_error(
            TransferErrorCode.RELOCATE_FAILED,
            f"Failed to move translation files to {destination}: {exc}",
            job,
        ) from exc
    return placed


def unpack_translations(
    content: bytes,
    job: Job,
    base_dir: Path,
    scratch: ScratchSpace | None = None,
) -> list[Path]:
    """Store, extract and relocate a downloaded translations archive.

    Scratch paths are released whether or not unpacking succeeds.

    Args:
        content: Raw ZIP bytes.
        job: Job the archive belongs to.
        base_dir: Base directory of the run.
        scratch: Scratch space for temporary paths.

    Returns:
        list[Path]: Translation files placed in the project.

    Raises:
        TransferError: If the archive cannot be stored, extracted or relocated.
    """
    scratch = scratch or get_scratch_space()
    destination = destination_dir(job, base_dir)
    created: list[Path] = []
    try:
        try:
            archive_path = scratch.archive_file()
            created.append(archive_path)
            extract_dir = scratch.extract_dir()
            created.append(extract_dir)
            archive_path.write_bytes(content)
        except OSError as exc:
            raise build_transfer_error(
                TransferErrorCode.DOWNLOAD_FAILED,
                f"Failed to store translations archive: {exc}",
                job,
            ) from exc
        logger.info("Unpacking translations to: %s", destination)
        files = extract_archive(archive_path, extract_dir, job)
        placed = relocate_translations(files, destination, job)
    finally:
        for path in created:
            scratch.release(path)
    if not placed:
        logger.warning(
            "No translation files found in archive for %s", job.relative_path
        )
    return placed
