"""Unit tests for translation archive unpacking."""

from __future__ import annotations

import io
import zipfile
from collections.abc import Callable
from pathlib import Path
from typing import TypeAlias

import pytest

from ptc_core.ports.transfer import TransferError, TransferErrorCode
from ptc_io.archive import (
    ScratchSpace,
    destination_dir,
    relocate_translations,
    unpack_translations,
)
from ptc_schemas.job import Job

JobFactory: TypeAlias = Callable[..., Job]


def _zip_bytes(entries: dict[str, str]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, content in entries.items():
            archive.writestr(name, content)
    return buffer.getvalue()


@pytest.fixture
def scratch(tmp_path: Path) -> ScratchSpace:
    """Return a scratch space rooted in its own temporary directory."""
    root = tmp_path / "scratch"
    root.mkdir()
    return ScratchSpace(root)


@pytest.mark.unit
def test_unpack_flattens_translations(
    make_job: JobFactory, tmp_path: Path, scratch: ScratchSpace
) -> None:
    """Nested archive members land flat next to the source file."""
    job = make_job("languages/plugin-en.po", content="msgid \"\"")
    content = _zip_bytes({
        "build/plugin-de.po": "de",
        "build/mo/plugin-de.mo": "mo",
        "notes.md": "skip",
    })

    placed = unpack_translations(content, job, tmp_path, scratch)

    assert sorted(path.name for path in placed) == ["plugin-de.mo", "plugin-de.po"]
    assert (tmp_path / "languages" / "plugin-de.po").read_text() == "de"
    assert not (tmp_path / "languages" / "notes.md").exists()
    assert not (tmp_path / "languages" / "build").exists()
    assert scratch.active == []


@pytest.mark.unit
def test_unpack_overwrites_existing_translation(
    make_job: JobFactory,
    tmp_path: Path,
    scratch: ScratchSpace,
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Existing translations are replaced by the downloaded ones."""
    caplog.set_level("INFO")
    job = make_job("locales/en.json")
    existing = tmp_path / "locales" / "de.json"
    existing.write_text("old", encoding="utf-8")

    unpack_translations(_zip_bytes({"de.json": "new"}), job, tmp_path, scratch)

    assert existing.read_text(encoding="utf-8") == "new"
    assert "Overwriting existing file" in caplog.text


@pytest.mark.unit
def test_unpack_corrupt_archive(
    make_job: JobFactory, tmp_path: Path, scratch: ScratchSpace
) -> None:
    """Unreadable archives fail extraction and leave no scratch files."""
    with pytest.raises(TransferError) as exc_info:
        unpack_translations(b"not a zip", make_job(), tmp_path, scratch)

    assert exc_info.value.info.code == TransferErrorCode.EXTRACT_FAILED
    assert scratch.active == []
    assert list((tmp_path / "scratch").iterdir()) == []


@pytest.mark.unit
def test_unpack_without_scratch_root_is_download_failure(
    make_job: JobFactory, tmp_path: Path
) -> None:
    """A scratch root that cannot be written to fails only this download."""
    scratch = ScratchSpace(tmp_path / "does-not-exist")

    content = _zip_bytes({"de.json": "{}"})
    with pytest.raises(TransferError) as exc_info:
        unpack_translations(content, make_job(), tmp_path, scratch)

    assert exc_info.value.info.code == TransferErrorCode.DOWNLOAD_FAILED
    assert scratch.active == []


@pytest.mark.unit
@pytest.mark.parametrize(
    "error",
    [
        NotImplementedError("That compression method is not supported"),
        RuntimeError("File 'de.json' is encrypted, password required"),
    ],
)
def test_unpack_unsupported_archive_is_extract_failure(
    make_job: JobFactory,
    tmp_path: Path,
    scratch: ScratchSpace,
    monkeypatch: pytest.MonkeyPatch,
    error: Exception,
) -> None:
    """Archives zipfile refuses to extract fail extraction for this job."""

    def _refuse(self: zipfile.ZipFile, *args: object, **kwargs: object) -> None:
        raise error

    monkeypatch.setattr(zipfile.ZipFile, "extractall", _refuse)

    content = _zip_bytes({"de.json": "{}"})
    with pytest.raises(TransferError) as exc_info:
        unpack_translations(content, make_job(), tmp_path, scratch)

    assert exc_info.value.info.code == TransferErrorCode.EXTRACT_FAILED
    assert scratch.active == []
    assert list((tmp_path / "scratch").iterdir()) == []


@pytest.mark.unit
def test_unpack_rejects_duplicate_names(
    make_job: JobFactory, tmp_path: Path, scratch: ScratchSpace
) -> None:
    """Two members flattening to one file name are refused."""
    content = _zip_bytes({"a/de.json": "1", "b/de.json": "2"})

    with pytest.raises(TransferError) as exc_info:
        unpack_translations(content, make_job(), tmp_path, scratch)

    assert exc_info.value.info.code == TransferErrorCode.RELOCATE_FAILED
    assert "de.json" in exc_info.value.info.message
    assert not (tmp_path / "locales" / "de.json").exists()


@pytest.mark.unit
def test_unpack_without_translations_warns(
    make_job: JobFactory,
    tmp_path: Path,
    scratch: ScratchSpace,
    caplog: pytest.LogCaptureFixture,
) -> None:
    """An archive without translation files places nothing."""
    placed = unpack_translations(
        _zip_bytes({"README.txt": "hi"}), make_job(), tmp_path, scratch
    )

    assert placed == []
    assert "No translation files found" in caplog.text


@pytest.mark.unit
def test_relocate_refuses_directory_in_the_way(
    make_job: JobFactory, tmp_path: Path
) -> None:
    """A directory at the target path is a relocation failure."""
    extracted = tmp_path / "extracted"
    extracted.mkdir()
    member = extracted / "de.json"
    member.write_text("{}", encoding="utf-8")
    destination = tmp_path / "out"
    (destination / "de.json").mkdir(parents=True)

    with pytest.raises(TransferError) as exc_info:
        relocate_translations([member], destination, make_job())

    assert exc_info.value.info.code == TransferErrorCode.RELOCATE_FAILED


@pytest.mark.unit
def test_destination_dir_for_external_file(
    make_job: JobFactory, tmp_path: Path
) -> None:
    """Files outside the base directory keep translations beside them."""
    inside = make_job("locales/en.json")
    external_source = tmp_path / "external" / "en.json"
    external_source.parent.mkdir()
    external_source.write_text("{}", encoding="utf-8")
    external = Job(
        source_path=external_source,
        relative_path=str(external_source),
        output_pattern=str(external_source.parent / "{{lang}}.json"),
        tag="main",
    )

    assert destination_dir(inside, tmp_path / "base") == tmp_path / "base" / "locales"
    assert destination_dir(external, tmp_path / "base") == external_source.parent


@pytest.mark.unit
def test_scratch_cleanup_removes_everything(scratch: ScratchSpace) -> None:
    """Cleanup deletes every scratch path still tracked."""
    archive = scratch.archive_file()
    extract = scratch.extract_dir()
    (extract / "partial.json").write_text("{}", encoding="utf-8")

    assert archive.name.startswith("ptc_translations_")
    assert extract.name.startswith("ptc_extract_")
    scratch.cleanup()

    assert scratch.active == []
    assert not archive.exists()
    assert not extract.exists()
