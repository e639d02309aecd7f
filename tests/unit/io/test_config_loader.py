"""Unit tests for YAML config file loading."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from ptc_core.ports.discovery import ConfigValidationError
from ptc_io.config_loader import load_config_file


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "ptc.yml"
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


@pytest.mark.unit
def test_load_valid_config(tmp_path: Path) -> None:
    """A complete config file loads with every entry."""
    path = _write(
        tmp_path,
        """
        source_locale: en
        file_tag_name: release
        api_url: https://ptc.example.test/api/v1
        api_token: from-file
        files:
          - file: locales/en.json
            output: locales/{{lang}}.json
          - file: languages/plugin-en.po
            output: languages/plugin-{{lang}}.po
            additional_translation_files:
              mo: languages/plugin-{{lang}}.mo
        """,
    )

    config = load_config_file(path)

    assert config.source_locale == "en"
    assert config.file_tag_name == "release"
    assert config.api_url == "https://ptc.example.test/api/v1/"
    assert config.api_token is not None
    assert config.api_token.get_secret_value() == "from-file"
    assert [entry.file for entry in config.files] == [
        "locales/en.json",
        "languages/plugin-en.po",
    ]
    assert config.files[1].additional_translation_files == {
        "mo": "languages/plugin-{{lang}}.mo"
    }


@pytest.mark.unit
def test_files_only_config(tmp_path: Path) -> None:
    """Every top-level key except files is optional."""
    path = _write(
        tmp_path,
        """
        files:
          - file: en.json
            output: "{{lang}}.json"
        """,
    )

    config = load_config_file(path)

    assert config.source_locale is None
    assert config.api_token is None
    assert config.files[0].output == "{{lang}}.json"


@pytest.mark.unit
def test_plain_scalars_stay_text(tmp_path: Path) -> None:
    """Values YAML would read as booleans, numbers or dates load as strings."""
    path = _write(
        tmp_path,
        """
        source_locale: no
        file_tag_name: 2024
        api_token: ~
        files:
          - file: locales/no.json
            output: locales/{{lang}}.json
            additional_translation_files:
              mo: 2024-01-01
        """,
    )

    config = load_config_file(path)

    assert config.source_locale == "no"
    assert config.file_tag_name == "2024"
    assert config.api_token is None
    assert config.files[0].additional_translation_files == {"mo": "2024-01-01"}


@pytest.mark.unit
def test_entry_without_output_names_entry(tmp_path: Path) -> None:
    """Validation errors point at the 1-based manifest entry."""
    path = _write(
        tmp_path,
        """
        files:
          - file: a/en.json
            output: a/{{lang}}.json
          - file: b/en.json
            output: b/{{lang}}.json
          - file: c/en.json
        """,
    )

    with pytest.raises(ConfigValidationError) as exc_info:
        load_config_file(path)

    details = exc_info.value.info.details
    assert details is not None
    assert details.entry_index == 3
    assert details.field == "output"
    assert exc_info.value.info.to_error_response().message.startswith(
        "Entry 3: output:"
    )


@pytest.mark.unit
def test_missing_config_file(tmp_path: Path) -> None:
    """A missing file is a config validation error."""
    with pytest.raises(ConfigValidationError, match="Config file not found"):
        load_config_file(tmp_path / "absent.yml")


@pytest.mark.unit
def test_invalid_yaml(tmp_path: Path) -> None:
    """Unparseable YAML is reported as unreadable."""
    path = _write(tmp_path, "files: [unclosed\n")

    with pytest.raises(ConfigValidationError, match="Could not read config file"):
        load_config_file(path)


@pytest.mark.unit
def test_non_mapping_document(tmp_path: Path) -> None:
    """The document root must be a mapping."""
    path = _write(tmp_path, "- file: en.json\n")

    with pytest.raises(ConfigValidationError, match="must contain a mapping"):
        load_config_file(path)


@pytest.mark.unit
@pytest.mark.parametrize("content", ["source_locale: en\n", "files: []\n"])
def test_empty_files_section(tmp_path: Path, content: str) -> None:
    """A config without file entries is rejected."""
    path = _write(tmp_path, content)

    with pytest.raises(ConfigValidationError, match="No file entries found"):
        load_config_file(path)


@pytest.mark.unit
def test_invalid_api_url(tmp_path: Path) -> None:
    """Top-level field errors carry the field name but no entry."""
    path = _write(
        tmp_path,
        """
        api_url: ftp://ptc.example.test
        files:
          - file: en.json
            output: "{{lang}}.json"
        """,
    )

    with pytest.raises(ConfigValidationError) as exc_info:
        load_config_file(path)

    details = exc_info.value.info.details
    assert details is not None
    assert details.entry_index is None
    assert details.field == "api_url"
