"""Tests for content_sniffer - bounded parameters-file detection."""

from __future__ import annotations

from pathlib import Path

import pytest

from param_linker.core.content_sniffer import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_MAX_BYTES,
    has_supported_params_extension,
    is_parameters_file,
    read_until_match,
)
from param_linker.core.schemas import contains_params_schema
from tests._factories import PARAMS_SCHEMA, TEMPLATE_SCHEMA, params_document, write_params


class TestHasSupportedParamsExtension:
    @pytest.mark.parametrize("name", ["a.json", "a.jsonc", "a.JSON", "a.params.JsonC"])
    def test_supported(self, name: str) -> None:
        assert has_supported_params_extension(name) is True

    @pytest.mark.parametrize("name", ["a.yaml", "a.json.bak", "a", "a.bicepparam"])
    def test_unsupported(self, name: str) -> None:
        assert has_supported_params_extension(name) is False


class TestReadUntilMatch:
    """Tests for read_until_match()."""

    def test_stops_after_first_chunk_when_marker_is_early(self, tmp_path: Path) -> None:
        """A huge file with the marker at the top costs one chunk, not the file."""
        path = tmp_path / "big.parameters.json"
        with path.open("wb") as f:
            f.write(params_document().encode("utf-8"))
            f.write(b" " * (10 * 1024 * 1024))

        result = read_until_match(path, contains_params_schema)

        assert result.matched is True
        assert result.bytes_read <= DEFAULT_CHUNK_SIZE

    def test_never_reads_past_ceiling(self, tmp_path: Path) -> None:
        path = tmp_path / "noise.json"
        path.write_bytes(b"{" + b" " * (DEFAULT_MAX_BYTES * 3) + b"}")

        result = read_until_match(path, contains_params_schema)

        assert result.matched is False
        assert result.bytes_read == DEFAULT_MAX_BYTES

    def test_marker_spanning_chunk_boundary(self, tmp_path: Path) -> None:
        path = tmp_path / "split.json"
        padding = b" " * (DEFAULT_CHUNK_SIZE - 20)
        path.write_bytes(padding + f'{{"$schema": "{PARAMS_SCHEMA}"}}'.encode())

        result = read_until_match(path, contains_params_schema)

        assert result.matched is True
        assert result.bytes_read > DEFAULT_CHUNK_SIZE

    def test_short_file_reports_its_size(self, tmp_path: Path) -> None:
        path = tmp_path / "tiny.json"
        path.write_bytes(b"{}")

        result = read_until_match(path, contains_params_schema)

        assert result.matched is False
        assert result.bytes_read == 2

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            read_until_match(tmp_path / "missing.json", contains_params_schema)


class TestIsParametersFile:
    """Tests for is_parameters_file()."""

    def test_detects_parameters_file(self, tmp_path: Path) -> None:
        assert is_parameters_file(write_params(tmp_path, "a.parameters.json")) is True

    def test_template_is_not_parameters_file(self, tmp_path: Path) -> None:
        path = write_params(tmp_path, "template.json", schema=TEMPLATE_SCHEMA)
        assert is_parameters_file(path) is False

    def test_wrong_extension_is_never_read(self, tmp_path: Path) -> None:
        path = write_params(tmp_path, "a.parameters.txt")
        assert is_parameters_file(path) is False

    def test_uppercase_extension_accepted(self, tmp_path: Path) -> None:
        assert is_parameters_file(write_params(tmp_path, "a.parameters.JSONC")) is True

    def test_http_schema_accepted(self, tmp_path: Path) -> None:
        path = write_params(
            tmp_path,
            "old.parameters.json",
            schema="http://schema.management.azure.com/schemas/2015-01-01/deploymentParameters.json#",
        )
        assert is_parameters_file(path) is True

    def test_marker_beyond_ceiling_is_missed(self, tmp_path: Path) -> None:
        path = tmp_path / "late.parameters.json"
        path.write_text(" " * (DEFAULT_MAX_BYTES + 10) + params_document(), encoding="utf-8")

        assert is_parameters_file(path) is False
        assert is_parameters_file(path, max_bytes=DEFAULT_MAX_BYTES * 4) is True

    def test_missing_file_is_false(self, tmp_path: Path) -> None:
        assert is_parameters_file(tmp_path / "missing.parameters.json") is False

    def test_directory_is_false(self, tmp_path: Path) -> None:
        folder = tmp_path / "folder.json"
        folder.mkdir()
        assert is_parameters_file(folder) is False

    def test_unreadable_file_logs_when_debugging(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setenv("PARAM_LINKER_DEBUG", "1")

        assert is_parameters_file(tmp_path / "missing.parameters.json") is False
        assert "Could not sniff" in capsys.readouterr().err

    def test_invalid_utf8_does_not_break_detection(self, tmp_path: Path) -> None:
        path = tmp_path / "latin.parameters.json"
        path.write_bytes(b"\xff\xfe\xfa junk " + params_document().encode("utf-8"))
        assert is_parameters_file(path) is True


class TestStrictMode:
    def test_marker_only_in_comment(self, tmp_path: Path) -> None:
        path = tmp_path / "commented.json"
        path.write_text(
            f"// {PARAMS_SCHEMA}\n"
            + f'{{"$schema": "{TEMPLATE_SCHEMA}", "resources": []}}\n',
            encoding="utf-8",
        )

        assert is_parameters_file(path) is True
        assert is_parameters_file(path, strict=True) is False

    def test_jsonc_with_comments_and_trailing_commas(self, tmp_path: Path) -> None:
        path = tmp_path / "dev.parameters.jsonc"
        path.write_text(
            "/* dev environment */\n"
            + "{\n"
            + f'  "$schema": "{PARAMS_SCHEMA}", // schema\n'
            + '  "parameters": {"name": {"value": "a//b"},},\n'
            + "}\n",
            encoding="utf-8",
        )

        assert is_parameters_file(path, strict=True) is True

    def test_unknown_schema_version_rejected(self, tmp_path: Path) -> None:
        path = write_params(
            tmp_path,
            "future.parameters.json",
            schema="https://schema.management.azure.com/schemas/2099-01-01/deploymentParameters.json#",
        )

        assert is_parameters_file(path) is True
        assert is_parameters_file(path, strict=True) is False

    def test_unparseable_document_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.parameters.json"
        path.write_text(f'{{"$schema": "{PARAMS_SCHEMA}", "parameters": ', encoding="utf-8")

        assert is_parameters_file(path, strict=True) is False

    def test_deeply_nested_document_rejected(self, tmp_path: Path) -> None:
        depth = 100_000
        path = tmp_path / "deep.json"
        path.write_text(
            f'{{"$schema": "{PARAMS_SCHEMA}", "x": ' + "[" * depth + "]" * depth + "}",
            encoding="utf-8",
        )

        assert is_parameters_file(path) is True
        assert is_parameters_file(path, strict=True) is False
