"""Tests for paths - normalization and stored-path rules."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

from param_linker.core.paths import (
    absolute_path,
    is_within_folder,
    normalize_path,
    paths_equal,
    resolve_stored_path,
    stored_path_for,
)

case_sensitive_paths = pytest.mark.skipif(
    sys.platform == "win32",
    reason="Windows paths compare case-insensitively",
)


class TestNormalizePath:
    def test_case_and_separator_variants_collapse(self) -> None:
        assert normalize_path("C:\\Proj\\template.json") == normalize_path("c:/proj/TEMPLATE.json")

    def test_dot_segments_collapse(self) -> None:
        assert normalize_path("/a/./b/../c//d.json") == "/a/c/d.json"

    def test_empty(self) -> None:
        assert normalize_path("") == ""

    def test_paths_equal(self) -> None:
        assert paths_equal(Path("/Work/Infra/A.json"), "/work/infra/a.json") is True
        assert paths_equal("/work/a.json", "/work/b.json") is False


class TestIsWithinFolder:
    def test_child_and_grandchild(self, tmp_path: Path) -> None:
        assert is_within_folder(tmp_path, tmp_path / "a.json") is True
        assert is_within_folder(tmp_path, tmp_path / "sub" / "a.json") is True

    def test_folder_itself(self, tmp_path: Path) -> None:
        assert is_within_folder(tmp_path, tmp_path) is True

    def test_sibling_with_shared_prefix(self, tmp_path: Path) -> None:
        assert is_within_folder(tmp_path / "infra", tmp_path / "infra-shared" / "a.json") is False

    def test_parent_is_outside(self, tmp_path: Path) -> None:
        assert is_within_folder(tmp_path / "infra", tmp_path / "a.json") is False

    @case_sensitive_paths
    def test_sibling_differing_only_by_case(self, tmp_path: Path) -> None:
        assert is_within_folder(tmp_path / "Infra", tmp_path / "infra" / "p.json") is False


class TestStoredPathFor:
    def test_same_folder_is_relative(self, tmp_path: Path) -> None:
        template = tmp_path / "template.json"
        assert stored_path_for(template, tmp_path / "template.parameters.json") == (
            "template.parameters.json"
        )

    def test_subfolder_is_relative(self, tmp_path: Path) -> None:
        template = tmp_path / "template.json"
        stored = stored_path_for(template, tmp_path / "params" / "dev.json")
        assert stored == os.path.join("params", "dev.json")

    def test_outside_folder_is_absolute(self, tmp_path: Path) -> None:
        template = tmp_path / "infra" / "template.json"
        params = tmp_path / "shared" / "dev.json"
        assert stored_path_for(template, params) == str(absolute_path(params))

    @case_sensitive_paths
    def test_case_variant_sibling_folder_is_absolute(self, tmp_path: Path) -> None:
        template = tmp_path / "Infra" / "template.json"
        params = tmp_path / "infra" / "template.parameters.json"
        assert stored_path_for(template, params) == str(params)


class TestResolveStoredPath:
    def test_relative_resolves_against_template_folder(self, tmp_path: Path) -> None:
        template = tmp_path / "infra" / "template.json"
        assert resolve_stored_path(template, "params/dev.json") == (
            tmp_path / "infra" / "params" / "dev.json"
        )

    def test_absolute_is_kept(self, tmp_path: Path) -> None:
        template = tmp_path / "infra" / "template.json"
        params = tmp_path / "shared" / "dev.json"
        assert resolve_stored_path(template, str(params)) == params

    def test_parent_segments_resolve(self, tmp_path: Path) -> None:
        template = tmp_path / "infra" / "template.json"
        assert resolve_stored_path(template, "../shared/dev.json") == (
            tmp_path / "shared" / "dev.json"
        )

    def test_round_trip(self, tmp_path: Path) -> None:
        template = tmp_path / "template.json"
        params = tmp_path / "params" / "dev.json"
        assert resolve_stored_path(template, stored_path_for(template, params)) == params
