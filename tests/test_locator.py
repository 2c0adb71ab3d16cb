"""Tests for ManifestLocator — pure filesystem logic."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

from depgap.engines.manifest_locator import ManifestLocator, locate


@pytest.fixture
def locator():
    return ManifestLocator()


class TestLocateFound:
    def test_manifest_next_to_file(self, tmp_path: Path, locator: ManifestLocator):
        pkg = tmp_path / "package.json"
        pkg.write_text("{}")
        src = tmp_path / "index.js"
        src.write_text("")

        assert locator.locate(src) == pkg

    def test_manifest_in_ancestor(self, tmp_path: Path, locator: ManifestLocator):
        pkg = tmp_path / "package.json"
        pkg.write_text("{}")
        deep = tmp_path / "src" / "components" / "ui"
        deep.mkdir(parents=True)

        assert locator.locate(deep / "Button.tsx") == pkg

    def test_nearest_manifest_wins(self, tmp_path: Path, locator: ManifestLocator):
        (tmp_path / "package.json").write_text("{}")
        inner = tmp_path / "packages" / "web"
        inner.mkdir(parents=True)
        inner_pkg = inner / "package.json"
        inner_pkg.write_text("{}")

        assert locator.locate(inner / "src" / "app.ts") == inner_pkg

    def test_file_need_not_exist(self, tmp_path: Path, locator: ManifestLocator):
        pkg = tmp_path / "package.json"
        pkg.write_text("{}")
        assert locator.locate(tmp_path / "unsaved.ts") == pkg

    def test_directory_named_like_manifest_is_ignored(
        self, tmp_path: Path, locator: ManifestLocator
    ):
        outer = tmp_path / "package.json"
        outer.write_text("{}")
        inner = tmp_path / "sub"
        (inner / "package.json").mkdir(parents=True)

        assert locator.locate(inner / "a.js") == outer

    def test_custom_manifest_name(self, tmp_path: Path):
        deno = tmp_path / "deno.json"
        deno.write_text("{}")
        assert ManifestLocator(manifest_name="deno.json").locate(tmp_path / "main.ts") == deno

    def test_relative_start_path(self, tmp_path: Path, locator: ManifestLocator, monkeypatch):
        pkg = tmp_path / "package.json"
        pkg.write_text("{}")
        (tmp_path / "src").mkdir()
        monkeypatch.chdir(tmp_path)

        result = locator.locate(Path("src") / "index.js")
        assert result is not None
        assert result.resolve() == pkg.resolve()

    def test_module_level_helper(self, tmp_path: Path):
        pkg = tmp_path / "package.json"
        pkg.write_text("{}")
        assert locate(tmp_path / "x.js") == pkg


class TestLocateBounds:
    def test_result_is_in_ancestor_chain(self, tmp_path: Path, locator: ManifestLocator):
        (tmp_path / "a" / "package.json").parent.mkdir()
        (tmp_path / "a" / "package.json").write_text("{}")
        start = tmp_path / "a" / "b" / "c" / "file.js"
        # A sibling manifest must never be picked.
        (tmp_path / "a" / "b" / "d").mkdir(parents=True)
        (tmp_path / "a" / "b" / "d" / "package.json").write_text("{}")

        result = locator.locate(start)
        assert result is not None
        assert result.parent in Path(os.path.abspath(start)).parents

    def test_not_found_when_no_ancestor_has_manifest(self, tmp_path: Path):
        # A name no real filesystem root will contain.
        locator = ManifestLocator(manifest_name="depgap-test-manifest-7f3a.json")
        deep = tmp_path / "x" / "y"
        deep.mkdir(parents=True)
        assert locator.locate(deep / "z.js") is None

    def test_depth_cap(self, tmp_path: Path):
        (tmp_path / "package.json").write_text("{}")
        deep = tmp_path / "a" / "b" / "c"
        deep.mkdir(parents=True)
        start = deep / "f.js"

        # c, b, a checked; tmp_path is the 4th directory.
        assert ManifestLocator(max_depth=3).locate(start) is None
        assert ManifestLocator(max_depth=4).locate(start) == tmp_path / "package.json"

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
    def test_symlink_back_into_chain_terminates(self, tmp_path: Path):
        (tmp_path / "package.json").write_text("{}")
        proj = tmp_path / "proj"
        proj.mkdir()
        (proj / "loop").symlink_to(proj, target_is_directory=True)
        start = proj / "loop" / "loop" / "loop" / "index.js"

        assert ManifestLocator().locate(start) == tmp_path / "package.json"
