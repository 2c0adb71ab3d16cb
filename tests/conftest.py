"""Shared pytest fixtures for depgap tests."""

from __future__ import annotations

import json
import os
import stat
import sys
from pathlib import Path

import pytest


def write_manifest(
    directory: Path,
    dependencies: dict[str, str] | None = None,
    dev_dependencies: dict[str, str] | None = None,
    **extra,
) -> Path:
    """Write a package.json into *directory* and return its path."""
    data: dict = {"name": directory.name or "root", "version": "1.0.0", **extra}
    if dependencies is not None:
        data["dependencies"] = dependencies
    if dev_dependencies is not None:
        data["devDependencies"] = dev_dependencies
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "package.json"
    path.write_text(json.dumps(data, indent=2))
    return path


@pytest.fixture
def manifest():
    """The :func:`write_manifest` helper."""
    return write_manifest


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A project root with an empty package.json and a src/ directory."""
    write_manifest(tmp_path)
    (tmp_path / "src").mkdir()
    return tmp_path


@pytest.fixture
def make_tool(tmp_path: Path):
    """Build a fake package manager script.

    The script appends ``<cwd>|<args>`` to ``calls.log`` next to it, prints
    *stdout* / *stderr* and exits with *exit_code*.
    """
    if sys.platform == "win32":
        pytest.skip("fake package manager is a POSIX shell script")

    def _make(exit_code: int = 0, stdout: str = "", stderr: str = "", name: str = "fake-npm"):
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir(exist_ok=True)
        log_file = bin_dir / "calls.log"
        script = bin_dir / name
        script.write_text(
            "#!/bin/sh\n"
            f'echo "$(pwd)|$*" >> "{log_file}"\n'
            f"printf '%s' '{stdout}'\n"
            f"printf '%s' '{stderr}' >&2\n"
            f"exit {exit_code}\n"
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script, log_file

    return _make


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every DEPGAP_* variable from the environment."""
    for key in list(os.environ):
        if key.startswith("DEPGAP_"):
            monkeypatch.delenv(key, raising=False)
    return monkeypatch
