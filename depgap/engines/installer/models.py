"""Data models for the installer engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class InstallState(Enum):
    """Single-module install flow state."""

    IDLE = "idle"
    INSTALLING = "installing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class InstallOutcome:
    """Result of a successful package manager run."""

    names: list[str]
    cwd: Path
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""


@dataclass
class InstallAllResult:
    """Result of installing every missing import of a document.

    An empty ``installed`` list means nothing was missing.
    """

    manifest_path: Path
    installed: list[str] = field(default_factory=list)
    outcome: InstallOutcome | None = None

    @property
    def nothing_missing(self) -> bool:
        return not self.installed
