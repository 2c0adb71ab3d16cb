"""Custom exceptions for depgap."""

from __future__ import annotations

from pathlib import Path


class DepGapError(Exception):
    """Base exception for all depgap errors."""


class ManifestNotFoundError(DepGapError):
    """Raised when no manifest exists in any ancestor of the start path."""

    def __init__(self, start_path: str | Path, manifest_name: str = "package.json"):
        self.start_path = str(start_path)
        self.manifest_name = manifest_name
        super().__init__(f"No {manifest_name} found in project.")


class ManifestParseError(DepGapError):
    """Raised when a manifest exists but is not a valid dependency manifest."""

    def __init__(self, path: str | Path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Invalid manifest {self.path}: {reason}")


class InstallProcessError(DepGapError):
    """Raised when the package manager exits non-zero or cannot be started.

    ``message`` (and ``str(exc)``) is the captured error text, unmodified
    apart from surrounding whitespace.
    """

    def __init__(
        self,
        message: str,
        names: list[str] | None = None,
        returncode: int | None = None,
    ):
        self.message = message
        self.names = list(names or [])
        self.returncode = returncode
        super().__init__(message)


class InstallStateError(DepGapError):
    """Raised on an illegal install flow transition."""
