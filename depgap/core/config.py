"""Runtime settings, read from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

DEFAULT_MANIFEST_NAME = "package.json"
DEFAULT_INSTALL_TOOL = "npm"
DEFAULT_MAX_WALK_DEPTH = 256


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < 1:
        raise ValueError(f"{name} must be >= 1, got {value}")
    return value


def _float_env(name: str) -> float | None:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number of seconds, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    """Settings shared by the locator, detector and installer.

    Environment variables:
        DEPGAP_MANIFEST_NAME    — manifest file name (default: package.json)
        DEPGAP_INSTALL_TOOL     — package manager executable (default: npm)
        DEPGAP_MAX_WALK_DEPTH   — max directories visited by the locator (default: 256)
        DEPGAP_INSTALL_TIMEOUT  — install timeout in seconds (default: none)
    """

    manifest_name: str = DEFAULT_MANIFEST_NAME
    install_tool: str = DEFAULT_INSTALL_TOOL
    max_walk_depth: int = DEFAULT_MAX_WALK_DEPTH
    install_timeout: float | None = None

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            manifest_name=os.environ.get("DEPGAP_MANIFEST_NAME") or DEFAULT_MANIFEST_NAME,
            install_tool=os.environ.get("DEPGAP_INSTALL_TOOL") or DEFAULT_INSTALL_TOOL,
            max_walk_depth=_int_env("DEPGAP_MAX_WALK_DEPTH", DEFAULT_MAX_WALK_DEPTH),
            install_timeout=_float_env("DEPGAP_INSTALL_TIMEOUT"),
        )

    def override(self, **changes: object) -> Settings:
        """Return a copy with every non-None value in *changes* applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
