"""depgap: find imports missing from package.json and install them."""

__version__ = "0.1.0"

from depgap.engines.gap_detector import find_missing_imports, is_installed
from depgap.engines.installer import Installer, InstallFlow, InstallState
from depgap.engines.manifest_locator import ManifestLocator, locate
from depgap.exceptions import (
    DepGapError,
    InstallProcessError,
    InstallStateError,
    ManifestNotFoundError,
    ManifestParseError,
)
from depgap.services import PackageService

__all__ = [
    "DepGapError",
    "InstallFlow",
    "InstallProcessError",
    "InstallState",
    "InstallStateError",
    "Installer",
    "ManifestLocator",
    "ManifestNotFoundError",
    "ManifestParseError",
    "PackageService",
    "find_missing_imports",
    "is_installed",
    "locate",
]
