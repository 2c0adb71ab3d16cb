"""PackageService: locate, detect and install for a single document."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import structlog

from depgap.core.config import Settings
from depgap.engines.gap_detector import (
    Suggestion,
    find_missing_imports,
    is_installed,
    is_package_name,
    module_at,
)
from depgap.engines.installer import InstallAllResult, Installer, InstallOutcome
from depgap.engines.manifest_locator import ManifestLocator
from depgap.exceptions import ManifestNotFoundError

log = structlog.get_logger("depgap.service")


@dataclass
class MissingReport:
    """Undeclared external imports of one document."""

    manifest_path: Path
    names: list[str] = field(default_factory=list)


class PackageService:
    """Host-independent query service behind every editor trigger.

    Nothing is cached: each call locates and reads the manifest again.
    """

    def __init__(self, settings: Settings | None = None, installer: Installer | None = None) -> None:
        self.settings = settings or Settings()
        self._locator = ManifestLocator(
            manifest_name=self.settings.manifest_name,
            max_depth=self.settings.max_walk_depth,
        )
        self._installer = installer or Installer(
            install_tool=self.settings.install_tool,
            timeout=self.settings.install_timeout,
        )

    @property
    def installer(self) -> Installer:
        return self._installer

    def locate(self, file_path: str | Path) -> Path:
        """Nearest manifest above *file_path*. Raises ``ManifestNotFoundError``."""
        manifest = self._locator.locate(file_path)
        if manifest is None:
            raise ManifestNotFoundError(file_path, self.settings.manifest_name)
        return manifest

    def is_installed(self, file_path: str | Path, module_name: str) -> bool:
        return is_installed(self.locate(file_path), module_name)

    def suggest(self, file_path: str | Path, text: str, offset: int) -> Suggestion | None:
        """Install suggestion for the module string under the cursor.

        None when the cursor is not on a quoted string, the string is not a
        package name (relative or option-like), or the manifest declares it.
        """
        match = module_at(text, offset)
        if match is None or not is_package_name(match.name):
            return None
        manifest = self.locate(file_path)
        if is_installed(manifest, match.name):
            return None
        return Suggestion(
            module_name=match.name,
            manifest_path=manifest,
            start=match.start,
            end=match.end,
        )

    def missing(self, file_path: str | Path, text: str) -> MissingReport:
        manifest = self.locate(file_path)
        names = sorted(find_missing_imports(text, manifest))
        return MissingReport(manifest_path=manifest, names=names)

    async def install_package(self, module_name: str, manifest_path: str | Path) -> InstallOutcome:
        return await self._installer.install([module_name], Path(manifest_path).parent)

    async def install_all(self, file_path: str | Path, text: str) -> InstallAllResult:
        """Install every undeclared external import of *text* in one call."""
        report = self.missing(file_path, text)
        if not report.names:
            log.info("service.nothing_missing", manifest=str(report.manifest_path))
            return InstallAllResult(manifest_path=report.manifest_path)

        outcome = await self._installer.install(report.names, report.manifest_path.parent)
        return InstallAllResult(
            manifest_path=report.manifest_path,
            installed=list(report.names),
            outcome=outcome,
        )
