"""Find imported modules that the manifest does not declare."""

from __future__ import annotations

from pathlib import Path

import structlog

from depgap.engines.gap_detector.imports import external_imports
from depgap.engines.gap_detector.manifest import read_manifest

log = structlog.get_logger("depgap.engine")


def is_installed(manifest_path: str | Path, module_name: str) -> bool:
    """Whether *module_name* is a runtime or development dependency.

    Raises ``ManifestParseError`` if the manifest cannot be parsed.
    """
    return module_name in read_manifest(manifest_path).declared


def find_missing_imports(document_text: str, manifest_path: str | Path) -> set[str]:
    """External modules imported by *document_text* but not declared in the manifest.

    The manifest is read once per call. Relative and ``@/`` aliased imports
    never appear in the result.
    """
    wanted = external_imports(document_text)
    declared = read_manifest(manifest_path).declared
    missing = wanted - declared
    log.debug(
        "detector.scanned",
        manifest=str(manifest_path),
        external=len(wanted),
        missing=sorted(missing),
    )
    return missing
