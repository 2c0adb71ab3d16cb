"""Dependency gap detector engine — imports the manifest does not declare."""

from depgap.engines.gap_detector.detector import find_missing_imports, is_installed
from depgap.engines.gap_detector.imports import (
    extract_imports,
    external_imports,
    find_imports,
    is_package_name,
    is_relative,
    module_at,
    offset_of,
)
from depgap.engines.gap_detector.manifest import parse_manifest, read_manifest
from depgap.engines.gap_detector.models import ImportMatch, PackageManifest, Suggestion

__all__ = [
    "ImportMatch",
    "PackageManifest",
    "Suggestion",
    "extract_imports",
    "external_imports",
    "find_imports",
    "find_missing_imports",
    "is_installed",
    "is_package_name",
    "is_relative",
    "module_at",
    "offset_of",
    "parse_manifest",
    "read_manifest",
]
