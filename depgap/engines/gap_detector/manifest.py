"""Read and validate package.json manifests."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from depgap.engines.gap_detector.models import PackageManifest
from depgap.exceptions import ManifestParseError


def parse_manifest(content: str, path: str | Path = "package.json") -> PackageManifest:
    """Parse manifest text. Raises ``ManifestParseError`` on any bad shape."""
    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ManifestParseError(path, f"not valid JSON ({exc})") from exc

    if not isinstance(data, dict):
        raise ManifestParseError(path, f"expected a JSON object, got {type(data).__name__}")

    try:
        return PackageManifest.model_validate(data)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise ManifestParseError(path, problems) from exc


def read_manifest(path: str | Path) -> PackageManifest:
    """Read *path* fresh from disk and parse it. Nothing is cached."""
    manifest_path = Path(path)
    try:
        content = manifest_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ManifestParseError(manifest_path, f"not UTF-8 text ({exc})") from exc
    except OSError as exc:
        raise ManifestParseError(manifest_path, f"cannot read file ({exc.strerror or exc})") from exc
    return parse_manifest(content, manifest_path)
