"""Locate the nearest dependency manifest above a source file."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from depgap.core.config import DEFAULT_MANIFEST_NAME, DEFAULT_MAX_WALK_DEPTH

logger = logging.getLogger(__name__)


class ManifestLocator:
    """Walk ancestor directories looking for a manifest file (e.g. package.json)."""

    def __init__(
        self,
        manifest_name: str = DEFAULT_MANIFEST_NAME,
        max_depth: int = DEFAULT_MAX_WALK_DEPTH,
    ) -> None:
        self.manifest_name = manifest_name
        self.max_depth = max_depth

    def locate(self, start_file_path: str | Path) -> Path | None:
        """Return the manifest closest to *start_file_path*, or None.

        The search begins in the directory containing *start_file_path* and
        moves to the lexical parent until the filesystem root, which is
        checked too. Parents are taken from the path itself, never by
        following symlinks, so the walk always terminates; ``max_depth``
        caps it regardless. A directory that resolves to one already checked
        (a symlink back into the chain) is not checked twice.

        Returns:
            Absolute path to the manifest, or None if not found.
        """
        current = Path(os.path.abspath(start_file_path)).parent
        checked: set[str] = set()

        for _ in range(self.max_depth):
            real = os.path.realpath(current)
            if real not in checked:
                checked.add(real)
                candidate = current / self.manifest_name
                if candidate.is_file():
                    logger.debug("Found %s: %s", self.manifest_name, candidate)
                    return candidate

            parent = current.parent
            if parent == current:
                logger.debug("No %s found above %s", self.manifest_name, start_file_path)
                return None
            current = parent

        logger.warning(
            "Gave up looking for %s after %d directories above %s",
            self.manifest_name,
            self.max_depth,
            start_file_path,
        )
        return None


def locate(start_file_path: str | Path, manifest_name: str = DEFAULT_MANIFEST_NAME) -> Path | None:
    """Convenience wrapper around :meth:`ManifestLocator.locate`."""
    return ManifestLocator(manifest_name).locate(start_file_path)
