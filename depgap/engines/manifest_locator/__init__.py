"""Manifest locator engine — find the nearest package.json upward."""

from depgap.engines.manifest_locator.locator import ManifestLocator, locate

__all__ = ["ManifestLocator", "locate"]
