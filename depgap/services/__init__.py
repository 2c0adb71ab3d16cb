"""Service layer: ties the engines together for editor and CLI callers."""

from depgap.services.package_service import MissingReport, PackageService

__all__ = ["MissingReport", "PackageService"]
