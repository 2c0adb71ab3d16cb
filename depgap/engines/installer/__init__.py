"""Installer engine — run the package manager for missing modules."""

from depgap.engines.installer.flow import InstallFlow
from depgap.engines.installer.models import InstallAllResult, InstallOutcome, InstallState
from depgap.engines.installer.runner import Installer

__all__ = ["InstallAllResult", "InstallFlow", "InstallOutcome", "InstallState", "Installer"]
