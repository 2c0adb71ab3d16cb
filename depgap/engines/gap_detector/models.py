"""Data models for the dependency gap detector."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class PackageManifest(BaseModel):
    """The dependency-bearing part of a package.json.

    Both mappings are optional; any other keys are kept but ignored.
    Version specifiers are opaque strings.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    dependencies: dict[str, str] = Field(default_factory=dict)
    dev_dependencies: dict[str, str] = Field(default_factory=dict, alias="devDependencies")

    @property
    def declared(self) -> frozenset[str]:
        """Union of runtime and development dependency names."""
        return frozenset(self.dependencies) | frozenset(self.dev_dependencies)


@dataclass(frozen=True)
class ImportMatch:
    """A quoted module string found in a document."""

    name: str
    start: int  # offset of the opening quote
    end: int  # offset just past the closing quote


@dataclass
class Suggestion:
    """An offer to install a single undeclared module."""

    module_name: str
    manifest_path: Path
    start: int
    end: int

    @property
    def title(self) -> str:
        return f"Install {self.module_name}"

    @property
    def message(self) -> str:
        return f"Package `{self.module_name}` is not installed."
