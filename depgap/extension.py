"""Editor adapter: commands, hover text and quick fixes over PackageService.

The editor itself is abstracted as a :class:`Host`. ``activate`` registers
the commands, ``deactivate`` releases every registration again.
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol
from urllib.parse import quote

import structlog

from depgap.core.config import Settings
from depgap.engines.gap_detector import Suggestion
from depgap.engines.installer import InstallAllResult, InstallFlow, InstallState
from depgap.exceptions import InstallProcessError, ManifestNotFoundError
from depgap.services import PackageService

log = structlog.get_logger("depgap.extension")

INSTALL_PACKAGE_COMMAND = "package-installer.installPackage"
INSTALL_ALL_COMMAND = "package-installer.installAllDependencies"

SUPPORTED_LANGUAGES = ("javascript", "typescript", "javascriptreact", "typescriptreact")

RETRY = "Retry"
VIEW_TERMINAL = "View Terminal"


class Host(Protocol):
    """What the extension needs from an editor."""

    def register_command(
        self, command_id: str, handler: Callable[..., Awaitable[Any]]
    ) -> Callable[[], None]:
        """Register *handler* under *command_id*; return a callable that unregisters it."""
        ...

    async def prompt(self, message: str, *choices: str) -> str | None:
        """Show *message* with *choices*; None when dismissed."""
        ...

    def show_info(self, message: str) -> None: ...

    def show_error(self, message: str) -> None: ...

    async def open_file(self, path: Path) -> None: ...

    def focus_terminal(self) -> None: ...

    def active_document(self) -> tuple[Path, str] | None:
        """(path, text) of the focused document, or None."""
        ...


@dataclass
class CodeAction:
    """A quick fix offered on an import string.

    The host invokes *command* with *arguments* as its single argument.
    """

    title: str
    command: str
    arguments: dict[str, str] = field(default_factory=dict)
    kind: str = "quickfix"


def install_arguments(suggestion: Suggestion) -> dict[str, str]:
    """Payload of the install-package command, shared by hover links and quick fixes."""
    return {
        "moduleName": suggestion.module_name,
        "packageJsonPath": str(suggestion.manifest_path),
    }


class Extension:
    """Editor integration for PackageService."""

    def __init__(self, service: PackageService | None = None) -> None:
        self.service = service or PackageService(Settings.from_env())
        self._host: Host | None = None
        self._disposables: list[Callable[[], None]] = []

    @property
    def active(self) -> bool:
        return self._host is not None

    def activate(self, host: Host) -> None:
        if self._host is not None:
            raise RuntimeError("extension is already active")
        self._host = host
        try:
            self._disposables.append(
                host.register_command(INSTALL_PACKAGE_COMMAND, self.install_package)
            )
            self._disposables.append(host.register_command(INSTALL_ALL_COMMAND, self.install_all))
        except Exception:
            self.deactivate()
            raise
        log.debug("extension.activated", commands=len(self._disposables))

    def deactivate(self) -> None:
        """Release every registration. Safe to call more than once."""
        while self._disposables:
            dispose = self._disposables.pop()
            dispose()
        self._host = None

    @classmethod
    @contextmanager
    def activated(cls, host: Host, service: PackageService | None = None) -> Iterator[Extension]:
        ext = cls(service)
        ext.activate(host)
        try:
            yield ext
        finally:
            ext.deactivate()

    def _require_host(self) -> Host:
        if self._host is None:
            raise RuntimeError("extension is not active")
        return self._host

    # ── providers ────────────────────────────────────────────────────────

    def provide_hover(self, file_path: str | Path, text: str, offset: int) -> str | None:
        """Markdown shown when hovering an import string."""
        try:
            suggestion = self.service.suggest(file_path, text, offset)
        except ManifestNotFoundError as exc:
            return str(exc)
        if suggestion is None:
            return None
        args = quote(json.dumps(install_arguments(suggestion)))
        return f"{suggestion.message} [{suggestion.title}](command:{INSTALL_PACKAGE_COMMAND}?{args})"

    def provide_code_actions(self, file_path: str | Path, text: str, offset: int) -> list[CodeAction]:
        try:
            suggestion = self.service.suggest(file_path, text, offset)
        except ManifestNotFoundError:
            return []
        if suggestion is None:
            return []
        return [
            CodeAction(
                title=suggestion.title,
                command=INSTALL_PACKAGE_COMMAND,
                arguments=install_arguments(suggestion),
            )
        ]

    # ── commands ─────────────────────────────────────────────────────────

    async def install_package(self, args: Mapping[str, str]) -> InstallState:
        """Install one module, offering a retry after each failure.

        *args* is the payload built by :func:`install_arguments`.
        """
        host = self._require_host()
        try:
            module_name = args["moduleName"]
            manifest = Path(args["packageJsonPath"])
        except KeyError as exc:
            raise ValueError(f"install command is missing {exc.args[0]!r}") from None
        open_manifest = f"Open {manifest.name}"
        flow = InstallFlow(self.service.installer, [module_name], manifest.parent)

        while True:
            try:
                await flow.run()
            except InstallProcessError as exc:
                choice = await host.prompt(
                    f"Failed to install {module_name}: {exc.message}", RETRY, VIEW_TERMINAL
                )
                if choice == RETRY:
                    continue
                if choice == VIEW_TERMINAL:
                    host.focus_terminal()
                return flow.state

            choice = await host.prompt(
                f"Successfully installed {module_name}!", open_manifest, VIEW_TERMINAL
            )
            if choice == open_manifest:
                await host.open_file(manifest)
            elif choice == VIEW_TERMINAL:
                host.focus_terminal()
            return flow.state

    async def install_all(self) -> InstallAllResult | None:
        """Install every missing import of the active document."""
        host = self._require_host()
        document = host.active_document()
        if document is None:
            host.show_error("No active editor found.")
            return None

        file_path, text = document
        try:
            result = await self.service.install_all(file_path, text)
        except ManifestNotFoundError as exc:
            host.show_error(str(exc))
            return None
        except InstallProcessError as exc:
            host.show_error(f"Failed to install dependencies: {exc.message}")
            return None

        if result.nothing_missing:
            host.show_info("All imported modules are already installed.")
        else:
            host.show_info(f"Successfully installed {', '.join(result.installed)}")
        return result
