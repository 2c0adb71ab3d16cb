"""Package manager invocation: ``<tool> install [names...]`` in the manifest directory."""

from __future__ import annotations

import asyncio
import os
import shutil
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from depgap.core.config import DEFAULT_INSTALL_TOOL
from depgap.engines.installer.models import InstallOutcome
from depgap.exceptions import InstallProcessError

log = structlog.get_logger("depgap.engine")


@dataclass
class _DirLock:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    users: int = 0


class Installer:
    """Run package installs, one at a time per manifest directory.

    Two installs against the same directory would both rewrite the same
    manifest, so they are serialised with a per-directory lock. Installs
    into different projects run independently. A directory's lock is
    forgotten once no install holds or waits on it.
    """

    def __init__(self, install_tool: str = DEFAULT_INSTALL_TOOL, timeout: float | None = None) -> None:
        self.install_tool = install_tool
        self.timeout = timeout
        self._locks: dict[str, _DirLock] = {}

    @asynccontextmanager
    async def _locked(self, manifest_dir: Path) -> AsyncIterator[None]:
        key = os.path.realpath(manifest_dir)
        entry = self._locks.setdefault(key, _DirLock())
        entry.users += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0:
                del self._locks[key]

    async def install(self, names: Iterable[str], manifest_dir: str | Path) -> InstallOutcome:
        """Install *names* with the package manager, cwd = *manifest_dir*.

        Blocks (cooperatively) until the process exits. No retry here; a
        retry is simply another call.

        Raises ``InstallProcessError`` on non-zero exit, start failure,
        timeout, or a name the tool would parse as an option.
        """
        packages = list(names)
        if not packages:
            raise ValueError("install() needs at least one package name")
        options = [name for name in packages if name.startswith("-")]
        if options:
            raise InstallProcessError(
                f"refusing to pass option-like package names to {self.install_tool}: "
                + ", ".join(options),
                packages,
            )

        cwd = Path(manifest_dir)
        executable = shutil.which(self.install_tool) or self.install_tool
        cmd = [executable, "install", *packages]

        async with self._locked(cwd):
            log.info("installer.started", tool=self.install_tool, packages=packages, cwd=str(cwd))
            try:
                outcome = await self._run(cmd, cwd, packages)
            except InstallProcessError as exc:
                log.warning(
                    "installer.failed",
                    packages=packages,
                    returncode=exc.returncode,
                    error=exc.message,
                )
                raise
        log.info("installer.succeeded", packages=packages)
        return outcome

    async def _run(self, cmd: list[str], cwd: Path, packages: list[str]) -> InstallOutcome:
        """Run the install command, raising InstallProcessError on failure."""
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                cwd=str(cwd),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise InstallProcessError(
                f"could not start {self.install_tool}: {exc.strerror or exc}", packages
            ) from exc

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            raise InstallProcessError(
                f"{self.install_tool} install timed out after {self.timeout}s", packages
            ) from None

        out = stdout.decode(errors="replace").strip()
        err = stderr.decode(errors="replace").strip()
        if proc.returncode != 0:
            message = err or out or f"{self.install_tool} exited with code {proc.returncode}"
            raise InstallProcessError(message, packages, proc.returncode)

        return InstallOutcome(
            names=packages,
            cwd=cwd,
            returncode=proc.returncode,
            stdout=out,
            stderr=err,
        )
