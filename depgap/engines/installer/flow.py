"""Single-module install flow: idle -> installing -> succeeded | failed."""

from __future__ import annotations

from pathlib import Path

import structlog

from depgap.engines.installer.models import InstallOutcome, InstallState
from depgap.engines.installer.runner import Installer
from depgap.exceptions import InstallProcessError, InstallStateError

log = structlog.get_logger("depgap.engine")


class InstallFlow:
    """Track one install request across user-triggered retries.

    ``failed`` only moves back to ``installing`` when :meth:`run` is called
    again; ``succeeded`` is terminal.
    """

    def __init__(self, installer: Installer, names: list[str], manifest_dir: str | Path) -> None:
        self._installer = installer
        self.names = list(names)
        self.manifest_dir = Path(manifest_dir)
        self.state = InstallState.IDLE
        self.attempts = 0
        self.outcome: InstallOutcome | None = None
        self.error: InstallProcessError | None = None

    @property
    def can_retry(self) -> bool:
        return self.state is InstallState.FAILED

    async def run(self) -> InstallOutcome:
        if self.state not in (InstallState.IDLE, InstallState.FAILED):
            raise InstallStateError(
                f"cannot start install of {', '.join(self.names)} while {self.state.value}"
            )

        self.state = InstallState.INSTALLING
        self.attempts += 1
        self.error = None
        log.debug("flow.installing", packages=self.names, attempt=self.attempts)

        try:
            outcome = await self._installer.install(self.names, self.manifest_dir)
        except InstallProcessError as exc:
            self.state = InstallState.FAILED
            self.error = exc
            raise
        except BaseException:
            # Cancelled or crashed: the request never finished, allow a retry.
            self.state = InstallState.FAILED
            raise

        self.state = InstallState.SUCCEEDED
        self.outcome = outcome
        return outcome
