"""Sequential execution of external toolchain commands."""

from __future__ import annotations

import logging
import shutil
import subprocess
import time
from datetime import datetime, timezone
from pathlib import Path

from core.domain.models import CommandResult, CommandSpec
from core.errors import ToolchainNotFoundError

logger = logging.getLogger(__name__)

TIMEOUT_RETURNCODE = -1


def find_executable(name: str) -> str:
    """Resolve `name` on PATH (or as a path) to an absolute executable."""

    resolved = shutil.which(name)
    if not resolved:
        raise ToolchainNotFoundError(name)
    return resolved


class SubprocessRunner:
    """Runs build steps with inherited stdio, one at a time.

    Implements `core.interfaces.command_runner.CommandRunner`.
    """

    def __init__(
        self,
        executable: str,
        *,
        cwd: Path | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self.executable = executable
        self.cwd = cwd
        self.timeout_seconds = timeout_seconds

    def run(self, spec: CommandSpec) -> CommandResult:
        argv = [self.executable, *spec.args]
        started_at = datetime.now(timezone.utc)
        logger.info("Running step '%s': %s", spec.name, " ".join(argv))

        start = time.monotonic()
        timed_out = False
        try:
            completed = subprocess.run(
                argv,
                cwd=self.cwd,
                timeout=self.timeout_seconds,
                check=False,
            )
            returncode = completed.returncode
        except subprocess.TimeoutExpired:
            timed_out = True
            returncode = TIMEOUT_RETURNCODE
            logger.error("Step '%s' timed out after %ss", spec.name, self.timeout_seconds)
        elapsed = time.monotonic() - start

        log = logger.info if returncode == 0 else logger.error
        log("Step '%s' exited with code %d in %.2fs", spec.name, returncode, elapsed)

        return CommandResult(
            spec=spec,
            argv=argv,
            returncode=returncode,
            elapsed_seconds=elapsed,
            started_at=started_at,
            timed_out=timed_out,
        )
