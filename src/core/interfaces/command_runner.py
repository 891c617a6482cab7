"""Contract for executing external build steps.

Why Protocol:
- Structural contract (duck typing) without rigid inheritance.
- The pipeline can be driven by the real subprocess runner or by a test
  double without touching the core.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import CommandResult, CommandSpec


@runtime_checkable
class CommandRunner(Protocol):
    """Minimal contract for a step runner.

    Rules:
    - `run` blocks until the step exits.
    - A non-zero exit is reported in the returned `CommandResult`, not raised.
    """

    def run(self, spec: CommandSpec) -> CommandResult:
        """Execute `spec` and return its exit status and timing."""

        ...
