"""Error hierarchy shared by the core and the adapters.

The CLI catches `BuildGenError` at the edge; everything else propagates.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.domain.models import CommandResult


class BuildGenError(Exception):
    """Base class for every expected failure of the tool."""


class ToolchainNotFoundError(BuildGenError):
    def __init__(self, executable: str) -> None:
        super().__init__(f"Executable '{executable}' was not found on PATH")
        self.executable = executable


class UnsupportedAnnotationError(BuildGenError):
    pass


class BuildYamlError(BuildGenError):
    pass


class BuildYamlNotFoundError(BuildYamlError):
    def __init__(self, path: object) -> None:
        super().__init__(f"{path} does not exist (run `flutter-buildgen init` to create it)")
        self.path = path


class CommandFailedError(BuildGenError):
    """Raised when an external build step exits with a non-zero status."""

    def __init__(self, result: "CommandResult") -> None:
        super().__init__(
            f"Step '{result.spec.name}' failed with exit code {result.returncode} "
            f"after {result.elapsed_seconds:.2f}s"
        )
        self.result = result
