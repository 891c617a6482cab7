"""Domain models (Pydantic v2).

These describe *what* a scan, a yaml sync and a build run produced, not
*how* they were obtained.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, Field

from core.domain.annotations import AnnotationType


class AnnotatedFile(BaseModel):
    """A Dart file that carries a code-generation annotation.

    `target` is what build_runner must be pointed at: the file itself, or
    the library it is `part of`.
    """

    source: Path = Field(..., description="File in which the annotation was found.")
    target: Path = Field(..., description="File listed in `generate_for`.")
    annotation: AnnotationType


class ScanResult(BaseModel):
    """Outcome of walking a project for annotations."""

    project_dir: Path
    files_scanned: int = Field(default=0, ge=0)
    matches: dict[str, list[AnnotatedFile]] = Field(
        default_factory=dict,
        description="Annotated files keyed by builder key.",
    )
    warnings: list[str] = Field(default_factory=list)

    def generate_for(self, builder_key: str) -> list[str]:
        """Sorted, de-duplicated, project-relative POSIX paths for a builder."""

        paths: set[str] = set()
        for match in self.matches.get(builder_key, []):
            target = match.target
            try:
                target = target.relative_to(self.project_dir)
            except ValueError:
                pass
            paths.add(target.as_posix())
        return sorted(paths)

    @property
    def total_matches(self) -> int:
        return sum(len(v) for v in self.matches.values())


class CommandSpec(BaseModel):
    """One external build step; `args` excludes the executable."""

    name: str = Field(..., min_length=1)
    args: list[str] = Field(default_factory=list)


class CommandResult(BaseModel):
    spec: CommandSpec
    argv: list[str]
    returncode: int
    elapsed_seconds: float = Field(..., ge=0)
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class YamlSyncResult(BaseModel):
    path: Path
    changed: bool = False
    written: bool = False
    updated_builders: list[str] = Field(default_factory=list)
    missing_builders: list[str] = Field(default_factory=list)


class BuildReport(BaseModel):
    """Aggregate of a full `run` invocation."""

    project_dir: Path
    scan: ScanResult | None = None
    yaml_sync: YamlSyncResult | None = None
    commands: list[CommandResult] = Field(default_factory=list)
    failed_step: str | None = None
    finished_at: datetime | None = None

    @property
    def ok(self) -> bool:
        return self.failed_step is None

    @property
    def exit_code(self) -> int:
        for result in self.commands:
            if not result.ok:
                return result.returncode if result.returncode > 0 else 1
        return 0 if self.ok else 1
