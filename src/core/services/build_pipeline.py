"""Build orchestration.

The CLI delegates the whole workflow here: toolchain check, annotation scan,
`build.yaml` sync and the fixed sequence of flutter commands. Side-effects
aimed at the user (tables, colours) stay in the CLI and are reached through
`PipelineHooks`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Sequence

from adapters.build_yaml import (
    default_build_yaml,
    merge_generate_for,
    read_build_yaml,
    read_text,
    render_build_yaml,
    write_build_yaml,
    write_text,
)
from adapters.dart_scanner import scan_project
from adapters.process_runner import SubprocessRunner, find_executable
from core.config import AppSettings
from core.domain.models import (
    BuildReport,
    CommandResult,
    CommandSpec,
    ScanResult,
    YamlSyncResult,
)
from core.errors import BuildGenError, CommandFailedError
from core.interfaces.command_runner import CommandRunner

logger = logging.getLogger(__name__)

DEFAULT_COMMANDS: tuple[CommandSpec, ...] = (
    CommandSpec(name="clean", args=["clean"]),
    CommandSpec(name="pub upgrade", args=["pub", "upgrade"]),
    CommandSpec(name="pub get", args=["pub", "get"]),
    CommandSpec(
        name="build_runner",
        args=["pub", "run", "build_runner", "build", "--delete-conflicting-outputs"],
    ),
)


@dataclass
class BuildRequest:
    """Parameters that control a pipeline run."""

    project_dir: Path = field(default_factory=Path.cwd)
    dry_run: bool = False
    skip_commands: bool = False
    commands: Sequence[CommandSpec] = DEFAULT_COMMANDS


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers (progress, warnings)."""

    warning: Callable[[str], None] | None = None
    step_start: Callable[[int, int, CommandSpec], None] | None = None
    step_done: Callable[[int, int, CommandResult], None] | None = None


def build_yaml_path(project_dir: Path, settings: AppSettings) -> Path:
    return project_dir / settings.build_yaml_name


def check_toolchain(settings: AppSettings) -> str:
    """Resolve the flutter executable or raise `ToolchainNotFoundError`."""

    executable = find_executable(settings.flutter_executable)
    logger.debug("Using flutter at %s", executable)
    return executable


def sync_build_yaml(
    project_dir: Path,
    settings: AppSettings,
    *,
    dry_run: bool = False,
    hooks: PipelineHooks | None = None,
) -> tuple[ScanResult, YamlSyncResult]:
    """Scan `project_dir` and bring `build.yaml` in line with the result."""

    hooks = hooks or PipelineHooks()
    path = build_yaml_path(project_dir, settings)
    logger.info("Generating %s for %s", path.name, project_dir)

    document = read_build_yaml(path)
    scan = scan_project(project_dir, exclude_dirs=settings.exclude_dirs)
    sync = merge_generate_for(document, scan, path=path)

    if hooks.warning:
        for message in scan.warnings:
            hooks.warning(message)
        for key in sync.missing_builders:
            if scan.generate_for(key):
                hooks.warning(f"Builder '{key}' is not configured in {path.name}")

    if dry_run:
        sync.changed = sync.changed or render_build_yaml(document) != read_text(path)
        logger.info("Dry run: %s %s", path.name, "would change" if sync.changed else "is up to date")
        return scan, sync

    sync.written = write_build_yaml(path, document)
    sync.changed = sync.written
    if sync.written:
        logger.info("Successfully updated %s", path.name)
    return scan, sync


def init_build_yaml(project_dir: Path, settings: AppSettings, *, force: bool = False) -> Path:
    """Create a skeleton `build.yaml`, refusing to overwrite unless `force`."""

    path = build_yaml_path(project_dir, settings)
    if path.exists() and not force:
        raise BuildGenError(f"{path} already exists (use --force to overwrite)")
    write_text(path, render_build_yaml(default_build_yaml()))
    logger.info("Created %s", path)
    return path


def run_commands(
    runner: CommandRunner,
    commands: Sequence[CommandSpec],
    *,
    hooks: PipelineHooks | None = None,
) -> list[CommandResult]:
    """Run `commands` in order, stopping after the first failure."""

    hooks = hooks or PipelineHooks()
    results: list[CommandResult] = []
    total = len(commands)
    for index, spec in enumerate(commands, start=1):
        if hooks.step_start:
            hooks.step_start(index, total, spec)
        result = runner.run(spec)
        results.append(result)
        if hooks.step_done:
            hooks.step_done(index, total, result)
        if not result.ok:
            logger.error("Stopping: step %d/%d '%s' failed", index, total, spec.name)
            break
    return results


def run_build(
    *,
    settings: AppSettings,
    request: BuildRequest,
    runner: CommandRunner | None = None,
    hooks: PipelineHooks | None = None,
) -> BuildReport:
    """Full workflow. YAML and toolchain errors raise; step failures are reported."""

    hooks = hooks or PipelineHooks()
    project_dir = request.project_dir.resolve()
    report = BuildReport(project_dir=project_dir)

    will_run = not request.skip_commands and not request.dry_run
    if will_run and runner is None:
        runner = SubprocessRunner(
            check_toolchain(settings),
            cwd=project_dir,
            timeout_seconds=settings.command_timeout_seconds,
        )

    report.scan, report.yaml_sync = sync_build_yaml(
        project_dir,
        settings,
        dry_run=request.dry_run,
        hooks=hooks,
    )

    if will_run:
        report.commands = run_commands(runner, request.commands, hooks=hooks)
        failed = next((r for r in report.commands if not r.ok), None)
        if failed is not None:
            report.failed_step = failed.spec.name
            logger.error("%s", CommandFailedError(failed))
    else:
        logger.info("Skipping flutter commands")

    report.finished_at = datetime.now(timezone.utc)
    return report
