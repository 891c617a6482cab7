"""Typer application: entry point of the `flutter-buildgen` command."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from adapters.dart_scanner import scan_project
from adapters.json_exporter import export_report_json
from cli import doctor
from cli.ui_components import (
    build_commands_table,
    build_scan_table,
    build_sync_panel,
    print_banner,
)
from core.config import AppSettings
from core.domain.models import CommandResult, CommandSpec
from core.errors import BuildGenError
from core.log import configure_logging
from core.services.build_pipeline import (
    BuildRequest,
    PipelineHooks,
    init_build_yaml,
    run_build,
    sync_build_yaml,
)

app = typer.Typer(
    help="Sync build.yaml with Dart code-generation annotations and run build_runner.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()
logger = logging.getLogger(__name__)

ProjectDirOption = typer.Option(
    Path("."),
    "--project-dir",
    "-C",
    help="Flutter project root (defaults to the current directory).",
    file_okay=False,
)


def _fail(exc: BuildGenError) -> typer.Exit:
    _console.print(f"[red]Error:[/red] {escape(str(exc))}")
    return typer.Exit(code=1)


def _cli_hooks() -> PipelineHooks:
    def warning(message: str) -> None:
        _console.print(f"[yellow]Warning:[/yellow] {escape(message)}")

    def step_start(index: int, total: int, spec: CommandSpec) -> None:
        _console.rule(f"[cyan][{index}/{total}] {spec.name}")

    def step_done(index: int, total: int, result: CommandResult) -> None:
        style = "green" if result.ok else "red"
        _console.print(
            f"[{style}]{result.spec.name}: exit {result.returncode} "
            f"({result.elapsed_seconds:.2f}s)[/{style}]"
        )

    return PipelineHooks(warning=warning, step_start=step_start, step_done=step_done)


def _run_workflow(
    *,
    project_dir: Path,
    dry_run: bool = False,
    skip_commands: bool = False,
    report: Optional[Path] = None,
    no_banner: bool = False,
) -> None:
    settings = AppSettings()
    if not no_banner:
        print_banner(_console)

    request = BuildRequest(
        project_dir=project_dir,
        dry_run=dry_run,
        skip_commands=skip_commands,
    )
    try:
        result = run_build(settings=settings, request=request, hooks=_cli_hooks())
    except BuildGenError as exc:
        logger.error("Build aborted: %s", exc)
        raise _fail(exc) from exc

    if result.yaml_sync:
        _console.print(build_sync_panel(result.yaml_sync))
    if result.commands:
        _console.print(build_commands_table(result.commands))
    if report:
        path = export_report_json(report=result, output_path=report)
        _console.print(f"[green]Report written to:[/green] {path}")

    if not result.ok:
        _console.print(f"[red]Build failed at step '{result.failed_step}'.[/red]")
        raise typer.Exit(code=result.exit_code)
    _console.print("[green]Done.[/green]")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Without a command, run the full workflow in the current directory."""

    settings = AppSettings()
    configure_logging("DEBUG" if verbose else settings.log_level)
    if ctx.invoked_subcommand is None:
        _run_workflow(project_dir=Path("."))


@app.command(name="run")
def run_build_command(
    project_dir: Path = ProjectDirOption,
    dry_run: bool = typer.Option(False, "--dry-run", help="Report build.yaml changes without writing or running commands."),
    skip_commands: bool = typer.Option(False, "--skip-commands", help="Only sync build.yaml."),
    report: Optional[Path] = typer.Option(None, "--report", help="Write a JSON report to this path."),
    no_banner: bool = typer.Option(False, "--no-banner", help="Do not print the banner."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Sync build.yaml, then run clean, pub upgrade, pub get and build_runner."""

    if verbose:
        configure_logging("DEBUG")
    _run_workflow(
        project_dir=project_dir,
        dry_run=dry_run,
        skip_commands=skip_commands,
        report=report,
        no_banner=no_banner,
    )


@app.command()
def sync(
    project_dir: Path = ProjectDirOption,
    dry_run: bool = typer.Option(False, "--dry-run", help="Do not write build.yaml."),
) -> None:
    """Update build.yaml from the annotations found in the project."""

    settings = AppSettings()
    try:
        scan, result = sync_build_yaml(
            project_dir.resolve(), settings, dry_run=dry_run, hooks=_cli_hooks()
        )
    except BuildGenError as exc:
        raise _fail(exc) from exc
    _console.print(build_scan_table(scan))
    _console.print(build_sync_panel(result))


@app.command()
def scan(project_dir: Path = ProjectDirOption) -> None:
    """List annotated Dart files per builder without touching anything."""

    settings = AppSettings()
    result = scan_project(project_dir, exclude_dirs=settings.exclude_dirs)
    for message in result.warnings:
        _console.print(f"[yellow]Warning:[/yellow] {escape(message)}")
    _console.print(build_scan_table(result))


@app.command()
def init(
    project_dir: Path = ProjectDirOption,
    force: bool = typer.Option(False, "--force", help="Overwrite an existing build.yaml."),
) -> None:
    """Create a build.yaml configuring every supported builder."""

    settings = AppSettings()
    try:
        path = init_build_yaml(project_dir.resolve(), settings, force=force)
    except BuildGenError as exc:
        raise _fail(exc) from exc
    _console.print(f"[green]Created:[/green] {path}")


def run() -> None:
    app(prog_name="flutter-buildgen")
