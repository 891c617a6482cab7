"""Doctor command for environment diagnostics."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import typer
import yaml
from rich.console import Console
from rich.table import Table

from core.config import AppSettings, write_user_env_vars

app = typer.Typer(no_args_is_help=True, help="Toolchain and project diagnostics.")

_console = Console()


def _check_executable(name: str) -> tuple[bool, str]:
    path = shutil.which(name)
    if not path:
        return False, f"'{name}' not found on PATH"
    try:
        completed = subprocess.run(
            [path, "--version"],
            capture_output=True,
            text=True,
            timeout=60,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        return False, str(exc)
    first_line = (completed.stdout or completed.stderr).strip().splitlines()[:1]
    return completed.returncode == 0, first_line[0] if first_line else path


def _check_build_runner(pubspec: Path) -> tuple[bool, str]:
    """Look for `build_runner` among the declared dependencies."""

    if not pubspec.is_file():
        return False, "pubspec.yaml missing"
    try:
        data = yaml.safe_load(pubspec.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        return False, f"invalid YAML: {exc}"
    if not isinstance(data, dict):
        return False, "pubspec.yaml is not a mapping"
    for section in ("dev_dependencies", "dependencies"):
        deps = data.get(section)
        if isinstance(deps, dict) and "build_runner" in deps:
            return True, f"declared in {section}"
    return False, "add build_runner to dev_dependencies"


def collect_checks(project_dir: Path, settings: AppSettings) -> list[tuple[str, bool, str]]:
    checks: list[tuple[str, bool, str]] = []

    ok, detail = _check_executable(settings.flutter_executable)
    checks.append(("flutter", ok, detail))
    ok, detail = _check_executable(settings.dart_executable)
    checks.append(("dart", ok, detail))

    pubspec = project_dir / "pubspec.yaml"
    checks.append(("pubspec.yaml", pubspec.is_file(), str(pubspec)))

    build_yaml = project_dir / settings.build_yaml_name
    checks.append((settings.build_yaml_name, build_yaml.is_file(), str(build_yaml)))

    ok, detail = _check_build_runner(pubspec)
    checks.append(("build_runner", ok, detail))
    return checks


@app.command()
def run(
    project_dir: Path = typer.Option(
        Path("."), "--project-dir", "-C", help="Flutter project root.", file_okay=False
    ),
) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()
    checks = collect_checks(project_dir.resolve(), settings)

    table = Table(title="flutter-buildgen doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")
    for name, ok, detail in checks:
        table.add_row(name, "OK" if ok else "FAIL", detail)
    _console.print(table)

    if not all(ok for _, ok, _ in checks):
        _console.print(
            "\n[yellow]Note:[/yellow] `flutter-buildgen init` creates a build.yaml; "
            "`flutter-buildgen doctor set-flutter` points at a specific SDK."
        )
        raise typer.Exit(code=1)


@app.command(name="set-flutter")
def set_flutter(
    executable: str = typer.Argument(..., help="Path to the flutter executable."),
) -> None:
    """Store the flutter executable in the user config .env."""

    executable = executable.strip()
    if not executable:
        raise typer.BadParameter("executable is required")

    env_path = write_user_env_vars({"FLUTTER_BUILDGEN_FLUTTER_EXECUTABLE": executable})
    _console.print(f"[green]Saved flutter executable to:[/green] {env_path}")
