"""Rich UI components for the CLI.

Kept apart from the commands so tables can be reused by `run`, `sync` and
`scan`.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.annotations import get_patterns
from core.domain.models import CommandResult, ScanResult, YamlSyncResult


def print_banner(console: Console) -> None:
    """Print the welcome banner (skipped in quiet/JSON modes by the caller)."""

    title = Text("flutter-buildgen", style="bold cyan")
    subtitle = Text("Annotations • build.yaml • build_runner", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_scan_table(scan: ScanResult) -> Table:
    table = Table(title=f"Annotated files ({scan.files_scanned} scanned)")
    table.add_column("Annotation", style="cyan", no_wrap=True)
    table.add_column("Builder", style="magenta", no_wrap=True)
    table.add_column("generate_for", style="white")
    for pattern in get_patterns():
        files = scan.generate_for(pattern.builder_key)
        table.add_row(pattern.display, pattern.builder_key, "\n".join(files) or "[dim]-[/dim]")
    return table


def build_sync_panel(sync: YamlSyncResult) -> Panel:
    body = Text()
    status = "updated" if sync.written else ("would change" if sync.changed else "up to date")
    body.append(f"{sync.path.name}: {status}\n", style="bold")
    if sync.updated_builders:
        body.append("Builders synced: " + ", ".join(sync.updated_builders) + "\n")
    if sync.missing_builders:
        body.append("Not configured: " + ", ".join(sync.missing_builders), style="yellow")
    return Panel(body, title="build.yaml", border_style="green" if not sync.missing_builders else "yellow")


def build_commands_table(results: list[CommandResult]) -> Table:
    table = Table(title="Build steps")
    table.add_column("#", style="dim", no_wrap=True)
    table.add_column("Step", style="cyan", no_wrap=True)
    table.add_column("Exit", no_wrap=True)
    table.add_column("Elapsed", style="white", justify="right")
    for index, result in enumerate(results, start=1):
        exit_style = "green" if result.ok else "red"
        exit_text = "timeout" if result.timed_out else str(result.returncode)
        table.add_row(
            str(index),
            result.spec.name,
            f"[{exit_style}]{exit_text}[/{exit_style}]",
            f"{result.elapsed_seconds:.2f}s",
        )
    return table
