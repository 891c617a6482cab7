"""Command-line layer (typer + rich). No build logic lives here."""
