# ABOUTME: The `shelfsync default` command group for per-field source defaults.
# ABOUTME: Provides ls, set, clear, and covers subcommands.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from shelfsync.cli.options import db_option
from shelfsync.db.connection import DEFAULT_DB_PATH, open_settings
from shelfsync.db.repository import SqliteSettingsRepository
from shelfsync.metadata.candidate import FieldName, SourceId

console = Console()


@click.group("default")
def default() -> None:
    """Manage default sources for reconciled fields."""


@default.command("ls")
@db_option
def default_ls(db_path: Path | None) -> None:
    """List stored field defaults and the audiobook cover preference."""
    conn = open_settings(db_path or DEFAULT_DB_PATH)
    try:
        settings = SqliteSettingsRepository(conn)
        defaults = settings.field_defaults()
        prefer_covers = settings.get_prefer_audiobook_covers()
    finally:
        conn.close()

    if defaults:
        table = Table(title="Field defaults")
        table.add_column("Field", style="cyan")
        table.add_column("Source", style="bold")
        for field_name, source in defaults.items():
            table.add_row(field_name, source)
        console.print(table)
    else:
        console.print("[yellow]No field defaults stored.[/yellow]")

    console.print(f"Prefer audiobook covers: {'yes' if prefer_covers else 'no'}")


@default.command("set")
@click.argument("field_name")
@click.argument("source")
@db_option
def default_set(field_name: str, source: str, db_path: Path | None) -> None:
    """Prefer SOURCE (original, audiobook, edition:N, ...) for FIELD_NAME."""
    try:
        field_enum = FieldName.parse(field_name)
        source_id = SourceId.parse(source)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise SystemExit(1) from exc

    conn = open_settings(db_path or DEFAULT_DB_PATH)
    try:
        SqliteSettingsRepository(conn).set_field_default(field_enum.value, str(source_id))
    finally:
        conn.close()

    console.print(f"Default for [cyan]{field_enum.value}[/cyan] is now [bold]{source_id}[/bold].")


@default.command("clear")
@click.argument("field_name")
@db_option
def default_clear(field_name: str, db_path: Path | None) -> None:
    """Forget the stored default for FIELD_NAME."""
    conn = open_settings(db_path or DEFAULT_DB_PATH)
    try:
        field_enum = FieldName.parse(field_name)
        SqliteSettingsRepository(conn).clear_field_default(field_enum.value)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise SystemExit(1) from exc
    finally:
        conn.close()

    console.print(f"Cleared default for [cyan]{field_enum.value}[/cyan].")


@default.command("covers")
@click.argument("choice", type=click.Choice(["on", "off"]))
@db_option
def default_covers(choice: str, db_path: Path | None) -> None:
    """Turn the "prefer audiobook covers" switch on or off."""
    conn = open_settings(db_path or DEFAULT_DB_PATH)
    try:
        SqliteSettingsRepository(conn).set_prefer_audiobook_covers(choice == "on")
    finally:
        conn.close()

    console.print(f"Prefer audiobook covers: {'yes' if choice == 'on' else 'no'}")
