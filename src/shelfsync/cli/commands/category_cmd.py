# ABOUTME: The `shelfsync category` command group for the mapping graph and ignore set.
# ABOUTME: Provides ls, map, unmap, ignore, unignore, explain, and seed-defaults subcommands.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from shelfsync.categories.canonical import canonicalize
from shelfsync.categories.normalizer import seed_default_mappings
from shelfsync.categories.similarity import explain_similarity, similarity_score
from shelfsync.cli.options import db_option
from shelfsync.db.connection import DEFAULT_DB_PATH, open_settings
from shelfsync.db.repository import SqliteSettingsRepository

console = Console()


@click.group("category")
def category() -> None:
    """Manage category mappings and ignored categories."""


@category.command("ls")
@db_option
def category_ls(db_path: Path | None) -> None:
    """List category mappings and ignored categories."""
    conn = open_settings(db_path or DEFAULT_DB_PATH)
    try:
        settings = SqliteSettingsRepository(conn)
        mappings = settings.mappings()
        ignored = settings.ignored_tags()
    finally:
        conn.close()

    if not mappings and not ignored:
        console.print("[yellow]No category mappings or ignored categories.[/yellow]")
        return

    if mappings:
        table = Table(title="Mappings")
        table.add_column("From", style="cyan")
        table.add_column("To", style="bold")
        for source, target in mappings.items():
            table.add_row(source, target)
        console.print(table)

    if ignored:
        table = Table(title="Ignored")
        table.add_column("Category", style="dim")
        for tag in ignored:
            table.add_row(tag)
        console.print(table)


@category.command("map")
@click.argument("from_tag")
@click.argument("to_tag")
@db_option
def category_map(from_tag: str, to_tag: str, db_path: Path | None) -> None:
    """Map FROM_TAG onto TO_TAG in every future review."""
    conn = open_settings(db_path or DEFAULT_DB_PATH)
    try:
        target = canonicalize(to_tag)
        SqliteSettingsRepository(conn).map_tag(from_tag, target)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise SystemExit(1) from exc
    finally:
        conn.close()

    console.print(f"Mapped [cyan]{from_tag}[/cyan] to [bold]{target}[/bold].")


@category.command("unmap")
@click.argument("tag")
@click.option(
    "--all",
    "all_to",
    is_flag=True,
    default=False,
    help="Remove every mapping that points at TAG instead of TAG's own mapping.",
)
@db_option
def category_unmap(tag: str, all_to: bool, db_path: Path | None) -> None:
    """Remove the mapping from TAG (or, with --all, every mapping to TAG)."""
    conn = open_settings(db_path or DEFAULT_DB_PATH)
    try:
        settings = SqliteSettingsRepository(conn)
        if all_to:
            removed = settings.unmap_all_to(tag)
            if not removed:
                raise ValueError(f"No categories are mapped to '{tag}'")
        else:
            settings.unmap_tag(tag)
            removed = [tag]
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise SystemExit(1) from exc
    finally:
        conn.close()

    console.print(f"Removed mapping for [cyan]{', '.join(removed)}[/cyan].")


@category.command("ignore")
@click.argument("tag")
@db_option
def category_ignore(tag: str, db_path: Path | None) -> None:
    """Hide TAG from the default selection in every future review."""
    conn = open_settings(db_path or DEFAULT_DB_PATH)
    try:
        SqliteSettingsRepository(conn).ignore_tag(canonicalize(tag))
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise SystemExit(1) from exc
    finally:
        conn.close()

    console.print(f"Ignoring [cyan]{canonicalize(tag)}[/cyan].")


@category.command("unignore")
@click.argument("tag")
@db_option
def category_unignore(tag: str, db_path: Path | None) -> None:
    """Stop ignoring TAG."""
    conn = open_settings(db_path or DEFAULT_DB_PATH)
    try:
        SqliteSettingsRepository(conn).unignore_tag(tag)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise SystemExit(1) from exc
    finally:
        conn.close()

    console.print(f"No longer ignoring [cyan]{tag}[/cyan].")


@category.command("explain")
@click.argument("first")
@click.argument("second")
def category_explain(first: str, second: str) -> None:
    """Explain whether FIRST and SECOND would be suggested as a merge."""
    score = similarity_score(first, second)
    console.print(f"[bold]{first}[/bold] / [bold]{second}[/bold]: score {score:.2f}")
    console.print(explain_similarity(first, second))


@category.command("seed-defaults")
@db_option
def category_seed_defaults(db_path: Path | None) -> None:
    """Install the built-in alias mappings (existing mappings are kept)."""
    conn = open_settings(db_path or DEFAULT_DB_PATH)
    try:
        added = seed_default_mappings(SqliteSettingsRepository(conn))
    finally:
        conn.close()

    if not added:
        console.print("[yellow]All built-in mappings are already present.[/yellow]")
        return
    console.print(f"Added {len(added)} mapping(s).")
