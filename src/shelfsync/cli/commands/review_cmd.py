# ABOUTME: The `shelfsync review` command: reconcile one book and emit its publish payload.
# ABOUTME: Loads provider records from JSON, runs the interactive review, writes JSON out.

import json
import logging
from pathlib import Path

import click
from rich.console import Console

from shelfsync.cli.options import db_option
from shelfsync.cli.review import ReviewSession
from shelfsync.core.session import BookSession
from shelfsync.db.connection import DEFAULT_DB_PATH, open_settings
from shelfsync.db.repository import SqliteSettingsRepository
from shelfsync.metadata.parser import InputFormatError, load_review_input

logger = logging.getLogger(__name__)

console = Console()


@click.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@db_option
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    default=False,
    help="Accept every default selection without prompting.",
)
@click.option(
    "-o",
    "--output",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the publish payload to this file instead of stdout.",
)
def review(
    input_path: Path, db_path: Path | None, quiet: bool, output_path: Path | None
) -> None:
    """Review a book's merged metadata and print its publish payload.

    INPUT_PATH is a JSON file shaped like
    {"book": {...}, "audiobook": {...} | null, "editions": [...]}.
    """
    try:
        data = load_review_input(input_path)
    except InputFormatError as exc:
        console.print(f"[red]{exc}[/red]")
        raise SystemExit(1) from exc

    conn = open_settings(db_path or DEFAULT_DB_PATH)
    try:
        settings = SqliteSettingsRepository(conn)
        session = BookSession(data.book, settings, data.audiobook, data.editions)
        record = ReviewSession(console=console, quiet=quiet).review(session)
    finally:
        conn.close()

    if record is None:
        console.print("[yellow]Review abandoned, nothing written.[/yellow]")
        return

    payload = json.dumps(record.to_payload(), indent=2, ensure_ascii=False)
    if output_path is not None:
        output_path.write_text(payload + "\n", encoding="utf-8")
        logger.info("Wrote publish payload to %s", output_path)
        console.print(f"Wrote [bold]{record.title}[/bold] to {output_path}.")
    else:
        click.echo(payload)
