# ABOUTME: Shared Click options for shelfsync CLI commands.
# ABOUTME: Provides the reusable --db option for the settings database path.

from pathlib import Path

import click

from shelfsync.db.connection import DEFAULT_DB_PATH

db_option = click.option(
    "--db",
    "db_path",
    type=click.Path(path_type=Path),
    default=None,
    help=f"Path to settings database (default: {DEFAULT_DB_PATH})",
)
