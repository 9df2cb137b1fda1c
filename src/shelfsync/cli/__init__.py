# ABOUTME: CLI package for shelfsync, built on Click.
# ABOUTME: Defines the root command group, logging setup, and registers subcommands.

import logging

import click
from rich.logging import RichHandler

from shelfsync.cli.commands import category_cmd, default_cmd, review_cmd


@click.group()
@click.version_option(package_name="shelfsync")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging.")
def cli(verbose: bool) -> None:
    """shelfsync - reconcile book metadata from several sources before publishing."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


cli.add_command(review_cmd.review)
cli.add_command(category_cmd.category)
cli.add_command(default_cmd.default)
