#!/usr/bin/env python3
"""
Interne Database Management CLI
-------------------------------

Command-line interface for administering an Interne database.

This module provides the main CLI group and shared context setup
for all database commands.

Command Structure:
    - Setup (init, create-user)
    - Import & Export (import, export)
    - Query (entries, tags)

Usage:
    # Get general help
    interne --help

    # Create the database and a first account
    interne init
    interne create-user "Ada" --email ada@example.com

    # Bring in a legacy browser-extension export
    interne import bookmarks.json --user-id 1
"""
import click
import logging
from pathlib import Path

from interne.core.logging_manager import InterneLogger
from interne.core.paths import ALEMBIC_DIR, DB_PATH, LOG_DIR
from interne.database.manager import InterneDB


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    default=str(DB_PATH),
    envvar="INTERNE_DB_PATH",
    help="Path to database file",
)
@click.option(
    "--alembic-dir",
    type=click.Path(),
    default=str(ALEMBIC_DIR),
    envvar="INTERNE_ALEMBIC_DIR",
    help="Path to Alembic directory",
)
@click.option(
    "--log-dir",
    type=click.Path(),
    default=str(LOG_DIR),
    envvar="INTERNE_LOG_DIR",
    help="Path to log directory",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Show detailed errors and tracebacks",
)
@click.pass_context
def cli(ctx, db_path, alembic_dir, log_dir, verbose):
    """Interne Database Management CLI"""

    # Suppress Alembic INFO logging by default
    logging.getLogger("alembic").setLevel(logging.WARNING)

    ctx.ensure_object(dict)
    ctx.obj["db_path"] = Path(db_path)
    ctx.obj["alembic_dir"] = Path(alembic_dir)
    ctx.obj["log_dir"] = Path(log_dir)
    ctx.obj["verbose"] = verbose
    ctx.obj["logger"] = InterneLogger(Path(log_dir), component_name="cli")

    ctx.call_on_close(lambda: _close(ctx))


def _close(ctx) -> None:
    if "db" in ctx.obj:
        ctx.obj["db"].close()
    ctx.obj["logger"].close()


def get_db(ctx) -> InterneDB:
    """Get or create database instance from context."""
    if "db" not in ctx.obj:
        ctx.obj["db"] = InterneDB(
            db_path=ctx.obj["db_path"],
            alembic_dir=ctx.obj["alembic_dir"],
            log_dir=ctx.obj["log_dir"],
        )
    return ctx.obj["db"]


# Import and register command modules
# These imports must come after CLI group definition
from .setup import init, create_user  # noqa: E402
from .transfer import export, import_legacy  # noqa: E402
from .query import entries, tags  # noqa: E402

# Register top-level commands
cli.add_command(init)
cli.add_command(create_user)
cli.add_command(export)
cli.add_command(import_legacy)
cli.add_command(entries)
cli.add_command(tags)


if __name__ == "__main__":
    cli(obj={})
