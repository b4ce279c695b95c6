"""
Import & Export Commands
------------------------

Moving entries in and out of the database.

Commands:
    - export: Write a user's entries to a JSON file
    - import: Load a legacy browser-extension JSON export
"""
import click
from pathlib import Path

from interne.core.logging_manager import handle_cli_error
from interne.core.exceptions import DatabaseError
from interne.core.paths import EXPORT_DIR
from . import get_db


@click.command()
@click.argument("output", type=click.Path(), default=str(EXPORT_DIR))
@click.option("--user-id", type=int, required=True, help="Owner of the exported entries")
@click.pass_context
def export(ctx, output, user_id):
    """Export a user's entries to OUTPUT (a file or a directory)."""
    try:
        db = get_db(ctx)

        with db.session_scope() as session:
            user = db.users.get(user_id)
            path = (
                db.export_manager.export_to_json(session, user, Path(output))
                if user is not None
                else None
            )

        if path is None:
            click.echo(f"❌ No user with id {user_id}", err=True)
            ctx.exit(1)

        click.echo(f"✅ Exported to {path}")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "export", {"output": output, "user_id": user_id})


@click.command("import")
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.option("--user-id", type=int, required=True, help="Owner of the imported entries")
@click.pass_context
def import_legacy(ctx, source, user_id):
    """Import a legacy JSON export (SOURCE) for a user."""
    try:
        db = get_db(ctx)

        stats = db.run_with_retry(
            lambda session: db.import_manager.import_legacy(session, Path(source), user_id)
        )

        click.echo(f"✅ Imported {stats['imported']} entries ({stats['visits']} visits)")
        if stats["skipped"]:
            click.echo(f"⚠️  Skipped {stats['skipped']} items without url or title")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "import", {"source": source, "user_id": user_id})
