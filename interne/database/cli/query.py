"""
Query Commands
--------------

Read-only views of a user's data.

Commands:
    - entries: List entries with availability (ready, waiting, unseen, all)
    - tags: List tags with usage counts and cloud weights
"""
import click

from interne.core.logging_manager import handle_cli_error
from interne.core.exceptions import DatabaseError
from interne.engine.visibility import EntryFilter
from . import get_db


@click.command()
@click.option("--user-id", type=int, required=True, help="Acting user")
@click.option(
    "--filter",
    "entry_filter",
    type=click.Choice(EntryFilter.choices()),
    default=EntryFilter.READY.value,
    show_default=True,
    help="Which entries to list",
)
@click.pass_context
def entries(ctx, user_id, entry_filter):
    """List the entries a user can see."""
    try:
        db = get_db(ctx)

        with db.session_scope():
            views = db.entries.list_views(user_id, entry_filter)

        if not views:
            click.echo(f"No {entry_filter} entries.")
            return

        click.echo(f"\n📚 {len(views)} {entry_filter} entries:\n")
        for view in views:
            status = "ready" if view.is_available else view.remaining
            seen = view.last_seen or "never visited"
            click.echo(f"  [{view.id}] {view.title}")
            click.echo(f"      {view.url}")
            click.echo(f"      {status} · {seen} · {view.visit_count} visits")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "entries", {"user_id": user_id})


@click.command()
@click.option("--user-id", type=int, required=True, help="Owner of the tagged entries")
@click.pass_context
def tags(ctx, user_id):
    """List a user's tags with their counts."""
    try:
        db = get_db(ctx)

        with db.session_scope():
            weights = db.tags.cloud_for_user(user_id)

        if not weights:
            click.echo("No tags.")
            return

        click.echo(f"\n🏷️  {len(weights)} tags:\n")
        for weight in weights:
            click.echo(f"  {weight.name} ({weight.count}) {weight.font_size} {weight.color}")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "tags", {"user_id": user_id})
