"""
Setup Commands
--------------

Database initialization and account creation.

Commands:
    - init: Create the database schema or bring it up to date
    - create-user: Add an account and print its invite code
"""
import click

from interne.core.logging_manager import handle_cli_error
from interne.core.exceptions import DatabaseError, ValidationError
from . import get_db


@click.command()
@click.pass_context
def init(ctx):
    """Initialize the database (create tables or run pending migrations)."""
    try:
        click.echo("🚀 Initializing Interne database...")
        db = get_db(ctx)
        db.initialize_schema()

        status = db.get_migration_history()
        click.echo(f"  Revision: {status.get('current_revision') or 'none'}")
        click.echo("✅ Database ready!")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "init", {"db_path": str(ctx.obj["db_path"])})


@click.command("create-user")
@click.argument("name")
@click.option("--email", default=None, help="Optional email address")
@click.pass_context
def create_user(ctx, name, email):
    """Create a user account and print its invite code."""
    try:
        db = get_db(ctx)

        def _create(session):
            del session
            user = db.users.create({"name": name, "email": email})
            return user.id, user.invite_code

        user_id, invite_code = db.run_with_retry(_create)

        click.echo(f"✅ Created user {name} (id {user_id})")
        click.echo(f"🔑 Invite code: {invite_code}")

    except (DatabaseError, ValidationError) as e:
        handle_cli_error(ctx, e, "create_user", {"name": name})
