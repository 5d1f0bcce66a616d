"""Main CLI entry point."""

import click
from khata.database.factories import create_sqlite_database
from khata.logging_setup import configure_logging

# Import and register all commands at module level
from khata.cli.commands import (
    categories,
    chat,
    dashboard,
    gst,
    import_cmd,
    seed,
    transaction,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides KHATA_DB_PATH environment variable)",
    envvar="KHATA_DB_PATH",
)
@click.option(
    "--owner",
    default="default",
    show_default=True,
    envvar="KHATA_OWNER",
    help="Business whose books to work on",
)
@click.option(
    "--log-level",
    envvar="KHATA_LOG_LEVEL",
    help="Logging level (DEBUG, INFO, WARNING, ...); defaults to WARNING",
)
@click.pass_context
def cli(ctx, db_path: str | None, owner: str, log_level: str | None):
    """Khata - GST and TDS bookkeeping for small businesses.

    Import bank or accounting exports, then review the dashboard, GST
    liability and TDS withheld, or ask simple questions about the books.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.call_on_close(db.disconnect)
        ctx.obj["db"] = db
        ctx.obj["owner"] = owner


# Register all commands
transaction.register_commands(cli)
import_cmd.register_commands(cli)
dashboard.register_commands(cli)
gst.register_commands(cli)
chat.register_commands(cli)
seed.register_commands(cli)
categories.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
