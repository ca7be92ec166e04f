"""Main CLI entry point."""

import logging

import click

from kedai.database.factories import create_sqlite_store
from kedai.domain.errors import StoreError

# Import and register all commands at module level
from kedai.cli.commands import (
    backup,
    init_cmd,
    product,
    report,
    sales,
    sell,
    user,
)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides KEDAI_DB_PATH environment variable)",
    envvar="KEDAI_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    envvar="KEDAI_LOG_LEVEL",
    show_default=True,
    help="Logging verbosity",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """Kedai - point of sale for a single stall.

    Keeps the product catalog, stock levels and sales ledger in a local
    database, so the till works with no network at all.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Open the database only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        store = create_sqlite_store(database_path=db_path)
        try:
            store.connect()
            store.initialize_schema()
        except StoreError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)
        ctx.obj["store"] = store
        ctx.call_on_close(store.disconnect)


# Register all commands
init_cmd.register_commands(cli)
product.register_commands(cli)
sell.register_commands(cli)
sales.register_commands(cli)
backup.register_commands(cli)
report.register_commands(cli)
user.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
