"""CLI error handling helpers."""

import click

from kedai.domain.errors import PartialCommitFailure, StoreError


def handle_domain_error(ctx: click.Context, error: ValueError | StoreError | OSError) -> None:
    """Render a domain or store error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def handle_partial_commit(ctx: click.Context, error: PartialCommitFailure) -> None:
    """Render a partial checkout and exit with a distinct status.

    Exit status 2 tells scripts not to retry: stock was already decremented.
    """
    click.echo(f"Error: {error}", err=True)
    click.echo("Stock already decremented for:", err=True)
    for product_id, quantity in error.applied:
        click.echo(f"  {product_id}: -{quantity}", err=True)
    click.echo("Check stock levels before selling these items again.", err=True)
    ctx.exit(2)
