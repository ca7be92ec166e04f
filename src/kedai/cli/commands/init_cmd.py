"""Initialize a fresh till with default data."""

import click

from kedai.domain.seed import seed_defaults


@click.command("init")
@click.option("--no-products", is_flag=True, help="Only create the default admin")
@click.pass_context
def init(ctx, no_products: bool):
    """Create the default admin and the starter product list.

    Existing data is never overwritten: the admin is only created when there
    are no users, and products only when the catalog is empty.
    """
    result = seed_defaults(ctx.obj["store"], products=not no_products)

    if result["admin_created"]:
        click.echo("Created default admin (username 'admin', PIN '1234'). Change the PIN soon.")
    else:
        click.echo("Users already exist; default admin not created.")

    if result["products_created"]:
        click.echo(f"Created {result['products_created']} products.")
    elif not no_products:
        click.echo("Catalog is not empty; no products created.")


def register_commands(cli):
    """Register init command with main CLI."""
    cli.add_command(init)
