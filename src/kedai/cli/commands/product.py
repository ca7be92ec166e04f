"""Product catalog commands."""

import click

from kedai.cli.error_handling import handle_domain_error
from kedai.domain.catalog import CatalogService
from kedai.domain.csv_products import ProductCSVService
from kedai.domain.errors import DomainError, StoreError
from kedai.utils.amount_parser import format_price, parse_price


def _parse_price_or_exit(ctx, price: str) -> int:
    try:
        return parse_price(price)
    except ValueError as e:
        click.echo(f"Error: Invalid price: {e}", err=True)
        ctx.exit(1)


@click.group()
def product_group():
    """Manage the product catalog."""
    pass


@product_group.command("add")
@click.argument("name")
@click.option("--price", required=True, help="Price (e.g., 12000 or 'Rp 12.000')")
@click.option("--category", default="", help="Category name")
@click.option("--stock", type=int, default=0, show_default=True, help="Initial stock")
@click.option("--notes", help="Free-text notes")
@click.pass_context
def add_product(ctx, name: str, price: str, category: str, stock: int, notes: str | None):
    """Add a product to the catalog.

    Examples:
        kedai product add "Mie SS Manis" --price 12000 --category "Mie SS" --stock 30
        kedai product add "Lemon Tea" --price "Rp 5.000" --category Minuman
    """
    service = CatalogService(ctx.obj["store"])
    price_value = _parse_price_or_exit(ctx, price)

    try:
        product = service.create_product(
            name=name, price=price_value, category=category, stock=stock, notes=notes
        )
    except (DomainError, StoreError) as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created product '{product.name}' (ID: {product.id})")
    click.echo(f"  Price: {format_price(product.price)}  Stock: {product.stock}")


@product_group.command("list")
@click.option("--category", help="Only show this category")
@click.option("--search", help="Case-insensitive name filter")
@click.pass_context
def list_products(ctx, category: str | None, search: str | None):
    """List products."""
    service = CatalogService(ctx.obj["store"])
    products = service.list_products(category=category, search=search)
    if not products:
        click.echo("No products found.")
        return

    click.echo("\nProducts:")
    click.echo("-" * 90)
    for p in products:
        click.echo(
            f"{p.id:28s} | {p.category[:12]:12s} | {p.name[:24]:24s} | "
            f"{format_price(p.price):>12s} | stock {p.stock:4d}"
        )


@product_group.command("edit")
@click.argument("product_id")
@click.option("--name", help="New name")
@click.option("--price", help="New price")
@click.option("--category", help="New category")
@click.option("--stock", type=int, help="New stock level")
@click.option("--notes", help="New notes")
@click.option("--clear-notes", is_flag=True, help="Remove notes")
@click.pass_context
def edit_product(
    ctx,
    product_id: str,
    name: str | None,
    price: str | None,
    category: str | None,
    stock: int | None,
    notes: str | None,
    clear_notes: bool,
):
    """Edit a product's fields. The product ID never changes."""
    service = CatalogService(ctx.obj["store"])
    price_value = _parse_price_or_exit(ctx, price) if price is not None else None

    try:
        product = service.update_product(
            product_id,
            name=name,
            price=price_value,
            category=category,
            stock=stock,
            notes=notes,
            clear_notes=clear_notes,
        )
    except (DomainError, StoreError) as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Updated product '{product.name}' (ID: {product.id})")


@product_group.command("delete")
@click.argument("product_id")
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_product(ctx, product_id: str, yes: bool):
    """Delete a product. Past sales keep their copy of its name and price."""
    service = CatalogService(ctx.obj["store"])
    product = service.get_product(product_id)
    if product is None:
        click.echo(f"Error: Product {product_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Are you sure you want to delete '{product.name}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_product(product_id)
    except (DomainError, StoreError) as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted product '{product.name}'")


@product_group.command("restock")
@click.argument("product_id")
@click.argument("quantity", type=int)
@click.pass_context
def restock_product(ctx, product_id: str, quantity: int):
    """Add QUANTITY received units to a product's stock."""
    service = CatalogService(ctx.obj["store"])
    try:
        product = service.restock(product_id, quantity)
    except (DomainError, StoreError) as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Restocked '{product.name}' by {quantity}. New stock: {product.stock}")


@product_group.command("categories")
@click.pass_context
def list_categories(ctx):
    """List the categories in use."""
    service = CatalogService(ctx.obj["store"])
    categories = sorted(service.categories(), key=str.lower)
    if not categories:
        click.echo("No categories found.")
        return
    for category in categories:
        click.echo(category)


@product_group.command("export-csv")
@click.argument("csv_file", type=click.Path(dir_okay=False, writable=True))
@click.pass_context
def export_csv(ctx, csv_file: str):
    """Export the catalog to a CSV file."""
    service = ProductCSVService(CatalogService(ctx.obj["store"]))
    count = service.export_products_file(csv_file)
    click.echo(f"Exported {count} products to {csv_file}")


@product_group.command("import-csv")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def import_csv(ctx, csv_file: str):
    """Import products from a CSV file.

    The file needs the columns category, name, price and stock; notes is
    optional. Products with the same name as an existing one overwrite it.
    """
    service = ProductCSVService(CatalogService(ctx.obj["store"]))
    try:
        result = service.import_products_file(csv_file)
    except (DomainError, StoreError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)
        return

    click.echo("\nImport complete:")
    click.echo(f"  Created: {result['created']} products")
    click.echo(f"  Updated: {result['updated']} products")
    if result["errors"]:
        click.echo(f"  Errors: {len(result['errors'])}")
        for error in result["errors"]:
            click.echo(f"    {error}", err=True)


def register_commands(cli):
    """Register product commands with main CLI."""
    cli.add_command(product_group, name="product")
