"""Sell command: ring up a cart and check it out."""

import click

from kedai.cli.error_handling import handle_domain_error, handle_partial_commit
from kedai.domain.cart import Cart
from kedai.domain.catalog import CatalogService
from kedai.domain.checkout import CheckoutService
from kedai.domain.entities import PaymentMethod
from kedai.domain.errors import DomainError, PartialCommitFailure, StoreError
from kedai.utils.amount_parser import format_price, parse_price


def parse_item_spec(spec: str) -> tuple[str, int]:
    """Parse ``PRODUCT_ID[:QTY]`` into a product id and quantity.

    Raises:
        ValueError: If the quantity is not a positive integer
    """
    product_id, sep, qty = spec.rpartition(":")
    if not sep:
        return spec, 1
    try:
        quantity = int(qty)
    except ValueError:
        raise ValueError(f"Invalid quantity in '{spec}'") from None
    if quantity <= 0:
        raise ValueError(f"Quantity must be positive in '{spec}'")
    return product_id, quantity


@click.command("sell")
@click.argument("items", nargs=-1, required=True, metavar="PRODUCT_ID[:QTY]...")
@click.option(
    "--method",
    type=click.Choice([m.value for m in PaymentMethod]),
    default=PaymentMethod.CASH.value,
    show_default=True,
    help="Payment method",
)
@click.option("--paid", help="Cash tendered (defaults to the exact total)")
@click.option("--reference", help="Payment reference for non-cash payments")
@click.pass_context
def sell(ctx, items: tuple[str, ...], method: str, paid: str | None, reference: str | None):
    """Sell one or more products.

    Examples:
        kedai sell p-1718000000000-ab12cd34:2 p-1718000000001-ef56ab78
        kedai sell p-1718000000000-ab12cd34:3 --paid 50000
        kedai sell p-1718000000000-ab12cd34 --method digital-wallet --reference QR123
    """
    store = ctx.obj["store"]
    catalog = CatalogService(store)
    cart = Cart(catalog)

    amount_paid = None
    if paid is not None:
        try:
            amount_paid = parse_price(paid)
        except ValueError as e:
            click.echo(f"Error: Invalid amount paid: {e}", err=True)
            ctx.exit(1)

    try:
        for spec in items:
            product_id, quantity = parse_item_spec(spec)
            cart.add_item(product_id)
            if quantity > 1:
                notice = cart.change_quantity(product_id, quantity - 1)
                if notice is not None:
                    click.echo(f"Error: {notice}", err=True)
                    ctx.exit(1)
    except (DomainError, StoreError, ValueError) as e:
        handle_domain_error(ctx, e)

    try:
        sale = CheckoutService(store, catalog).checkout(
            cart, payment_method=method, amount_paid=amount_paid, payment_reference=reference
        )
    except PartialCommitFailure as e:
        handle_partial_commit(ctx, e)
        return
    except (DomainError, StoreError) as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Sale {sale.id}")
    for item in sale.items:
        click.echo(f"  {item.name} x{item.quantity}  {format_price(item.subtotal)}")
    click.echo(f"  Total: {format_price(sale.total)}")
    click.echo(f"  Paid ({sale.payment_method.value}): {format_price(sale.amount_paid)}")
    if sale.change:
        click.echo(f"  Change: {format_price(sale.change)}")


def register_commands(cli):
    """Register sell command with main CLI."""
    cli.add_command(sell)
