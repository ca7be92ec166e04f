"""Sales ledger commands."""

from pathlib import Path

import click

from kedai.cli.date_filters import resolve_cli_date_range
from kedai.domain.reports import ReportService
from kedai.domain.sales import SalesService
from kedai.utils.amount_parser import format_price
from kedai.utils.clock import ms_to_datetime
from kedai.utils.date_parser import PERIODS


def _date_options(func):
    func = click.option(
        "--period", type=click.Choice(PERIODS), help="Named period (e.g., today, this-week)"
    )(func)
    func = click.option("--end-date", help="End date (inclusive)")(func)
    func = click.option("--start-date", help="Start date (YYYY-MM-DD or 'today', 'yesterday')")(func)
    return func


@click.group()
def sales_group():
    """View and export the sales ledger."""
    pass


@sales_group.command("list")
@_date_options
@click.pass_context
def list_sales(ctx, start_date: str | None, end_date: str | None, period: str | None):
    """List sales, newest first."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period
    )
    sales = SalesService(ctx.obj["store"]).list_sales(start, end)
    if not sales:
        click.echo("No sales found.")
        return

    click.echo("\nSales:")
    click.echo("-" * 90)
    for sale in sales:
        when = ms_to_datetime(sale.created_at).strftime("%Y-%m-%d %H:%M")
        units = sum(item.quantity for item in sale.items)
        click.echo(
            f"{sale.id:28s} | {when} | {units:3d} item(s) | "
            f"{format_price(sale.total):>12s} | {sale.payment_method.value}"
        )
    click.echo("-" * 90)
    click.echo(f"{len(sales)} sale(s), total {format_price(sum(s.total for s in sales))}")


@sales_group.command("export")
@click.argument("csv_file", type=click.Path(dir_okay=False, writable=True))
@_date_options
@click.pass_context
def export_sales(ctx, csv_file: str, start_date: str | None, end_date: str | None, period: str | None):
    """Export sales to a CSV file."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period
    )
    text = ReportService(ctx.obj["store"]).export_sales_csv(start, end)
    Path(csv_file).write_text(text, encoding="utf-8")
    click.echo(f"Exported sales to {csv_file}")


def register_commands(cli):
    """Register sales commands with main CLI."""
    cli.add_command(sales_group, name="sales")
