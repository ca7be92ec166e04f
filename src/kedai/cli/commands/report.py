"""Dashboard report command."""

import click

from kedai.domain.reports import ReportService
from kedai.utils.amount_parser import format_price


@click.command("report")
@click.pass_context
def report(ctx):
    """Show today's sales, the last 7 days and low-stock products."""
    data = ReportService(ctx.obj["store"]).dashboard()

    click.echo(f"\nToday: {format_price(data['total_today'])} ({data['count_today']} sales)")

    click.echo("\nLast 7 days:")
    peak = max((row["total"] for row in data["daily_totals"]), default=0)
    for row in data["daily_totals"]:
        bar = "#" * (int(30 * row["total"] / peak) if peak else 0)
        click.echo(f"  {row['date'].isoformat()} {format_price(row['total']):>14s} {bar}")

    low_stock = data["low_stock"]
    click.echo(f"\nLow stock: {len(low_stock)} products")
    for product in low_stock:
        click.echo(f"  {product.name} ({product.id}): {product.stock}")


def register_commands(cli):
    """Register report command with main CLI."""
    cli.add_command(report)
