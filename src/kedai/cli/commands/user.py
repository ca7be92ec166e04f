"""Operator PIN commands."""

import click

from kedai.cli.error_handling import handle_domain_error
from kedai.domain.errors import DomainError, StoreError
from kedai.domain.users import UserService


@click.group()
def user_group():
    """Manage operators and PINs."""
    pass


@user_group.command("list")
@click.pass_context
def list_users(ctx):
    """List operators."""
    users = UserService(ctx.obj["store"]).list_users()
    if not users:
        click.echo("No users found. Run 'kedai init' to create the default admin.")
        return
    for u in users:
        click.echo(f"{u.id:28s} | {u.username}")


@user_group.command("verify")
@click.argument("username")
@click.option("--pin", prompt=True, hide_input=True, help="PIN to check")
@click.pass_context
def verify(ctx, username: str, pin: str):
    """Check a username and PIN."""
    try:
        user = UserService(ctx.obj["store"]).authenticate(username, pin)
    except (DomainError, StoreError) as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Login OK for {user.username}")


@user_group.command("change-pin")
@click.argument("username")
@click.option("--pin", prompt="Current PIN", hide_input=True, help="Current PIN")
@click.option(
    "--new-pin",
    prompt="New PIN",
    hide_input=True,
    confirmation_prompt=True,
    help="New PIN (at least 4 characters)",
)
@click.pass_context
def change_pin(ctx, username: str, pin: str, new_pin: str):
    """Change an operator's PIN."""
    service = UserService(ctx.obj["store"])
    try:
        user = service.authenticate(username, pin)
        service.change_pin(user.id, new_pin)
    except (DomainError, StoreError) as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"PIN changed for {username}")


def register_commands(cli):
    """Register user commands with main CLI."""
    cli.add_command(user_group, name="user")
