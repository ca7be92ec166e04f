"""Backup, restore and auto-backup commands."""

import time

import click

from kedai.cli.error_handling import handle_domain_error
from kedai.domain.auto_backup import AutoBackupScheduler
from kedai.domain.errors import DomainError, StoreError
from kedai.domain.settings import SettingsService
from kedai.domain.snapshot import (
    SnapshotService,
    read_snapshot_file,
    write_snapshot_file,
)
from kedai.utils.clock import ms_to_datetime


@click.group()
def backup_group():
    """Back up and restore products and sales."""
    pass


@backup_group.command("create")
@click.option("--name", help="Backup name (generated if omitted)")
@click.pass_context
def create_backup(ctx, name: str | None):
    """Save a backup in the local backup history."""
    service = SnapshotService(ctx.obj["store"])
    try:
        backup = service.create_backup(name=name)
    except StoreError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created backup '{backup.name}' (ID: {backup.id})")
    click.echo(
        f"  {len(backup.payload.products)} products, {len(backup.payload.sales)} sales"
    )


@backup_group.command("list")
@click.pass_context
def list_backups(ctx):
    """List stored backups, newest first."""
    backups = SnapshotService(ctx.obj["store"]).list_backups()
    if not backups:
        click.echo("No backups found.")
        return

    click.echo("\nBackups:")
    click.echo("-" * 90)
    for b in backups:
        when = ms_to_datetime(b.created_at).strftime("%Y-%m-%d %H:%M:%S")
        click.echo(
            f"{b.id:28s} | {when} | {b.name} "
            f"({len(b.payload.products)} products, {len(b.payload.sales)} sales)"
        )


@backup_group.command("export")
@click.argument("json_file", type=click.Path(dir_okay=False, writable=True))
@click.option("--backup-id", help="Write a stored backup instead of the current data")
@click.pass_context
def export_snapshot(ctx, json_file: str, backup_id: str | None):
    """Write a snapshot file of the current data (or of a stored backup)."""
    service = SnapshotService(ctx.obj["store"])
    try:
        if backup_id is not None:
            snapshot = service.require_backup(backup_id).payload
        else:
            snapshot = service.export()
    except (DomainError, StoreError) as e:
        handle_domain_error(ctx, e)
        return
    write_snapshot_file(json_file, snapshot)
    click.echo(
        f"Wrote {len(snapshot.products)} products and {len(snapshot.sales)} sales to {json_file}"
    )


@backup_group.command("restore")
@click.argument("json_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def restore_file(ctx, json_file: str, yes: bool):
    """Replace all products and sales with the contents of a snapshot file.

    Current products and sales are deleted. If the restore fails midway, run
    it again with the same file.
    """
    service = SnapshotService(ctx.obj["store"])
    try:
        snapshot = read_snapshot_file(json_file)
    except (DomainError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)
        return

    prompt = (
        f"Replace all data with {len(snapshot.products)} products and "
        f"{len(snapshot.sales)} sales from {json_file}? Current data will be lost"
    )
    if not yes and not click.confirm(prompt):
        click.echo("Restore cancelled.")
        return

    try:
        service.restore(snapshot)
    except (DomainError, StoreError) as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Restored {len(snapshot.products)} products and {len(snapshot.sales)} sales")


@backup_group.command("restore-backup")
@click.argument("backup_id")
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def restore_backup(ctx, backup_id: str, yes: bool):
    """Replace all products and sales with a stored backup."""
    service = SnapshotService(ctx.obj["store"])
    backup = service.get_backup(backup_id)
    if backup is None:
        click.echo(f"Error: Backup {backup_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Restore backup '{backup.name}'? Current data will be lost"):
        click.echo("Restore cancelled.")
        return

    try:
        service.restore_backup(backup_id)
    except (DomainError, StoreError) as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Restored backup '{backup.name}'")


@backup_group.command("delete")
@click.argument("backup_id")
@click.pass_context
def delete_backup(ctx, backup_id: str):
    """Delete a stored backup."""
    try:
        SnapshotService(ctx.obj["store"]).delete_backup(backup_id)
    except (DomainError, StoreError) as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted backup {backup_id}")


@backup_group.command("auto")
@click.option("--enable/--disable", default=None, help="Turn auto-backup on or off")
@click.option("--interval", type=int, help="Minutes between automatic backups")
@click.pass_context
def auto_backup(ctx, enable: bool | None, interval: int | None):
    """Show or change the auto-backup settings."""
    settings = SettingsService(ctx.obj["store"])
    try:
        if enable is None and interval is None:
            config = settings.get_auto_backup_config()
        else:
            config = settings.set_auto_backup_config(enabled=enable, interval_minutes=interval)
    except (DomainError, StoreError) as e:
        handle_domain_error(ctx, e)
        return
    state = "ON" if config.enabled else "OFF"
    click.echo(f"Auto-backup: {state} (every {config.interval_minutes} min)")


@backup_group.command("watch")
@click.pass_context
def watch(ctx):
    """Run the auto-backup schedule in the foreground until interrupted."""
    store = ctx.obj["store"]
    settings = SettingsService(store)
    scheduler = AutoBackupScheduler.from_settings(SnapshotService(store), settings)
    if not scheduler.config.enabled:
        click.echo("Auto-backup is disabled. Enable it with 'kedai backup auto --enable'.", err=True)
        ctx.exit(1)

    scheduler.start()
    click.echo(f"Auto-backup running every {scheduler.config.interval_minutes} min. Press Ctrl+C to stop.")
    try:
        while scheduler.is_running:
            time.sleep(1)
    except KeyboardInterrupt:
        pass
    finally:
        scheduler.stop()
    click.echo("Auto-backup stopped.")


def register_commands(cli):
    """Register backup commands with main CLI."""
    cli.add_command(backup_group, name="backup")
