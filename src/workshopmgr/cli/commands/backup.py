"""Backup export and restore commands."""

import click
from workshopmgr.cli.error_handling import handle_domain_error
from workshopmgr.domain.backup import BackupService


@click.group()
def backup_group():
    """Export or restore the whole database as JSON."""
    pass


@backup_group.command("export")
@click.argument("path", type=click.Path(dir_okay=False))
@click.pass_context
def export_backup(ctx, path: str):
    """Write a JSON backup of every record.

    Examples:
        workshopmgr backup export backup-2024-10.json
    """
    written = BackupService(ctx.obj["db"]).export_json(path)
    click.echo(f"Backup written to {written}")


@backup_group.command("import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def import_backup(ctx, path: str, yes: bool):
    """Replace ALL data with the contents of a JSON backup.

    The file is checked completely before anything is replaced; an
    incomplete backup leaves the database untouched.
    """
    if not yes and not click.confirm("This replaces all current data. Continue?"):
        click.echo("Import cancelled.")
        return

    try:
        counts = BackupService(ctx.obj["db"]).import_json(path)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Restored {sum(counts.values())} record(s) from {path}")
    for collection, count in counts.items():
        if count:
            click.echo(f"  {collection}: {count}")


def register_commands(cli):
    """Register backup commands with main CLI."""
    cli.add_command(backup_group, name="backup")
