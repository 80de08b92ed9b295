"""Registration commands."""

import click
from workshopmgr.cli.error_handling import handle_domain_error
from workshopmgr.cli.input_parsing import date_or_exit
from workshopmgr.domain.entities import Collection
from workshopmgr.domain.registration import RegistrationService


@click.command("register")
@click.argument("child_id")
@click.argument("workshop_ids", nargs=-1, required=True, metavar="WORKSHOP_ID...")
@click.option("--date", "registration_date", help="Registration date (defaults to today)")
@click.pass_context
def register_child(ctx, child_id: str, workshop_ids: tuple[str, ...], registration_date: str | None):
    """Register a child into one or more workshops.

    Nothing is registered if any workshop is full or already has the child;
    every problem found is listed.

    Examples:
        workshopmgr register 7a41c2 0e9f3b 12ab77
    """
    registered_on = date_or_exit(ctx, registration_date) if registration_date else None
    try:
        ids = RegistrationService(ctx.obj["db"]).register_child(
            child_id, list(workshop_ids), registration_date=registered_on
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created {len(ids)} registration(s)")
    for registration_id in ids:
        click.echo(f"  ID: {registration_id}")


@click.command("unregister")
@click.argument("registration_id")
@click.pass_context
def unregister(ctx, registration_id: str):
    """Remove a registration."""
    try:
        RegistrationService(ctx.obj["db"]).unregister(registration_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Removed registration {registration_id}")


@click.command("registrations")
@click.option("--child", "child_id", help="Only registrations of this child")
@click.option("--workshop", "workshop_id", help="Only registrations to this workshop")
@click.pass_context
def list_registrations(ctx, child_id: str | None, workshop_id: str | None):
    """List registrations."""
    db = ctx.obj["db"]
    registrations = RegistrationService(db).list_registrations(child_id=child_id, workshop_id=workshop_id)
    if not registrations:
        click.echo("No registrations found.")
        return

    children = {child.id: child.name for child in db.list_records(Collection.CHILDREN)}
    workshops = {workshop.id: workshop.name for workshop in db.list_records(Collection.WORKSHOPS)}
    click.echo("\nRegistrations:")
    click.echo("-" * 90)
    for reg in sorted(registrations, key=lambda reg: reg.registration_date):
        click.echo(
            f"{reg.id} | {reg.registration_date} | {children.get(reg.child_id, '?'):15s} | "
            f"{workshops.get(reg.workshop_id, '?')}"
        )


def register_commands(cli):
    """Register registration commands with main CLI."""
    cli.add_command(register_child)
    cli.add_command(unregister)
    cli.add_command(list_registrations)
