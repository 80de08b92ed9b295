"""Workshop scheduling commands."""

import click
from workshopmgr.cli.error_handling import handle_domain_error
from workshopmgr.cli.input_parsing import amount_or_exit, date_or_exit, format_money, time_or_exit
from workshopmgr.domain.entities import Collection, DayOfWeek, WorkshopType
from workshopmgr.domain.registration import RegistrationService, available_seats
from workshopmgr.domain.workshop import WorkshopService

TYPE_CHOICE = click.Choice([workshop_type.value for workshop_type in WorkshopType])
DAY_CHOICE = click.Choice([day.value for day in DayOfWeek])


@click.group()
def workshop_group():
    """Manage workshops."""
    pass


@workshop_group.command("add")
@click.argument("name")
@click.option("--type", "workshop_type", required=True, type=TYPE_CHOICE, help="Workshop type")
@click.option("--location", "location_id", required=True, help="Location ID")
@click.option("--start-date", required=True, help="Date of the first session")
@click.option("--start-time", required=True, help="Session start time (HH:MM)")
@click.option("--end-time", help="Session end time (defaults to one hour after the start)")
@click.option("--day", "day_of_week", type=DAY_CHOICE, help="Weekday (defaults to the start date's)")
@click.option("--price", help="Price per child")
@click.option("--months", "duration_in_months", type=int, help="Duration in months (Scolastico and Campus)")
@click.pass_context
def add_workshop(
    ctx,
    name: str,
    workshop_type: str,
    location_id: str,
    start_date: str,
    start_time: str,
    end_time: str | None,
    day_of_week: str | None,
    price: str | None,
    duration_in_months: int | None,
):
    """Schedule a workshop series.

    The end date and the workshop code are computed from the type, the start
    date and the location.

    Examples:
        workshopmgr workshop add "Piccoli Chef" --type "1 Mese" --location 5c0d1e \\
            --start-date 2024-10-01 --start-time 17:00 --price 80
        workshopmgr workshop add "Robotica" --type Scolastico --months 3 --location 5c0d1e \\
            --start-date 2024-10-07 --start-time 16:30 --end-time 18:00
    """
    service = WorkshopService(ctx.obj["db"])
    values = {
        "name": name,
        "workshop_type": WorkshopType(workshop_type),
        "location_id": location_id,
        "start_date": date_or_exit(ctx, start_date, "start date"),
        "start_time": time_or_exit(ctx, start_time, "start time"),
        "duration_in_months": duration_in_months,
    }
    if end_time is not None:
        values["end_time"] = time_or_exit(ctx, end_time, "end time")
    if day_of_week is not None:
        values["day_of_week"] = DayOfWeek(day_of_week)
    if price is not None:
        values["price"] = amount_or_exit(ctx, price, "price")

    try:
        workshop_id = service.create_workshop(**values)
    except ValueError as e:
        handle_domain_error(ctx, e)

    workshop = service.get_workshop(workshop_id)
    click.echo(f"Created workshop '{workshop.name}' (ID: {workshop_id})")
    click.echo(f"  Code: {workshop.code}")
    click.echo(f"  From {workshop.start_date} to {workshop.end_date}")


@workshop_group.command("list")
@click.option("--location", "location_id", help="Only workshops at this location")
@click.option("--active-on", help="Only workshops running on this date (e.g. 'today')")
@click.pass_context
def list_workshops(ctx, location_id: str | None, active_on: str | None):
    """List workshops."""
    db = ctx.obj["db"]
    active_date = date_or_exit(ctx, active_on) if active_on else None
    workshops = WorkshopService(db).list_workshops(location_id=location_id, active_on=active_date)
    if not workshops:
        click.echo("No workshops found.")
        return

    registrations = RegistrationService(db).list_registrations()
    locations = {location.id: location for location in db.list_records(Collection.LOCATIONS)}
    click.echo("\nWorkshops:")
    click.echo("-" * 110)
    for workshop in workshops:
        location = locations.get(workshop.location_id)
        seats = available_seats(workshop, location, registrations) if location else "?"
        click.echo(
            f"{workshop.id} | {workshop.code:15s} | {workshop.name:20s} | "
            f"{workshop.start_date} - {workshop.end_date} | free seats: {seats}"
        )


@workshop_group.command("show")
@click.argument("workshop_id")
@click.pass_context
def show_workshop(ctx, workshop_id: str):
    """Show a workshop with its sessions and participants."""
    db = ctx.obj["db"]
    service = WorkshopService(db)
    try:
        workshop = service.require_workshop(workshop_id)
        sessions = service.sessions(workshop_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    location = db.get_record(Collection.LOCATIONS, workshop.location_id)
    click.echo(f"{workshop.name} [{workshop.code}]")
    click.echo(f"  Type: {workshop.workshop_type.value}")
    click.echo(f"  Location: {location.name if location else 'unknown'}")
    click.echo(
        f"  {workshop.day_of_week.value} {workshop.start_time:%H:%M}-{workshop.end_time:%H:%M}, "
        f"{workshop.start_date} to {workshop.end_date}"
    )
    click.echo(f"  Price: {format_money(workshop.price)}")
    click.echo(f"  Sessions ({len(sessions)}): {', '.join(str(day) for day in sessions)}")

    roster = RegistrationService(db).roster(workshop_id)
    capacity = f"/{location.capacity}" if location else ""
    click.echo(f"  Participants ({len(roster)}{capacity}):")
    for child in roster:
        click.echo(f"    {child.id} | {child.name}")


@workshop_group.command("update")
@click.argument("workshop_id")
@click.option("--name", help="New name")
@click.option("--type", "workshop_type", type=TYPE_CHOICE, help="Workshop type")
@click.option("--location", "location_id", help="Location ID")
@click.option("--start-date", help="Date of the first session")
@click.option("--start-time", help="Session start time (HH:MM)")
@click.option("--end-time", help="Session end time (HH:MM)")
@click.option("--day", "day_of_week", type=DAY_CHOICE, help="Weekday")
@click.option("--price", help="Price per child")
@click.option("--months", "duration_in_months", type=int, help="Duration in months")
@click.pass_context
def update_workshop(
    ctx,
    workshop_id: str,
    name: str | None,
    workshop_type: str | None,
    location_id: str | None,
    start_date: str | None,
    start_time: str | None,
    end_time: str | None,
    day_of_week: str | None,
    price: str | None,
    duration_in_months: int | None,
):
    """Update a workshop; code and end date are recomputed."""
    changes = {}
    if name is not None:
        changes["name"] = name
    if workshop_type is not None:
        changes["workshop_type"] = WorkshopType(workshop_type)
    if location_id is not None:
        changes["location_id"] = location_id
    if start_date is not None:
        changes["start_date"] = date_or_exit(ctx, start_date, "start date")
    if start_time is not None:
        changes["start_time"] = time_or_exit(ctx, start_time, "start time")
    if end_time is not None:
        changes["end_time"] = time_or_exit(ctx, end_time, "end time")
    if day_of_week is not None:
        changes["day_of_week"] = DayOfWeek(day_of_week)
    if price is not None:
        changes["price"] = amount_or_exit(ctx, price, "price")
    if duration_in_months is not None:
        changes["duration_in_months"] = duration_in_months
    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        workshop = WorkshopService(ctx.obj["db"]).update_workshop(workshop_id, **changes)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated workshop {workshop_id} ({workshop.code}, ends {workshop.end_date})")


@workshop_group.command("delete")
@click.argument("workshop_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_workshop(ctx, workshop_id: str, yes: bool):
    """Delete a workshop and its registrations."""
    service = WorkshopService(ctx.obj["db"])
    try:
        workshop = service.require_workshop(workshop_id)
        plan = service.plan_workshop_deletion(workshop_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(
        f"Delete workshop '{workshop.name}' and {plan.count(Collection.REGISTRATIONS)} registration(s)?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_workshop(workshop_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted workshop '{workshop.name}'")


def register_commands(cli):
    """Register workshop commands with main CLI."""
    cli.add_command(workshop_group, name="workshop")
