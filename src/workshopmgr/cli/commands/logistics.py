"""Supplier and location commands."""

import click
from workshopmgr.cli.error_handling import handle_domain_error
from workshopmgr.cli.input_parsing import amount_or_exit, format_money
from workshopmgr.domain.logistics import LogisticsService


@click.group()
def supplier_group():
    """Manage suppliers."""
    pass


@supplier_group.command("add")
@click.argument("name")
@click.option("--vat", "vat_number", help="VAT number")
@click.option("--contact", help="Contact person")
@click.option("--email", help="Email address")
@click.option("--phone", help="Phone number")
@click.pass_context
def add_supplier(ctx, name: str, vat_number: str | None, contact: str | None, email: str | None, phone: str | None):
    """Add a supplier.

    Examples:
        workshopmgr supplier add "Comune di Milano" --email sport@example.com
    """
    try:
        supplier_id = LogisticsService(ctx.obj["db"]).create_supplier(
            name=name, vat_number=vat_number, contact=contact, email=email, phone=phone
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created supplier '{name}' (ID: {supplier_id})")


@supplier_group.command("list")
@click.pass_context
def list_suppliers(ctx):
    """List suppliers."""
    suppliers = LogisticsService(ctx.obj["db"]).list_suppliers()
    if not suppliers:
        click.echo("No suppliers found.")
        return

    click.echo("\nSuppliers:")
    click.echo("-" * 80)
    for supplier in suppliers:
        click.echo(f"{supplier.id} | {supplier.name:25s} | {supplier.email or ''}")


@supplier_group.command("update")
@click.argument("supplier_id")
@click.option("--name", help="New name")
@click.option("--vat", "vat_number", help="VAT number")
@click.option("--contact", help="Contact person")
@click.option("--email", help="Email address")
@click.option("--phone", help="Phone number")
@click.pass_context
def update_supplier(ctx, supplier_id: str, **fields: str | None):
    """Update a supplier."""
    changes = {name: value for name, value in fields.items() if value is not None}
    if not changes:
        click.echo("Nothing to update.")
        return
    try:
        LogisticsService(ctx.obj["db"]).update_supplier(supplier_id, **changes)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated supplier {supplier_id}")


@supplier_group.command("delete")
@click.argument("supplier_id")
@click.pass_context
def delete_supplier(ctx, supplier_id: str):
    """Delete a supplier.

    The supplier can only be deleted once none of its locations remain.
    """
    try:
        LogisticsService(ctx.obj["db"]).delete_supplier(supplier_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted supplier {supplier_id}")


@click.group()
def location_group():
    """Manage locations."""
    pass


@location_group.command("add")
@click.argument("supplier_id")
@click.argument("name")
@click.option("--address", required=True, help="Street address")
@click.option("--capacity", required=True, type=int, help="Maximum participants")
@click.option("--zip", "zip_code", help="ZIP code")
@click.option("--city", help="City")
@click.option("--province", help="Province")
@click.option("--rental-cost", help="Rental cost per session")
@click.option("--distance-km", help="Distance from base in km")
@click.option("--color", help="Calendar color (e.g. #ffcc00)")
@click.pass_context
def add_location(
    ctx,
    supplier_id: str,
    name: str,
    address: str,
    capacity: int,
    zip_code: str | None,
    city: str | None,
    province: str | None,
    rental_cost: str | None,
    distance_km: str | None,
    color: str | None,
):
    """Add a location run by a supplier.

    Examples:
        workshopmgr location add 9b1e04 "Palestra Comunale" --address "Via Verdi 3" --capacity 12
    """
    try:
        location_id = LogisticsService(ctx.obj["db"]).create_location(
            supplier_id=supplier_id,
            name=name,
            address=address,
            capacity=capacity,
            rental_cost=amount_or_exit(ctx, rental_cost, "rental cost") if rental_cost else None,
            distance_km=amount_or_exit(ctx, distance_km, "distance") if distance_km else None,
            zip_code=zip_code,
            city=city,
            province=province,
            color=color,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created location '{name}' (ID: {location_id})")


@location_group.command("list")
@click.option("--supplier", "supplier_id", help="Only locations of this supplier")
@click.pass_context
def list_locations(ctx, supplier_id: str | None):
    """List locations."""
    locations = LogisticsService(ctx.obj["db"]).list_locations(supplier_id)
    if not locations:
        click.echo("No locations found.")
        return

    click.echo("\nLocations:")
    click.echo("-" * 100)
    for location in locations:
        click.echo(
            f"{location.id} | {location.short_name:4s} | {location.name:25s} | "
            f"capacity {location.capacity:3d} | rent {format_money(location.rental_cost)}"
        )


@location_group.command("update")
@click.argument("location_id")
@click.option("--name", help="New name (the short name follows)")
@click.option("--address", help="Street address")
@click.option("--capacity", type=int, help="Maximum participants")
@click.option("--supplier", "supplier_id", help="Move to another supplier")
@click.option("--rental-cost", help="Rental cost per session")
@click.option("--color", help="Calendar color")
@click.pass_context
def update_location(
    ctx,
    location_id: str,
    rental_cost: str | None,
    **fields,
):
    """Update a location."""
    changes = {name: value for name, value in fields.items() if value is not None}
    if rental_cost is not None:
        changes["rental_cost"] = amount_or_exit(ctx, rental_cost, "rental cost")
    if not changes:
        click.echo("Nothing to update.")
        return
    try:
        LogisticsService(ctx.obj["db"]).update_location(location_id, **changes)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated location {location_id}")


@location_group.command("delete")
@click.argument("location_id")
@click.pass_context
def delete_location(ctx, location_id: str):
    """Delete a location.

    The location can only be deleted once no workshop uses it.
    """
    try:
        LogisticsService(ctx.obj["db"]).delete_location(location_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted location {location_id}")


def register_commands(cli):
    """Register supplier and location commands with main CLI."""
    cli.add_command(supplier_group, name="supplier")
    cli.add_command(location_group, name="location")
