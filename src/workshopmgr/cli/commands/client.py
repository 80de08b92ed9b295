"""Client (parent) and child commands."""

import dataclasses

import click
from workshopmgr.cli.error_handling import handle_domain_error
from workshopmgr.cli.input_parsing import date_or_exit
from workshopmgr.domain.client import ClientService
from workshopmgr.domain.entities import (
    Collection,
    CompanyIdentity,
    ContactInfo,
    IndividualIdentity,
    ParentStatus,
)

STATUS_CHOICE = click.Choice([status.value for status in ParentStatus])


def contact_options(command):
    """Add the contact detail options shared by client commands."""
    for option in reversed(
        [
            click.option("--email", help="Email address"),
            click.option("--phone", help="Phone number"),
            click.option("--address", help="Street address"),
            click.option("--zip", "zip_code", help="ZIP code"),
            click.option("--city", help="City"),
            click.option("--province", help="Province"),
        ]
    ):
        command = option(command)
    return command


@click.group()
def client_group():
    """Manage clients."""
    pass


@client_group.command("add")
@click.option("--company", "is_company", is_flag=True, help="Client is a company (persona giuridica)")
@click.option("--name", help="First name (individuals)")
@click.option("--surname", help="Last name (individuals)")
@click.option("--tax-code", help="Tax code (individuals)")
@click.option("--company-name", help="Company name (companies)")
@click.option("--vat", "vat_number", help="VAT number (companies)")
@contact_options
@click.option("--status", type=STATUS_CHOICE, default=ParentStatus.ACTIVE.value, show_default=True)
@click.pass_context
def add_client(
    ctx,
    is_company: bool,
    name: str | None,
    surname: str | None,
    tax_code: str | None,
    company_name: str | None,
    vat_number: str | None,
    status: str,
    **contact: str | None,
):
    """Add a new client.

    Examples:
        workshopmgr client add --name Anna --surname Rossi --email anna@example.com
        workshopmgr client add --company --company-name "Scuola Arcobaleno" --vat 01234567890 \\
            --email segreteria@example.com
    """
    if is_company:
        identity = CompanyIdentity(company_name=company_name or "", vat_number=vat_number or "")
    else:
        identity = IndividualIdentity(name=name or "", surname=surname or "", tax_code=tax_code)

    try:
        parent_id = ClientService(ctx.obj["db"]).create_parent(
            identity=identity,
            contact=ContactInfo(**{**contact, "email": contact["email"] or ""}),
            status=ParentStatus(status),
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created client '{identity.display_name}' (ID: {parent_id})")


@client_group.command("list")
@click.option("--status", type=STATUS_CHOICE, help="Only clients with this status")
@click.pass_context
def list_clients(ctx, status: str | None):
    """List clients."""
    service = ClientService(ctx.obj["db"])
    parents = service.list_parents(ParentStatus(status) if status else None)
    if not parents:
        click.echo("No clients found.")
        return

    click.echo("\nClients:")
    click.echo("-" * 90)
    for parent in parents:
        click.echo(
            f"{parent.id} | {parent.display_name:30s} | {parent.status.value:9s} | "
            f"{parent.contact.email}"
        )


@client_group.command("show")
@click.argument("parent_id")
@click.pass_context
def show_client(ctx, parent_id: str):
    """Show a client with its children."""
    service = ClientService(ctx.obj["db"])
    try:
        parent = service.require_parent(parent_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"{parent.display_name} ({parent.client_type.value}, {parent.status.value})")
    click.echo(f"  ID: {parent.id}")
    if isinstance(parent.identity, CompanyIdentity):
        click.echo(f"  VAT number: {parent.identity.vat_number}")
    elif parent.identity.tax_code:
        click.echo(f"  Tax code: {parent.identity.tax_code}")
    for field in dataclasses.fields(parent.contact):
        value = getattr(parent.contact, field.name)
        if value:
            click.echo(f"  {field.name.replace('_', ' ').capitalize()}: {value}")

    children = service.list_children(parent_id)
    if children:
        click.echo("  Children:")
        for child in children:
            click.echo(
                f"    {child.id} | {child.name} | born {child.birth_date} "
                f"({service.child_age(child)})"
            )


@client_group.command("update")
@click.argument("parent_id")
@click.option("--name", help="First name (individuals)")
@click.option("--surname", help="Last name (individuals)")
@click.option("--tax-code", help="Tax code (individuals)")
@click.option("--company-name", help="Company name (companies)")
@click.option("--vat", "vat_number", help="VAT number (companies)")
@contact_options
@click.pass_context
def update_client(ctx, parent_id: str, **fields: str | None):
    """Update a client's identity or contact details.

    Only the given fields change; identity fields must match the client type.
    """
    service = ClientService(ctx.obj["db"])
    try:
        parent = service.require_parent(parent_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    given = {name: value for name, value in fields.items() if value is not None}
    identity_changes = {
        name: given.pop(name)
        for name in ("name", "surname", "tax_code", "company_name", "vat_number")
        if name in given
    }

    changes = {}
    if identity_changes:
        try:
            changes["identity"] = dataclasses.replace(parent.identity, **identity_changes)
        except TypeError:
            click.echo(
                f"Error: Options {', '.join(sorted(identity_changes))} do not apply to a "
                f"'{parent.client_type.value}' client",
                err=True,
            )
            ctx.exit(1)
    if given:
        changes["contact"] = dataclasses.replace(parent.contact, **given)
    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        service.update_parent(parent_id, **changes)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated client {parent_id}")


@client_group.command("status")
@click.argument("parent_id")
@click.argument("status", type=STATUS_CHOICE)
@click.pass_context
def set_client_status(ctx, parent_id: str, status: str):
    """Change a client's status."""
    try:
        ClientService(ctx.obj["db"]).set_status(parent_id, ParentStatus(status))
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Client {parent_id} is now '{status}'")


@client_group.command("delete")
@click.argument("parent_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_client(ctx, parent_id: str, yes: bool):
    """Delete a client with its children and their registrations.

    Payments, invoices and quotes of the client are kept.
    """
    service = ClientService(ctx.obj["db"])
    try:
        parent = service.require_parent(parent_id)
        plan = service.plan_parent_deletion(parent_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(
        f"Delete client '{parent.display_name}', {plan.count(Collection.CHILDREN)} child(ren) "
        f"and {plan.count(Collection.REGISTRATIONS)} registration(s)?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_parent(parent_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted client '{parent.display_name}'")


@click.group()
def child_group():
    """Manage children."""
    pass


@child_group.command("add")
@click.argument("parent_id")
@click.argument("name")
@click.option("--birth-date", required=True, help="Birth date (YYYY-MM-DD or DD/MM/YYYY)")
@click.pass_context
def add_child(ctx, parent_id: str, name: str, birth_date: str):
    """Add a child to a client.

    Examples:
        workshopmgr child add 3f2a9c Luca --birth-date 2018-05-12
    """
    born = date_or_exit(ctx, birth_date, "birth date")
    try:
        child_id = ClientService(ctx.obj["db"]).add_child(parent_id, name, born)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Added child '{name}' (ID: {child_id})")


@child_group.command("list")
@click.option("--parent", "parent_id", help="Only children of this client")
@click.pass_context
def list_children(ctx, parent_id: str | None):
    """List children with their age."""
    service = ClientService(ctx.obj["db"])
    children = service.list_children(parent_id)
    if not children:
        click.echo("No children found.")
        return

    parents = {parent.id: parent for parent in service.list_parents()}
    click.echo("\nChildren:")
    click.echo("-" * 80)
    for child in children:
        parent = parents.get(child.parent_id)
        click.echo(
            f"{child.id} | {child.name:20s} | {service.child_age(child):8s} | "
            f"{parent.display_name if parent else '?'}"
        )


@child_group.command("update")
@click.argument("child_id")
@click.option("--name", help="New name")
@click.option("--birth-date", help="New birth date")
@click.option("--parent", "parent_id", help="Move the child to another client")
@click.pass_context
def update_child(ctx, child_id: str, name: str | None, birth_date: str | None, parent_id: str | None):
    """Update a child."""
    changes = {}
    if name is not None:
        changes["name"] = name
    if birth_date is not None:
        changes["birth_date"] = date_or_exit(ctx, birth_date, "birth date")
    if parent_id is not None:
        changes["parent_id"] = parent_id
    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        ClientService(ctx.obj["db"]).update_child(child_id, **changes)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated child {child_id}")


@child_group.command("delete")
@click.argument("child_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_child(ctx, child_id: str, yes: bool):
    """Delete a child and its registrations."""
    service = ClientService(ctx.obj["db"])
    child = service.get_child(child_id)
    if child is None:
        click.echo(f"Error: Child {child_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Delete child '{child.name}' and its registrations?"):
        click.echo("Deletion cancelled.")
        return

    try:
        plan = service.delete_child(child_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(
        f"Deleted child '{child.name}' and {plan.count(Collection.REGISTRATIONS)} registration(s)"
    )


def register_commands(cli):
    """Register client and child commands with main CLI."""
    cli.add_command(client_group, name="client")
    cli.add_command(child_group, name="child")
