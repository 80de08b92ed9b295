"""Company profile commands."""

import click
from workshopmgr.cli.error_handling import handle_domain_error
from workshopmgr.domain.company import CompanyService


@click.group()
def company_group():
    """Manage the company profile."""
    pass


@company_group.command("show")
@click.pass_context
def show_company(ctx):
    """Show the company profile."""
    profile = CompanyService(ctx.obj["db"]).get_profile()
    if not profile.company_name:
        click.echo("Company profile not set. Use 'workshopmgr company set' to create it.")
        return

    click.echo(f"Company:    {profile.company_name}")
    click.echo(f"VAT number: {profile.vat_number}")
    click.echo(f"Address:    {profile.address}")
    click.echo(f"Email:      {profile.email}")
    click.echo(f"Phone:      {profile.phone}")
    click.echo(f"Tax regime: {profile.tax_regime}")


@company_group.command("set")
@click.option("--name", "company_name", help="Company name")
@click.option("--vat", "vat_number", help="VAT number")
@click.option("--address", help="Registered address")
@click.option("--email", help="Contact email")
@click.option("--phone", help="Contact phone")
@click.option("--tax-regime", help="Tax regime (e.g. 'forfettario')")
@click.pass_context
def set_company(ctx, **fields: str | None):
    """Update company profile fields.

    Only the given fields change. Name, VAT number, address and email are
    required once the profile is saved.

    Examples:
        workshopmgr company set --name "Piccoli Esploratori" --vat 01234567890 \\
            --address "Via Roma 1, Milano" --email info@example.com
    """
    changes = {name: value for name, value in fields.items() if value is not None}
    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        profile = CompanyService(ctx.obj["db"]).update_profile(**changes)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated company profile for '{profile.company_name}'")


def register_commands(cli):
    """Register company commands with main CLI."""
    cli.add_command(company_group, name="company")
