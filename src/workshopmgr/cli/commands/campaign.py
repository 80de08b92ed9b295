"""Campaign commands."""

import click
from workshopmgr.cli.error_handling import handle_domain_error
from workshopmgr.domain.campaign import CLIENT_NAME_PLACEHOLDER, CampaignService
from workshopmgr.domain.entities import CampaignType, ParentStatus

TYPE_CHOICE = click.Choice([campaign_type.value for campaign_type in CampaignType])
STATUS_CHOICE = click.Choice([status.value for status in ParentStatus])


@click.group()
def campaign_group():
    """Manage reminder and marketing campaigns."""
    pass


@campaign_group.command("add")
@click.argument("name")
@click.option("--type", "campaign_type", type=TYPE_CHOICE, required=True, help="Campaign type")
@click.option("--subject", required=True, help="Message subject")
@click.option("--body", required=True, help=f"Message body; {CLIENT_NAME_PLACEHOLDER} is replaced by the client name")
@click.option("--target", "targets", type=STATUS_CHOICE, multiple=True, help="Client status to target (repeatable; default all)")
@click.pass_context
def add_campaign(ctx, name: str, campaign_type: str, subject: str, body: str, targets: tuple[str, ...]):
    """Create a campaign template.

    Examples:
        workshopmgr campaign add "Rinnovo" --type sollecito --subject "Iscrizioni aperte" \\
            --body "Ciao {NOME_CLIENTE}, le iscrizioni sono aperte!" --target attivo
    """
    try:
        campaign_id = CampaignService(ctx.obj["db"]).create_campaign(
            name=name,
            campaign_type=CampaignType(campaign_type),
            subject=subject,
            body=body,
            target_statuses=[ParentStatus(target) for target in targets],
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created campaign '{name}' (ID: {campaign_id})")


@campaign_group.command("list")
@click.pass_context
def list_campaigns(ctx):
    """List campaigns."""
    campaigns = CampaignService(ctx.obj["db"]).list_campaigns()
    if not campaigns:
        click.echo("No campaigns found.")
        return

    click.echo("\nCampaigns:")
    click.echo("-" * 80)
    for campaign in campaigns:
        targets = ", ".join(status.value for status in campaign.target_statuses) or "all"
        click.echo(
            f"{campaign.id} | ({campaign.campaign_type.value}) {campaign.name:25s} | targets: {targets}"
        )


@campaign_group.command("preview")
@click.argument("campaign_id")
@click.option("--client", "parent_ids", multiple=True, help="Preview for this client only (repeatable)")
@click.pass_context
def preview_campaign(ctx, campaign_id: str, parent_ids: tuple[str, ...]):
    """Show the messages a campaign would send."""
    try:
        messages = CampaignService(ctx.obj["db"]).preview(campaign_id, list(parent_ids) or None)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not messages:
        click.echo("No recipients.")
        return
    for message in messages:
        click.echo(f"To: {message.email}")
        click.echo(f"Subject: {message.subject}")
        click.echo(message.body)
        click.echo("-" * 60)


@campaign_group.command("send")
@click.argument("campaign_id")
@click.option("--client", "parent_ids", multiple=True, help="Send to this client only (repeatable)")
@click.pass_context
def send_campaign(ctx, campaign_id: str, parent_ids: tuple[str, ...]):
    """Send a campaign (simulated: messages are written to the log)."""
    try:
        messages = CampaignService(ctx.obj["db"]).send(campaign_id, list(parent_ids) or None)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Sent {len(messages)} message(s) (simulated)")


@campaign_group.command("delete")
@click.argument("campaign_id")
@click.pass_context
def delete_campaign(ctx, campaign_id: str):
    """Delete a campaign."""
    try:
        CampaignService(ctx.obj["db"]).delete_campaign(campaign_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted campaign {campaign_id}")


def register_commands(cli):
    """Register campaign commands with main CLI."""
    cli.add_command(campaign_group, name="campaign")
