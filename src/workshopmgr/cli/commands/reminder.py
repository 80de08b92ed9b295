"""Reminder rule commands."""

import click
from workshopmgr.cli.error_handling import handle_domain_error
from workshopmgr.domain.reminder import (
    DEFAULT_CADENCE_DAYS,
    DEFAULT_PRE_WARNING_DAYS,
    ReminderService,
)


@click.group()
def reminder_group():
    """Manage payment reminder rules."""
    pass


@reminder_group.command("add")
@click.argument("name")
@click.option("--pre-warning-days", type=int, default=DEFAULT_PRE_WARNING_DAYS, show_default=True, help="Days before the due date to start reminding")
@click.option("--cadence", "cadence_days", type=int, default=DEFAULT_CADENCE_DAYS, show_default=True, help="Days between reminders")
@click.option("--disabled", is_flag=True, help="Create the rule switched off")
@click.pass_context
def add_reminder(ctx, name: str, pre_warning_days: int, cadence_days: int, disabled: bool):
    """Create a reminder rule.

    Examples:
        workshopmgr reminder add "Saldo iscrizione" --pre-warning-days 10 --cadence 3
    """
    try:
        reminder_id = ReminderService(ctx.obj["db"]).create_reminder(
            name=name,
            pre_warning_days=pre_warning_days,
            cadence_days=cadence_days,
            enabled=not disabled,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created reminder '{name}' (ID: {reminder_id})")


@reminder_group.command("list")
@click.option("--enabled-only", is_flag=True, help="Hide rules that are switched off")
@click.pass_context
def list_reminders(ctx, enabled_only: bool):
    """List reminder rules."""
    reminders = ReminderService(ctx.obj["db"]).list_reminders(enabled_only=enabled_only)
    if not reminders:
        click.echo("No reminders found.")
        return

    click.echo("\nReminders:")
    click.echo("-" * 80)
    for reminder in reminders:
        state = "on" if reminder.enabled else "off"
        click.echo(
            f"{reminder.id} | {reminder.name:25s} | {reminder.pre_warning_days} days before, "
            f"every {reminder.cadence_days} day(s) | {state}"
        )


@reminder_group.command("update")
@click.argument("reminder_id")
@click.option("--name", help="New name")
@click.option("--pre-warning-days", type=int, help="Days before the due date to start reminding")
@click.option("--cadence", "cadence_days", type=int, help="Days between reminders")
@click.option("--enable/--disable", "enabled", default=None, help="Switch the rule on or off")
@click.pass_context
def update_reminder(ctx, reminder_id: str, **fields):
    """Update a reminder rule."""
    changes = {name: value for name, value in fields.items() if value is not None}
    if not changes:
        click.echo("Nothing to update.")
        return
    try:
        ReminderService(ctx.obj["db"]).update_reminder(reminder_id, **changes)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated reminder {reminder_id}")


@reminder_group.command("delete")
@click.argument("reminder_id")
@click.pass_context
def delete_reminder(ctx, reminder_id: str):
    """Delete a reminder rule."""
    try:
        ReminderService(ctx.obj["db"]).delete_reminder(reminder_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted reminder {reminder_id}")


def register_commands(cli):
    """Register reminder commands with main CLI."""
    cli.add_command(reminder_group, name="reminder")
