"""CLI helpers turning option strings into values, or exiting with an error.

This keeps error messaging and exit behavior consistent across commands.
"""

from datetime import date, time
from decimal import Decimal

import click

from workshopmgr.utils.amount_parser import parse_amount
from workshopmgr.utils.date_parser import parse_date, parse_time


def date_or_exit(ctx: click.Context, value: str, label: str = "date") -> date:
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def time_or_exit(ctx: click.Context, value: str, label: str = "time") -> time:
    try:
        return parse_time(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def amount_or_exit(ctx: click.Context, value: str, label: str = "amount") -> Decimal:
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label} format: {e}", err=True)
        ctx.exit(1)


def format_money(amount: Decimal | None) -> str:
    """Euro amount with two decimals, e.g. "€1,234.50"."""
    if amount is None:
        return "-"
    return f"€{amount:,.2f}"
