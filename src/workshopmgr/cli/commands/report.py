"""Dashboard and report commands."""

import click
from workshopmgr.cli.date_filters import period_options, pop_period_flags, resolve_cli_date_range
from workshopmgr.cli.input_parsing import format_money
from workshopmgr.domain.entities import PaymentMethod
from workshopmgr.domain.reports import REPORT_NAMES, ReportService


@click.group()
def report_group():
    """Dashboards and financial reports."""
    pass


@report_group.command("dashboard")
@click.pass_context
def show_dashboard(ctx):
    """Show headline figures for today."""
    dashboard = ReportService(ctx.obj["db"]).dashboard()

    click.echo("\nDashboard")
    click.echo("=" * 50)
    click.echo(f"Active workshops:      {dashboard.active_workshops}")
    click.echo(f"Active clients:        {dashboard.active_clients}")
    click.echo(f"Children:              {dashboard.children}")
    click.echo(f"Registrations:         {dashboard.registrations}")
    click.echo("-" * 50)
    click.echo(f"Revenue this month:    {format_money(dashboard.revenue_this_month)}")
    click.echo(f"Revenue this quarter:  {format_money(dashboard.revenue_this_quarter)}")
    click.echo(f"Revenue this year:     {format_money(dashboard.revenue_this_year)}")
    click.echo(f"Costs this month:      {format_money(dashboard.costs_this_month)}")
    click.echo(f"Costs this year:       {format_money(dashboard.costs_this_year)}")
    click.echo(f"Net profit (all time): {format_money(dashboard.net_profit)}")
    click.echo(f"Quote conversion:      {dashboard.quote_conversion_rate:.1f}%")
    click.echo("-" * 50)
    for method in PaymentMethod:
        amount = dashboard.payment_methods.by_method[method]
        click.echo(f"  {method.value:20s} {format_money(amount):>14s}")
    click.echo(f"  {'total':20s} {format_money(dashboard.payment_methods.grand_total):>14s}")


@report_group.command("show")
@click.argument("report", type=click.Choice(REPORT_NAMES))
@period_options
@click.option(
    "--csv",
    "csv_path",
    type=click.Path(dir_okay=False),
    help="Also write the table to this CSV file",
)
@click.pass_context
def show_report(ctx, report: str, start_date, end_date, csv_path: str | None, **flags):
    """Show a report table, optionally exporting it to CSV.

    Payments and costs are limited to the selected period.

    \b
    Reports:
        methods          Payments by method
        cost-categories  Top 5 costs by category
        workshops        Top 5 payments by workshop
        suppliers        Top 5 costs by supplier
        locations        Revenue by location
        monthly          Revenue and costs per month
        performance      Revenue and profit per participant

    Examples:
        workshopmgr report show methods --this-month
        workshopmgr report show monthly --this-year --csv monthly.csv
    """
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=pop_period_flags(flags)
    )
    service = ReportService(ctx.obj["db"])
    table = service.build_table(report, start_date=start, end_date=end)

    click.echo(f"\n{table.title}")
    if start or end:
        click.echo(f"Period: {start or '...'} to {end or '...'}")
    widths = [
        max([len(header)] + [len(row[index]) for row in table.rows])
        for index, header in enumerate(table.headers)
    ]
    click.echo(" | ".join(header.ljust(width) for header, width in zip(table.headers, widths)))
    click.echo("-+-".join("-" * width for width in widths))
    if not table.rows:
        click.echo("No data for this period.")
    for row in table.rows:
        click.echo(" | ".join(cell.ljust(width) for cell, width in zip(row, widths)))

    if report == "performance":
        _, revenue_stats, profit_stats = service.workshop_performance(start, end)
        for label, stats in (("Revenue", revenue_stats), ("Profit", profit_stats)):
            if stats is not None:
                click.echo(
                    f"{label} per participant: min {format_money(stats.minimum)}, "
                    f"avg {format_money(stats.average)}, max {format_money(stats.maximum)}"
                )

    if csv_path:
        path = service.export_csv(table, csv_path)
        click.echo(f"\nExported {len(table.rows)} row(s) to {path}")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
