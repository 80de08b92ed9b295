"""Payment, cost, quote and invoice commands."""

import click
from workshopmgr.cli.date_filters import period_options, pop_period_flags, resolve_cli_date_range
from workshopmgr.cli.error_handling import handle_domain_error
from workshopmgr.cli.input_parsing import amount_or_exit, date_or_exit, format_money
from workshopmgr.domain.billing import BillingService
from workshopmgr.domain.entities import (
    CompanyIdentity,
    ContactInfo,
    ExistingClient,
    IndividualIdentity,
    PaymentMethod,
    PotentialClient,
    QuoteStatus,
)

METHOD_CHOICE = click.Choice([method.value for method in PaymentMethod])
QUOTE_STATUS_CHOICE = click.Choice([status.value for status in QuoteStatus])


@click.group()
def payment_group():
    """Manage payments."""
    pass


@payment_group.command("add")
@click.argument("parent_id")
@click.argument("amount")
@click.option("--date", "payment_date", default="today", show_default=True, help="Payment date")
@click.option("--method", type=METHOD_CHOICE, default=PaymentMethod.UNSPECIFIED.value, show_default=True)
@click.option("--workshop", "workshop_id", help="Workshop paid for")
@click.option("--description", help="Description, for payments not tied to a workshop")
@click.pass_context
def add_payment(
    ctx,
    parent_id: str,
    amount: str,
    payment_date: str,
    method: str,
    workshop_id: str | None,
    description: str | None,
):
    """Record a payment from a client.

    Examples:
        workshopmgr payment add 3f2a9c 80 --method transfer --workshop 0e9f3b
        workshopmgr payment add 3f2a9c "25,50" --date 15/10/2024 --description "Materiale"
    """
    try:
        payment_id = BillingService(ctx.obj["db"]).record_payment(
            parent_id=parent_id,
            amount=amount_or_exit(ctx, amount),
            payment_date=date_or_exit(ctx, payment_date, "payment date"),
            method=PaymentMethod(method),
            workshop_id=workshop_id,
            description=description,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Recorded payment {payment_id}")


@payment_group.command("list")
@click.option("--client", "parent_id", help="Only payments from this client")
@click.option("--workshop", "workshop_id", help="Only payments for this workshop")
@period_options
@click.pass_context
def list_payments(ctx, parent_id: str | None, workshop_id: str | None, start_date, end_date, **flags):
    """List payments, newest first."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=pop_period_flags(flags)
    )
    payments = BillingService(ctx.obj["db"]).list_payments(
        parent_id=parent_id, workshop_id=workshop_id, start_date=start, end_date=end
    )
    if not payments:
        click.echo("No payments found.")
        return

    click.echo("\nPayments:")
    click.echo("-" * 90)
    for payment in payments:
        click.echo(
            f"{payment.id} | {payment.payment_date} | {format_money(payment.amount):>12s} | "
            f"{payment.method.value:11s} | {payment.description or ''}"
        )


@payment_group.command("delete")
@click.argument("payment_id")
@click.pass_context
def delete_payment(ctx, payment_id: str):
    """Delete a payment."""
    try:
        BillingService(ctx.obj["db"]).delete_payment(payment_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted payment {payment_id}")


@click.group()
def cost_group():
    """Manage operational costs."""
    pass


@cost_group.command("add")
@click.argument("category")
@click.argument("amount")
@click.option("--sub-category", default="", help="Sub-category")
@click.option("--date", "cost_date", default="today", show_default=True, help="Cost date")
@click.option("--method", type=METHOD_CHOICE, default=PaymentMethod.UNSPECIFIED.value, show_default=True)
@click.option("--description", help="Description")
@click.option("--supplier", "supplier_id", help="Supplier ID")
@click.option("--location", "location_id", help="Location ID")
@click.option("--workshop", "workshop_ids", multiple=True, help="Workshop ID (repeatable)")
@click.pass_context
def add_cost(
    ctx,
    category: str,
    amount: str,
    sub_category: str,
    cost_date: str,
    method: str,
    description: str | None,
    supplier_id: str | None,
    location_id: str | None,
    workshop_ids: tuple[str, ...],
):
    """Record an operational cost.

    A cost linked to several workshops is split evenly among them in the
    workshop performance report.

    Examples:
        workshopmgr cost add Affitto 120 --sub-category Palestra --supplier 9b1e04 --workshop 0e9f3b
    """
    try:
        cost_id = BillingService(ctx.obj["db"]).record_cost(
            category=category,
            amount=amount_or_exit(ctx, amount),
            cost_date=date_or_exit(ctx, cost_date, "cost date"),
            sub_category=sub_category,
            method=PaymentMethod(method),
            description=description,
            supplier_id=supplier_id,
            workshop_ids=workshop_ids,
            location_id=location_id,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Recorded cost {cost_id}")


@cost_group.command("list")
@click.option("--supplier", "supplier_id", help="Only costs of this supplier")
@period_options
@click.pass_context
def list_costs(ctx, supplier_id: str | None, start_date, end_date, **flags):
    """List costs, newest first."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=pop_period_flags(flags)
    )
    costs = BillingService(ctx.obj["db"]).list_costs(
        supplier_id=supplier_id, start_date=start, end_date=end
    )
    if not costs:
        click.echo("No costs found.")
        return

    click.echo("\nCosts:")
    click.echo("-" * 90)
    for cost in costs:
        label = f"{cost.category} / {cost.sub_category}" if cost.sub_category else cost.category
        click.echo(f"{cost.id} | {cost.date} | {format_money(cost.amount):>12s} | {label}")


@cost_group.command("delete")
@click.argument("cost_id")
@click.pass_context
def delete_cost(ctx, cost_id: str):
    """Delete a cost."""
    try:
        BillingService(ctx.obj["db"]).delete_cost(cost_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted cost {cost_id}")


@click.group()
def quote_group():
    """Manage quotes."""
    pass


@quote_group.command("add")
@click.argument("description")
@click.argument("amount")
@click.option("--client", "parent_id", help="Existing client ID")
@click.option("--name", help="Prospect first name")
@click.option("--surname", help="Prospect last name")
@click.option("--company-name", help="Prospect company name")
@click.option("--vat", "vat_number", help="Prospect VAT number")
@click.option("--email", help="Prospect email")
@click.option("--phone", help="Prospect phone")
@click.option("--date", "quote_date", default="today", show_default=True, help="Quote date")
@click.option("--method", type=METHOD_CHOICE, help="Expected payment method")
@click.pass_context
def add_quote(
    ctx,
    description: str,
    amount: str,
    parent_id: str | None,
    name: str | None,
    surname: str | None,
    company_name: str | None,
    vat_number: str | None,
    email: str | None,
    phone: str | None,
    quote_date: str,
    method: str | None,
):
    """Create a quote for a client (--client) or a prospect.

    Examples:
        workshopmgr quote add "Festa di compleanno" 150 --client 3f2a9c
        workshopmgr quote add "Laboratorio scuola" 900 --company-name "Scuola Arcobaleno" \\
            --vat 01234567890 --email segreteria@example.com
    """
    if parent_id is not None:
        recipient = ExistingClient(parent_id=parent_id)
    else:
        if company_name is not None:
            identity = CompanyIdentity(company_name=company_name, vat_number=vat_number or "")
        else:
            identity = IndividualIdentity(name=name or "", surname=surname or "")
        recipient = PotentialClient(identity=identity, contact=ContactInfo(email=email or "", phone=phone))

    try:
        quote_id = BillingService(ctx.obj["db"]).create_quote(
            recipient=recipient,
            description=description,
            amount=amount_or_exit(ctx, amount),
            quote_date=date_or_exit(ctx, quote_date, "quote date"),
            method=PaymentMethod(method) if method else None,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created quote {quote_id}")


@quote_group.command("list")
@click.option("--status", type=QUOTE_STATUS_CHOICE, help="Only quotes with this status")
@click.pass_context
def list_quotes(ctx, status: str | None):
    """List quotes, newest first."""
    quotes = BillingService(ctx.obj["db"]).list_quotes(QuoteStatus(status) if status else None)
    if not quotes:
        click.echo("No quotes found.")
        return

    click.echo("\nQuotes:")
    click.echo("-" * 90)
    for quote in quotes:
        click.echo(
            f"{quote.id} | {quote.date} | {format_money(quote.amount):>12s} | "
            f"{quote.status.value:8s} | {quote.description}"
        )


@quote_group.command("status")
@click.argument("quote_id")
@click.argument("status", type=QUOTE_STATUS_CHOICE)
@click.pass_context
def set_quote_status(ctx, quote_id: str, status: str):
    """Mark a quote as sent, approved or rejected."""
    try:
        BillingService(ctx.obj["db"]).set_quote_status(quote_id, QuoteStatus(status))
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Quote {quote_id} is now '{status}'")


@quote_group.command("show")
@click.argument("quote_id")
@click.pass_context
def show_quote(ctx, quote_id: str):
    """Show a quote as it would be printed."""
    try:
        document = BillingService(ctx.obj["db"]).quote_document(quote_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    company = document.company
    if company.company_name:
        click.echo(company.company_name)
        click.echo(f"VAT {company.vat_number} - {company.address}")
        click.echo(f"{company.email} {company.phone}".strip())
        click.echo("")
    click.echo(f"QUOTE {document.quote_id} - {document.date} ({document.status.value})")
    click.echo(f"To: {document.recipient_name} <{document.recipient_contact.email}>")
    click.echo("")
    click.echo(f"{document.description:50s} {format_money(document.totals.base):>12s}")
    if document.totals.has_stamp_duty:
        click.echo(f"{'Stamp duty':50s} {format_money(document.totals.stamp_duty):>12s}")
    click.echo(f"{'Total':50s} {format_money(document.totals.total):>12s}")


@quote_group.command("update")
@click.argument("quote_id")
@click.option("--description", help="New description")
@click.option("--amount", help="New amount")
@click.option("--date", "quote_date", help="New quote date")
@click.option("--method", type=METHOD_CHOICE, help="Expected payment method")
@click.option("--client", "parent_id", help="Address the quote to this existing client")
@click.pass_context
def update_quote(
    ctx,
    quote_id: str,
    description: str | None,
    amount: str | None,
    quote_date: str | None,
    method: str | None,
    parent_id: str | None,
):
    """Update a quote."""
    changes = {}
    if description is not None:
        changes["description"] = description
    if amount is not None:
        changes["amount"] = amount_or_exit(ctx, amount)
    if quote_date is not None:
        changes["date"] = date_or_exit(ctx, quote_date, "quote date")
    if method is not None:
        changes["method"] = PaymentMethod(method)
    if parent_id is not None:
        changes["recipient"] = ExistingClient(parent_id=parent_id)
    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        BillingService(ctx.obj["db"]).update_quote(quote_id, **changes)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated quote {quote_id}")


@quote_group.command("delete")
@click.argument("quote_id")
@click.pass_context
def delete_quote(ctx, quote_id: str):
    """Delete a quote."""
    try:
        BillingService(ctx.obj["db"]).delete_quote(quote_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted quote {quote_id}")


@click.group()
def invoice_group():
    """Manage invoices."""
    pass


@invoice_group.command("add")
@click.argument("parent_id")
@click.argument("amount")
@click.option("--sdi", "sdi_number", required=True, help="SDI number of the electronic invoice")
@click.option("--date", "issue_date", default="today", show_default=True, help="Issue date")
@click.option("--method", type=METHOD_CHOICE, default=PaymentMethod.UNSPECIFIED.value, show_default=True)
@click.pass_context
def add_invoice(ctx, parent_id: str, amount: str, sdi_number: str, issue_date: str, method: str):
    """Register an invoice issued to a client."""
    try:
        invoice_id = BillingService(ctx.obj["db"]).create_invoice(
            parent_id=parent_id,
            amount=amount_or_exit(ctx, amount),
            sdi_number=sdi_number,
            issue_date=date_or_exit(ctx, issue_date, "issue date"),
            method=PaymentMethod(method),
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Registered invoice {invoice_id}")


@invoice_group.command("list")
@click.option("--client", "parent_id", help="Only invoices of this client")
@click.pass_context
def list_invoices(ctx, parent_id: str | None):
    """List invoices, newest first."""
    invoices = BillingService(ctx.obj["db"]).list_invoices(parent_id)
    if not invoices:
        click.echo("No invoices found.")
        return

    click.echo("\nInvoices:")
    click.echo("-" * 80)
    for invoice in invoices:
        click.echo(
            f"{invoice.id} | {invoice.issue_date} | SDI {invoice.sdi_number:15s} | "
            f"{format_money(invoice.amount):>12s}"
        )


@invoice_group.command("update")
@click.argument("invoice_id")
@click.option("--amount", help="New amount")
@click.option("--sdi", "sdi_number", help="New SDI number")
@click.option("--date", "issue_date", help="New issue date")
@click.option("--method", type=METHOD_CHOICE, help="Payment method")
@click.option("--client", "parent_id", help="Client the invoice was issued to")
@click.pass_context
def update_invoice(
    ctx,
    invoice_id: str,
    amount: str | None,
    sdi_number: str | None,
    issue_date: str | None,
    method: str | None,
    parent_id: str | None,
):
    """Update an invoice."""
    changes = {}
    if amount is not None:
        changes["amount"] = amount_or_exit(ctx, amount)
    if sdi_number is not None:
        changes["sdi_number"] = sdi_number
    if issue_date is not None:
        changes["issue_date"] = date_or_exit(ctx, issue_date, "issue date")
    if method is not None:
        changes["method"] = PaymentMethod(method)
    if parent_id is not None:
        changes["parent_id"] = parent_id
    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        BillingService(ctx.obj["db"]).update_invoice(invoice_id, **changes)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated invoice {invoice_id}")


@invoice_group.command("delete")
@click.argument("invoice_id")
@click.pass_context
def delete_invoice(ctx, invoice_id: str):
    """Delete an invoice."""
    try:
        BillingService(ctx.obj["db"]).delete_invoice(invoice_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted invoice {invoice_id}")


def register_commands(cli):
    """Register billing commands with main CLI."""
    cli.add_command(payment_group, name="payment")
    cli.add_command(cost_group, name="cost")
    cli.add_command(quote_group, name="quote")
    cli.add_command(invoice_group, name="invoice")
