"""Payments, operational costs, quotes and invoices."""

import dataclasses
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Optional, Sequence

from workshopmgr.database.base import Database
from workshopmgr.domain.entities import (
    Collection,
    CompanyProfile,
    ContactInfo,
    ExistingClient,
    Invoice,
    OperationalCost,
    Payment,
    PaymentMethod,
    PotentialClient,
    Quote,
    QuoteRecipient,
    QuoteStatus,
)
from workshopmgr.domain.errors import ConflictError, NotFoundError, record_not_found
from workshopmgr.domain.finance import QuoteTotals, filter_by_date, quote_totals
from workshopmgr.domain.validation import FieldErrors, check_contact, check_identity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuoteDocument:
    """Everything a renderer needs to lay out a quote."""

    quote_id: str
    company: CompanyProfile
    recipient_name: str
    recipient_contact: ContactInfo
    is_existing_client: bool
    description: str
    date: date
    status: QuoteStatus
    totals: QuoteTotals


class BillingService:
    """Service for money coming in (payments, invoices, quotes) and going out (costs)."""

    def __init__(self, db: Database):
        """Initialize billing service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require(self, collection: Collection, kind: str, record_id: str):
        record = self.db.get_record(collection, record_id)
        if record is None:
            raise NotFoundError(record_not_found(kind, record_id))
        return record

    # Payments
    def record_payment(
        self,
        parent_id: str,
        amount: Decimal,
        payment_date: date,
        method: PaymentMethod = PaymentMethod.UNSPECIFIED,
        workshop_id: Optional[str] = None,
        description: Optional[str] = None,
    ) -> str:
        """Record a payment received from a client.

        Args:
            parent_id: Paying client
            amount: Amount received (must be positive)
            payment_date: Date of the payment
            method: Payment method
            workshop_id: Workshop paid for; None for other income
            description: Free text, used when no workshop applies

        Returns:
            Payment ID

        Raises:
            NotFoundError: If the client or workshop doesn't exist
            ValidationError: If the amount is not positive
        """
        self._require(Collection.PARENTS, "Client", parent_id)
        if workshop_id is not None:
            self._require(Collection.WORKSHOPS, "Workshop", workshop_id)

        errors = FieldErrors()
        errors.positive("amount", amount)
        errors.raise_if_any()

        payment_id = self.db.add_record(
            Collection.PAYMENTS,
            Payment(
                parent_id=parent_id,
                amount=amount,
                payment_date=payment_date,
                method=method,
                workshop_id=workshop_id,
                description=description,
            ),
        )
        logger.info("Recorded payment %s of %s from client %s", payment_id, amount, parent_id)
        return payment_id

    def list_payments(
        self,
        parent_id: Optional[str] = None,
        workshop_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Payment]:
        """List payments, newest first, with optional filters."""
        payments = [
            payment
            for payment in self.db.list_records(Collection.PAYMENTS)
            if (parent_id is None or payment.parent_id == parent_id)
            and (workshop_id is None or payment.workshop_id == workshop_id)
        ]
        payments = filter_by_date(payments, start_date, end_date, lambda p: p.payment_date)
        return sorted(payments, key=lambda payment: payment.payment_date, reverse=True)

    def update_payment(self, payment_id: str, **changes: Any) -> None:
        """Update payment fields.

        Raises:
            NotFoundError: If the payment doesn't exist
            ValidationError: If the amount is not positive
        """
        self._require(Collection.PAYMENTS, "Payment", payment_id)
        if "amount" in changes:
            errors = FieldErrors()
            errors.positive("amount", changes["amount"])
            errors.raise_if_any()
        self.db.update_record(Collection.PAYMENTS, payment_id, changes)

    def delete_payment(self, payment_id: str) -> None:
        self._require(Collection.PAYMENTS, "Payment", payment_id)
        self.db.remove_record(Collection.PAYMENTS, payment_id)

    # Operational costs
    def record_cost(
        self,
        category: str,
        amount: Decimal,
        cost_date: date,
        sub_category: str = "",
        method: PaymentMethod = PaymentMethod.UNSPECIFIED,
        description: Optional[str] = None,
        supplier_id: Optional[str] = None,
        workshop_ids: Sequence[str] = (),
        location_id: Optional[str] = None,
    ) -> str:
        """Record an operational cost.

        A cost can be linked to a supplier, a location and any number of
        workshops; each link must point at an existing record.

        Returns:
            Cost ID

        Raises:
            NotFoundError: If a linked record doesn't exist
            ValidationError: If category is empty or the amount is not positive
        """
        if supplier_id is not None:
            self._require(Collection.SUPPLIERS, "Supplier", supplier_id)
        if location_id is not None:
            self._require(Collection.LOCATIONS, "Location", location_id)
        workshop_ids = tuple(dict.fromkeys(workshop_ids))
        for workshop_id in workshop_ids:
            self._require(Collection.WORKSHOPS, "Workshop", workshop_id)

        errors = FieldErrors()
        errors.require("category", category, "Category")
        errors.positive("amount", amount)
        errors.raise_if_any()

        cost_id = self.db.add_record(
            Collection.COSTS,
            OperationalCost(
                category=category.strip(),
                sub_category=sub_category.strip(),
                amount=amount,
                date=cost_date,
                method=method,
                description=description,
                supplier_id=supplier_id,
                workshop_ids=workshop_ids,
                location_id=location_id,
            ),
        )
        logger.info("Recorded cost %s of %s (%s)", cost_id, amount, category)
        return cost_id

    def list_costs(
        self,
        supplier_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[OperationalCost]:
        """List costs, newest first, with optional filters."""
        costs = [
            cost
            for cost in self.db.list_records(Collection.COSTS)
            if supplier_id is None or cost.supplier_id == supplier_id
        ]
        costs = filter_by_date(costs, start_date, end_date, lambda cost: cost.date)
        return sorted(costs, key=lambda cost: cost.date, reverse=True)

    def update_cost(self, cost_id: str, **changes: Any) -> None:
        """Update cost fields.

        Raises:
            NotFoundError: If the cost doesn't exist
            ValidationError: If the amount is not positive
        """
        self._require(Collection.COSTS, "Cost", cost_id)
        if "amount" in changes:
            errors = FieldErrors()
            errors.positive("amount", changes["amount"])
            errors.raise_if_any()
        if "workshop_ids" in changes:
            changes["workshop_ids"] = tuple(changes["workshop_ids"])
        self.db.update_record(Collection.COSTS, cost_id, changes)

    def delete_cost(self, cost_id: str) -> None:
        self._require(Collection.COSTS, "Cost", cost_id)
        self.db.remove_record(Collection.COSTS, cost_id)

    # Quotes
    def create_quote(
        self,
        recipient: QuoteRecipient,
        description: str,
        amount: Decimal,
        quote_date: date,
        method: Optional[PaymentMethod] = None,
    ) -> str:
        """Create a quote for an existing client or a prospect.

        Returns:
            Quote ID

        Raises:
            NotFoundError: If an existing-client recipient doesn't exist
            ValidationError: If the description, amount or prospect details are invalid
        """
        self._check_quote(recipient, description, amount)

        quote_id = self.db.add_record(
            Collection.QUOTES,
            Quote(
                recipient=recipient,
                description=description.strip(),
                amount=amount,
                date=quote_date,
                method=method,
            ),
        )
        logger.info("Created quote %s for %s", quote_id, amount)
        return quote_id

    def _check_quote(self, recipient: QuoteRecipient, description: str, amount: Decimal) -> None:
        errors = FieldErrors()
        if isinstance(recipient, ExistingClient):
            self._require(Collection.PARENTS, "Client", recipient.parent_id)
        else:
            check_identity(errors, recipient.identity)
            check_contact(errors, recipient.contact)
        errors.require("description", description, "Description")
        errors.positive("amount", amount)
        errors.raise_if_any()

    def get_quote(self, quote_id: str) -> Quote:
        """Get quote by ID.

        Raises:
            NotFoundError: If the quote doesn't exist
        """
        return self._require(Collection.QUOTES, "Quote", quote_id)

    def list_quotes(self, status: Optional[QuoteStatus] = None) -> list[Quote]:
        """List quotes, newest first, optionally by status."""
        quotes = [
            quote
            for quote in self.db.list_records(Collection.QUOTES)
            if status is None or quote.status == status
        ]
        return sorted(quotes, key=lambda quote: quote.date, reverse=True)

    def update_quote(self, quote_id: str, **changes: Any) -> None:
        """Update quote fields.

        The updated quote is checked like a new one: the amount must stay
        positive and the recipient must be an existing client or a prospect
        with valid details.

        Raises:
            NotFoundError: If the quote or the new client doesn't exist
            ValidationError: If the resulting quote is invalid
        """
        current = self.get_quote(quote_id)
        if isinstance(changes.get("description"), str):
            changes["description"] = changes["description"].strip()
        updated = dataclasses.replace(current, **changes)
        self._check_quote(updated.recipient, updated.description, updated.amount)
        self.db.update_record(Collection.QUOTES, quote_id, changes)
        logger.info("Updated quote %s", quote_id)

    def set_quote_status(self, quote_id: str, status: QuoteStatus) -> None:
        """Mark a quote as sent, approved or rejected."""
        self.get_quote(quote_id)
        self.db.update_record(Collection.QUOTES, quote_id, {"status": status})
        logger.info("Quote %s is now %s", quote_id, status.value)

    def delete_quote(self, quote_id: str) -> None:
        self.get_quote(quote_id)
        self.db.remove_record(Collection.QUOTES, quote_id)

    def quote_document(self, quote_id: str) -> QuoteDocument:
        """Structured data for rendering a quote.

        The recipient is resolved to a name and contact details, and totals
        include the stamp duty when the amount is above the threshold.

        Raises:
            NotFoundError: If the quote or its client doesn't exist
        """
        quote = self.get_quote(quote_id)
        if isinstance(quote.recipient, PotentialClient):
            identity = quote.recipient.identity
            contact = quote.recipient.contact
        else:
            parent = self._require(Collection.PARENTS, "Client", quote.recipient.parent_id)
            identity = parent.identity
            contact = parent.contact

        return QuoteDocument(
            quote_id=quote.id,
            company=self.db.get_company_profile() or CompanyProfile(),
            recipient_name=identity.display_name,
            recipient_contact=contact,
            is_existing_client=isinstance(quote.recipient, ExistingClient),
            description=quote.description,
            date=quote.date,
            status=quote.status,
            totals=quote_totals(quote.amount),
        )

    # Invoices
    def create_invoice(
        self,
        parent_id: str,
        amount: Decimal,
        sdi_number: str,
        issue_date: date,
        method: PaymentMethod = PaymentMethod.UNSPECIFIED,
    ) -> str:
        """Register an electronic invoice issued to a client.

        Returns:
            Invoice ID

        Raises:
            NotFoundError: If the client doesn't exist
            ValidationError: If the SDI number is empty or the amount is not positive
            ConflictError: If the SDI number is already registered
        """
        sdi_number = self._check_invoice(parent_id, amount, sdi_number)

        invoice_id = self.db.add_record(
            Collection.INVOICES,
            Invoice(
                parent_id=parent_id,
                amount=amount,
                sdi_number=sdi_number,
                issue_date=issue_date,
                method=method,
            ),
        )
        logger.info("Registered invoice %s (SDI %s)", invoice_id, sdi_number)
        return invoice_id

    def _check_invoice(
        self, parent_id: str, amount: Decimal, sdi_number: str, invoice_id: Optional[str] = None
    ) -> str:
        """Validate invoice fields and return the stripped SDI number.

        The SDI number must not belong to any invoice other than ``invoice_id``.
        """
        self._require(Collection.PARENTS, "Client", parent_id)

        errors = FieldErrors()
        errors.require("sdi_number", sdi_number, "SDI number")
        errors.positive("amount", amount)
        errors.raise_if_any()

        sdi_number = sdi_number.strip()
        if any(
            invoice.sdi_number == sdi_number and invoice.id != invoice_id
            for invoice in self.list_invoices()
        ):
            raise ConflictError(f"Invoice with SDI number '{sdi_number}' already exists")
        return sdi_number

    def get_invoice(self, invoice_id: str) -> Invoice:
        """Get invoice by ID.

        Raises:
            NotFoundError: If the invoice doesn't exist
        """
        return self._require(Collection.INVOICES, "Invoice", invoice_id)

    def list_invoices(self, parent_id: Optional[str] = None) -> list[Invoice]:
        """List invoices, newest first."""
        invoices = [
            invoice
            for invoice in self.db.list_records(Collection.INVOICES)
            if parent_id is None or invoice.parent_id == parent_id
        ]
        return sorted(invoices, key=lambda invoice: invoice.issue_date, reverse=True)

    def update_invoice(self, invoice_id: str, **changes: Any) -> None:
        """Update invoice fields.

        Raises:
            NotFoundError: If the invoice or the new client doesn't exist
            ValidationError: If the amount is not positive or the SDI number is empty
            ConflictError: If the SDI number belongs to another invoice
        """
        current = self.get_invoice(invoice_id)
        updated = dataclasses.replace(current, **changes)
        sdi_number = self._check_invoice(
            updated.parent_id, updated.amount, updated.sdi_number, invoice_id
        )
        if "sdi_number" in changes:
            changes["sdi_number"] = sdi_number
        self.db.update_record(Collection.INVOICES, invoice_id, changes)
        logger.info("Updated invoice %s", invoice_id)

    def delete_invoice(self, invoice_id: str) -> None:
        self._require(Collection.INVOICES, "Invoice", invoice_id)
        self.db.remove_record(Collection.INVOICES, invoice_id)
