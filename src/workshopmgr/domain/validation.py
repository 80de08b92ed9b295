"""Field-level validation helpers.

Validators append messages to a ``FieldErrors`` collector so a form is
rejected once with every problem listed, before any store call is made.
"""

import re
from datetime import date
from decimal import Decimal
from typing import Optional

from workshopmgr.domain.entities import ClientIdentity, CompanyIdentity, ContactInfo
from workshopmgr.domain.errors import ValidationError

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class FieldErrors:
    """Collects validation messages keyed by field name."""

    def __init__(self) -> None:
        self.errors: dict[str, str] = {}

    def add(self, field_name: str, message: str) -> None:
        # Keep the first message per field
        self.errors.setdefault(field_name, message)

    def require(self, field_name: str, value: Optional[str], label: str) -> None:
        if value is None or not str(value).strip():
            self.add(field_name, f"{label} is required")

    def email(self, field_name: str, value: Optional[str], required: bool = True) -> None:
        if value is None or not value.strip():
            if required:
                self.add(field_name, "Email is required")
            return
        if not EMAIL_PATTERN.match(value.strip()):
            self.add(field_name, f"Invalid email address '{value}'")

    def positive(self, field_name: str, value: Optional[Decimal], label: str = "Amount") -> None:
        if value is None or value <= 0:
            self.add(field_name, f"{label} must be greater than zero")

    def non_negative(self, field_name: str, value: Optional[Decimal], label: str) -> None:
        if value is not None and value < 0:
            self.add(field_name, f"{label} cannot be negative")

    def date_order(self, field_name: str, start: Optional[date], end: Optional[date]) -> None:
        if start is not None and end is not None and end < start:
            self.add(field_name, "End date cannot be before start date")

    def raise_if_any(self) -> None:
        """Raise a ValidationError with every collected message."""
        if self.errors:
            raise ValidationError(
                [f"{field_name}: {message}" for field_name, message in self.errors.items()]
            )


def check_identity(errors: FieldErrors, identity: ClientIdentity) -> None:
    """Validate the field set selected by the client type."""
    if isinstance(identity, CompanyIdentity):
        errors.require("company_name", identity.company_name, "Company name")
        errors.require("vat_number", identity.vat_number, "VAT number")
    else:
        errors.require("name", identity.name, "Name")
        errors.require("surname", identity.surname, "Surname")


def check_contact(errors: FieldErrors, contact: ContactInfo) -> None:
    errors.email("email", contact.email)
