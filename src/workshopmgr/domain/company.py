"""Company profile domain service."""

import dataclasses
import logging

from workshopmgr.database.base import Database
from workshopmgr.domain.entities import CompanyProfile
from workshopmgr.domain.validation import FieldErrors

logger = logging.getLogger(__name__)


class CompanyService:
    """Service for the singleton company profile."""

    def __init__(self, db: Database):
        """Initialize company service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_profile(self) -> CompanyProfile:
        """Get the company profile; an empty one if never saved."""
        return self.db.get_company_profile() or CompanyProfile()

    def update_profile(self, **changes: str) -> CompanyProfile:
        """Update some profile fields.

        Returns:
            The saved profile

        Raises:
            ValidationError: If required fields end up empty or the email is invalid
        """
        profile = dataclasses.replace(self.get_profile(), **changes)

        errors = FieldErrors()
        errors.require("company_name", profile.company_name, "Company name")
        errors.require("vat_number", profile.vat_number, "VAT number")
        errors.require("address", profile.address, "Address")
        errors.email("email", profile.email)
        errors.raise_if_any()

        self.db.save_company_profile(profile)
        logger.info("Company profile updated: %s", ", ".join(sorted(changes)))
        return profile
