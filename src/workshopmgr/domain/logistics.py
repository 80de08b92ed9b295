"""Supplier and location domain service."""

import logging
from decimal import Decimal
from typing import Any, Optional

from workshopmgr.database.base import Database
from workshopmgr.domain.entities import Collection, Location, Supplier
from workshopmgr.domain.errors import (
    DependencyError,
    NotFoundError,
    location_delete_blocked,
    record_not_found,
    supplier_delete_blocked,
)
from workshopmgr.domain.scheduling import consonant_short_name
from workshopmgr.domain.validation import FieldErrors

logger = logging.getLogger(__name__)


class LogisticsService:
    """Service for managing suppliers and the locations they operate."""

    def __init__(self, db: Database):
        """Initialize logistics service.

        Args:
            db: Database instance
        """
        self.db = db

    # Suppliers
    def create_supplier(
        self,
        name: str,
        vat_number: Optional[str] = None,
        contact: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> str:
        """Create a new supplier.

        Returns:
            Supplier ID

        Raises:
            ValidationError: If the name is empty or the email is malformed
        """
        errors = FieldErrors()
        errors.require("name", name, "Name")
        errors.email("email", email, required=False)
        errors.raise_if_any()

        return self.db.add_record(
            Collection.SUPPLIERS,
            Supplier(name=name.strip(), vat_number=vat_number, contact=contact, email=email, phone=phone),
        )

    def get_supplier(self, supplier_id: str) -> Optional[Supplier]:
        """Get supplier by ID."""
        return self.db.get_record(Collection.SUPPLIERS, supplier_id)

    def list_suppliers(self) -> list[Supplier]:
        """List suppliers sorted by name."""
        return sorted(
            self.db.list_records(Collection.SUPPLIERS), key=lambda supplier: supplier.name.lower()
        )

    def update_supplier(self, supplier_id: str, **changes: Any) -> None:
        """Update supplier fields.

        Raises:
            NotFoundError: If the supplier doesn't exist
            ValidationError: If the name becomes empty
        """
        if self.get_supplier(supplier_id) is None:
            raise NotFoundError(record_not_found("Supplier", supplier_id))
        if "name" in changes:
            errors = FieldErrors()
            errors.require("name", changes["name"], "Name")
            errors.raise_if_any()
        self.db.update_record(Collection.SUPPLIERS, supplier_id, changes)

    def delete_supplier(self, supplier_id: str) -> None:
        """Delete a supplier.

        Raises:
            NotFoundError: If the supplier doesn't exist
            DependencyError: If locations are still attached to it
        """
        if self.get_supplier(supplier_id) is None:
            raise NotFoundError(record_not_found("Supplier", supplier_id))

        location_count = len(self.list_locations(supplier_id=supplier_id))
        if location_count > 0:
            logger.warning("Refused to delete supplier %s with locations", supplier_id)
            raise DependencyError(supplier_delete_blocked(supplier_id, location_count))

        self.db.remove_record(Collection.SUPPLIERS, supplier_id)

    # Locations
    def create_location(
        self,
        supplier_id: str,
        name: str,
        address: str,
        capacity: int,
        rental_cost: Optional[Decimal] = None,
        **details: Any,
    ) -> str:
        """Create a new location.

        The short name is derived from the location name.

        Returns:
            Location ID

        Raises:
            NotFoundError: If the supplier doesn't exist
            ValidationError: If name/address are empty or capacity is not positive
        """
        if self.get_supplier(supplier_id) is None:
            raise NotFoundError(record_not_found("Supplier", supplier_id))

        errors = FieldErrors()
        errors.require("name", name, "Name")
        errors.require("address", address, "Address")
        if capacity is None or capacity <= 0:
            errors.add("capacity", "Capacity must be a positive number")
        errors.non_negative("rental_cost", rental_cost, "Rental cost")
        errors.raise_if_any()

        return self.db.add_record(
            Collection.LOCATIONS,
            Location(
                supplier_id=supplier_id,
                name=name.strip(),
                short_name=consonant_short_name(name),
                address=address.strip(),
                capacity=capacity,
                rental_cost=rental_cost,
                **details,
            ),
        )

    def get_location(self, location_id: str) -> Optional[Location]:
        """Get location by ID."""
        return self.db.get_record(Collection.LOCATIONS, location_id)

    def list_locations(self, supplier_id: Optional[str] = None) -> list[Location]:
        """List locations sorted by name, optionally for one supplier."""
        locations = [
            location
            for location in self.db.list_records(Collection.LOCATIONS)
            if supplier_id is None or location.supplier_id == supplier_id
        ]
        return sorted(locations, key=lambda location: location.name.lower())

    def update_location(self, location_id: str, **changes: Any) -> None:
        """Update location fields, re-deriving the short name on rename.

        Raises:
            NotFoundError: If the location or new supplier doesn't exist
            ValidationError: If capacity is not positive
        """
        if self.get_location(location_id) is None:
            raise NotFoundError(record_not_found("Location", location_id))
        if "supplier_id" in changes and self.get_supplier(changes["supplier_id"]) is None:
            raise NotFoundError(record_not_found("Supplier", changes["supplier_id"]))

        errors = FieldErrors()
        if "capacity" in changes and (changes["capacity"] is None or changes["capacity"] <= 0):
            errors.add("capacity", "Capacity must be a positive number")
        if "name" in changes:
            errors.require("name", changes["name"], "Name")
        errors.raise_if_any()

        if "name" in changes:
            changes = {**changes, "short_name": consonant_short_name(changes["name"])}
        self.db.update_record(Collection.LOCATIONS, location_id, changes)

    def delete_location(self, location_id: str) -> None:
        """Delete a location.

        Raises:
            NotFoundError: If the location doesn't exist
            DependencyError: If workshops are scheduled there
        """
        if self.get_location(location_id) is None:
            raise NotFoundError(record_not_found("Location", location_id))

        workshop_count = sum(
            1
            for workshop in self.db.list_records(Collection.WORKSHOPS)
            if workshop.location_id == location_id
        )
        if workshop_count > 0:
            logger.warning("Refused to delete location %s used by workshops", location_id)
            raise DependencyError(location_delete_blocked(location_id, workshop_count))

        self.db.remove_record(Collection.LOCATIONS, location_id)
