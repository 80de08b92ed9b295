"""Client (parent) and child domain service."""

import logging
from datetime import date
from typing import Any, Optional

from workshopmgr.database.base import Database
from workshopmgr.domain.age import format_age
from workshopmgr.domain.cascade import (
    DeletePlan,
    plan_child_deletion,
    plan_parent_deletion,
)
from workshopmgr.domain.entities import (
    Child,
    ClientIdentity,
    Collection,
    ContactInfo,
    Parent,
    ParentStatus,
)
from workshopmgr.domain.errors import NotFoundError, record_not_found
from workshopmgr.domain.validation import FieldErrors, check_contact, check_identity

logger = logging.getLogger(__name__)


class ClientService:
    """Service for managing parents and their children."""

    def __init__(self, db: Database):
        """Initialize client service.

        Args:
            db: Database instance
        """
        self.db = db

    # Parents
    def create_parent(
        self,
        identity: ClientIdentity,
        contact: ContactInfo,
        status: ParentStatus = ParentStatus.ACTIVE,
    ) -> str:
        """Create a new client.

        Args:
            identity: Individual or company identity
            contact: Contact details
            status: Client status

        Returns:
            Parent ID

        Raises:
            ValidationError: If identity or contact fields are invalid
        """
        errors = FieldErrors()
        check_identity(errors, identity)
        check_contact(errors, contact)
        errors.raise_if_any()

        parent_id = self.db.add_record(
            Collection.PARENTS, Parent(identity=identity, contact=contact, status=status)
        )
        logger.info("Created client %s (%s)", parent_id, identity.client_type.value)
        return parent_id

    def get_parent(self, parent_id: str) -> Optional[Parent]:
        """Get a client by ID."""
        return self.db.get_record(Collection.PARENTS, parent_id)

    def require_parent(self, parent_id: str) -> Parent:
        """Get a client by ID.

        Raises:
            NotFoundError: If the client doesn't exist
        """
        parent = self.get_parent(parent_id)
        if parent is None:
            raise NotFoundError(record_not_found("Client", parent_id))
        return parent

    def list_parents(self, status: Optional[ParentStatus] = None) -> list[Parent]:
        """List clients sorted by display name, optionally filtered by status."""
        parents = [
            parent
            for parent in self.db.list_records(Collection.PARENTS)
            if status is None or parent.status == status
        ]
        return sorted(parents, key=lambda parent: parent.display_name.lower())

    def update_parent(self, parent_id: str, **changes: Any) -> None:
        """Update client fields (identity, contact, status).

        Raises:
            NotFoundError: If the client doesn't exist
            ValidationError: If the resulting identity or contact is invalid
        """
        parent = self.require_parent(parent_id)
        errors = FieldErrors()
        check_identity(errors, changes.get("identity", parent.identity))
        check_contact(errors, changes.get("contact", parent.contact))
        errors.raise_if_any()

        self.db.update_record(Collection.PARENTS, parent_id, changes)

    def set_status(self, parent_id: str, status: ParentStatus) -> None:
        """Change a client's status."""
        self.require_parent(parent_id)
        self.db.update_record(Collection.PARENTS, parent_id, {"status": status})

    def plan_parent_deletion(self, parent_id: str) -> DeletePlan:
        """Everything removed along with a client."""
        self.require_parent(parent_id)
        return plan_parent_deletion(
            parent_id,
            self.db.list_records(Collection.CHILDREN),
            self.db.list_records(Collection.REGISTRATIONS),
        )

    def delete_parent(self, parent_id: str) -> DeletePlan:
        """Delete a client with its children and their registrations.

        Payments, invoices and quotes are kept as accounting history.

        Returns:
            The executed plan
        """
        plan = self.plan_parent_deletion(parent_id)
        self.db.remove_records(plan.steps)
        logger.info(
            "Deleted client %s with %d child(ren) and %d registration(s)",
            parent_id,
            plan.count(Collection.CHILDREN),
            plan.count(Collection.REGISTRATIONS),
        )
        return plan

    # Children
    def add_child(self, parent_id: str, name: str, birth_date: date) -> str:
        """Add a child to a client.

        Returns:
            Child ID

        Raises:
            NotFoundError: If the client doesn't exist
            ValidationError: If the name is empty or the birth date is in the future
        """
        self.require_parent(parent_id)
        errors = FieldErrors()
        errors.require("name", name, "Name")
        if birth_date > date.today():
            errors.add("birth_date", "Birth date cannot be in the future")
        errors.raise_if_any()

        return self.db.add_record(
            Collection.CHILDREN, Child(parent_id=parent_id, name=name.strip(), birth_date=birth_date)
        )

    def get_child(self, child_id: str) -> Optional[Child]:
        """Get a child by ID."""
        return self.db.get_record(Collection.CHILDREN, child_id)

    def list_children(self, parent_id: Optional[str] = None) -> list[Child]:
        """List children sorted by name, optionally for one client."""
        children = [
            child
            for child in self.db.list_records(Collection.CHILDREN)
            if parent_id is None or child.parent_id == parent_id
        ]
        return sorted(children, key=lambda child: child.name.lower())

    def update_child(self, child_id: str, **changes: Any) -> None:
        """Update child fields; a new parent must exist.

        Raises:
            NotFoundError: If the child or the new parent doesn't exist
        """
        if self.get_child(child_id) is None:
            raise NotFoundError(record_not_found("Child", child_id))
        if "parent_id" in changes:
            self.require_parent(changes["parent_id"])
        self.db.update_record(Collection.CHILDREN, child_id, changes)

    def child_age(self, child: Child, today: Optional[date] = None) -> str:
        """Readable age of a child."""
        return format_age(child.birth_date, today)

    def delete_child(self, child_id: str) -> DeletePlan:
        """Delete a child and its registrations.

        Raises:
            NotFoundError: If the child doesn't exist
        """
        if self.get_child(child_id) is None:
            raise NotFoundError(record_not_found("Child", child_id))
        plan = plan_child_deletion(child_id, self.db.list_records(Collection.REGISTRATIONS))
        self.db.remove_records(plan.steps)
        logger.info("Deleted child %s", child_id)
        return plan
