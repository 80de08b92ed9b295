"""Registration admissibility rules and registration service.

The validator functions are pure: they read a snapshot of registrations and
report problems as descriptors instead of raising. The check is only as fresh
as that snapshot; two sessions registering at the same moment can both pass
and together exceed a location's capacity.
"""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, Optional, Sequence

from workshopmgr.database.base import Database
from workshopmgr.domain.entities import (
    Child,
    Collection,
    Location,
    Registration,
    Workshop,
)
from workshopmgr.domain.errors import (
    NotFoundError,
    ValidationError,
    capacity_exceeded,
    duplicate_registration,
    record_not_found,
)

logger = logging.getLogger(__name__)


class IssueKind(str, Enum):
    DUPLICATE = "duplicate"
    CAPACITY = "capacity"
    MISSING_LOCATION = "missing_location"


@dataclass(frozen=True)
class RegistrationIssue:
    """Reason a proposed registration is not admissible."""

    kind: IssueKind
    workshop_id: str
    message: str


def registration_count(workshop_id: str, registrations: Iterable[Registration]) -> int:
    """Number of registrations referencing a workshop."""
    return sum(1 for reg in registrations if reg.workshop_id == workshop_id)


def is_registered(
    child_id: str, workshop_id: str, registrations: Iterable[Registration]
) -> bool:
    """Whether a child is already registered to a workshop."""
    return any(
        reg.child_id == child_id and reg.workshop_id == workshop_id
        for reg in registrations
    )


def available_seats(
    workshop: Workshop, location: Location, registrations: Iterable[Registration]
) -> int:
    """Seats left in a workshop, never below zero."""
    return max(location.capacity - registration_count(workshop.id, registrations), 0)


def check_registration(
    child_id: str,
    workshop: Workshop,
    location: Optional[Location],
    registrations: Sequence[Registration],
    child_name: Optional[str] = None,
) -> list[RegistrationIssue]:
    """Check one child/workshop pair.

    Duplicate and capacity checks run independently, so a pair can collect
    both issues.
    """
    issues = []
    label = child_name or f"Child {child_id}"

    if is_registered(child_id, workshop.id, registrations):
        issues.append(
            RegistrationIssue(
                kind=IssueKind.DUPLICATE,
                workshop_id=workshop.id,
                message=duplicate_registration(label, workshop.name),
            )
        )

    if location is None:
        issues.append(
            RegistrationIssue(
                kind=IssueKind.MISSING_LOCATION,
                workshop_id=workshop.id,
                message=f"Location of '{workshop.name}' not found: capacity cannot be checked",
            )
        )
    elif registration_count(workshop.id, registrations) >= location.capacity:
        issues.append(
            RegistrationIssue(
                kind=IssueKind.CAPACITY,
                workshop_id=workshop.id,
                message=capacity_exceeded(workshop.name, location.capacity),
            )
        )

    return issues


def check_registrations(
    child_id: str,
    workshops: Sequence[Workshop],
    locations: Sequence[Location],
    registrations: Sequence[Registration],
    child_name: Optional[str] = None,
) -> list[RegistrationIssue]:
    """Check a child against several workshops, collecting every issue."""
    locations_by_id = {loc.id: loc for loc in locations}
    issues: list[RegistrationIssue] = []
    for workshop in workshops:
        issues.extend(
            check_registration(
                child_id,
                workshop,
                locations_by_id.get(workshop.location_id),
                registrations,
                child_name=child_name,
            )
        )
    return issues


class RegistrationService:
    """Service for enrolling children into workshops."""

    def __init__(self, db: Database):
        """Initialize registration service.

        Args:
            db: Database instance
        """
        self.db = db

    def register_child(
        self,
        child_id: str,
        workshop_ids: Sequence[str],
        registration_date: Optional[date] = None,
    ) -> list[str]:
        """Register a child into one or more workshops.

        Args:
            child_id: Child ID
            workshop_ids: Target workshop IDs (repeats are ignored)
            registration_date: Defaults to today

        Returns:
            IDs of the new registrations, in workshop order

        Raises:
            NotFoundError: If the child or a workshop doesn't exist
            ValidationError: With every duplicate/capacity problem found
        """
        child = self.db.get_record(Collection.CHILDREN, child_id)
        if child is None:
            raise NotFoundError(record_not_found("Child", child_id))

        workshops = []
        for workshop_id in dict.fromkeys(workshop_ids):
            workshop = self.db.get_record(Collection.WORKSHOPS, workshop_id)
            if workshop is None:
                raise NotFoundError(record_not_found("Workshop", workshop_id))
            workshops.append(workshop)

        if not workshops:
            raise ValidationError("Select at least one workshop")

        issues = check_registrations(
            child.id,
            workshops,
            self.db.list_records(Collection.LOCATIONS),
            self.db.list_records(Collection.REGISTRATIONS),
            child_name=child.name,
        )
        if issues:
            logger.warning(
                "Registration of child %s rejected: %d issue(s)", child_id, len(issues)
            )
            raise ValidationError([issue.message for issue in issues])

        registered_on = registration_date or date.today()
        ids = self.db.add_records(
            [
                (
                    Collection.REGISTRATIONS,
                    Registration(
                        child_id=child.id,
                        workshop_id=workshop.id,
                        registration_date=registered_on,
                    ),
                )
                for workshop in workshops
            ]
        )
        logger.info("Registered child %s into %d workshop(s)", child_id, len(ids))
        return ids

    def unregister(self, registration_id: str) -> None:
        """Remove a registration.

        Raises:
            NotFoundError: If the registration doesn't exist
        """
        if self.db.get_record(Collection.REGISTRATIONS, registration_id) is None:
            raise NotFoundError(record_not_found("Registration", registration_id))
        self.db.remove_record(Collection.REGISTRATIONS, registration_id)

    def list_registrations(
        self, child_id: Optional[str] = None, workshop_id: Optional[str] = None
    ) -> list[Registration]:
        """List registrations, optionally filtered by child and/or workshop."""
        return [
            reg
            for reg in self.db.list_records(Collection.REGISTRATIONS)
            if (child_id is None or reg.child_id == child_id)
            and (workshop_id is None or reg.workshop_id == workshop_id)
        ]

    def roster(self, workshop_id: str) -> list[Child]:
        """Children registered to a workshop, sorted by name."""
        child_ids = {reg.child_id for reg in self.list_registrations(workshop_id=workshop_id)}
        children = [
            child
            for child in self.db.list_records(Collection.CHILDREN)
            if child.id in child_ids
        ]
        return sorted(children, key=lambda child: child.name)
