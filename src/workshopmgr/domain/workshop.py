"""Workshop domain service."""

import dataclasses
import logging
from datetime import date, time
from decimal import Decimal
from typing import Any, Optional

from workshopmgr.database.base import Database
from workshopmgr.domain.cascade import DeletePlan, plan_workshop_deletion
from workshopmgr.domain.entities import (
    Collection,
    DayOfWeek,
    Location,
    Workshop,
    WorkshopType,
)
from workshopmgr.domain.errors import NotFoundError, record_not_found
from workshopmgr.domain.scheduling import (
    compute_schedule,
    default_end_time,
    requires_duration,
    session_dates,
    workshop_code,
)
from workshopmgr.domain.validation import FieldErrors

logger = logging.getLogger(__name__)

WEEKDAYS = list(DayOfWeek)


def weekday_of(day: date) -> DayOfWeek:
    """Day-of-week enum member for a date."""
    return WEEKDAYS[day.weekday()]


class WorkshopService:
    """Service for scheduling workshops."""

    def __init__(self, db: Database):
        """Initialize workshop service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_location(self, location_id: str) -> Location:
        location = self.db.get_record(Collection.LOCATIONS, location_id)
        if location is None:
            raise NotFoundError(record_not_found("Location", location_id))
        return location

    def _derive(self, workshop: Workshop) -> Workshop:
        """Validate a workshop and fill in its code and end date.

        Raises:
            NotFoundError: If the location doesn't exist
            ValidationError: On invalid name, price, duration or times
        """
        location = self._require_location(workshop.location_id)

        errors = FieldErrors()
        errors.require("name", workshop.name, "Name")
        errors.non_negative("price", workshop.price, "Price")
        if requires_duration(workshop.workshop_type):
            if workshop.duration_in_months is None:
                errors.add(
                    "duration_in_months",
                    f"Duration in months is required for '{workshop.workshop_type.value}' workshops",
                )
            elif workshop.duration_in_months <= 0:
                errors.add("duration_in_months", "Duration must be a positive number of months")
        # The default end time may wrap past midnight; explicit ones may not
        wraps_by_default = workshop.end_time == default_end_time(workshop.start_time)
        if workshop.end_time <= workshop.start_time and not wraps_by_default:
            errors.add("end_time", "End time must be after start time")
        errors.raise_if_any()

        duration = workshop.duration_in_months if requires_duration(workshop.workshop_type) else None
        schedule = compute_schedule(workshop.workshop_type, workshop.start_date, duration)
        return dataclasses.replace(
            workshop,
            name=workshop.name.strip(),
            code=workshop_code(location.name, workshop.day_of_week, workshop.start_time),
            end_date=schedule.end_date,
            duration_in_months=duration,
        )

    def create_workshop(
        self,
        name: str,
        workshop_type: WorkshopType,
        location_id: str,
        start_date: date,
        start_time: time,
        end_time: Optional[time] = None,
        day_of_week: Optional[DayOfWeek] = None,
        price: Decimal = Decimal("0"),
        duration_in_months: Optional[int] = None,
    ) -> str:
        """Schedule a new workshop series.

        Args:
            name: Workshop name
            workshop_type: Workshop type, which sets the number of sessions
            location_id: Location ID
            start_date: Date of the first session
            start_time: Session start time
            end_time: Session end time; defaults to one hour after the start
            day_of_week: Weekday of the sessions; defaults to the start date's
            price: Price per child
            duration_in_months: Required for school and campus workshops

        Returns:
            Workshop ID

        Raises:
            NotFoundError: If the location doesn't exist
            ValidationError: If any field is invalid
        """
        workshop = self._derive(
            Workshop(
                code="",
                name=name,
                workshop_type=workshop_type,
                location_id=location_id,
                start_date=start_date,
                end_date=start_date,
                day_of_week=day_of_week or weekday_of(start_date),
                start_time=start_time,
                end_time=end_time or default_end_time(start_time),
                price=price,
                duration_in_months=duration_in_months,
            )
        )
        workshop_id = self.db.add_record(Collection.WORKSHOPS, workshop)
        logger.info("Created workshop %s (%s) ending %s", workshop_id, workshop.code, workshop.end_date)
        return workshop_id

    def get_workshop(self, workshop_id: str) -> Optional[Workshop]:
        """Get workshop by ID."""
        return self.db.get_record(Collection.WORKSHOPS, workshop_id)

    def require_workshop(self, workshop_id: str) -> Workshop:
        """Get workshop by ID.

        Raises:
            NotFoundError: If the workshop doesn't exist
        """
        workshop = self.get_workshop(workshop_id)
        if workshop is None:
            raise NotFoundError(record_not_found("Workshop", workshop_id))
        return workshop

    def list_workshops(
        self,
        location_id: Optional[str] = None,
        active_on: Optional[date] = None,
    ) -> list[Workshop]:
        """List workshops by start date.

        Args:
            location_id: Only workshops at this location
            active_on: Only workshops running on this date
        """
        workshops = [
            workshop
            for workshop in self.db.list_records(Collection.WORKSHOPS)
            if (location_id is None or workshop.location_id == location_id)
            and (active_on is None or workshop.start_date <= active_on <= workshop.end_date)
        ]
        return sorted(workshops, key=lambda workshop: (workshop.start_date, workshop.start_time))

    def update_workshop(self, workshop_id: str, **changes: Any) -> Workshop:
        """Update workshop fields and re-derive code and end date.

        Returns:
            The stored workshop

        Raises:
            NotFoundError: If the workshop or its location doesn't exist
            ValidationError: If the resulting workshop is invalid
        """
        current = self.require_workshop(workshop_id)
        if "start_time" in changes and "end_time" not in changes:
            changes["end_time"] = default_end_time(changes["start_time"])

        workshop = self._derive(dataclasses.replace(current, **changes))
        self.db.update_record(
            Collection.WORKSHOPS,
            workshop_id,
            {
                field.name: getattr(workshop, field.name)
                for field in dataclasses.fields(workshop)
                if field.name != "id"
            },
        )
        logger.info("Updated workshop %s", workshop_id)
        return workshop

    def sessions(self, workshop_id: str) -> list[date]:
        """Dates of every session of a workshop."""
        workshop = self.require_workshop(workshop_id)
        schedule = compute_schedule(
            workshop.workshop_type, workshop.start_date, workshop.duration_in_months
        )
        return session_dates(workshop.start_date, schedule.repetitions)

    def plan_workshop_deletion(self, workshop_id: str) -> DeletePlan:
        """Everything removed along with a workshop."""
        self.require_workshop(workshop_id)
        return plan_workshop_deletion(
            workshop_id, self.db.list_records(Collection.REGISTRATIONS)
        )

    def delete_workshop(self, workshop_id: str) -> DeletePlan:
        """Delete a workshop and its registrations.

        Returns:
            The executed plan
        """
        plan = self.plan_workshop_deletion(workshop_id)
        self.db.remove_records(plan.steps)
        logger.info(
            "Deleted workshop %s with %d registration(s)",
            workshop_id,
            plan.count(Collection.REGISTRATIONS),
        )
        return plan
