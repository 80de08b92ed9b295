"""Payment reminder rules.

A rule only describes when reminders go out; nothing is scheduled or sent
from here.
"""

import dataclasses
import logging
from typing import Any

from workshopmgr.database.base import Database
from workshopmgr.domain.entities import Collection, ReminderSetting
from workshopmgr.domain.errors import NotFoundError, record_not_found
from workshopmgr.domain.validation import FieldErrors

logger = logging.getLogger(__name__)

DEFAULT_PRE_WARNING_DAYS = 7
DEFAULT_CADENCE_DAYS = 1


def check_reminder(reminder: ReminderSetting) -> None:
    """Validate a complete reminder rule.

    Raises:
        ValidationError: If the name is empty, the warning lead is negative
            or the cadence is not at least one day
    """
    errors = FieldErrors()
    errors.require("name", reminder.name, "Name")
    errors.non_negative("pre_warning_days", reminder.pre_warning_days, "Pre-warning days")
    errors.positive("cadence_days", reminder.cadence_days, "Cadence")
    errors.raise_if_any()


class ReminderService:
    """Service for managing reminder rules."""

    def __init__(self, db: Database):
        """Initialize reminder service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_reminder(
        self,
        name: str,
        pre_warning_days: int = DEFAULT_PRE_WARNING_DAYS,
        cadence_days: int = DEFAULT_CADENCE_DAYS,
        enabled: bool = True,
    ) -> str:
        """Create a reminder rule.

        Returns:
            Reminder ID
        """
        reminder = ReminderSetting(
            name=name.strip() if name else name,
            pre_warning_days=pre_warning_days,
            cadence_days=cadence_days,
            enabled=enabled,
        )
        check_reminder(reminder)
        return self.db.add_record(Collection.REMINDERS, reminder)

    def get_reminder(self, reminder_id: str) -> ReminderSetting:
        """Get reminder rule by ID.

        Raises:
            NotFoundError: If the rule doesn't exist
        """
        reminder = self.db.get_record(Collection.REMINDERS, reminder_id)
        if reminder is None:
            raise NotFoundError(record_not_found("Reminder", reminder_id))
        return reminder

    def list_reminders(self, enabled_only: bool = False) -> list[ReminderSetting]:
        reminders = [
            reminder
            for reminder in self.db.list_records(Collection.REMINDERS)
            if reminder.enabled or not enabled_only
        ]
        return sorted(reminders, key=lambda reminder: reminder.name.lower())

    def update_reminder(self, reminder_id: str, **changes: Any) -> None:
        """Apply a partial update; the resulting rule is validated as a whole."""
        current = self.get_reminder(reminder_id)
        if isinstance(changes.get("name"), str):
            changes["name"] = changes["name"].strip()
        check_reminder(dataclasses.replace(current, **changes))
        self.db.update_record(Collection.REMINDERS, reminder_id, changes)

    def delete_reminder(self, reminder_id: str) -> None:
        self.get_reminder(reminder_id)
        self.db.remove_record(Collection.REMINDERS, reminder_id)
        logger.info("Deleted reminder %s", reminder_id)
