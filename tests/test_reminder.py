"""Tests for payment reminder rules."""

import pytest

from workshopmgr.domain.errors import NotFoundError, ValidationError
from workshopmgr.domain.reminder import DEFAULT_CADENCE_DAYS, DEFAULT_PRE_WARNING_DAYS


class TestReminderService:
    def test_create_uses_defaults(self, reminder_service):
        reminder_id = reminder_service.create_reminder("  Saldo iscrizione ")

        reminder = reminder_service.get_reminder(reminder_id)
        assert reminder.name == "Saldo iscrizione"
        assert reminder.pre_warning_days == DEFAULT_PRE_WARNING_DAYS == 7
        assert reminder.cadence_days == DEFAULT_CADENCE_DAYS == 1
        assert reminder.enabled is True

    def test_list_sorted_by_name(self, reminder_service):
        reminder_service.create_reminder("zeta")
        reminder_service.create_reminder("Alfa", enabled=False)

        assert [r.name for r in reminder_service.list_reminders()] == ["Alfa", "zeta"]
        assert [r.name for r in reminder_service.list_reminders(enabled_only=True)] == ["zeta"]

    def test_zero_pre_warning_days_is_allowed(self, reminder_service):
        reminder_id = reminder_service.create_reminder("Scadenza", pre_warning_days=0)

        assert reminder_service.get_reminder(reminder_id).pre_warning_days == 0

    def test_create_rejects_bad_values(self, reminder_service):
        with pytest.raises(ValidationError) as exc_info:
            reminder_service.create_reminder(" ", pre_warning_days=-1, cadence_days=0)

        assert exc_info.value.messages == [
            "name: Name is required",
            "pre_warning_days: Pre-warning days cannot be negative",
            "cadence_days: Cadence must be greater than zero",
        ]
        assert reminder_service.list_reminders() == []

    def test_update_is_partial(self, reminder_service):
        reminder_id = reminder_service.create_reminder("Saldo", pre_warning_days=10, cadence_days=3)

        reminder_service.update_reminder(reminder_id, enabled=False, name=" Acconto ")

        reminder = reminder_service.get_reminder(reminder_id)
        assert reminder.name == "Acconto"
        assert reminder.enabled is False
        assert reminder.pre_warning_days == 10
        assert reminder.cadence_days == 3

    def test_update_validates_the_result(self, reminder_service):
        reminder_id = reminder_service.create_reminder("Saldo")

        with pytest.raises(ValidationError, match="Cadence must be greater than zero"):
            reminder_service.update_reminder(reminder_id, cadence_days=0)
        assert reminder_service.get_reminder(reminder_id).cadence_days == 1

    def test_delete(self, reminder_service):
        reminder_id = reminder_service.create_reminder("Saldo")

        reminder_service.delete_reminder(reminder_id)

        assert reminder_service.list_reminders() == []
        with pytest.raises(NotFoundError):
            reminder_service.get_reminder(reminder_id)

    def test_unknown_reminder(self, reminder_service):
        with pytest.raises(NotFoundError):
            reminder_service.update_reminder("missing", enabled=False)
        with pytest.raises(NotFoundError):
            reminder_service.delete_reminder("missing")
