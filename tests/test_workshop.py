"""Tests for workshop scheduling."""

import pytest
from datetime import date, time
from decimal import Decimal

from workshopmgr.domain.entities import Collection, DayOfWeek, WorkshopType
from workshopmgr.domain.errors import NotFoundError, ValidationError
from workshopmgr.domain.workshop import weekday_of


class TestCreateWorkshop:
    def test_derived_fields(self, sample_workshop):
        assert sample_workshop.code == "PLST-MAR-17:00"
        assert sample_workshop.end_date == date(2024, 10, 22)
        assert sample_workshop.day_of_week == DayOfWeek.TUESDAY
        assert sample_workshop.end_time == time(18, 0)
        assert sample_workshop.duration_in_months is None

    def test_school_workshop_uses_months(self, workshop_service, sample_location):
        workshop_id = workshop_service.create_workshop(
            name="Robotica",
            workshop_type=WorkshopType.SCHOOL,
            location_id=sample_location.id,
            start_date=date(2024, 10, 7),
            start_time=time(16, 30),
            end_time=time(18, 0),
            duration_in_months=3,
        )

        workshop = workshop_service.get_workshop(workshop_id)
        assert workshop.end_date == date(2024, 12, 23)
        assert workshop.duration_in_months == 3
        assert workshop.code == "PLST-LUN-16:30"

    def test_school_workshop_requires_months(self, workshop_service, sample_location):
        with pytest.raises(ValidationError, match="Duration in months is required"):
            workshop_service.create_workshop(
                name="Robotica",
                workshop_type=WorkshopType.CAMPUS,
                location_id=sample_location.id,
                start_date=date(2024, 6, 10),
                start_time=time(9, 0),
            )

    def test_months_ignored_for_fixed_types(self, workshop_service, sample_location):
        workshop_id = workshop_service.create_workshop(
            name="Festa",
            workshop_type=WorkshopType.EVENT,
            location_id=sample_location.id,
            start_date=date(2024, 12, 14),
            start_time=time(15, 0),
            duration_in_months=6,
        )

        workshop = workshop_service.get_workshop(workshop_id)
        assert workshop.end_date == date(2024, 12, 14)
        assert workshop.duration_in_months is None

    def test_explicit_day_of_week(self, workshop_service, sample_location):
        workshop_id = workshop_service.create_workshop(
            name="Teatro",
            workshop_type=WorkshopType.OPEN_DAY,
            location_id=sample_location.id,
            start_date=date(2024, 10, 1),
            start_time=time(9, 30),
            day_of_week=DayOfWeek.THURSDAY,
        )

        assert workshop_service.get_workshop(workshop_id).code == "PLST-GIO-09:30"

    def test_invalid_fields_reported(self, workshop_service, sample_location):
        with pytest.raises(ValidationError) as excinfo:
            workshop_service.create_workshop(
                name=" ",
                workshop_type=WorkshopType.ONE_MONTH,
                location_id=sample_location.id,
                start_date=date(2024, 10, 1),
                start_time=time(17, 0),
                end_time=time(16, 0),
                price=Decimal("-1"),
            )

        assert len(excinfo.value.messages) == 3

    def test_late_start_wraps_past_midnight(self, workshop_service, sample_location):
        workshop_id = workshop_service.create_workshop(
            name="Notte al museo",
            workshop_type=WorkshopType.EVENT,
            location_id=sample_location.id,
            start_date=date(2024, 10, 31),
            start_time=time(23, 30),
        )

        assert workshop_service.get_workshop(workshop_id).end_time == time(0, 30)

    def test_unknown_location(self, workshop_service):
        with pytest.raises(NotFoundError, match="Location"):
            workshop_service.create_workshop(
                name="Robotica",
                workshop_type=WorkshopType.OPEN_DAY,
                location_id="missing",
                start_date=date(2024, 10, 1),
                start_time=time(10, 0),
            )


class TestWorkshopQueries:
    def test_sessions(self, workshop_service, sample_workshop):
        assert workshop_service.sessions(sample_workshop.id) == [
            date(2024, 10, 1),
            date(2024, 10, 8),
            date(2024, 10, 15),
            date(2024, 10, 22),
        ]

    def test_list_active_on(self, workshop_service, sample_workshop):
        assert workshop_service.list_workshops(active_on=date(2024, 10, 10)) == [sample_workshop]
        assert workshop_service.list_workshops(active_on=date(2024, 10, 23)) == []

    def test_list_by_location(self, workshop_service, sample_workshop):
        assert workshop_service.list_workshops(location_id=sample_workshop.location_id) == [sample_workshop]
        assert workshop_service.list_workshops(location_id="elsewhere") == []

    def test_weekday_of(self):
        assert weekday_of(date(2024, 10, 6)) == DayOfWeek.SUNDAY


class TestUpdateWorkshop:
    def test_change_type_recomputes_end_date(self, workshop_service, sample_workshop):
        workshop = workshop_service.update_workshop(sample_workshop.id, workshop_type=WorkshopType.TWO_MONTHS)

        assert workshop.end_date == date(2024, 11, 19)
        assert workshop_service.get_workshop(sample_workshop.id).end_date == date(2024, 11, 19)

    def test_new_start_time_resets_end_time(self, workshop_service, sample_workshop):
        workshop = workshop_service.update_workshop(sample_workshop.id, start_time=time(10, 0))

        assert workshop.end_time == time(11, 0)
        assert workshop.code == "PLST-MAR-10:00"

    def test_move_to_other_location(self, workshop_service, logistics_service, sample_workshop, sample_supplier):
        location_id = logistics_service.create_location(
            supplier_id=sample_supplier.id, name="Biblioteca", address="Piazza Duomo 1", capacity=10
        )

        workshop = workshop_service.update_workshop(sample_workshop.id, location_id=location_id)

        assert workshop.code.startswith("BBLT-")

    def test_update_missing_workshop(self, workshop_service):
        with pytest.raises(NotFoundError):
            workshop_service.update_workshop("missing", name="X")


class TestDeleteWorkshop:
    def test_delete_takes_registrations(self, workshop_service, registration_service, sample_child, sample_workshop):
        registration_service.register_child(sample_child.id, [sample_workshop.id])

        plan = workshop_service.delete_workshop(sample_workshop.id)

        assert plan.count(Collection.REGISTRATIONS) == 1
        assert workshop_service.get_workshop(sample_workshop.id) is None
        assert registration_service.list_registrations() == []
