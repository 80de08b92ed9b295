"""Tests for registration validation and the registration service."""

import pytest
from sqlalchemy.exc import OperationalError
from datetime import date, time
from decimal import Decimal

from workshopmgr.domain.entities import (
    DayOfWeek,
    Location,
    Registration,
    Workshop,
    WorkshopType,
)
from workshopmgr.domain.errors import NotFoundError, StorageError, ValidationError
from workshopmgr.domain.registration import (
    IssueKind,
    available_seats,
    check_registration,
    check_registrations,
    registration_count,
)


def _workshop(workshop_id: str, location_id: str = "loc-1") -> Workshop:
    return Workshop(
        id=workshop_id,
        code="PLST-MAR-17:00",
        name=f"Workshop {workshop_id}",
        workshop_type=WorkshopType.ONE_MONTH,
        location_id=location_id,
        start_date=date(2024, 10, 1),
        end_date=date(2024, 10, 22),
        day_of_week=DayOfWeek.TUESDAY,
        start_time=time(17, 0),
        end_time=time(18, 0),
        price=Decimal("80"),
    )


def _location(capacity: int, location_id: str = "loc-1") -> Location:
    return Location(
        id=location_id, supplier_id="sup-1", name="Palestra", address="Via Verdi 3", capacity=capacity
    )


def _registrations(workshop_id: str, child_ids):
    return [
        Registration(id=f"reg-{child_id}", child_id=child_id, workshop_id=workshop_id,
                     registration_date=date(2024, 9, 1))
        for child_id in child_ids
    ]


class TestRegistrationChecks:
    """Tests for the pure admissibility checks."""

    def test_registration_below_capacity_is_admissible(self):
        registrations = _registrations("w1", ["c1"])
        assert check_registration("c2", _workshop("w1"), _location(2), registrations) == []

    def test_capacity_reached_is_rejected(self):
        """With capacity C, the (C+1)-th registration is rejected."""
        registrations = _registrations("w1", ["c1", "c2"])

        issues = check_registration("c3", _workshop("w1"), _location(2), registrations)

        assert [issue.kind for issue in issues] == [IssueKind.CAPACITY]
        assert "full" in issues[0].message

    def test_duplicate_is_rejected_regardless_of_capacity(self):
        registrations = _registrations("w1", ["c1"])

        issues = check_registration("c1", _workshop("w1"), _location(50), registrations)

        assert [issue.kind for issue in issues] == [IssueKind.DUPLICATE]

    def test_duplicate_and_capacity_are_both_reported(self):
        registrations = _registrations("w1", ["c1"])

        issues = check_registration("c1", _workshop("w1"), _location(1), registrations, child_name="Luca")

        assert {issue.kind for issue in issues} == {IssueKind.DUPLICATE, IssueKind.CAPACITY}
        assert any("Luca" in issue.message for issue in issues)

    def test_other_workshops_do_not_count_towards_capacity(self):
        registrations = _registrations("w2", ["c1", "c2", "c3"])
        assert check_registration("c4", _workshop("w1"), _location(1), registrations) == []

    def test_missing_location_is_reported(self):
        issues = check_registration("c1", _workshop("w1"), None, [])
        assert [issue.kind for issue in issues] == [IssueKind.MISSING_LOCATION]

    def test_check_registrations_collects_issues_for_every_workshop(self):
        workshops = [_workshop("w1"), _workshop("w2", "loc-2"), _workshop("w3")]
        locations = [_location(1), _location(5, "loc-2")]
        registrations = _registrations("w1", ["c9"]) + _registrations("w3", ["c1"])

        issues = check_registrations("c1", workshops, locations, registrations)

        assert [(issue.workshop_id, issue.kind) for issue in issues] == [
            ("w1", IssueKind.CAPACITY),
            ("w3", IssueKind.DUPLICATE),
            ("w3", IssueKind.CAPACITY),
        ]

    def test_checks_do_not_modify_input(self):
        registrations = _registrations("w1", ["c1"])
        before = list(registrations)
        check_registration("c1", _workshop("w1"), _location(1), registrations)
        assert registrations == before

    def test_counts_and_available_seats(self):
        registrations = _registrations("w1", ["c1", "c2"])
        assert registration_count("w1", registrations) == 2
        assert available_seats(_workshop("w1"), _location(5), registrations) == 3
        assert available_seats(_workshop("w1"), _location(1), registrations) == 0


class TestRegistrationService:
    """Tests for RegistrationService."""

    def test_register_child(self, registration_service, sample_child, sample_workshop):
        ids = registration_service.register_child(
            sample_child.id, [sample_workshop.id], registration_date=date(2024, 9, 15)
        )

        assert len(ids) == 1
        registrations = registration_service.list_registrations(child_id=sample_child.id)
        assert len(registrations) == 1
        assert registrations[0].workshop_id == sample_workshop.id
        assert registrations[0].registration_date == date(2024, 9, 15)

    def test_register_defaults_to_today(self, registration_service, sample_child, sample_workshop):
        registration_service.register_child(sample_child.id, [sample_workshop.id])
        registration = registration_service.list_registrations()[0]
        assert registration.registration_date == date.today()

    def test_capacity_is_enforced(
        self, registration_service, client_service, sample_parent, sample_workshop
    ):
        """Sample location holds two children: the third is refused."""
        child_ids = [
            client_service.add_child(sample_parent.id, name, date(2018, 1, 1))
            for name in ("Luca", "Marta", "Sara")
        ]

        registration_service.register_child(child_ids[0], [sample_workshop.id])
        registration_service.register_child(child_ids[1], [sample_workshop.id])
        with pytest.raises(ValidationError, match="full"):
            registration_service.register_child(child_ids[2], [sample_workshop.id])

        assert len(registration_service.list_registrations(workshop_id=sample_workshop.id)) == 2

    def test_duplicate_registration_is_refused(self, registration_service, sample_child, sample_workshop):
        registration_service.register_child(sample_child.id, [sample_workshop.id])

        with pytest.raises(ValidationError, match="already registered"):
            registration_service.register_child(sample_child.id, [sample_workshop.id])

    def test_nothing_is_registered_when_one_workshop_fails(
        self, registration_service, workshop_service, sample_child, sample_workshop, sample_location
    ):
        other_id = workshop_service.create_workshop(
            name="Robotica",
            workshop_type=WorkshopType.OPEN_DAY,
            location_id=sample_location.id,
            start_date=date(2024, 11, 9),
            start_time=time(10, 0),
        )
        registration_service.register_child(sample_child.id, [sample_workshop.id])

        with pytest.raises(ValidationError) as excinfo:
            registration_service.register_child(sample_child.id, [other_id, sample_workshop.id])

        assert len(excinfo.value.messages) == 1
        assert registration_service.list_registrations(workshop_id=other_id) == []

    def test_storage_failure_registers_nothing(
        self, registration_service, workshop_service, temp_db, sample_child, sample_workshop, sample_location,
        monkeypatch,
    ):
        other_id = workshop_service.create_workshop(
            name="Robotica",
            workshop_type=WorkshopType.OPEN_DAY,
            location_id=sample_location.id,
            start_date=date(2024, 11, 9),
            start_time=time(10, 0),
        )

        def failing_commit():
            raise OperationalError("INSERT", {}, Exception("database is locked"))

        monkeypatch.setattr(temp_db._get_session(), "commit", failing_commit)
        with pytest.raises(StorageError):
            registration_service.register_child(sample_child.id, [sample_workshop.id, other_id])
        monkeypatch.undo()

        assert registration_service.list_registrations() == []

    def test_repeated_workshop_ids_register_once(self, registration_service, sample_child, sample_workshop):
        ids = registration_service.register_child(
            sample_child.id, [sample_workshop.id, sample_workshop.id]
        )
        assert len(ids) == 1

    def test_unknown_child_or_workshop(self, registration_service, sample_child, sample_workshop):
        with pytest.raises(NotFoundError):
            registration_service.register_child("missing", [sample_workshop.id])
        with pytest.raises(NotFoundError):
            registration_service.register_child(sample_child.id, ["missing"])

    def test_empty_workshop_list(self, registration_service, sample_child):
        with pytest.raises(ValidationError, match="at least one workshop"):
            registration_service.register_child(sample_child.id, [])

    def test_unregister(self, registration_service, sample_child, sample_workshop):
        (registration_id,) = registration_service.register_child(sample_child.id, [sample_workshop.id])

        registration_service.unregister(registration_id)

        assert registration_service.list_registrations() == []
        with pytest.raises(NotFoundError):
            registration_service.unregister(registration_id)

    def test_roster(self, registration_service, client_service, sample_parent, sample_workshop):
        marta = client_service.add_child(sample_parent.id, "Marta", date(2017, 3, 3))
        bruno = client_service.add_child(sample_parent.id, "Bruno", date(2016, 4, 4))
        registration_service.register_child(marta, [sample_workshop.id])
        registration_service.register_child(bruno, [sample_workshop.id])

        assert [child.name for child in registration_service.roster(sample_workshop.id)] == [
            "Bruno",
            "Marta",
        ]
