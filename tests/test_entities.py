"""Tests for domain entities."""

import dataclasses
from datetime import date

import pytest

from workshopmgr.domain.entities import (
    ENTITY_TYPES,
    Child,
    ClientType,
    Collection,
    CompanyIdentity,
    ContactInfo,
    IndividualIdentity,
    Parent,
    ParentStatus,
    PotentialClient,
    ReminderSetting,
    Snapshot,
)


class TestParent:
    """Tests for Parent entity."""

    def test_individual_parent(self):
        parent = Parent(
            identity=IndividualIdentity(name="Anna", surname="Rossi"),
            contact=ContactInfo(email="anna@example.com"),
        )

        assert parent.display_name == "Anna Rossi"
        assert parent.client_type == ClientType.INDIVIDUAL
        assert parent.status == ParentStatus.ACTIVE
        assert parent.id == ""

    def test_company_parent(self):
        parent = Parent(
            identity=CompanyIdentity(company_name="Scuola Arcobaleno", vat_number="0123"),
            contact=ContactInfo(email="scuola@example.com"),
            id="p1",
        )

        assert parent.display_name == "Scuola Arcobaleno"
        assert parent.client_type == ClientType.COMPANY

    def test_parent_immutability(self):
        """Test that Parent entities are immutable."""
        parent = Parent(
            identity=IndividualIdentity(name="Anna", surname="Rossi"),
            contact=ContactInfo(email="anna@example.com"),
        )

        with pytest.raises(dataclasses.FrozenInstanceError):
            parent.status = ParentStatus.CEASED


def test_potential_client_type():
    prospect = PotentialClient(
        identity=CompanyIdentity(company_name="ACME", vat_number="1"),
        contact=ContactInfo(email="acme@example.com"),
    )
    assert prospect.client_type == ClientType.COMPANY


def test_id_is_keyword_only():
    with pytest.raises(TypeError):
        Child("p1", "Luca", date(2018, 5, 12), "c1")


class TestSnapshot:
    def test_empty_snapshot(self):
        snapshot = Snapshot()

        for collection in Collection:
            assert snapshot.records(collection) == ()

    def test_records_by_collection(self):
        child = Child(parent_id="p1", name="Luca", birth_date=date(2018, 5, 12), id="c1")
        snapshot = Snapshot(children=(child,))

        assert snapshot.records(Collection.CHILDREN) == (child,)

    def test_every_collection_has_an_entity_type(self):
        assert set(ENTITY_TYPES) == set(Collection)
        for collection in Collection:
            assert hasattr(Snapshot(), collection.value)


def test_domain_package_exports_no_services():
    import workshopmgr.domain as domain_package

    assert not hasattr(domain_package, "__getattr__")
    assert not hasattr(domain_package, "ClientService")


class TestReminderSetting:
    def test_defaults(self):
        reminder = ReminderSetting(name="Saldo")

        assert reminder.pre_warning_days == 7
        assert reminder.cadence_days == 1
        assert reminder.enabled is True
        assert reminder.id == ""
