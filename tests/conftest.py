"""Shared pytest fixtures for workshopmgr tests."""

import tempfile
import os
from datetime import date, time
from decimal import Decimal
import pytest

from workshopmgr.database.factories import create_sqlite_database
from workshopmgr.domain.backup import BackupService
from workshopmgr.domain.billing import BillingService
from workshopmgr.domain.campaign import CampaignService
from workshopmgr.domain.client import ClientService
from workshopmgr.domain.company import CompanyService
from workshopmgr.domain.entities import ContactInfo, IndividualIdentity, WorkshopType
from workshopmgr.domain.logistics import LogisticsService
from workshopmgr.domain.registration import RegistrationService
from workshopmgr.domain.reminder import ReminderService
from workshopmgr.domain.reports import ReportService
from workshopmgr.domain.workshop import WorkshopService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def company_service(temp_db):
    return CompanyService(temp_db)


@pytest.fixture
def client_service(temp_db):
    """Create a ClientService with a temporary database."""
    return ClientService(temp_db)


@pytest.fixture
def logistics_service(temp_db):
    """Create a LogisticsService with a temporary database."""
    return LogisticsService(temp_db)


@pytest.fixture
def workshop_service(temp_db):
    """Create a WorkshopService with a temporary database."""
    return WorkshopService(temp_db)


@pytest.fixture
def registration_service(temp_db):
    """Create a RegistrationService with a temporary database."""
    return RegistrationService(temp_db)


@pytest.fixture
def billing_service(temp_db):
    """Create a BillingService with a temporary database."""
    return BillingService(temp_db)


@pytest.fixture
def report_service(temp_db):
    return ReportService(temp_db)


@pytest.fixture
def backup_service(temp_db):
    return BackupService(temp_db)


@pytest.fixture
def campaign_service(temp_db):
    return CampaignService(temp_db)


@pytest.fixture
def reminder_service(temp_db):
    return ReminderService(temp_db)


@pytest.fixture
def sample_parent(client_service):
    """Create a sample individual client."""
    parent_id = client_service.create_parent(
        identity=IndividualIdentity(name="Anna", surname="Rossi", tax_code="RSSNNA80A41F205X"),
        contact=ContactInfo(email="anna.rossi@example.com", phone="3331234567", city="Milano"),
    )
    return client_service.get_parent(parent_id)


@pytest.fixture
def sample_child(client_service, sample_parent):
    """Create a child of the sample client."""
    child_id = client_service.add_child(sample_parent.id, "Luca", date(2018, 5, 12))
    return client_service.get_child(child_id)


@pytest.fixture
def sample_supplier(logistics_service):
    supplier_id = logistics_service.create_supplier(name="Comune di Milano", email="sport@example.com")
    return logistics_service.get_supplier(supplier_id)


@pytest.fixture
def sample_location(logistics_service, sample_supplier):
    """Create a location with room for two children."""
    location_id = logistics_service.create_location(
        supplier_id=sample_supplier.id,
        name="Palestra Comunale",
        address="Via Verdi 3",
        capacity=2,
        rental_cost=Decimal("40.00"),
    )
    return logistics_service.get_location(location_id)


@pytest.fixture
def sample_workshop(workshop_service, sample_location):
    """Create a one-month workshop starting on a Tuesday."""
    workshop_id = workshop_service.create_workshop(
        name="Piccoli Chef",
        workshop_type=WorkshopType.ONE_MONTH,
        location_id=sample_location.id,
        start_date=date(2024, 10, 1),
        start_time=time(17, 0),
        price=Decimal("80.00"),
    )
    return workshop_service.get_workshop(workshop_id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
