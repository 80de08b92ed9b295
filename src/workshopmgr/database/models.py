"""SQLAlchemy models for workshopmgr database.

Tables carry no foreign-key constraints: references between records are
checked by the domain services.
"""

from datetime import datetime, UTC
from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Integer,
    String,
    DateTime,
    Date,
    Time,
    Numeric,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()

COMPANY_PROFILE_ID = "main"


class CompanyProfile(Base):
    """Singleton company profile model."""

    __tablename__ = "company_profile"

    id = Column(String, primary_key=True, default=COMPANY_PROFILE_ID)
    company_name = Column(String, nullable=False, default="")
    vat_number = Column(String, nullable=False, default="")
    address = Column(String, nullable=False, default="")
    email = Column(String, nullable=False, default="")
    phone = Column(String, nullable=False, default="")
    tax_regime = Column(String, nullable=False, default="")
    updated_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Parent(Base):
    """Client model; the populated name columns depend on client_type."""

    __tablename__ = "parents"

    id = Column(String, primary_key=True)
    client_type = Column(String, nullable=False)
    status = Column(String, nullable=False)
    name = Column(String, nullable=True)
    surname = Column(String, nullable=True)
    tax_code = Column(String, nullable=True)
    company_name = Column(String, nullable=True)
    vat_number = Column(String, nullable=True)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    address = Column(String, nullable=True)
    zip_code = Column(String, nullable=True)
    city = Column(String, nullable=True)
    province = Column(String, nullable=True)


class Child(Base):
    __tablename__ = "children"

    id = Column(String, primary_key=True)
    parent_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    birth_date = Column(Date, nullable=False)


class Workshop(Base):
    __tablename__ = "workshops"

    id = Column(String, primary_key=True)
    code = Column(String, nullable=False)
    name = Column(String, nullable=False)
    workshop_type = Column(String, nullable=False)
    location_id = Column(String, nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    day_of_week = Column(String, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    duration_in_months = Column(Integer, nullable=True)


class Registration(Base):
    __tablename__ = "registrations"

    id = Column(String, primary_key=True)
    child_id = Column(String, nullable=False, index=True)
    workshop_id = Column(String, nullable=False, index=True)
    registration_date = Column(Date, nullable=False)


class Payment(Base):
    __tablename__ = "payments"

    id = Column(String, primary_key=True)
    parent_id = Column(String, nullable=False, index=True)
    workshop_id = Column(String, nullable=True)
    description = Column(String, nullable=True)
    amount = Column(Numeric(10, 2), nullable=False)
    payment_date = Column(Date, nullable=False)
    method = Column(String, nullable=False)


class OperationalCost(Base):
    __tablename__ = "costs"

    id = Column(String, primary_key=True)
    category = Column(String, nullable=False)
    sub_category = Column(String, nullable=False)
    description = Column(String, nullable=True)
    amount = Column(Numeric(10, 2), nullable=False)
    date = Column(Date, nullable=False)
    method = Column(String, nullable=False)
    supplier_id = Column(String, nullable=True)
    workshop_ids = Column(JSON, nullable=False, default=list)
    location_id = Column(String, nullable=True)


class Quote(Base):
    """Quote model; exactly one of parent_id / potential_client is set."""

    __tablename__ = "quotes"

    id = Column(String, primary_key=True)
    parent_id = Column(String, nullable=True)
    potential_client = Column(JSON, nullable=True)
    description = Column(String, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    date = Column(Date, nullable=False)
    status = Column(String, nullable=False)
    method = Column(String, nullable=True)


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(String, primary_key=True)
    parent_id = Column(String, nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    sdi_number = Column(String, nullable=False)
    issue_date = Column(Date, nullable=False)
    method = Column(String, nullable=False)


class Supplier(Base):
    __tablename__ = "suppliers"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    vat_number = Column(String, nullable=True)
    contact = Column(String, nullable=True)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)


class Location(Base):
    __tablename__ = "locations"

    id = Column(String, primary_key=True)
    supplier_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    short_name = Column(String(4), nullable=False, default="")
    address = Column(String, nullable=False)
    zip_code = Column(String, nullable=True)
    city = Column(String, nullable=True)
    province = Column(String, nullable=True)
    capacity = Column(Integer, nullable=False)
    rental_cost = Column(Numeric(10, 2), nullable=True)
    distance_km = Column(Numeric(10, 2), nullable=True)
    color = Column(String, nullable=True)


class Campaign(Base):
    __tablename__ = "campaigns"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    campaign_type = Column(String, nullable=False)
    subject = Column(String, nullable=False)
    body = Column(String, nullable=False)
    target_statuses = Column(JSON, nullable=False, default=list)


class ReminderSetting(Base):
    __tablename__ = "reminder_settings"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    pre_warning_days = Column(Integer, nullable=False)
    cadence_days = Column(Integer, nullable=False)
    enabled = Column(Boolean, nullable=False, default=True)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
