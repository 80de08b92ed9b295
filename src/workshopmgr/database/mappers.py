"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the tagged unions of the domain
(client identity, quote recipient) can be stored as flat columns.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Optional

from workshopmgr.domain import entities as domain
from workshopmgr.database.models import (
    Base,
    Campaign as ORMCampaign,
    Child as ORMChild,
    CompanyProfile as ORMCompanyProfile,
    Invoice as ORMInvoice,
    Location as ORMLocation,
    OperationalCost as ORMOperationalCost,
    Parent as ORMParent,
    Payment as ORMPayment,
    Quote as ORMQuote,
    Registration as ORMRegistration,
    ReminderSetting as ORMReminderSetting,
    Supplier as ORMSupplier,
    Workshop as ORMWorkshop,
)

_CONTACT_FIELDS = ("email", "phone", "address", "zip_code", "city", "province")


def _decimal(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    return value if isinstance(value, Decimal) else Decimal(str(value))


def identity_from_columns(values: dict[str, Any]) -> domain.ClientIdentity:
    """Build the identity variant selected by the client_type column."""
    if domain.ClientType(values["client_type"]) == domain.ClientType.COMPANY:
        return domain.CompanyIdentity(
            company_name=values.get("company_name") or "",
            vat_number=values.get("vat_number") or "",
        )
    return domain.IndividualIdentity(
        name=values.get("name") or "",
        surname=values.get("surname") or "",
        tax_code=values.get("tax_code"),
    )


def identity_to_columns(identity: domain.ClientIdentity) -> dict[str, Any]:
    """Flatten an identity; the other variant's columns are set to None."""
    values: dict[str, Any] = {
        "client_type": identity.client_type.value,
        "name": None,
        "surname": None,
        "tax_code": None,
        "company_name": None,
        "vat_number": None,
    }
    if isinstance(identity, domain.CompanyIdentity):
        values["company_name"] = identity.company_name
        values["vat_number"] = identity.vat_number
    else:
        values["name"] = identity.name
        values["surname"] = identity.surname
        values["tax_code"] = identity.tax_code
    return values


def contact_from_columns(values: dict[str, Any]) -> domain.ContactInfo:
    return domain.ContactInfo(**{name: values.get(name) for name in _CONTACT_FIELDS})


def contact_to_columns(contact: domain.ContactInfo) -> dict[str, Any]:
    return {name: getattr(contact, name) for name in _CONTACT_FIELDS}


def _row(orm_obj: Base) -> dict[str, Any]:
    return {column.name: getattr(orm_obj, column.name) for column in orm_obj.__table__.columns}


def company_profile_to_domain(orm_profile: ORMCompanyProfile) -> domain.CompanyProfile:
    """Convert SQLAlchemy CompanyProfile model to domain CompanyProfile entity."""
    return domain.CompanyProfile(
        company_name=orm_profile.company_name,
        vat_number=orm_profile.vat_number,
        address=orm_profile.address,
        email=orm_profile.email,
        phone=orm_profile.phone,
        tax_regime=orm_profile.tax_regime,
    )


def parent_to_domain(orm_parent: ORMParent) -> domain.Parent:
    """Convert SQLAlchemy Parent model to domain Parent entity."""
    values = _row(orm_parent)
    return domain.Parent(
        id=orm_parent.id,
        identity=identity_from_columns(values),
        contact=contact_from_columns(values),
        status=domain.ParentStatus(orm_parent.status),
    )


def parent_to_columns(parent: domain.Parent) -> dict[str, Any]:
    return {
        **identity_to_columns(parent.identity),
        **contact_to_columns(parent.contact),
        "status": parent.status.value,
    }


def child_to_domain(orm_child: ORMChild) -> domain.Child:
    """Convert SQLAlchemy Child model to domain Child entity."""
    return domain.Child(
        id=orm_child.id,
        parent_id=orm_child.parent_id,
        name=orm_child.name,
        birth_date=orm_child.birth_date,
    )


def child_to_columns(child: domain.Child) -> dict[str, Any]:
    return {"parent_id": child.parent_id, "name": child.name, "birth_date": child.birth_date}


def workshop_to_domain(orm_workshop: ORMWorkshop) -> domain.Workshop:
    """Convert SQLAlchemy Workshop model to domain Workshop entity."""
    return domain.Workshop(
        id=orm_workshop.id,
        code=orm_workshop.code,
        name=orm_workshop.name,
        workshop_type=domain.WorkshopType(orm_workshop.workshop_type),
        location_id=orm_workshop.location_id,
        start_date=orm_workshop.start_date,
        end_date=orm_workshop.end_date,
        day_of_week=domain.DayOfWeek(orm_workshop.day_of_week),
        start_time=orm_workshop.start_time,
        end_time=orm_workshop.end_time,
        price=_decimal(orm_workshop.price),
        duration_in_months=orm_workshop.duration_in_months,
    )


def workshop_to_columns(workshop: domain.Workshop) -> dict[str, Any]:
    return {
        "code": workshop.code,
        "name": workshop.name,
        "workshop_type": workshop.workshop_type.value,
        "location_id": workshop.location_id,
        "start_date": workshop.start_date,
        "end_date": workshop.end_date,
        "day_of_week": workshop.day_of_week.value,
        "start_time": workshop.start_time,
        "end_time": workshop.end_time,
        "price": workshop.price,
        "duration_in_months": workshop.duration_in_months,
    }


def registration_to_domain(orm_registration: ORMRegistration) -> domain.Registration:
    """Convert SQLAlchemy Registration model to domain Registration entity."""
    return domain.Registration(
        id=orm_registration.id,
        child_id=orm_registration.child_id,
        workshop_id=orm_registration.workshop_id,
        registration_date=orm_registration.registration_date,
    )


def registration_to_columns(registration: domain.Registration) -> dict[str, Any]:
    return {
        "child_id": registration.child_id,
        "workshop_id": registration.workshop_id,
        "registration_date": registration.registration_date,
    }


def payment_to_domain(orm_payment: ORMPayment) -> domain.Payment:
    """Convert SQLAlchemy Payment model to domain Payment entity."""
    return domain.Payment(
        id=orm_payment.id,
        parent_id=orm_payment.parent_id,
        amount=_decimal(orm_payment.amount),
        payment_date=orm_payment.payment_date,
        method=domain.PaymentMethod(orm_payment.method),
        workshop_id=orm_payment.workshop_id,
        description=orm_payment.description,
    )


def payment_to_columns(payment: domain.Payment) -> dict[str, Any]:
    return {
        "parent_id": payment.parent_id,
        "amount": payment.amount,
        "payment_date": payment.payment_date,
        "method": payment.method.value,
        "workshop_id": payment.workshop_id,
        "description": payment.description,
    }


def cost_to_domain(orm_cost: ORMOperationalCost) -> domain.OperationalCost:
    """Convert SQLAlchemy OperationalCost model to domain OperationalCost entity."""
    return domain.OperationalCost(
        id=orm_cost.id,
        category=orm_cost.category,
        sub_category=orm_cost.sub_category,
        amount=_decimal(orm_cost.amount),
        date=orm_cost.date,
        method=domain.PaymentMethod(orm_cost.method),
        description=orm_cost.description,
        supplier_id=orm_cost.supplier_id,
        workshop_ids=tuple(orm_cost.workshop_ids or ()),
        location_id=orm_cost.location_id,
    )


def cost_to_columns(cost: domain.OperationalCost) -> dict[str, Any]:
    return {
        "category": cost.category,
        "sub_category": cost.sub_category,
        "amount": cost.amount,
        "date": cost.date,
        "method": cost.method.value,
        "description": cost.description,
        "supplier_id": cost.supplier_id,
        "workshop_ids": list(cost.workshop_ids),
        "location_id": cost.location_id,
    }


def quote_to_domain(orm_quote: ORMQuote) -> domain.Quote:
    """Convert SQLAlchemy Quote model to domain Quote entity."""
    if orm_quote.potential_client is not None:
        values = orm_quote.potential_client
        recipient: domain.QuoteRecipient = domain.PotentialClient(
            identity=identity_from_columns(values),
            contact=contact_from_columns(values),
        )
    else:
        recipient = domain.ExistingClient(parent_id=orm_quote.parent_id)

    return domain.Quote(
        id=orm_quote.id,
        recipient=recipient,
        description=orm_quote.description,
        amount=_decimal(orm_quote.amount),
        date=orm_quote.date,
        status=domain.QuoteStatus(orm_quote.status),
        method=domain.PaymentMethod(orm_quote.method) if orm_quote.method else None,
    )


def quote_to_columns(quote: domain.Quote) -> dict[str, Any]:
    values: dict[str, Any] = {
        "description": quote.description,
        "amount": quote.amount,
        "date": quote.date,
        "status": quote.status.value,
        "method": quote.method.value if quote.method else None,
        "parent_id": None,
        "potential_client": None,
    }
    if isinstance(quote.recipient, domain.ExistingClient):
        values["parent_id"] = quote.recipient.parent_id
    else:
        values["potential_client"] = {
            **identity_to_columns(quote.recipient.identity),
            **contact_to_columns(quote.recipient.contact),
        }
    return values


def invoice_to_domain(orm_invoice: ORMInvoice) -> domain.Invoice:
    """Convert SQLAlchemy Invoice model to domain Invoice entity."""
    return domain.Invoice(
        id=orm_invoice.id,
        parent_id=orm_invoice.parent_id,
        amount=_decimal(orm_invoice.amount),
        sdi_number=orm_invoice.sdi_number,
        issue_date=orm_invoice.issue_date,
        method=domain.PaymentMethod(orm_invoice.method),
    )


def invoice_to_columns(invoice: domain.Invoice) -> dict[str, Any]:
    return {
        "parent_id": invoice.parent_id,
        "amount": invoice.amount,
        "sdi_number": invoice.sdi_number,
        "issue_date": invoice.issue_date,
        "method": invoice.method.value,
    }


def supplier_to_domain(orm_supplier: ORMSupplier) -> domain.Supplier:
    """Convert SQLAlchemy Supplier model to domain Supplier entity."""
    return domain.Supplier(
        id=orm_supplier.id,
        name=orm_supplier.name,
        vat_number=orm_supplier.vat_number,
        contact=orm_supplier.contact,
        email=orm_supplier.email,
        phone=orm_supplier.phone,
    )


def supplier_to_columns(supplier: domain.Supplier) -> dict[str, Any]:
    return {
        "name": supplier.name,
        "vat_number": supplier.vat_number,
        "contact": supplier.contact,
        "email": supplier.email,
        "phone": supplier.phone,
    }


def location_to_domain(orm_location: ORMLocation) -> domain.Location:
    """Convert SQLAlchemy Location model to domain Location entity."""
    return domain.Location(
        id=orm_location.id,
        supplier_id=orm_location.supplier_id,
        name=orm_location.name,
        address=orm_location.address,
        capacity=orm_location.capacity,
        short_name=orm_location.short_name or "",
        zip_code=orm_location.zip_code,
        city=orm_location.city,
        province=orm_location.province,
        rental_cost=_decimal(orm_location.rental_cost),
        distance_km=_decimal(orm_location.distance_km),
        color=orm_location.color,
    )


def location_to_columns(location: domain.Location) -> dict[str, Any]:
    return {
        "supplier_id": location.supplier_id,
        "name": location.name,
        "address": location.address,
        "capacity": location.capacity,
        "short_name": location.short_name,
        "zip_code": location.zip_code,
        "city": location.city,
        "province": location.province,
        "rental_cost": location.rental_cost,
        "distance_km": location.distance_km,
        "color": location.color,
    }


def campaign_to_domain(orm_campaign: ORMCampaign) -> domain.Campaign:
    """Convert SQLAlchemy Campaign model to domain Campaign entity."""
    return domain.Campaign(
        id=orm_campaign.id,
        name=orm_campaign.name,
        campaign_type=domain.CampaignType(orm_campaign.campaign_type),
        subject=orm_campaign.subject,
        body=orm_campaign.body,
        target_statuses=tuple(
            domain.ParentStatus(status) for status in orm_campaign.target_statuses or ()
        ),
    )


def campaign_to_columns(campaign: domain.Campaign) -> dict[str, Any]:
    return {
        "name": campaign.name,
        "campaign_type": campaign.campaign_type.value,
        "subject": campaign.subject,
        "body": campaign.body,
        "target_statuses": [status.value for status in campaign.target_statuses],
    }


def reminder_to_domain(orm_reminder: ORMReminderSetting) -> domain.ReminderSetting:
    return domain.ReminderSetting(
        id=orm_reminder.id,
        name=orm_reminder.name,
        pre_warning_days=orm_reminder.pre_warning_days,
        cadence_days=orm_reminder.cadence_days,
        enabled=orm_reminder.enabled,
    )


def reminder_to_columns(reminder: domain.ReminderSetting) -> dict[str, Any]:
    return {
        "name": reminder.name,
        "pre_warning_days": reminder.pre_warning_days,
        "cadence_days": reminder.cadence_days,
        "enabled": reminder.enabled,
    }


@dataclass(frozen=True)
class CollectionMapper:
    """ORM model and conversion functions for one collection."""

    model: type
    to_domain: Callable[[Any], Any]
    to_columns: Callable[[Any], dict[str, Any]]


COLLECTION_MAPPERS: dict[domain.Collection, CollectionMapper] = {
    domain.Collection.WORKSHOPS: CollectionMapper(ORMWorkshop, workshop_to_domain, workshop_to_columns),
    domain.Collection.PARENTS: CollectionMapper(ORMParent, parent_to_domain, parent_to_columns),
    domain.Collection.CHILDREN: CollectionMapper(ORMChild, child_to_domain, child_to_columns),
    domain.Collection.REGISTRATIONS: CollectionMapper(
        ORMRegistration, registration_to_domain, registration_to_columns
    ),
    domain.Collection.PAYMENTS: CollectionMapper(ORMPayment, payment_to_domain, payment_to_columns),
    domain.Collection.COSTS: CollectionMapper(ORMOperationalCost, cost_to_domain, cost_to_columns),
    domain.Collection.QUOTES: CollectionMapper(ORMQuote, quote_to_domain, quote_to_columns),
    domain.Collection.INVOICES: CollectionMapper(ORMInvoice, invoice_to_domain, invoice_to_columns),
    domain.Collection.SUPPLIERS: CollectionMapper(ORMSupplier, supplier_to_domain, supplier_to_columns),
    domain.Collection.LOCATIONS: CollectionMapper(ORMLocation, location_to_domain, location_to_columns),
    domain.Collection.CAMPAIGNS: CollectionMapper(ORMCampaign, campaign_to_domain, campaign_to_columns),
    domain.Collection.REMINDERS: CollectionMapper(
        ORMReminderSetting, reminder_to_domain, reminder_to_columns
    ),
}
