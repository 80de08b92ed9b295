"""Domain model entities for workshopmgr.

These are pure data classes representing business concepts, independent of
the storage schema. Every record carries an opaque string ``id``; a blank id
means the record has not been stored yet and the gateway assigns one on add.
"""

from dataclasses import dataclass, field
from datetime import date, time
from decimal import Decimal
from enum import Enum
from typing import Optional, Union


class Collection(str, Enum):
    """Entity collections handled by the store gateway.

    Values double as the top-level keys of the backup file.
    """

    WORKSHOPS = "workshops"
    PARENTS = "parents"
    CHILDREN = "children"
    REGISTRATIONS = "registrations"
    PAYMENTS = "payments"
    COSTS = "costs"
    QUOTES = "quotes"
    INVOICES = "invoices"
    SUPPLIERS = "suppliers"
    LOCATIONS = "locations"
    CAMPAIGNS = "campaigns"
    REMINDERS = "reminders"


class WorkshopType(str, Enum):
    OPEN_DAY = "OpenDay"
    EVENT = "Evento"
    ONE_MONTH = "1 Mese"
    TWO_MONTHS = "2 Mesi"
    THREE_MONTHS = "3 Mesi"
    SCHOOL = "Scolastico"
    CAMPUS = "Campus"


class DayOfWeek(str, Enum):
    MONDAY = "Lunedì"
    TUESDAY = "Martedì"
    WEDNESDAY = "Mercoledì"
    THURSDAY = "Giovedì"
    FRIDAY = "Venerdì"
    SATURDAY = "Sabato"
    SUNDAY = "Domenica"


class ClientType(str, Enum):
    INDIVIDUAL = "persona fisica"
    COMPANY = "persona giuridica"


class ParentStatus(str, Enum):
    ACTIVE = "attivo"
    SUSPENDED = "sospeso"
    CEASED = "cessato"
    PROSPECT = "prospect"


class PaymentMethod(str, Enum):
    CASH = "cash"
    TRANSFER = "transfer"
    CARD = "card"
    UNSPECIFIED = "unspecified"


class QuoteStatus(str, Enum):
    SENT = "sent"
    APPROVED = "approved"
    REJECTED = "rejected"


class CampaignType(str, Enum):
    REMINDER = "sollecito"
    DEVELOPMENT = "sviluppo"


@dataclass(frozen=True)
class CompanyProfile:
    """Singleton profile of the operating business."""

    company_name: str = ""
    vat_number: str = ""
    address: str = ""
    email: str = ""
    phone: str = ""
    tax_regime: str = ""


@dataclass(frozen=True)
class IndividualIdentity:
    """Identity of a private person client."""

    name: str
    surname: str
    tax_code: Optional[str] = None

    @property
    def client_type(self) -> ClientType:
        return ClientType.INDIVIDUAL

    @property
    def display_name(self) -> str:
        return f"{self.name} {self.surname}".strip()


@dataclass(frozen=True)
class CompanyIdentity:
    """Identity of a legal entity client."""

    company_name: str
    vat_number: str

    @property
    def client_type(self) -> ClientType:
        return ClientType.COMPANY

    @property
    def display_name(self) -> str:
        return self.company_name


ClientIdentity = Union[IndividualIdentity, CompanyIdentity]


@dataclass(frozen=True)
class ContactInfo:
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    zip_code: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None


@dataclass(frozen=True)
class Parent:
    """Billing client who enrolls children in workshops."""

    identity: ClientIdentity
    contact: ContactInfo
    status: ParentStatus = ParentStatus.ACTIVE
    id: str = field(default="", kw_only=True)

    @property
    def client_type(self) -> ClientType:
        return self.identity.client_type

    @property
    def display_name(self) -> str:
        return self.identity.display_name


@dataclass(frozen=True)
class Child:
    parent_id: str
    name: str
    birth_date: date
    id: str = field(default="", kw_only=True)


@dataclass(frozen=True)
class Workshop:
    """Scheduled activity at a location.

    ``code`` and ``end_date`` are derived by the scheduling engine and stored
    alongside the record.
    """

    code: str
    name: str
    workshop_type: WorkshopType
    location_id: str
    start_date: date
    end_date: date
    day_of_week: DayOfWeek
    start_time: time
    end_time: time
    price: Decimal = Decimal("0")
    duration_in_months: Optional[int] = None
    id: str = field(default="", kw_only=True)


@dataclass(frozen=True)
class Registration:
    child_id: str
    workshop_id: str
    registration_date: date
    id: str = field(default="", kw_only=True)


@dataclass(frozen=True)
class Payment:
    """Money received from a client, tied to a workshop or a free description."""

    parent_id: str
    amount: Decimal
    payment_date: date
    method: PaymentMethod = PaymentMethod.UNSPECIFIED
    workshop_id: Optional[str] = None
    description: Optional[str] = None
    id: str = field(default="", kw_only=True)


@dataclass(frozen=True)
class OperationalCost:
    category: str
    sub_category: str
    amount: Decimal
    date: date
    method: PaymentMethod = PaymentMethod.UNSPECIFIED
    description: Optional[str] = None
    supplier_id: Optional[str] = None
    workshop_ids: tuple[str, ...] = ()
    location_id: Optional[str] = None
    id: str = field(default="", kw_only=True)


@dataclass(frozen=True)
class ExistingClient:
    """Quote recipient that is already a registered parent."""

    parent_id: str


@dataclass(frozen=True)
class PotentialClient:
    """Quote recipient that is not (yet) a client."""

    identity: ClientIdentity
    contact: ContactInfo

    @property
    def client_type(self) -> ClientType:
        return self.identity.client_type


QuoteRecipient = Union[ExistingClient, PotentialClient]


@dataclass(frozen=True)
class Quote:
    recipient: QuoteRecipient
    description: str
    amount: Decimal
    date: date
    status: QuoteStatus = QuoteStatus.SENT
    method: Optional[PaymentMethod] = None
    id: str = field(default="", kw_only=True)


@dataclass(frozen=True)
class Invoice:
    parent_id: str
    amount: Decimal
    sdi_number: str
    issue_date: date
    method: PaymentMethod = PaymentMethod.UNSPECIFIED
    id: str = field(default="", kw_only=True)


@dataclass(frozen=True)
class Supplier:
    name: str
    vat_number: Optional[str] = None
    contact: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    id: str = field(default="", kw_only=True)


@dataclass(frozen=True)
class Location:
    """Venue operated through a supplier, with a participant capacity."""

    supplier_id: str
    name: str
    address: str
    capacity: int
    short_name: str = ""
    zip_code: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    rental_cost: Optional[Decimal] = None
    distance_km: Optional[Decimal] = None
    color: Optional[str] = None
    id: str = field(default="", kw_only=True)


@dataclass(frozen=True)
class Campaign:
    """Message template sent to clients filtered by status."""

    name: str
    campaign_type: CampaignType
    subject: str
    body: str
    target_statuses: tuple[ParentStatus, ...] = ()
    id: str = field(default="", kw_only=True)


@dataclass(frozen=True)
class ReminderSetting:
    """Payment reminder rule.

    Reminding starts ``pre_warning_days`` before a due date and repeats every
    ``cadence_days`` days.
    """

    name: str
    pre_warning_days: int = 7
    cadence_days: int = 1
    enabled: bool = True
    id: str = field(default="", kw_only=True)


Entity = Union[
    Parent,
    Child,
    Workshop,
    Registration,
    Payment,
    OperationalCost,
    Quote,
    Invoice,
    Supplier,
    Location,
    Campaign,
    ReminderSetting,
]

ENTITY_TYPES: dict[Collection, type] = {
    Collection.WORKSHOPS: Workshop,
    Collection.PARENTS: Parent,
    Collection.CHILDREN: Child,
    Collection.REGISTRATIONS: Registration,
    Collection.PAYMENTS: Payment,
    Collection.COSTS: OperationalCost,
    Collection.QUOTES: Quote,
    Collection.INVOICES: Invoice,
    Collection.SUPPLIERS: Supplier,
    Collection.LOCATIONS: Location,
    Collection.CAMPAIGNS: Campaign,
    Collection.REMINDERS: ReminderSetting,
}


@dataclass(frozen=True)
class Snapshot:
    """Full in-memory copy of every collection, as loaded from the gateway."""

    company_profile: CompanyProfile = field(default_factory=CompanyProfile)
    workshops: tuple[Workshop, ...] = ()
    parents: tuple[Parent, ...] = ()
    children: tuple[Child, ...] = ()
    registrations: tuple[Registration, ...] = ()
    payments: tuple[Payment, ...] = ()
    costs: tuple[OperationalCost, ...] = ()
    quotes: tuple[Quote, ...] = ()
    invoices: tuple[Invoice, ...] = ()
    suppliers: tuple[Supplier, ...] = ()
    locations: tuple[Location, ...] = ()
    campaigns: tuple[Campaign, ...] = ()
    reminders: tuple[ReminderSetting, ...] = ()

    def records(self, collection: Collection) -> tuple:
        """Return the records held for a collection."""
        return getattr(self, collection.value)
