"""JSON backup export and restore.

The backup file holds one camelCase record list per collection plus the
``companyProfile`` object. Amounts are written as JSON numbers, dates as ISO
strings and times as ``HH:MM``. Restoring replaces the whole store in one
transaction, and only after the entire file has been read successfully.
"""

import dataclasses
import json
import logging
import typing
from datetime import date, time
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Union

from dateutil import parser as date_parser

from workshopmgr.database.base import Database
from workshopmgr.domain.entities import (
    ENTITY_TYPES,
    ClientIdentity,
    ClientType,
    Collection,
    CompanyIdentity,
    CompanyProfile,
    ContactInfo,
    ExistingClient,
    IndividualIdentity,
    Parent,
    ParentStatus,
    PotentialClient,
    Quote,
    Snapshot,
)
from workshopmgr.domain.errors import ValidationError

logger = logging.getLogger(__name__)

COMPANY_PROFILE_KEY = "companyProfile"

# Collections added after the first backup format; older files may lack them
OPTIONAL_COLLECTIONS = frozenset({Collection.CAMPAIGNS, Collection.REMINDERS})

REQUIRED_KEYS: tuple[str, ...] = (COMPANY_PROFILE_KEY,) + tuple(
    collection.value for collection in Collection if collection not in OPTIONAL_COLLECTIONS
)

# Backup keys that don't follow the plain camelCase rule
_KEY_OVERRIDES = {
    "workshop_type": "type",
    "campaign_type": "type",
    "target_statuses": "targetStatus",
    "cadence_days": "cadence",
}

_IDENTITY_FIELDS = ("name", "surname", "tax_code", "company_name", "vat_number")
_CONTACT_FIELDS = tuple(field.name for field in dataclasses.fields(ContactInfo))


def camel_case(name: str) -> str:
    """``sub_category`` -> ``subCategory``."""
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _backup_key(field_name: str) -> str:
    return _KEY_OVERRIDES.get(field_name, camel_case(field_name))


def _encode(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, time):
        return value.strftime("%H:%M")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, tuple):
        return [_encode(item) for item in value]
    return value


def _decode(value: Any, annotation: Any) -> Any:
    """Convert a JSON value to the type a dataclass field is annotated with."""
    if value is None:
        return None
    origin = typing.get_origin(annotation)
    if origin is Union:
        # Optional[X]
        inner = next(arg for arg in typing.get_args(annotation) if arg is not type(None))
        return _decode(value, inner)
    if origin is tuple:
        item_type = typing.get_args(annotation)[0]
        return tuple(_decode(item, item_type) for item in value)
    if annotation is Decimal:
        return Decimal(str(value))
    if annotation is date:
        return date_parser.isoparse(value).date()
    if annotation is time:
        return time.fromisoformat(value)
    if annotation is int:
        return int(value)
    if isinstance(annotation, type) and issubclass(annotation, Enum):
        return annotation(value)
    return value


def _identity_to_json(identity: ClientIdentity) -> dict[str, Any]:
    values = {"clientType": identity.client_type.value}
    for name in _IDENTITY_FIELDS:
        value = getattr(identity, name, None)
        if value is not None:
            values[camel_case(name)] = value
    return values


def _identity_from_json(record: dict[str, Any]) -> ClientIdentity:
    if ClientType(record["clientType"]) == ClientType.COMPANY:
        return CompanyIdentity(
            company_name=record.get("companyName", ""), vat_number=record.get("vatNumber", "")
        )
    return IndividualIdentity(
        name=record.get("name", ""),
        surname=record.get("surname", ""),
        tax_code=record.get("taxCode"),
    )


def _contact_to_json(contact: ContactInfo) -> dict[str, Any]:
    return {
        camel_case(name): getattr(contact, name)
        for name in _CONTACT_FIELDS
        if getattr(contact, name) is not None
    }


def _contact_from_json(record: dict[str, Any]) -> ContactInfo:
    return ContactInfo(**{name: record.get(camel_case(name)) for name in _CONTACT_FIELDS})


def record_to_json(entity: Any) -> dict[str, Any]:
    """Encode one entity as a backup record; None fields are omitted."""
    if isinstance(entity, Parent):
        return {
            "id": entity.id,
            **_identity_to_json(entity.identity),
            **_contact_to_json(entity.contact),
            "status": entity.status.value,
        }

    record: dict[str, Any] = {}
    for field in dataclasses.fields(entity):
        value = getattr(entity, field.name)
        if field.name == "recipient":
            if isinstance(value, ExistingClient):
                record["parentId"] = value.parent_id
            else:
                record["potentialClient"] = {
                    **_identity_to_json(value.identity),
                    **_contact_to_json(value.contact),
                }
        elif value is not None:
            record[_backup_key(field.name)] = _encode(value)
    return record


def record_from_json(collection: Collection, record: dict[str, Any]) -> Any:
    """Decode one backup record into the collection's entity type."""
    if collection == Collection.PARENTS:
        return Parent(
            id=record["id"],
            identity=_identity_from_json(record),
            contact=_contact_from_json(record),
            status=ParentStatus(record.get("status", ParentStatus.ACTIVE.value)),
        )

    entity_type = ENTITY_TYPES[collection]
    hints = typing.get_type_hints(entity_type)
    values: dict[str, Any] = {}
    for field in dataclasses.fields(entity_type):
        if field.name == "recipient":
            continue
        key = _backup_key(field.name)
        if key in record:
            values[field.name] = _decode(record[key], hints[field.name])

    if entity_type is Quote:
        if record.get("parentId"):
            values["recipient"] = ExistingClient(parent_id=record["parentId"])
        else:
            details = record["potentialClient"]
            values["recipient"] = PotentialClient(
                identity=_identity_from_json(details), contact=_contact_from_json(details)
            )
    return entity_type(**values)


def snapshot_to_backup(snapshot: Snapshot) -> dict[str, Any]:
    """Encode a full store snapshot as a backup document."""
    data: dict[str, Any] = {
        COMPANY_PROFILE_KEY: {
            camel_case(name): value
            for name, value in dataclasses.asdict(snapshot.company_profile).items()
        }
    }
    for collection in Collection:
        data[collection.value] = [record_to_json(entity) for entity in snapshot.records(collection)]
    return data


def snapshot_from_backup(data: Any) -> Snapshot:
    """Decode a backup document.

    Raises:
        ValidationError: If a required key is missing or a record is malformed;
            nothing is decoded partially
    """
    if not isinstance(data, dict):
        raise ValidationError("Backup must be a JSON object")

    missing = [key for key in REQUIRED_KEYS if key not in data]
    if missing:
        raise ValidationError(f"Backup is missing required key(s): {', '.join(missing)}")

    profile_data = data[COMPANY_PROFILE_KEY]
    if profile_data is None:
        profile_data = {}
    if not isinstance(profile_data, dict):
        raise ValidationError(f"Backup key '{COMPANY_PROFILE_KEY}' must be an object")
    profile = CompanyProfile(
        **{
            field.name: profile_data.get(camel_case(field.name), "")
            for field in dataclasses.fields(CompanyProfile)
        }
    )

    collections: dict[str, tuple] = {}
    for collection in Collection:
        records = data.get(collection.value, [])
        if not isinstance(records, list):
            raise ValidationError(f"Backup key '{collection.value}' must be a list")
        decoded = []
        for index, record in enumerate(records):
            try:
                decoded.append(record_from_json(collection, record))
            except (KeyError, ValueError, TypeError, AttributeError, StopIteration) as e:
                raise ValidationError(
                    f"Invalid {collection.value} record at position {index}: {e}"
                ) from e
        collections[collection.value] = tuple(decoded)

    return Snapshot(company_profile=profile, **collections)


class BackupService:
    """Service for exporting and restoring the whole store."""

    def __init__(self, db: Database):
        """Initialize backup service.

        Args:
            db: Database instance
        """
        self.db = db

    def export_data(self) -> dict[str, Any]:
        """Backup document of the current store contents."""
        return snapshot_to_backup(self.db.load_snapshot())

    def export_json(self, path: Union[str, Path]) -> Path:
        """Write a backup file.

        Returns:
            The written path
        """
        path = Path(path)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.export_data(), f, ensure_ascii=False, indent=2)
        logger.info("Backup written to %s", path)
        return path

    def import_data(self, data: Any) -> dict[str, int]:
        """Replace the store contents with a backup document.

        Returns:
            Number of restored records per collection

        Raises:
            ValidationError: If the document is incomplete or malformed; the
                store is left untouched
        """
        snapshot = snapshot_from_backup(data)
        self.db.replace_all(snapshot)
        counts = {collection.value: len(snapshot.records(collection)) for collection in Collection}
        logger.info("Backup restored: %d records", sum(counts.values()))
        return counts

    def import_json(self, path: Union[str, Path]) -> dict[str, int]:
        """Restore from a backup file.

        Raises:
            ValidationError: If the file is not valid JSON or not a valid backup
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Backup file is not valid JSON: {e}") from e
        return self.import_data(data)
