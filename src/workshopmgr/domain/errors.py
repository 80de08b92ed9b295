"""Shared domain error messages and error types."""

from typing import Sequence, Union


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic.

    Carries every field-level message collected during validation so callers
    can show all problems in one pass.
    """

    def __init__(self, messages: Union[str, Sequence[str]]):
        if isinstance(messages, str):
            messages = [messages]
        self.messages = list(messages)
        super().__init__("; ".join(self.messages))


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class StorageError(RuntimeError):
    """The entity store failed to read or persist records."""


def record_not_found(kind: str, record_id: str) -> str:
    """Return message for a missing record."""
    return f"{kind} {record_id} not found"


def duplicate_registration(child_name: str, workshop_name: str) -> str:
    """Return message for a child already registered to a workshop."""
    return f"{child_name} is already registered to '{workshop_name}'"


def capacity_exceeded(workshop_name: str, capacity: int) -> str:
    """Return message for a workshop that has no seats left."""
    return f"'{workshop_name}' is full (capacity {capacity})"


def _plural(count: int, singular: str, plural: str) -> str:
    return f"{count} {singular if count == 1 else plural}"


def supplier_delete_blocked(supplier_id: str, location_count: int) -> str:
    """Return message when a supplier still has locations attached."""
    return (
        f"Cannot delete supplier {supplier_id}: it has "
        f"{_plural(location_count, 'location', 'locations')}. "
        "Please reassign or delete them first."
    )


def location_delete_blocked(location_id: str, workshop_count: int) -> str:
    """Return message when a location is still used by workshops."""
    return (
        f"Cannot delete location {location_id}: it is used by "
        f"{_plural(workshop_count, 'workshop', 'workshops')}. "
        "Please move or delete them first."
    )
