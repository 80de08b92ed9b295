"""Abstract entity store interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

# Import entities directly to avoid circular import through domain/__init__.py
from workshopmgr.domain.entities import (
    Collection,
    CompanyProfile,
    Entity,
    Snapshot,
)


class Database(ABC):
    """Abstract entity store for workshopmgr.

    Every collection exposes the same four operations (list, add, update,
    remove). Filtering and aggregation happen in the domain layer over the
    full lists returned here.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Record operations
    @abstractmethod
    def list_records(self, collection: Collection) -> list[Entity]:
        """List all records of a collection."""
        pass

    @abstractmethod
    def get_record(self, collection: Collection, record_id: str) -> Optional[Entity]:
        """Get a record by ID."""
        pass

    @abstractmethod
    def add_record(self, collection: Collection, entity: Entity) -> str:
        """Store a new record. Assigns an ID when the entity has none. Returns the ID."""
        pass

    @abstractmethod
    def add_records(self, steps: Sequence[tuple[Collection, Entity]]) -> list[str]:
        """Store several new records atomically. Returns their IDs in order."""
        pass

    @abstractmethod
    def update_record(
        self, collection: Collection, record_id: str, changes: dict[str, Any]
    ) -> None:
        """Apply a partial update, keyed by domain field name."""
        pass

    @abstractmethod
    def remove_record(self, collection: Collection, record_id: str) -> None:
        """Remove a record."""
        pass

    @abstractmethod
    def remove_records(self, steps: Sequence[tuple[Collection, str]]) -> None:
        """Remove several records atomically: either all go or none do."""
        pass

    # Whole-store operations
    @abstractmethod
    def replace_all(self, snapshot: Snapshot) -> None:
        """Atomically replace every collection and the company profile."""
        pass

    @abstractmethod
    def get_company_profile(self) -> Optional[CompanyProfile]:
        """Get the company profile, or None if it was never saved."""
        pass

    @abstractmethod
    def save_company_profile(self, profile: CompanyProfile) -> None:
        """Create or overwrite the company profile."""
        pass

    def load_snapshot(self) -> Snapshot:
        """Read every collection into one immutable snapshot."""
        return Snapshot(
            company_profile=self.get_company_profile() or CompanyProfile(),
            **{
                collection.value: tuple(self.list_records(collection))
                for collection in Collection
            },
        )
