"""
Abstract Storage Interface

We define an abstract interface for the ledger collections.
This allows us to:
1. Keep editors and the dashboard decoupled from where data lives
2. Swap the in-memory session store for a persistent one later
3. Use the same contract in tests

The interface is intentionally simple - we're not building an ORM.
Each ledger collection (transactions, categories, budgets) exposes the
same small set of operations. Update and delete never raise for an
unknown id; they report it through their boolean result.

A persistent implementation would have to make update's
read-modify-write atomic per entity. The in-memory store is only
ever touched by one session, so it doesn't.
"""

from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

from finance_tracker.models.audit import AuditEvent
from finance_tracker.models.ledger import EntityKind


EntityT = TypeVar("EntityT", bound=BaseModel)


class EntityCollectionInterface(ABC, Generic[EntityT]):
    """
    Abstract interface for one ledger collection.

    Any storage implementation must implement these methods.
    """

    @property
    @abstractmethod
    def kind(self) -> EntityKind:
        """Which ledger collection this is."""
        pass

    @abstractmethod
    def add(self, entity: EntityT) -> EntityT:
        """
        Append an entity to the collection.

        The entity's id is ignored and replaced with a freshly
        generated one. No validation happens here.

        Args:
            entity: The entity to add

        Returns:
            The stored entity, carrying its new id
        """
        pass

    @abstractmethod
    def update(self, entity: EntityT) -> bool:
        """
        Replace the entry with the same id, wholesale.

        Args:
            entity: The full replacement record

        Returns:
            True if an entry was replaced, False if no entry
            has that id (nothing changes in that case)
        """
        pass

    @abstractmethod
    def delete(self, entity_id: str) -> bool:
        """
        Remove the entry with the given id.

        Nothing referencing the entity by name is touched.

        Args:
            entity_id: The entity's unique identifier

        Returns:
            True if an entry was removed, False if it didn't exist
        """
        pass

    @abstractmethod
    def get(self, entity_id: str) -> Optional[EntityT]:
        """
        Retrieve an entity by its ID.

        Returns:
            A copy of the entity if found, None otherwise
        """
        pass

    @abstractmethod
    def list(self) -> list[EntityT]:
        """
        All entities in insertion order.

        Returns:
            Copies of the stored entities
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove every entity."""
        pass

    def require(self, entity_id: str) -> EntityT:
        """
        Retrieve an entity that must exist.

        Raises:
            NotFoundError: If no entity has that id
        """
        entity = self.get(entity_id)
        if entity is None:
            raise NotFoundError(f"No entry in {self.kind.value} with id {entity_id}")
        return entity


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_entity(
        self,
        kind: EntityKind,
        entity_id: str,
    ) -> list[AuditEvent]:
        """
        Get all events for a specific entity.

        Returns:
            List of events in chronological order
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass
