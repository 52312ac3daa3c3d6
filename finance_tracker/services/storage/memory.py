"""
In-Memory Storage Implementation

The ledger lives in memory for the duration of one session.
There is no persistence: a new session starts from the seed data
(or empty) and everything is gone when it ends.

The store is a plain object. It is created once per session by
create_app_components() and handed to everything that needs it;
there is no module-level instance.
"""

from collections import deque
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Generic, Iterable, Optional

import structlog

from finance_tracker.models.audit import AuditEvent, AuditEventBuilder
from finance_tracker.models.ledger import (
    ENTITY_MODELS,
    Budget,
    Category,
    EntityKind,
    LedgerSnapshot,
    Transaction,
    new_entity_id,
)
from finance_tracker.services.storage.interface import (
    AuditStorageInterface,
    EntityCollectionInterface,
    EntityT,
)

if TYPE_CHECKING:
    from finance_tracker.audit.logger import AuditLogger


logger = structlog.get_logger(__name__)


MAX_LABEL_LENGTH = 80


def entity_label(entity) -> str:
    """Short human-readable label for audit messages."""
    label = getattr(entity, "id", "?")
    for attr in ("description", "name", "category"):
        value = getattr(entity, attr, None)
        if value:
            label = str(value)
            break
    if len(label) > MAX_LABEL_LENGTH:
        return label[:MAX_LABEL_LENGTH - 3] + "..."
    return label


class InMemoryEntityCollection(EntityCollectionInterface[EntityT], Generic[EntityT]):
    """
    One ledger collection held in a Python list.

    Entities are copied on the way in and on the way out, so a caller
    holding an entity (e.g. an editor's draft) can't change the store
    by mutating it.
    """

    def __init__(
        self,
        kind: EntityKind,
        audit_logger: Optional["AuditLogger"] = None,
    ):
        self._kind = kind
        self._model = ENTITY_MODELS[kind]
        self._items: list[EntityT] = []
        self._audit_logger = audit_logger

    @property
    def kind(self) -> EntityKind:
        return self._kind

    @property
    def model(self) -> type:
        return self._model

    def add(self, entity: EntityT) -> EntityT:
        stored = entity.model_copy(update={"id": new_entity_id()}, deep=True)
        # Built before the append: nothing is stored if this fails
        event = AuditEventBuilder.entity_added(
            kind=self._kind,
            entity_id=stored.id,
            label=entity_label(stored),
        )
        self._items.append(stored)

        self._audit(event)
        return stored.model_copy(deep=True)

    def update(self, entity: EntityT) -> bool:
        for index, existing in enumerate(self._items):
            if existing.id == entity.id:
                event = AuditEventBuilder.entity_updated(
                    kind=self._kind,
                    entity_id=entity.id,
                    label=entity_label(entity),
                )
                self._items[index] = entity.model_copy(deep=True)
                self._audit(event)
                return True

        self._audit(AuditEventBuilder.update_target_missing(
            kind=self._kind,
            entity_id=entity.id,
        ))
        return False

    def delete(self, entity_id: str) -> bool:
        remaining = [item for item in self._items if item.id != entity_id]
        if len(remaining) == len(self._items):
            self._audit(AuditEventBuilder.delete_target_missing(
                kind=self._kind,
                entity_id=entity_id,
            ))
            return False

        self._items = remaining
        self._audit(AuditEventBuilder.entity_deleted(
            kind=self._kind,
            entity_id=entity_id,
        ))
        return True

    def get(self, entity_id: str) -> Optional[EntityT]:
        for item in self._items:
            if item.id == entity_id:
                return item.model_copy(deep=True)
        return None

    def list(self) -> list[EntityT]:
        return [item.model_copy(deep=True) for item in self._items]

    def clear(self) -> None:
        self._items = []

    def load(self, entities: Iterable[EntityT]) -> None:
        """Append entities keeping their ids (used for seed data)."""
        for entity in entities:
            self._items.append(entity.model_copy(deep=True))

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, entity_id: object) -> bool:
        return any(item.id == entity_id for item in self._items)

    def _audit(self, event: AuditEvent) -> None:
        if self._audit_logger is not None:
            self._audit_logger.log(event)


class LedgerStore(Mapping[EntityKind, InMemoryEntityCollection]):
    """
    The single source of truth for the session's ledger.

    Behaves as a mapping from EntityKind to that kind's collection:

        store[EntityKind.BUDGETS].add(budget)
    """

    def __init__(self, audit_logger: Optional["AuditLogger"] = None):
        self._audit_logger = audit_logger
        self._collections: dict[EntityKind, InMemoryEntityCollection] = {
            kind: InMemoryEntityCollection(kind, audit_logger=audit_logger)
            for kind in EntityKind
        }

    def __getitem__(self, kind: EntityKind) -> InMemoryEntityCollection:
        return self._collections[EntityKind(kind)]

    def __iter__(self) -> Iterator[EntityKind]:
        return iter(self._collections)

    def __len__(self) -> int:
        return len(self._collections)

    @property
    def transactions(self) -> InMemoryEntityCollection[Transaction]:
        return self._collections[EntityKind.TRANSACTIONS]

    @property
    def categories(self) -> InMemoryEntityCollection[Category]:
        return self._collections[EntityKind.CATEGORIES]

    @property
    def budgets(self) -> InMemoryEntityCollection[Budget]:
        return self._collections[EntityKind.BUDGETS]

    def snapshot(self) -> LedgerSnapshot:
        """Take a read-only copy of the ledger for one computation."""
        return LedgerSnapshot(
            transactions=tuple(self.transactions.list()),
            categories=tuple(self.categories.list()),
            budgets=tuple(self.budgets.list()),
        )

    def counts(self) -> dict[str, int]:
        return {kind.value: len(collection) for kind, collection in self._collections.items()}

    def reset(self) -> None:
        """Empty every collection."""
        for collection in self._collections.values():
            collection.clear()
        logger.info("ledger_reset")


class InMemoryAuditStorage(AuditStorageInterface):
    """
    Bounded in-memory audit log.

    Keeps the most recent `max_events` events; older ones fall off.
    """

    def __init__(self, max_events: int = 500):
        self._events: deque[AuditEvent] = deque(maxlen=max_events)

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_events_by_entity(
        self,
        kind: EntityKind,
        entity_id: str,
    ) -> list[AuditEvent]:
        return [
            event for event in self._events
            if event.entity_kind == kind and event.entity_id == entity_id
        ]

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]

    def __len__(self) -> int:
        return len(self._events)
