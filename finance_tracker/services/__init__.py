"""Services package."""

from finance_tracker.services.storage import (
    AuditStorageInterface,
    EntityCollectionInterface,
    InMemoryAuditStorage,
    InMemoryEntityCollection,
    LedgerStore,
    NotFoundError,
    StorageError,
    load_seed_ledger,
)

__all__ = [
    "AuditStorageInterface",
    "EntityCollectionInterface",
    "InMemoryAuditStorage",
    "InMemoryEntityCollection",
    "LedgerStore",
    "NotFoundError",
    "StorageError",
    "load_seed_ledger",
]
