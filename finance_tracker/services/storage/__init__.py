"""
Storage Services Package

Provides the abstract interface for ledger collections and the
in-memory, per-session implementation.
"""

from finance_tracker.services.storage.interface import (
    AuditStorageInterface,
    EntityCollectionInterface,
    NotFoundError,
    StorageError,
)
from finance_tracker.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryEntityCollection,
    LedgerStore,
)
from finance_tracker.services.storage.seed import (
    load_seed_ledger,
    seed_budgets,
    seed_categories,
    seed_transactions,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "EntityCollectionInterface",
    # Exceptions
    "NotFoundError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryEntityCollection",
    "LedgerStore",
    # Seed data
    "load_seed_ledger",
    "seed_budgets",
    "seed_categories",
    "seed_transactions",
]
