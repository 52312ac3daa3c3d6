"""
Sample Ledger Data

A fixed dataset a new session starts with, so the dashboard has
something to show before the user enters anything. It is not
user-configurable beyond switching it off (FINANCE_LOAD_SEED_DATA).
"""

from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from finance_tracker.models.audit import AuditEventBuilder
from finance_tracker.models.ledger import (
    Budget,
    Category,
    Transaction,
    TransactionType,
)
from finance_tracker.services.storage.memory import LedgerStore

if TYPE_CHECKING:
    from finance_tracker.audit.logger import AuditLogger


def seed_transactions() -> list[Transaction]:
    return [
        Transaction(
            id="1",
            amount=Decimal("3200.00"),
            date="2025-03-06",
            description="Salary",
            category="Income",
            type=TransactionType.INCOME,
        ),
        Transaction(
            id="2",
            amount=Decimal("1200.00"),
            date="2025-03-08",
            description="Monthly rent",
            category="Rent",
            type=TransactionType.EXPENSE,
        ),
        Transaction(
            id="3",
            amount=Decimal("120.50"),
            date="2025-03-10",
            description="Grocery shopping",
            category="Food",
            type=TransactionType.EXPENSE,
        ),
    ]


def seed_categories() -> list[Category]:
    return [
        Category(id="1", name="Food", color="#0ea5e9"),
        Category(id="2", name="Rent", color="#8b5cf6"),
        Category(id="3", name="Income", color="#10b981"),
    ]


def seed_budgets() -> list[Budget]:
    return [
        Budget(
            id="1",
            category="Food",
            budget_amount=Decimal("500.00"),
            spent_amount=Decimal("120.00"),
        ),
        Budget(
            id="2",
            category="Rent",
            budget_amount=Decimal("1200.00"),
            spent_amount=Decimal("1200.00"),
        ),
    ]


def load_seed_ledger(
    store: LedgerStore,
    audit_logger: Optional["AuditLogger"] = None,
) -> LedgerStore:
    """
    Replace the store's contents with the sample dataset.

    Seed entities keep their fixed ids ("1", "2", ...). Ids generated
    later by add() are uuid hex strings and can't collide with them.
    """
    store.reset()
    store.transactions.load(seed_transactions())
    store.categories.load(seed_categories())
    store.budgets.load(seed_budgets())

    if audit_logger is not None:
        audit_logger.log(AuditEventBuilder.ledger_seeded(store.counts()))

    return store
