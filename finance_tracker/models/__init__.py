"""
Data Models Package

This package contains all Pydantic models used in Finance Tracker.
All data flowing through the system must conform to these schemas.
"""

from finance_tracker.models.ledger import (
    ENTITY_MODELS,
    Budget,
    Category,
    EntityKind,
    LedgerEntity,
    LedgerSnapshot,
    Transaction,
    TransactionType,
    new_entity_id,
)
from finance_tracker.models.dashboard import (
    NO_CATEGORY,
    UNKNOWN_MONTH,
    BudgetProgress,
    CategorySlice,
    DashboardView,
    MonthlyPoint,
    TopCategory,
)
from finance_tracker.models.validation import (
    ValidationIssue,
    ValidationResult,
)
from finance_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "ENTITY_MODELS",
    "Budget",
    "Category",
    "EntityKind",
    "LedgerEntity",
    "LedgerSnapshot",
    "Transaction",
    "TransactionType",
    "new_entity_id",
    # Derived view
    "NO_CATEGORY",
    "UNKNOWN_MONTH",
    "BudgetProgress",
    "CategorySlice",
    "DashboardView",
    "MonthlyPoint",
    "TopCategory",
    # Validation
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
