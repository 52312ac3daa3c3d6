"""
Core Data Models for Finance Tracker

These models define the schemas of everything the ledger holds:
transactions, categories and budgets. They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Be copyable so editors can work on drafts

Relationships between entities are BY NAME: Transaction.category and
Budget.category are plain strings matched against Category.name.
Nothing enforces that a matching Category exists, and renaming or
deleting a Category does not touch transactions or budgets.

Amounts are Decimal, never float. A transaction stores the MAGNITUDE
of its amount; whether it adds or subtracts is decided by its type.
"""

from datetime import date as calendar_date
from decimal import Decimal
from enum import Enum
from typing import Optional, Union
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
)


# Upper bound of a transaction description; settings may only lower it
MAX_DESCRIPTION_LENGTH = 100


def new_entity_id() -> str:
    """Generate a fresh identifier for a ledger entity."""
    return uuid4().hex


# =============================================================================
# ENUMS
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a transaction."""
    INCOME = "income"
    EXPENSE = "expense"


class EntityKind(str, Enum):
    """The three collections that make up the ledger."""
    TRANSACTIONS = "transactions"
    CATEGORIES = "categories"
    BUDGETS = "budgets"


# =============================================================================
# LEDGER ENTITIES
# =============================================================================

class Transaction(BaseModel):
    """
    A single income or expense entry.

    The amount is always stored as a non-negative magnitude.
    Use signed_amount when the direction matters.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(
        default_factory=new_entity_id,
        description="Unique transaction ID (assigned by the store on add)"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        decimal_places=2,
        description="Amount magnitude"
    )
    date: str = Field(
        ...,
        min_length=1,
        description="Calendar date as an ISO 8601 string (YYYY-MM-DD)"
    )
    description: Optional[str] = Field(
        default=None,
        max_length=MAX_DESCRIPTION_LENGTH,
        description="Optional free-text description"
    )
    category: str = Field(
        ...,
        min_length=1,
        description="Category name, matched against Category.name"
    )
    type: TransactionType = Field(
        ...,
        description="income or expense"
    )

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE

    @property
    def signed_amount(self) -> Decimal:
        """Amount with its sign derived from the type (negative for expenses)."""
        magnitude = abs(self.amount)
        return -magnitude if self.is_expense else magnitude

    @property
    def parsed_date(self) -> Optional[calendar_date]:
        """The date as a datetime.date, or None if it isn't valid ISO."""
        try:
            return calendar_date.fromisoformat(self.date)
        except (TypeError, ValueError):
            return None

    @classmethod
    def from_signed_amount(
        cls,
        amount: Union[Decimal, int, float, str],
        **fields,
    ) -> "Transaction":
        """
        Build a transaction from a signed amount.

        Negative amounts become expenses, everything else income,
        unless an explicit type is given. The stored amount is
        always the magnitude.
        """
        value = Decimal(str(amount))
        if "type" not in fields:
            fields["type"] = (
                TransactionType.EXPENSE if value < 0 else TransactionType.INCOME
            )
        return cls(amount=abs(value), **fields)


class Category(BaseModel):
    """A named category with a display color used in charts."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(
        default_factory=new_entity_id,
        description="Unique category ID"
    )
    name: str = Field(
        ...,
        min_length=1,
        description="Category name (join key for transactions and budgets)"
    )
    color: str = Field(
        ...,
        min_length=1,
        description="Display color, e.g. #0ea5e9"
    )


class Budget(BaseModel):
    """
    A spending budget for one category.

    spent_amount is entered by hand. It is NOT derived
    from transactions.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(
        default_factory=new_entity_id,
        description="Unique budget ID"
    )
    category: str = Field(
        ...,
        min_length=1,
        description="Category name this budget applies to"
    )
    budget_amount: Decimal = Field(
        ...,
        ge=0,
        decimal_places=2,
        description="Budgeted amount"
    )
    spent_amount: Decimal = Field(
        ...,
        ge=0,
        decimal_places=2,
        description="Amount spent so far"
    )


LedgerEntity = Union[Transaction, Category, Budget]

ENTITY_MODELS: dict[EntityKind, type[BaseModel]] = {
    EntityKind.TRANSACTIONS: Transaction,
    EntityKind.CATEGORIES: Category,
    EntityKind.BUDGETS: Budget,
}


# =============================================================================
# SNAPSHOT
# =============================================================================

class LedgerSnapshot(BaseModel):
    """
    Read-only view of the ledger for one computation.

    Collections are tuples of copies; mutating the store afterwards
    does not change a snapshot that was already taken.
    """
    model_config = ConfigDict(frozen=True)

    transactions: tuple[Transaction, ...] = ()
    categories: tuple[Category, ...] = ()
    budgets: tuple[Budget, ...] = ()
