"""
Derived View Models

Everything the dashboard shows is computed from a ledger snapshot
by the aggregation engine and returned in these models. None of
these values are stored in the ledger.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from finance_tracker.models.ledger import Transaction


NO_CATEGORY = "none"
UNKNOWN_MONTH = "Unknown"


class MonthlyPoint(BaseModel):
    """Income and expenses of one month (one bar group in the chart)."""
    model_config = ConfigDict(frozen=True)

    name: str
    income: Decimal = Decimal("0")
    expenses: Decimal = Decimal("0")


class CategorySlice(BaseModel):
    """One slice of the expense categories chart."""
    model_config = ConfigDict(frozen=True)

    name: str
    value: Decimal
    color: str


class TopCategory(BaseModel):
    """The category with the highest expenses."""
    model_config = ConfigDict(frozen=True)

    name: str = NO_CATEGORY
    amount: Decimal = Decimal("0")

    @property
    def is_none(self) -> bool:
        return self.name == NO_CATEGORY


class BudgetProgress(BaseModel):
    """How much of a budget has been used."""
    model_config = ConfigDict(frozen=True)

    budget_id: str
    category: str
    budget_amount: Decimal
    spent_amount: Decimal
    percent_used: float = Field(
        ...,
        ge=0.0,
        le=100.0,
        description="Share of the budget used, capped at 100"
    )
    remaining: Decimal
    over_budget: bool


class DashboardView(BaseModel):
    """
    The derived view of the ledger.

    Produced by AggregationEngine.compute(), read by the dashboard.
    """
    model_config = ConfigDict(frozen=True)

    total_income: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")
    expense_by_category: dict[str, Decimal] = Field(default_factory=dict)
    top_category: TopCategory = Field(default_factory=TopCategory)
    monthly_data: list[MonthlyPoint] = Field(default_factory=list)
    category_data: list[CategorySlice] = Field(default_factory=list)
    recent_transactions: list[Transaction] = Field(default_factory=list)
    budget_progress: list[BudgetProgress] = Field(default_factory=list)
    transaction_count: int = Field(default=0, ge=0)

    @property
    def has_transactions(self) -> bool:
        return self.transaction_count > 0
