"""
Aggregation Engine

Turns a ledger snapshot into the dashboard's derived view: totals,
per-category expenses, the top category, the monthly series, chart
slices, the recent activity list and budget progress.

The engine is a pure function of its input. It never mutates the
snapshot and keeps no state between calls: the view is recomputed
from scratch for every snapshot, there is no invalidation to get wrong.

Sign handling: expenses are always summed as abs(amount), so the
totals are right whichever way an amount's sign was stored.

Ordering rules (deterministic):
- expense_by_category, monthly_data and category_data follow the
  order in which a key is first seen in the transaction list
- top_category ties go to the category seen first
- recent_transactions are sorted by date descending; equal dates keep
  their ledger order, dates that don't parse come last

Monthly grouping is keyed by month AND year by default ("Mar 2025"),
so March 2024 and March 2025 are separate bars. Set month_key_format
to "%b" to group by month name only. Dates that don't parse are
grouped under "Unknown" rather than failing the whole view.
"""

from datetime import date as calendar_date
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable, Optional

from finance_tracker.models.dashboard import (
    UNKNOWN_MONTH,
    BudgetProgress,
    CategorySlice,
    DashboardView,
    MonthlyPoint,
    TopCategory,
)
from finance_tracker.models.ledger import (
    Budget,
    Category,
    LedgerSnapshot,
    Transaction,
)

if TYPE_CHECKING:
    from finance_tracker.audit.logger import AuditLogger


ZERO = Decimal("0")

# Fixed English month names, independent of the process locale
MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

DEFAULT_CATEGORY_COLOR = "#94a3b8"
DEFAULT_RECENT_LIMIT = 5
DEFAULT_MONTH_KEY_FORMAT = "%b %Y"


def _recency_key(transaction: Transaction) -> tuple:
    parsed = transaction.parsed_date
    if parsed is None:
        return (False, calendar_date.min)
    return (True, parsed)


class AggregationEngine:
    """
    Computes the dashboard view from a ledger snapshot.

    GUARANTEES:
    - Never raises on well-typed input, including malformed dates
    - Never mutates its input
    - An empty ledger gives zero totals and the "none" top category
    """

    def __init__(
        self,
        recent_limit: int = DEFAULT_RECENT_LIMIT,
        default_color: str = DEFAULT_CATEGORY_COLOR,
        month_key_format: str = DEFAULT_MONTH_KEY_FORMAT,
        audit_logger: Optional["AuditLogger"] = None,
    ):
        self._recent_limit = recent_limit
        self._default_color = default_color
        self._month_key_format = month_key_format
        self._audit_logger = audit_logger

    def compute(self, snapshot: LedgerSnapshot) -> DashboardView:
        """Derive the full dashboard view from a snapshot."""
        transactions = snapshot.transactions

        total_income = self.total_income(transactions)
        total_expenses = self.total_expenses(transactions)
        expense_by_category = self.expense_by_category(transactions)
        monthly_data = self.monthly_data(transactions)

        view = DashboardView(
            total_income=total_income,
            total_expenses=total_expenses,
            balance=total_income - total_expenses,
            expense_by_category=expense_by_category,
            top_category=self.top_category(expense_by_category),
            monthly_data=monthly_data,
            category_data=self.category_data(expense_by_category, snapshot.categories),
            recent_transactions=self.recent_transactions(transactions),
            budget_progress=self.budget_progress(snapshot.budgets),
            transaction_count=len(transactions),
        )

        if self._audit_logger is not None:
            self._audit_logger.log_dashboard_computed(
                transaction_count=len(transactions),
                month_count=len(monthly_data),
                category_count=len(expense_by_category),
            )

        return view

    # ------------------------------------------------------------------
    # Totals
    # ------------------------------------------------------------------

    def total_income(self, transactions: Iterable[Transaction]) -> Decimal:
        return sum((t.amount for t in transactions if t.is_income), ZERO)

    def total_expenses(self, transactions: Iterable[Transaction]) -> Decimal:
        return sum((abs(t.amount) for t in transactions if t.is_expense), ZERO)

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def expense_by_category(
        self,
        transactions: Iterable[Transaction],
    ) -> dict[str, Decimal]:
        """Expense totals per category name; categories without expenses are absent."""
        totals: dict[str, Decimal] = {}
        for t in transactions:
            if not t.is_expense:
                continue
            totals[t.category] = totals.get(t.category, ZERO) + abs(t.amount)
        return totals

    def top_category(self, expense_by_category: dict[str, Decimal]) -> TopCategory:
        top: Optional[TopCategory] = None
        for name, amount in expense_by_category.items():
            # Strict comparison: the first category wins a tie
            if top is None or amount > top.amount:
                top = TopCategory(name=name, amount=amount)
        return top or TopCategory()

    def category_data(
        self,
        expense_by_category: dict[str, Decimal],
        categories: Iterable[Category],
    ) -> list[CategorySlice]:
        """Chart slices, colored by the Category with the same name."""
        colors: dict[str, str] = {}
        for category in categories:
            # Duplicate names: the first category keeps its color
            colors.setdefault(category.name, category.color)

        return [
            CategorySlice(
                name=name,
                value=value,
                color=colors.get(name, self._default_color),
            )
            for name, value in expense_by_category.items()
        ]

    # ------------------------------------------------------------------
    # Time series
    # ------------------------------------------------------------------

    def month_key(self, transaction: Transaction) -> str:
        """Group key of the transaction's month, "Unknown" for bad dates."""
        parsed = transaction.parsed_date
        if parsed is None:
            return UNKNOWN_MONTH
        fmt = (
            self._month_key_format
            .replace("%b", MONTH_ABBREVIATIONS[parsed.month - 1])
            .replace("%B", MONTH_NAMES[parsed.month - 1])
        )
        return parsed.strftime(fmt)

    def monthly_data(self, transactions: Iterable[Transaction]) -> list[MonthlyPoint]:
        groups: dict[str, dict[str, Decimal]] = {}

        for t in transactions:
            key = self.month_key(t)
            if key not in groups:
                groups[key] = {"income": ZERO, "expenses": ZERO}
            if t.is_income:
                groups[key]["income"] += t.amount
            else:
                groups[key]["expenses"] += abs(t.amount)

        return [
            MonthlyPoint(name=key, income=sums["income"], expenses=sums["expenses"])
            for key, sums in groups.items()
        ]

    def recent_transactions(
        self,
        transactions: Iterable[Transaction],
    ) -> list[Transaction]:
        # Unparseable dates sort last; sorted() stays stable with reverse=True
        ordered = sorted(transactions, key=_recency_key, reverse=True)
        return ordered[:self._recent_limit]

    # ------------------------------------------------------------------
    # Budgets
    # ------------------------------------------------------------------

    def budget_progress(self, budgets: Iterable[Budget]) -> list[BudgetProgress]:
        return [self._progress_for(budget) for budget in budgets]

    def _progress_for(self, budget: Budget) -> BudgetProgress:
        if budget.budget_amount > 0:
            ratio = float(budget.spent_amount / budget.budget_amount * 100)
            percent = min(ratio, 100.0)
        else:
            percent = 100.0 if budget.spent_amount > 0 else 0.0

        return BudgetProgress(
            budget_id=budget.id,
            category=budget.category,
            budget_amount=budget.budget_amount,
            spent_amount=budget.spent_amount,
            percent_used=percent,
            remaining=budget.budget_amount - budget.spent_amount,
            over_budget=budget.spent_amount > budget.budget_amount,
        )


def compute_dashboard(
    transactions: Iterable[Transaction],
    categories: Iterable[Category] = (),
    budgets: Iterable[Budget] = (),
    **engine_options,
) -> DashboardView:
    """Convenience wrapper: aggregate plain collections with a default engine."""
    snapshot = LedgerSnapshot(
        transactions=tuple(transactions),
        categories=tuple(categories),
        budgets=tuple(budgets),
    )
    return AggregationEngine(**engine_options).compute(snapshot)
