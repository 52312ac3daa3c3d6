"""Tests for the dashboard aggregation engine."""

import pytest
from decimal import Decimal

from finance_tracker.aggregation import AggregationEngine, compute_dashboard
from finance_tracker.audit import AuditLogger
from finance_tracker.models.audit import AuditEventType
from finance_tracker.models.dashboard import NO_CATEGORY, UNKNOWN_MONTH
from finance_tracker.models.ledger import (
    Budget,
    Category,
    LedgerSnapshot,
    Transaction,
    TransactionType,
)
from finance_tracker.services.storage import (
    InMemoryAuditStorage,
    seed_budgets,
    seed_categories,
    seed_transactions,
)


def expense(amount: str, category: str, date: str = "2025-03-10", **kw) -> Transaction:
    return Transaction(
        amount=Decimal(amount), date=date, category=category,
        type=TransactionType.EXPENSE, **kw,
    )


def income(amount: str, date: str = "2025-03-06", category: str = "Income", **kw) -> Transaction:
    return Transaction(
        amount=Decimal(amount), date=date, category=category,
        type=TransactionType.INCOME, **kw,
    )


@pytest.fixture
def engine():
    return AggregationEngine()


class TestTotals:
    """Tests for income, expenses and balance."""

    def test_seed_scenario(self, engine):
        """The sample ledger gives the documented figures."""
        view = engine.compute(LedgerSnapshot(
            transactions=tuple(seed_transactions()),
            categories=tuple(seed_categories()),
        ))

        assert view.total_income == Decimal("3200")
        assert view.total_expenses == Decimal("1320.50")
        assert view.balance == Decimal("1879.50")
        assert view.expense_by_category == {
            "Rent": Decimal("1200"),
            "Food": Decimal("120.50"),
        }
        assert view.top_category.name == "Rent"
        assert view.top_category.amount == Decimal("1200")

    def test_balance_identity(self, engine):
        transactions = [
            income("1000.10"),
            expense("250.05", "Food"),
            income("15", date="2025-04-01"),
            expense("999.99", "Rent", date="2024-12-31"),
        ]
        view = compute_dashboard(transactions)
        assert view.balance == view.total_income - view.total_expenses
        assert view.total_expenses == Decimal("1250.04")

    def test_expenses_use_magnitude_regardless_of_sign(self, engine):
        """An expense converted from a signed amount counts the same."""
        signed = Transaction.from_signed_amount("-1200", date="2025-03-08", category="Rent")
        unsigned = expense("1200", "Rent", date="2025-03-08")

        assert engine.total_expenses([signed]) == engine.total_expenses([unsigned])
        # Built without validation, as a foreign source might
        raw = Transaction.model_construct(
            id="x", amount=Decimal("-1200"), date="2025-03-08",
            description=None, category="Rent", type=TransactionType.EXPENSE,
        )
        assert engine.total_expenses([raw]) == Decimal("1200")
        assert engine.expense_by_category([raw]) == {"Rent": Decimal("1200")}

    def test_decimal_sums_are_exact(self, engine):
        transactions = [expense("0.10", "Food") for _ in range(3)]
        assert engine.total_expenses(transactions) == Decimal("0.30")

    def test_empty_ledger(self, engine):
        view = engine.compute(LedgerSnapshot())

        assert view.total_income == 0
        assert view.total_expenses == 0
        assert view.balance == 0
        assert view.expense_by_category == {}
        assert view.top_category.name == NO_CATEGORY
        assert view.top_category.amount == 0
        assert view.monthly_data == []
        assert view.category_data == []
        assert view.recent_transactions == []
        assert view.has_transactions is False


class TestCategories:
    """Tests for per-category expenses and the top category."""

    def test_income_only_categories_are_absent(self, engine):
        totals = engine.expense_by_category([income("100", category="Salary"), expense("5", "Food")])
        assert "Salary" not in totals
        assert totals == {"Food": Decimal("5")}

    def test_order_is_first_occurrence(self, engine):
        totals = engine.expense_by_category([
            expense("1", "Food"), expense("1", "Rent"), expense("1", "Food"),
        ])
        assert list(totals) == ["Food", "Rent"]
        assert totals["Food"] == Decimal("2")

    def test_top_category(self, engine):
        top = engine.top_category({"Food": Decimal("120.50"), "Rent": Decimal("1200.00")})
        assert top.name == "Rent"
        assert top.amount == Decimal("1200.00")

    def test_top_category_tie_goes_to_first(self, engine):
        top = engine.top_category({"Food": Decimal("50"), "Rent": Decimal("50")})
        assert top.name == "Food"

    def test_category_data_colors(self, engine):
        categories = [
            Category(name="Food", color="#0ea5e9"),
            Category(name="Rent", color="#8b5cf6"),
        ]
        slices = engine.category_data(
            {"Rent": Decimal("1200"), "Travel": Decimal("300")},
            categories,
        )
        assert [(s.name, s.color) for s in slices] == [
            ("Rent", "#8b5cf6"),
            ("Travel", "#94a3b8"),
        ]
        assert slices[1].value == Decimal("300")

    def test_category_data_custom_default_color(self):
        engine = AggregationEngine(default_color="#cccccc")
        slices = engine.category_data({"Travel": Decimal("1")}, [])
        assert slices[0].color == "#cccccc"

    def test_category_match_is_exact_string(self, engine):
        slices = engine.category_data(
            {"food": Decimal("1")},
            [Category(name="Food", color="#0ea5e9")],
        )
        assert slices[0].color == "#94a3b8"


class TestMonthlyData:
    """Tests for the monthly series."""

    def test_groups_income_and_expenses(self, engine):
        points = engine.monthly_data([
            income("3200", date="2025-03-06"),
            expense("1200", "Rent", date="2025-03-08"),
            expense("20", "Food", date="2025-04-02"),
        ])
        assert [p.name for p in points] == ["Mar 2025", "Apr 2025"]
        assert points[0].income == Decimal("3200")
        assert points[0].expenses == Decimal("1200")
        assert points[1].income == Decimal("0")
        assert points[1].expenses == Decimal("20")

    def test_order_is_first_occurrence_not_calendar(self, engine):
        points = engine.monthly_data([
            expense("1", "Food", date="2025-05-01"),
            expense("1", "Food", date="2025-01-01"),
            expense("1", "Food", date="2025-05-20"),
        ])
        assert [p.name for p in points] == ["May 2025", "Jan 2025"]
        assert points[0].expenses == Decimal("2")

    def test_years_are_not_conflated(self, engine):
        points = engine.monthly_data([
            expense("1", "Food", date="2024-03-01"),
            expense("1", "Food", date="2025-03-01"),
        ])
        assert [p.name for p in points] == ["Mar 2024", "Mar 2025"]

    def test_month_only_grouping(self):
        engine = AggregationEngine(month_key_format="%b")
        points = engine.monthly_data([
            expense("1", "Food", date="2024-03-01"),
            expense("2", "Food", date="2025-03-01"),
        ])
        assert [p.name for p in points] == ["Mar"]
        assert points[0].expenses == Decimal("3")

    def test_full_month_names_ignore_locale(self):
        engine = AggregationEngine(month_key_format="%B %Y")
        points = engine.monthly_data([expense("1", "Food", date="2025-03-01")])
        assert [p.name for p in points] == ["March 2025"]

    def test_unparseable_date_goes_to_unknown(self, engine):
        points = engine.monthly_data([
            expense("1", "Food", date="sometime"),
            expense("2", "Food", date="2025-02-30"),
        ])
        assert [p.name for p in points] == [UNKNOWN_MONTH]
        assert points[0].expenses == Decimal("3")


class TestRecentTransactions:
    """Tests for the recent activity list."""

    def test_truncated_and_sorted_descending(self, engine):
        dates = [
            "2025-03-01", "2025-03-07", "2025-02-15", "2025-03-04",
            "2025-01-30", "2025-03-09", "2025-03-02",
        ]
        recent = engine.recent_transactions([expense("1", "Food", date=d) for d in dates])

        assert len(recent) == 5
        recent_dates = [t.date for t in recent]
        assert recent_dates == sorted(recent_dates, reverse=True)
        assert len(set(recent_dates)) == 5
        assert recent_dates[0] == "2025-03-09"

    def test_ties_keep_ledger_order(self, engine):
        a = expense("1", "Food", date="2025-03-01", description="a")
        b = expense("1", "Food", date="2025-03-01", description="b")
        c = expense("1", "Food", date="2025-03-02", description="c")
        recent = engine.recent_transactions([a, b, c])
        assert [t.description for t in recent] == ["c", "a", "b"]

    def test_sorted_by_calendar_date(self, engine):
        """Order follows the parsed date, unparseable dates come last."""
        recent = engine.recent_transactions([
            expense("1", "Food", date="not a date", description="bad"),
            expense("1", "Food", date="2025-01-10", description="jan"),
            expense("1", "Food", date="2025-12-01", description="dec"),
        ])
        assert [t.description for t in recent] == ["dec", "jan", "bad"]

    def test_limit_is_configurable(self):
        engine = AggregationEngine(recent_limit=2)
        recent = engine.recent_transactions(
            [expense("1", "Food", date=f"2025-03-0{i}") for i in range(1, 6)]
        )
        assert [t.date for t in recent] == ["2025-03-05", "2025-03-04"]

    def test_input_is_not_mutated(self, engine):
        transactions = [
            expense("1", "Food", date="2025-01-01"),
            expense("1", "Food", date="2025-02-01"),
        ]
        snapshot = LedgerSnapshot(transactions=tuple(transactions))
        engine.compute(snapshot)
        assert [t.date for t in snapshot.transactions] == ["2025-01-01", "2025-02-01"]


class TestBudgetProgress:
    """Tests for budget usage."""

    def test_seed_budgets(self, engine):
        progress = engine.budget_progress(seed_budgets())
        food, rent = progress
        assert food.percent_used == pytest.approx(24.0)
        assert food.remaining == Decimal("380")
        assert food.over_budget is False
        assert rent.percent_used == pytest.approx(100.0)
        assert rent.remaining == Decimal("0")

    def test_over_budget_is_capped(self, engine):
        (progress,) = engine.budget_progress([
            Budget(category="Food", budget_amount=Decimal("100"), spent_amount=Decimal("150")),
        ])
        assert progress.percent_used == 100.0
        assert progress.over_budget is True
        assert progress.remaining == Decimal("-50")

    def test_zero_budget(self, engine):
        unused, used = engine.budget_progress([
            Budget(category="A", budget_amount=Decimal("0"), spent_amount=Decimal("0")),
            Budget(category="B", budget_amount=Decimal("0"), spent_amount=Decimal("5")),
        ])
        assert unused.percent_used == 0.0
        assert used.percent_used == 100.0

    def test_budgets_are_not_derived_from_transactions(self, engine):
        view = engine.compute(LedgerSnapshot(
            transactions=(expense("400", "Food"),),
            budgets=(Budget(category="Food", budget_amount=Decimal("500"), spent_amount=Decimal("0")),),
        ))
        assert view.budget_progress[0].spent_amount == Decimal("0")


class TestEngineAuditing:
    def test_compute_logs_event(self):
        storage = InMemoryAuditStorage()
        engine = AggregationEngine(audit_logger=AuditLogger(storage))
        engine.compute(LedgerSnapshot(transactions=tuple(seed_transactions())))

        event = storage.get_recent_events(1)[0]
        assert event.event_type == AuditEventType.DASHBOARD_COMPUTED
        assert event.details["transaction_count"] == 3
