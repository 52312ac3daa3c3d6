"""
Tests for Finance Tracker

Test strategy:
1. Unit tests for individual components (models, store, engine, validator)
2. Flow tests for editors against a real in-memory store
3. No Streamlit in tests; the UI only calls tested components
"""

import pytest
from decimal import Decimal

from finance_tracker.models.ledger import (
    ENTITY_MODELS,
    Budget,
    Category,
    EntityKind,
    LedgerSnapshot,
    Transaction,
    TransactionType,
)
from finance_tracker.models.dashboard import NO_CATEGORY, TopCategory
from finance_tracker.models.validation import ValidationIssue, ValidationResult
from finance_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestLedgerModels:
    """Tests for ledger Pydantic models."""

    def test_transaction_creation(self):
        """Test Transaction model creation."""
        tx = Transaction(
            amount=Decimal("120.50"),
            date="2025-03-10",
            description="Grocery shopping",
            category="Food",
            type=TransactionType.EXPENSE,
        )
        assert tx.amount == Decimal("120.50")
        assert tx.category == "Food"
        assert tx.is_expense is True
        assert tx.id

    def test_transaction_strips_whitespace(self):
        """Test that whitespace is stripped from text fields."""
        tx = Transaction(
            amount=Decimal("1"),
            date="2025-03-10",
            category="  Food  ",
            type="expense",
        )
        assert tx.category == "Food"

    def test_transaction_rejects_negative_amount(self):
        """Stored amounts are magnitudes; negative values are rejected."""
        with pytest.raises(ValueError):
            Transaction(
                amount=Decimal("-100"),
                date="2025-03-10",
                category="Food",
                type=TransactionType.EXPENSE,
            )

    def test_transaction_rejects_long_description(self):
        """Test description length bound."""
        with pytest.raises(ValueError):
            Transaction(
                amount=Decimal("1"),
                date="2025-03-10",
                category="Food",
                type=TransactionType.EXPENSE,
                description="x" * 101,
            )

    def test_transaction_requires_category(self):
        """Test that an empty category name is rejected."""
        with pytest.raises(ValueError):
            Transaction(
                amount=Decimal("1"),
                date="2025-03-10",
                category="",
                type=TransactionType.INCOME,
            )

    def test_signed_amount_follows_type(self):
        """Test that the sign comes from the type, not the stored number."""
        expense = Transaction(
            amount=Decimal("1200"), date="2025-03-08",
            category="Rent", type=TransactionType.EXPENSE,
        )
        income = Transaction(
            amount=Decimal("3200"), date="2025-03-06",
            category="Income", type=TransactionType.INCOME,
        )
        assert expense.signed_amount == Decimal("-1200")
        assert income.signed_amount == Decimal("3200")

    def test_from_signed_amount_converts_to_magnitude(self):
        """Test conversion of a signed amount at the boundary."""
        tx = Transaction.from_signed_amount(
            "-120.50", date="2025-03-10", category="Food",
        )
        assert tx.amount == Decimal("120.50")
        assert tx.type == TransactionType.EXPENSE

        income = Transaction.from_signed_amount(
            3200, date="2025-03-06", category="Income",
        )
        assert income.amount == Decimal("3200")
        assert income.type == TransactionType.INCOME

    def test_from_signed_amount_keeps_explicit_type(self):
        """An explicit type wins over the sign."""
        tx = Transaction.from_signed_amount(
            "-50", date="2025-03-10", category="Refund", type="income",
        )
        assert tx.type == TransactionType.INCOME
        assert tx.amount == Decimal("50")

    def test_parsed_date(self):
        """Test date parsing, including malformed dates."""
        good = Transaction(
            amount=Decimal("1"), date="2025-03-10", category="Food", type="expense",
        )
        bad = Transaction(
            amount=Decimal("1"), date="not a date", category="Food", type="expense",
        )
        assert good.parsed_date is not None
        assert good.parsed_date.month == 3
        assert bad.parsed_date is None

    def test_category_creation(self):
        """Test Category model creation."""
        category = Category(name="Food", color="#0ea5e9")
        assert category.name == "Food"
        assert category.color == "#0ea5e9"

    def test_category_requires_name(self):
        with pytest.raises(ValueError):
            Category(name="   ", color="#0ea5e9")

    def test_budget_creation(self):
        """Test Budget model creation."""
        budget = Budget(
            category="Food",
            budget_amount=Decimal("500"),
            spent_amount=Decimal("120"),
        )
        assert budget.budget_amount == Decimal("500")
        assert budget.spent_amount == Decimal("120")

    def test_budget_rejects_negative_amounts(self):
        with pytest.raises(ValueError):
            Budget(category="Food", budget_amount=Decimal("-1"), spent_amount=Decimal("0"))
        with pytest.raises(ValueError):
            Budget(category="Food", budget_amount=Decimal("1"), spent_amount=Decimal("-1"))

    def test_generated_ids_are_unique(self):
        ids = {Category(name="Food", color="#000").id for _ in range(50)}
        assert len(ids) == 50

    def test_entity_models_cover_every_kind(self):
        assert set(ENTITY_MODELS) == set(EntityKind)
        assert ENTITY_MODELS[EntityKind.BUDGETS] is Budget

    def test_snapshot_is_frozen(self):
        snapshot = LedgerSnapshot()
        with pytest.raises(ValueError):
            snapshot.transactions = ()


class TestDashboardModels:
    """Tests for derived view models."""

    def test_top_category_defaults_to_none(self):
        top = TopCategory()
        assert top.name == NO_CATEGORY
        assert top.amount == Decimal("0")
        assert top.is_none is True


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_has_errors(self):
        """Test has_errors and field_errors."""
        result = ValidationResult(
            kind=EntityKind.TRANSACTIONS,
            schema_valid=False,
            semantic_valid=False,
            issues=[
                ValidationIssue(
                    field="amount",
                    issue_type="missing",
                    message="Amount is required",
                    severity="error",
                ),
                ValidationIssue(
                    field="amount",
                    issue_type="invalid_value",
                    message="Amount must be positive",
                    severity="error",
                ),
            ],
        )
        assert result.has_errors is True
        assert result.error_count == 2
        assert result.is_valid is False
        assert result.field_errors() == {"amount": "Amount is required"}

    def test_validation_result_warnings_only(self):
        """Test that warnings don't count as errors."""
        result = ValidationResult(
            kind=EntityKind.BUDGETS,
            schema_valid=True,
            semantic_valid=True,
            issues=[
                ValidationIssue(
                    field="category",
                    issue_type="unknown_category",
                    message="No category named 'Travel' exists",
                    severity="warning",
                ),
            ],
        )
        assert result.has_errors is False
        assert result.is_valid is True
        assert result.warnings == ["No category named 'Travel' exists"]

    def test_issue_severity_pattern(self):
        with pytest.raises(ValueError):
            ValidationIssue(field="x", issue_type="y", message="z", severity="fatal")


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.ENTITY_ADDED,
            description="Added",
        )
        assert event.event_type == AuditEventType.ENTITY_ADDED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.entity_added(
            kind=EntityKind.CATEGORIES,
            entity_id="abc",
            label="Food",
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "entity_added"
        assert log_dict["entity_kind"] == "categories"
        assert log_dict["details"]["label"] == "Food"

    def test_audit_event_to_table_row(self):
        event = AuditEventBuilder.entity_deleted(EntityKind.BUDGETS, "7")
        row = event.to_table_row()
        assert row["event"] == "entity_deleted"
        assert row["kind"] == "budgets"

    def test_update_target_missing_is_warning(self):
        event = AuditEventBuilder.update_target_missing(EntityKind.TRANSACTIONS, "missing")
        assert event.severity == AuditSeverity.WARNING
        assert event.entity_id == "missing"

    def test_validation_failed_counts_issues(self):
        event = AuditEventBuilder.validation_failed(
            kind=EntityKind.TRANSACTIONS,
            issues=[{"field": "amount"}, {"field": "date"}],
        )
        assert event.event_type == AuditEventType.VALIDATION_FAILED
        assert "2 issues" in event.description
        assert event.is_user_action is True


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
