"""
Two-Stage Form Validation

Validation of an editor's draft happens in two distinct stages:

STAGE 1 - SCHEMA VALIDATION:
- Required fields
- Numbers that parse and are not negative
- Text length bounds
- This is what blocks a form from being submitted

STAGE 2 - SEMANTIC VALIDATION (only if stage 1 passed):
- Dates that are not real ISO calendar dates (blocks)
- Dates far in the future (warning)
- Category names that match no Category (warning)
- Duplicate category names (warning)
- Budgets already overspent (warning)

Warnings never block a submission. Categories are joined by name,
so an unknown name is allowed; the user is just told about it.

IMPORTANT: Validation never silently fixes values beyond trimming
whitespace and treating blank inputs as "not filled in".
"""

from datetime import date, timedelta
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from finance_tracker.config import AppSettings, get_settings
from finance_tracker.models.ledger import (
    ENTITY_MODELS,
    EntityKind,
)
from finance_tracker.models.validation import ValidationIssue, ValidationResult
from finance_tracker.services.storage import LedgerStore


FIELD_LABELS = {
    "amount": "Amount",
    "date": "Date",
    "description": "Description",
    "category": "Category",
    "type": "Type",
    "name": "Name",
    "color": "Color",
    "budget_amount": "Budget amount",
    "spent_amount": "Spent amount",
}

# Fields where a number is expected
NUMERIC_FIELDS = {"amount", "budget_amount", "spent_amount"}


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_iso_date(value: str) -> Optional[date]:
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def normalize_form_data(form_data: Mapping[str, Any]) -> dict[str, Any]:
    """Drop blank inputs and the id so the schema sees only what the user filled in."""
    return {
        key: value
        for key, value in form_data.items()
        if key != "id" and not _is_blank(value)
    }


def _message_for(field: str, error_type: str, ctx: dict) -> str:
    """Translate a pydantic error into the message shown under the form field."""
    label = FIELD_LABELS.get(field, field.replace("_", " ").capitalize())

    if error_type in ("missing", "string_too_short"):
        return f"{label} is required"
    if error_type == "string_too_long":
        return f"Max {ctx.get('max_length')} characters"
    if error_type in ("decimal_parsing", "decimal_type", "float_parsing"):
        return f"{label} must be a number"
    if error_type == "greater_than_equal":
        if field == "amount":
            return "Amount must be positive"
        return "Must be non-negative"
    if error_type == "decimal_max_places":
        return f"{label} can have at most {ctx.get('decimal_places', 2)} decimal places"
    if error_type == "enum":
        return f"{label} must be income or expense"
    if error_type == "finite_number":
        return f"{label} must be a finite number"
    return f"{label} is invalid"


class EntityValidator:
    """
    Validates editor drafts through a two-stage pipeline.

    Stage 1: Schema validation (no store needed)
    Stage 2: Semantic validation (uses the store for by-name lookups)
    """

    def __init__(
        self,
        store: Optional[LedgerStore] = None,
        settings: Optional[AppSettings] = None,
    ):
        """
        Initialize validator.

        Args:
            store: Ledger store used to look up category names.
                   If None, by-name checks are skipped.
            settings: Thresholds; defaults to the application settings.
        """
        self._store = store
        self._settings = settings or get_settings().app

    def _validate_schema(
        self,
        kind: EntityKind,
        data: dict[str, Any],
    ) -> tuple[bool, list[ValidationIssue], Optional[dict]]:
        """
        Stage 1: Schema validation.

        Returns: (is_valid, list_of_issues, cleaned_data)
        """
        issues = []
        model = ENTITY_MODELS[kind]

        try:
            entity = model.model_validate(data)
        except ValidationError as e:
            for error in e.errors():
                field = str(error["loc"][0]) if error["loc"] else "__root__"
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="missing" if error["type"] == "missing" else "invalid_value",
                    message=_message_for(field, error["type"], error.get("ctx") or {}),
                    severity="error",
                ))
            return False, issues, None

        cleaned = entity.model_dump(exclude={"id"})

        limit = self._settings.max_description_length
        description = cleaned.get("description")
        if description and len(description) > limit:
            issues.append(ValidationIssue(
                field="description",
                issue_type="invalid_value",
                message=f"Max {limit} characters",
                severity="error",
            ))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues, cleaned

    def _validate_semantic(
        self,
        kind: EntityKind,
        cleaned: dict[str, Any],
        entity_id: Optional[str],
        today: date,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 2: Semantic validation.

        Returns: (is_valid, list_of_issues)
        """
        issues = []

        if kind == EntityKind.TRANSACTIONS:
            issues.extend(self._check_transaction_date(cleaned["date"], today))
            parsed = _parse_iso_date(cleaned["date"])
            if parsed is not None:
                # Canonical YYYY-MM-DD
                cleaned["date"] = parsed.isoformat()
            issues.extend(self._check_category_reference(cleaned["category"]))

        elif kind == EntityKind.BUDGETS:
            issues.extend(self._check_category_reference(cleaned["category"]))
            if cleaned["spent_amount"] > cleaned["budget_amount"]:
                issues.append(ValidationIssue(
                    field="spent_amount",
                    issue_type="over_budget",
                    message="Spent amount is above the budget",
                    severity="warning",
                ))

        elif kind == EntityKind.CATEGORIES:
            issues.extend(self._check_duplicate_name(cleaned["name"], entity_id))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues

    def _check_transaction_date(self, value: str, today: date) -> list[ValidationIssue]:
        parsed = _parse_iso_date(value)
        if parsed is None:
            return [ValidationIssue(
                field="date",
                issue_type="invalid_format",
                message="Date must be a valid date (YYYY-MM-DD)",
                severity="error",
            )]

        max_future_date = today + timedelta(days=self._settings.future_date_tolerance_days)
        if parsed > max_future_date:
            return [ValidationIssue(
                field="date",
                issue_type="future_date",
                message=f"Date ({parsed.isoformat()}) is far in the future",
                severity="warning",
            )]
        return []

    def _check_category_reference(self, name: str) -> list[ValidationIssue]:
        if self._store is None:
            return []
        known = {category.name for category in self._store.categories.list()}
        if name in known:
            return []
        return [ValidationIssue(
            field="category",
            issue_type="unknown_category",
            message=f"No category named '{name}' exists",
            severity="warning",
        )]

    def _check_duplicate_name(
        self,
        name: str,
        entity_id: Optional[str],
    ) -> list[ValidationIssue]:
        if self._store is None:
            return []
        for category in self._store.categories.list():
            if category.name == name and category.id != entity_id:
                return [ValidationIssue(
                    field="name",
                    issue_type="duplicate_name",
                    message=f"A category named '{name}' already exists",
                    severity="warning",
                )]
        return []

    def validate(
        self,
        kind: EntityKind,
        form_data: Mapping[str, Any],
        entity_id: Optional[str] = None,
        today: Optional[date] = None,
    ) -> ValidationResult:
        """
        Run full two-stage validation pipeline.

        Args:
            kind: Which ledger collection the draft is for
            form_data: Raw field values from the form
            entity_id: Id of the entity being edited, None when adding
            today: Reference date for the future-date check

        Returns:
            ValidationResult with all issues found, and the cleaned
            field values when the draft can be submitted
        """
        kind = EntityKind(kind)
        data = normalize_form_data(form_data)

        schema_valid, issues, cleaned = self._validate_schema(kind, data)

        # Only run stage 2 if stage 1 passes
        semantic_valid = False
        if schema_valid and cleaned is not None:
            semantic_valid, semantic_issues = self._validate_semantic(
                kind, cleaned, entity_id, today or date.today()
            )
            issues.extend(semantic_issues)

        result = ValidationResult(
            kind=kind,
            schema_valid=schema_valid,
            semantic_valid=semantic_valid,
            issues=issues,
        )
        if result.is_valid:
            result.cleaned_data = cleaned
        return result

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """One-paragraph summary of a validation result for the UI."""
        if result.is_valid and not result.warnings:
            return "All checks passed."

        lines = []
        if result.has_errors:
            lines.append("Please fix the following:")
            for field, message in result.field_errors().items():
                lines.append(f"   • {FIELD_LABELS.get(field, field)}: {message}")

        if result.warnings:
            lines.append("Please note:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)
