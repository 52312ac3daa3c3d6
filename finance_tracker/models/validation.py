"""
Form Validation Models

Result of validating an editor's draft before it is submitted
to the ledger store.
"""

from typing import Optional

from pydantic import BaseModel, Field

from finance_tracker.models.ledger import EntityKind


class ValidationIssue(BaseModel):
    """A single validation issue found in a draft."""

    field: str = Field(
        ...,
        description="Form field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'unknown_category')"
    )
    message: str = Field(
        ...,
        description="Message shown under the form field"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """
    Result of the two-stage validation.

    Stage 1: Schema validation (types, required fields, bounds)
    Stage 2: Semantic validation (dates, by-name references)
    """

    kind: EntityKind
    schema_valid: bool = Field(
        ...,
        description="Did schema validation pass?"
    )
    semantic_valid: bool = Field(
        ...,
        description="Did semantic validation pass?"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )
    # Normalized field values, set only when the draft can be submitted
    cleaned_data: Optional[dict] = None

    @property
    def is_valid(self) -> bool:
        """A draft can be submitted when there are no error-level issues."""
        return self.schema_valid and self.semantic_valid and not self.has_errors

    @property
    def has_errors(self) -> bool:
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == "warning"]

    def field_errors(self) -> dict[str, str]:
        """First error message per field, for display under the inputs."""
        errors: dict[str, str] = {}
        for issue in self.issues:
            if issue.severity == "error" and issue.field not in errors:
                errors[issue.field] = issue.message
        return errors
