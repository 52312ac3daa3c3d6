"""Form validation package."""

from finance_tracker.validation.validator import EntityValidator, normalize_form_data

__all__ = ["EntityValidator", "normalize_form_data"]
