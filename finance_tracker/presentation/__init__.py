"""Dashboard presentation helpers (charts and formatting)."""

from finance_tracker.presentation.charts import (
    create_category_pie_chart,
    create_monthly_bar_chart,
)
from finance_tracker.presentation.formatting import (
    format_balance,
    format_currency,
    format_percent,
    format_signed_amount,
)

__all__ = [
    "create_category_pie_chart",
    "create_monthly_bar_chart",
    "format_balance",
    "format_currency",
    "format_percent",
    "format_signed_amount",
]
