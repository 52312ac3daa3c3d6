"""Plotly chart builders for the dashboard.

Each function takes series already computed by the aggregation
engine and returns a ``plotly.graph_objects.Figure`` that Streamlit
renders with ``st.plotly_chart``. No aggregation happens here.
"""

from __future__ import annotations

from typing import Sequence

import plotly.graph_objects as go

from finance_tracker.models.dashboard import CategorySlice, MonthlyPoint


EXPENSES_COLOR = "#ef4444"
INCOME_COLOR = "#10b981"

MONTHLY_SERIES = ("expenses", "income")


def _empty_figure(title: str = "No data to display") -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title=title)
    return fig


def create_monthly_bar_chart(
    points: Sequence[MonthlyPoint],
    series: str = "expenses",
    currency_symbol: str = "$",
) -> go.Figure:
    """Bar chart of one monthly series ("expenses" or "income").

    Parameters
    ----------
    points : sequence of MonthlyPoint
        The engine's monthly data, in the order the bars are drawn.
    series : str
        Which value to plot.
    currency_symbol : str
        Prefix for the hover values.

    Returns
    -------
    plotly.graph_objects.Figure
    """
    if series not in MONTHLY_SERIES:
        raise ValueError(f"Unknown series: {series}. Expected one of {MONTHLY_SERIES}")
    if not points:
        return _empty_figure()

    label = series.capitalize()
    fig = go.Figure(
        go.Bar(
            x=[p.name for p in points],
            y=[float(getattr(p, series)) for p in points],
            name=label,
            marker_color=EXPENSES_COLOR if series == "expenses" else INCOME_COLOR,
            hovertemplate=f"%{{x}}<br>{label}: {currency_symbol}%{{y:,.2f}}<extra></extra>",
        )
    )
    fig.update_layout(
        xaxis_title=None,
        yaxis_title=label,
        bargap=0.3,
        margin=dict(l=10, r=10, t=30, b=10),
    )
    return fig


def create_category_pie_chart(
    slices: Sequence[CategorySlice],
    currency_symbol: str = "$",
) -> go.Figure:
    """Donut chart of expenses per category, colored per category."""
    if not slices:
        return _empty_figure()

    fig = go.Figure(
        go.Pie(
            labels=[s.name for s in slices],
            values=[float(s.value) for s in slices],
            marker=dict(colors=[s.color for s in slices]),
            hole=0.6,
            sort=False,
            hovertemplate=f"%{{label}}: {currency_symbol}%{{value:,.2f}}<extra></extra>",
        )
    )
    fig.update_layout(
        showlegend=True,
        margin=dict(l=10, r=10, t=30, b=10),
    )
    return fig
