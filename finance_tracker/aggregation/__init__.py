"""Dashboard aggregation package."""

from finance_tracker.aggregation.engine import AggregationEngine, compute_dashboard

__all__ = ["AggregationEngine", "compute_dashboard"]
