"""Performance analytics module."""

from mt5metrics.analytics.dashboard import summarize_dashboard, trades_by_account
from mt5metrics.analytics.export import (
    MetricCard,
    build_metrics_summary,
    format_ratio,
    metric_cards,
)
from mt5metrics.analytics.metrics import compute_metrics

__all__ = [
    "MetricCard",
    "build_metrics_summary",
    "compute_metrics",
    "format_ratio",
    "metric_cards",
    "summarize_dashboard",
    "trades_by_account",
]
