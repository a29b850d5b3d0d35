"""Data models for MT5Metrics."""

from mt5metrics.models.account import Account, AccountsData
from mt5metrics.models.dashboard import DashboardSummary
from mt5metrics.models.metrics import (
    LogPoint,
    MetricsRatios,
    MetricsResult,
    MetricsTotals,
    SymbolSummary,
)
from mt5metrics.models.trade import Trade

__all__ = [
    "Account",
    "AccountsData",
    "DashboardSummary",
    "LogPoint",
    "MetricsRatios",
    "MetricsResult",
    "MetricsTotals",
    "SymbolSummary",
    "Trade",
]
