"""Database module for MT5Metrics."""

from mt5metrics.db.store import DataStore

__all__ = ["DataStore"]
