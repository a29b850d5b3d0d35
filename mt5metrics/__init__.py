"""MT5Metrics - trading-performance analytics for MT5 account ledgers."""

__version__ = "0.1.0"
