"""CLI commands for MT5Metrics.

This package provides the command-line interface for MT5Metrics,
including account registration, log ingestion and metrics reports.
"""

from mt5metrics.cli.main import cli, main

__all__ = ["cli", "main"]
