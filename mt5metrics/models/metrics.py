"""Metrics result models.

The seven unbounded ratios (profit factor, payoff ratio, gain to pain,
sharpe, sortino, recovery factor and SQN) hold ``math.inf`` when their
denominator is zero. Display code should branch on ``math.isinf``.
"""

from typing import Optional
from pydantic import BaseModel, Field

from mt5metrics.models.trade import Trade


class LogPoint(BaseModel):
    """One point of the cumulative P&L series."""

    date: str = Field(..., description="Timestamp of the trade")
    pnl: float = Field(..., description="Cumulative P&L, cash-flow excluded")

    model_config = {"frozen": True}


class SymbolSummary(BaseModel):
    """Aggregate of trading results for one symbol."""

    symbol: str = Field(..., description="Instrument or '-' when unknown")
    trades: int = Field(..., ge=0, description="Number of trades")
    volume: float = Field(..., description="Summed volume")
    profit: float = Field(..., description="Summed profit")
    avg_per_trade: float = Field(..., description="Average profit per trade")

    model_config = {"frozen": True}


class MetricsTotals(BaseModel):
    """Ledger totals."""

    pnl_total: float = Field(..., description="Cumulative P&L, cash-flow excluded")
    current_balance: float = Field(..., description="Equal to pnl_total")
    deposits: float = Field(..., ge=0, description="Sum of positive deposits")
    withdrawals: float = Field(..., ge=0, description="Sum of withdrawn amounts")

    model_config = {"frozen": True}


class MetricsRatios(BaseModel):
    """Risk and performance ratio bundle."""

    win_rate: float
    loss_rate: float
    breakeven_rate: float
    avg_win: float
    avg_loss: float
    expectancy: float
    profit_factor: float
    payoff_ratio: float
    gain_to_pain: float
    max_dd: float
    ulcer_index: float
    recovery_factor: float
    sharpe_ratio: float
    sortino_ratio: float
    average_trade: float
    std_dev: float
    sqn: float
    best_day: Optional[tuple[str, float]] = None
    worst_day: Optional[tuple[str, float]] = None

    model_config = {"frozen": True}


class MetricsResult(BaseModel):
    """Snapshot produced by ``compute_metrics``."""

    logs: tuple[LogPoint, ...] = Field(..., description="Chronological cumulative series")
    trades_no_cashflow: tuple[Trade, ...] = Field(
        ..., description="Trading records, most recent first"
    )
    per_symbol: tuple[SymbolSummary, ...] = Field(
        ..., description="Symbol summaries sorted by |profit| descending"
    )
    by_day_sorted: tuple[tuple[str, float], ...] = Field(
        ..., description="(day, pnl) pairs sorted by pnl descending"
    )
    totals: MetricsTotals
    ratios: MetricsRatios

    model_config = {"frozen": True}
