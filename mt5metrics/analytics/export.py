"""Presentation helpers for a computed metrics snapshot.

``metric_cards`` renders the ratio bundle for humans, ``build_metrics_summary``
builds the JSON document handed to the analytics assistant. The assistant
expects finite numbers, so unbounded ratios are exported as 0 there while
the cards show them as "∞".
"""

import math
from typing import Any, Optional

from pydantic import BaseModel, Field

from mt5metrics.models import MetricsResult

INFINITY_SYMBOL = "∞"


class MetricCard(BaseModel):
    """A labelled metric ready for display."""

    label: str = Field(..., description="Metric name")
    value: str = Field(..., description="Formatted value")
    hint: str = Field(default="", description="One-line explanation")

    model_config = {"frozen": True}


def format_ratio(value: float, digits: int = 2) -> str:
    """Format a ratio, rendering infinities as the infinity symbol."""
    if math.isinf(value):
        return INFINITY_SYMBOL if value > 0 else f"-{INFINITY_SYMBOL}"
    return f"{value:.{digits}f}"


def _pct(value: float) -> str:
    return f"{value * 100:.2f}%"


def _money(value: float) -> str:
    return f"${value:.2f}"


def _day(day: Optional[tuple[str, float]]) -> str:
    if day is None:
        return "-"
    return f"{day[0]} ({_money(day[1])})"


def metric_cards(result: MetricsResult) -> list[MetricCard]:
    """Build the ordered list of display cards for a metrics snapshot."""
    r = result.ratios
    rows = [
        ("Trades", str(len(result.trades_no_cashflow)), "Number of trading operations."),
        ("Win Rate", _pct(r.win_rate), "Share of trades closed in profit."),
        ("Loss Rate", _pct(r.loss_rate), "Share of trades closed at a loss."),
        ("Break-even Rate", _pct(r.breakeven_rate), "Share of trades with zero result."),
        ("Average Win", _money(r.avg_win), "Mean profit of winning trades."),
        ("Average Loss", _money(r.avg_loss), "Mean loss of losing trades."),
        ("Expectancy", _money(r.expectancy), "Expected result per trade."),
        ("Profit Factor", format_ratio(r.profit_factor), "Gross profit over gross loss."),
        ("Payoff Ratio", format_ratio(r.payoff_ratio), "Average win over average loss."),
        ("Gain to Pain", format_ratio(r.gain_to_pain), "Total gains over total losses."),
        ("Max Drawdown", _money(r.max_dd), "Largest drop from a cumulative peak."),
        ("Ulcer Index", f"{r.ulcer_index:.2f}", "Depth and duration of drawdowns."),
        ("Recovery Factor", format_ratio(r.recovery_factor), "Net profit over max drawdown."),
        ("Sharpe Ratio", format_ratio(r.sharpe_ratio), "Return adjusted by volatility."),
        ("Sortino Ratio", format_ratio(r.sortino_ratio), "Return adjusted by downside volatility."),
        ("Average Trade", _money(r.average_trade), "Arithmetic mean result per trade."),
        ("Standard Deviation", _money(r.std_dev), "Dispersion of trade results."),
        ("SQN", format_ratio(r.sqn), "System quality number."),
        ("Best Day", _day(r.best_day), "Most profitable day."),
        ("Worst Day", _day(r.worst_day), "Least profitable day."),
    ]
    return [MetricCard(label=label, value=value, hint=hint) for label, value, hint in rows]


def _finite(value: float, digits: int) -> float:
    """Round for export, mapping infinities to 0."""
    return round(0.0 if math.isinf(value) else value, digits)


def _export_day(day: Optional[tuple[str, float]]) -> Optional[dict[str, Any]]:
    if day is None:
        return None
    return {"date": day[0], "pnl": round(day[1], 2)}


def build_metrics_summary(
    result: MetricsResult,
    account_id: Optional[str] = None,
    last_updated: Optional[str] = None,
) -> dict[str, Any]:
    """Build the machine-readable summary of a metrics snapshot.

    Args:
        result: Snapshot from ``compute_metrics``.
        account_id: Account the snapshot belongs to, if any.
        last_updated: ISO timestamp of the underlying ledger.

    Returns:
        JSON-serializable dictionary with ``account``, ``metrics`` and
        ``bySymbol`` sections. Rates are percentages.
    """
    totals = result.totals
    r = result.ratios

    return {
        "account": {
            "id": account_id,
            "lastUpdated": last_updated,
            "currentBalance": round(totals.current_balance, 2),
            "pnlTotal": round(totals.pnl_total, 2),
            "deposits": round(totals.deposits, 2),
            "withdrawals": round(totals.withdrawals, 2),
        },
        "metrics": {
            "trades": len(result.trades_no_cashflow),
            "winRate": round(r.win_rate * 100, 2),
            "lossRate": round(r.loss_rate * 100, 2),
            "breakevenRate": round(r.breakeven_rate * 100, 2),
            "avgWin": round(r.avg_win, 2),
            "avgLoss": round(r.avg_loss, 2),
            "expectancy": round(r.expectancy, 2),
            "profitFactor": _finite(r.profit_factor, 4),
            "payoffRatio": _finite(r.payoff_ratio, 4),
            "gainToPain": _finite(r.gain_to_pain, 4),
            "maxDrawdown": round(r.max_dd, 2),
            "ulcerIndex": round(r.ulcer_index, 4),
            "recoveryFactor": _finite(r.recovery_factor, 4),
            "sharpeRatio": _finite(r.sharpe_ratio, 4),
            "sortinoRatio": _finite(r.sortino_ratio, 4),
            "averageTrade": round(r.average_trade, 2),
            "stdDev": round(r.std_dev, 2),
            "sqn": _finite(r.sqn, 4),
            "bestDay": _export_day(r.best_day),
            "worstDay": _export_day(r.worst_day),
        },
        "bySymbol": [
            {
                "symbol": s.symbol,
                "trades": s.trades,
                "volume": s.volume,
                "grossProfit": round(s.profit, 2),
                "avgPerTrade": round(s.avg_per_trade, 2),
            }
            for s in result.per_symbol
        ],
    }
