"""Trading-performance metrics engine.

Turns a raw trade ledger into risk and performance analytics. Everything
is computed in one fold over the ledger; drawdown and standard deviation
are second passes over the already-materialized cumulative series and
trading records.

``compute_metrics`` is pure: it reads its argument, allocates its own
output and keeps no state between calls.
"""

import math
from typing import Iterable, Optional

from mt5metrics.models import (
    LogPoint,
    MetricsRatios,
    MetricsResult,
    MetricsTotals,
    SymbolSummary,
    Trade,
)

UNKNOWN_SYMBOL = "-"


def _num(value: Optional[float]) -> float:
    """Coerce None and NaN to 0.0 so aggregates stay display-safe."""
    if value is None or math.isnan(value):
        return 0.0
    return float(value)


def _ratio(numerator: float, denominator: float) -> float:
    """Divide, returning +inf when the denominator is zero."""
    return numerator / denominator if denominator else math.inf


def compute_metrics(
    trades: Iterable[Trade], account_id: Optional[str] = None
) -> MetricsResult:
    """Compute the full metrics snapshot for a trade ledger.

    Args:
        trades: Ledger in chronological order. The order is kept as given;
            the cumulative series depends on it.
        account_id: If given, only records of this account are used.

    Returns:
        MetricsResult with the cumulative series, per-symbol and per-day
        aggregates, cash-flow totals and the ratio bundle.
    """
    if account_id is not None:
        trades = [t for t in trades if t.account_id == account_id]

    deposits = 0.0
    withdrawals = 0.0

    logs: list[LogPoint] = []
    trading: list[Trade] = []
    by_symbol: dict[str, list] = {}
    by_day: dict[str, float] = {}

    cumulative = 0.0
    wins = losses = breakevens = 0
    sum_win = 0.0
    sum_loss = 0.0
    sum_all = 0.0
    sum_loss_sq = 0.0

    for trade in trades:
        profit = _num(trade.profit)

        if trade.type == "deposit" and profit > 0:
            deposits += profit
        elif trade.type in ("withdraw", "withdrawal") or (
            trade.type == "deposit" and profit < 0
        ):
            withdrawals += abs(profit)

        if trade.is_cashflow:
            continue

        trading.append(trade)
        cumulative += profit
        logs.append(LogPoint(date=trade.date, pnl=cumulative))

        # [trades, volume, profit]
        bucket = by_symbol.setdefault(trade.symbol or UNKNOWN_SYMBOL, [0, 0.0, 0.0])
        bucket[0] += 1
        bucket[1] += _num(trade.volume)
        bucket[2] += profit

        day = trade.day
        by_day[day] = by_day.get(day, 0.0) + profit

        sum_all += profit
        if profit > 0:
            wins += 1
            sum_win += profit
        elif profit < 0:
            losses += 1
            sum_loss += profit
            sum_loss_sq += profit * profit
        else:
            breakevens += 1

    per_symbol = sorted(
        (
            SymbolSummary(
                symbol=symbol,
                trades=count,
                volume=volume,
                profit=profit,
                avg_per_trade=profit / count if count else 0.0,
            )
            for symbol, (count, volume, profit) in by_symbol.items()
        ),
        key=lambda s: abs(s.profit),
        reverse=True,
    )

    by_day_sorted = sorted(by_day.items(), key=lambda item: item[1], reverse=True)
    best_day = by_day_sorted[0] if by_day_sorted else None
    worst_day = by_day_sorted[-1] if by_day_sorted else None

    count = len(trading)
    n = count or 1
    win_rate = wins / n
    loss_rate = losses / n
    breakeven_rate = breakevens / n

    avg_win = sum_win / wins if wins else 0.0
    avg_loss = abs(sum_loss) / losses if losses else 0.0

    total_win = sum_win
    total_loss_abs = abs(sum_loss)
    expectancy = win_rate * avg_win - loss_rate * avg_loss
    profit_factor = _ratio(total_win, total_loss_abs)
    payoff_ratio = _ratio(avg_win, avg_loss)
    gain_to_pain = _ratio(total_win, total_loss_abs)

    max_dd, ulcer_index = _drawdown(logs)

    # Deviation is measured against expectancy, not the sample mean.
    variance = (
        sum((_num(t.profit) - expectancy) ** 2 for t in trading) / count
        if count
        else 0.0
    )
    std_dev = math.sqrt(variance)
    average_trade = sum_all / count if count else 0.0
    sortino_denom = math.sqrt(sum_loss_sq / losses) if losses else 0.0

    sharpe_ratio = _ratio(average_trade, std_dev)
    sortino_ratio = _ratio(average_trade, sortino_denom)
    recovery_factor = _ratio(total_win - total_loss_abs, max_dd)
    sqn = (average_trade / std_dev) * math.sqrt(count) if std_dev else math.inf

    pnl_total = logs[-1].pnl if logs else 0.0

    trading.reverse()

    return MetricsResult(
        logs=tuple(logs),
        trades_no_cashflow=tuple(trading),
        per_symbol=tuple(per_symbol),
        by_day_sorted=tuple(by_day_sorted),
        totals=MetricsTotals(
            pnl_total=pnl_total,
            current_balance=pnl_total,
            deposits=deposits,
            withdrawals=withdrawals,
        ),
        ratios=MetricsRatios(
            win_rate=win_rate,
            loss_rate=loss_rate,
            breakeven_rate=breakeven_rate,
            avg_win=avg_win,
            avg_loss=avg_loss,
            expectancy=expectancy,
            profit_factor=profit_factor,
            payoff_ratio=payoff_ratio,
            gain_to_pain=gain_to_pain,
            max_dd=max_dd,
            ulcer_index=ulcer_index,
            recovery_factor=recovery_factor,
            sharpe_ratio=sharpe_ratio,
            sortino_ratio=sortino_ratio,
            average_trade=average_trade,
            std_dev=std_dev,
            sqn=sqn,
            best_day=best_day,
            worst_day=worst_day,
        ),
    )


def _drawdown(logs: list[LogPoint]) -> tuple[float, float]:
    """Return (max drawdown, ulcer index) of a cumulative P&L series."""
    if not logs:
        return 0.0, 0.0

    peak = logs[0].pnl
    max_dd = 0.0
    ulcer_acc = 0.0

    for point in logs:
        if point.pnl > peak:
            peak = point.pnl
        dd = peak - point.pnl
        if dd > max_dd:
            max_dd = dd
        if peak:
            dd_pct = dd / peak * 100
            ulcer_acc += dd_pct * dd_pct

    return max_dd, math.sqrt(ulcer_acc / len(logs))
