"""Account overview shown by the dashboard command.

Balance and growth are derived from the quick aggregates in
:class:`~mt5metrics.models.AccountsData` rather than from the full
metrics engine.
"""

from datetime import date
from typing import Iterable, Optional

from mt5metrics.models import AccountsData, DashboardSummary, Trade


def _month_bounds(day: date) -> tuple[date, date]:
    first = day.replace(day=1)
    if first.month == 12:
        return first, first.replace(year=first.year + 1, month=1)
    return first, first.replace(month=first.month + 1)


def _parse_day(value: str) -> Optional[date]:
    try:
        return date.fromisoformat(value.replace(".", "-"))
    except ValueError:
        return None


def summarize_dashboard(
    data: AccountsData, today: Optional[date] = None
) -> DashboardSummary:
    """Summarize balance and month growth for a merged ledger.

    Deposits count towards the balance only through ``total_deposits``.
    Every other record, withdrawals included, is P&L. Growth compares the
    P&L booked inside the month of ``today`` with the P&L accumulated
    before it, and is 0 when that capital is not positive.

    Args:
        data: Merged ledger with its daily aggregates.
        today: Any day of the month to summarize (default: today).

    Returns:
        DashboardSummary for the month.
    """
    today = today or date.today()
    first, next_first = _month_bounds(today)

    non_deposits = [t for t in data.trades if t.type != "deposit"]
    pnl_this_month = 0.0
    capital_before_month = 0.0
    for trade in non_deposits:
        day = _parse_day(trade.day)
        if day is None:
            continue
        if day < first:
            capital_before_month += trade.profit
        elif day < next_first:
            pnl_this_month += trade.profit

    if capital_before_month > 0:
        growth_pct = round(pnl_this_month / capital_before_month * 100, 2)
    else:
        growth_pct = 0.0

    daily = sorted(
        (day.replace(".", "-"), pnl) for day, pnl in data.daily_pnls.items()
    )

    return DashboardSummary(
        month=f"{first:%Y-%m}",
        balance=data.total_deposits + sum(t.profit for t in non_deposits),
        total_deposits=data.total_deposits,
        pnl_this_month=pnl_this_month,
        capital_before_month=capital_before_month,
        growth_pct=growth_pct,
        growth_positive=pnl_this_month >= 0,
        daily_pnls=tuple(daily),
    )


def trades_by_account(trades: Iterable[Trade], day: str) -> dict[str, list[Trade]]:
    """Group one day's non-deposit records by account, in ledger order."""
    grouped: dict[str, list[Trade]] = {}
    for trade in trades:
        if trade.type == "deposit" or trade.day.replace(".", "-") != day:
            continue
        grouped.setdefault(trade.account_id, []).append(trade)
    return grouped
