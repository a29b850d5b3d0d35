"""Dashboard command for MT5Metrics CLI.

Shows the balance, month-to-date growth and a calendar of daily P&L
for the stored ledgers.
"""

import calendar
from datetime import date, datetime
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

console = Console()


def _get_data_store():
    """Get the data store instance."""
    from mt5metrics.config import get_config, get_db_path
    from mt5metrics.db.store import DataStore

    return DataStore(get_db_path(get_config()))


def _signed(value: float) -> str:
    color = "green" if value >= 0 else "red"
    return f"[{color}]${value:+,.2f}[/{color}]"


def _parse_month(ctx, param, value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    try:
        return datetime.strptime(value, "%Y-%m").date()
    except ValueError:
        raise click.BadParameter("expected YYYY-MM")


def _parse_day(ctx, param, value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    try:
        return date.fromisoformat(value).isoformat()
    except ValueError:
        raise click.BadParameter("expected YYYY-MM-DD")


def _calendar_table(month: date, daily: dict[str, float]) -> Table:
    table = Table(
        title=f"Daily P&L {month:%B %Y}",
        show_header=True,
        header_style="bold cyan",
        show_lines=True,
    )
    for name in calendar.day_abbr:
        table.add_column(name, justify="right", no_wrap=True)

    for week in calendar.Calendar().monthdatescalendar(month.year, month.month):
        cells = []
        for day in week:
            if day.month != month.month:
                cells.append("")
                continue
            pnl = daily.get(day.isoformat())
            value = _signed(pnl) if pnl is not None else "[dim]-[/dim]"
            cells.append(f"[bold]{day.day}[/bold]\n{value}")
        table.add_row(*cells)

    return table


@click.command()
@click.option("--account", "-a", default=None, help="Restrict to one account number.")
@click.option(
    "--month", "-m", callback=_parse_month, default=None,
    help="Month to show as YYYY-MM (default: current month).",
)
@click.option(
    "--day", "-d", callback=_parse_day, default=None,
    help="Also list the records of this day (YYYY-MM-DD) per account.",
)
def dashboard(account: Optional[str], month: Optional[date], day: Optional[str]) -> None:
    """Display balance, monthly growth and the daily P&L calendar.

    \b
    Examples:
      mt5metrics dashboard
      mt5metrics dashboard -m 2024-01 -d 2024-01-02
    """
    from mt5metrics.analytics import summarize_dashboard, trades_by_account
    from mt5metrics.ingest import summarize_accounts

    store = _get_data_store()
    trades = store.get_trades(account_id=account)

    if not trades:
        scope = f"account {account}" if account else "any account"
        console.print(Panel(
            f"[dim]No records stored for {scope}[/dim]\n\n"
            "[dim]Run 'mt5metrics sync' or 'mt5metrics import' first[/dim]",
            title="[bold]Dashboard[/bold]",
            border_style="dim",
        ))
        return

    data = summarize_accounts(trades)
    summary = summarize_dashboard(data, today=month)

    arrow = "▲" if summary.growth_positive else "▼"
    color = "green" if summary.growth_positive else "red"
    overview = (
        f"Balance:          ${summary.balance:,.2f}\n"
        f"Deposits:         ${summary.total_deposits:,.2f}\n"
        f"P&L {summary.month}:    {_signed(summary.pnl_this_month)}\n"
        f"Growth:           [{color}]{arrow} {summary.growth_pct:.2f}%[/{color}]"
    )
    title = f"Account {account}" if account else "All Accounts"
    console.print(Panel(
        overview,
        title=f"[bold cyan]{title}[/bold cyan]",
        border_style="cyan",
    ))

    first = datetime.strptime(summary.month, "%Y-%m").date()
    console.print(_calendar_table(first, dict(summary.daily_pnls)))

    if day is None:
        return

    grouped = trades_by_account(data.trades, day)
    if not grouped:
        console.print(f"\n[dim]No records on {day}[/dim]")
        return

    table = Table(title=f"Records on {day}", show_header=True, header_style="bold cyan")
    table.add_column("Account", style="bold")
    table.add_column("Time")
    table.add_column("Type")
    table.add_column("Symbol")
    table.add_column("Profit", justify="right")

    for account_id, records in grouped.items():
        for trade in records:
            time = trade.date.split("T", 1)[1][:8] if "T" in trade.date else ""
            table.add_row(
                account_id,
                time,
                trade.type or "-",
                trade.symbol or "-",
                _signed(trade.profit),
            )
        table.add_section()

    console.print(table)
