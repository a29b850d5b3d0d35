"""Metrics report commands for MT5Metrics CLI.

Displays the metrics computed from stored ledgers and exports the
machine-readable summary.
"""

import json
from pathlib import Path
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


def _load_metrics(account: Optional[str]):
    """Compute metrics for one account or for every stored ledger."""
    from mt5metrics.analytics import compute_metrics

    store = _get_data_store()
    trades = store.get_trades(account_id=account)

    if not trades:
        scope = f"account {account}" if account else "any account"
        console.print(Panel(
            f"[dim]No records stored for {scope}[/dim]\n\n"
            "[dim]Run 'mt5metrics sync' or 'mt5metrics import' first[/dim]",
            title="[bold]Metrics[/bold]",
            border_style="dim",
        ))
        return None

    return compute_metrics(trades, account_id=account)


def _signed(value: float) -> str:
    color = "green" if value >= 0 else "red"
    return f"[{color}]${value:+,.2f}[/{color}]"


account_option = click.option(
    "--account", "-a", default=None, help="Restrict to one account number."
)


@click.command()
@account_option
def metrics(account: Optional[str]) -> None:
    """Display the performance metrics report.

    \b
    Examples:
      mt5metrics metrics              # All accounts
      mt5metrics metrics -a 123456    # One account
    """
    from mt5metrics.analytics import metric_cards

    result = _load_metrics(account)
    if result is None:
        return

    totals = result.totals
    summary = (
        f"P&L:          {_signed(totals.pnl_total)}\n"
        f"Deposits:     ${totals.deposits:,.2f}\n"
        f"Withdrawals:  ${totals.withdrawals:,.2f}"
    )
    title = f"Account {account}" if account else "All Accounts"
    console.print(Panel(
        summary,
        title=f"[bold cyan]{title}[/bold cyan]",
        border_style="cyan",
    ))

    table = Table(title="Metrics", show_header=True, header_style="bold cyan")
    table.add_column("Metric", style="bold", no_wrap=True)
    table.add_column("Value", justify="right", no_wrap=True)
    table.add_column("Description", style="dim")

    for card in metric_cards(result):
        table.add_row(card.label, card.value, card.hint)

    console.print(table)


@click.command()
@account_option
@click.option("--limit", type=int, default=None, help="Show only the top N symbols.")
def symbols(account: Optional[str], limit: Optional[int]) -> None:
    """Display results per symbol, largest absolute profit first."""
    result = _load_metrics(account)
    if result is None:
        return

    table = Table(title="Results by Symbol", show_header=True, header_style="bold cyan")
    table.add_column("Symbol", style="bold")
    table.add_column("Trades", justify="right")
    table.add_column("Volume", justify="right")
    table.add_column("Profit", justify="right")
    table.add_column("Avg/Trade", justify="right")

    rows = result.per_symbol[:limit] if limit is not None else result.per_symbol
    for s in rows:
        table.add_row(
            s.symbol,
            str(s.trades),
            f"{s.volume:,.2f}",
            _signed(s.profit),
            _signed(s.avg_per_trade),
        )

    console.print(table)


@click.command()
@account_option
@click.option("--limit", type=int, default=5, help="Days shown at each end (default: 5).")
def days(account: Optional[str], limit: int) -> None:
    """Display best and worst trading days."""
    result = _load_metrics(account)
    if result is None:
        return

    by_day = result.by_day_sorted
    best = list(by_day[:limit])
    # by_day_sorted is descending, so the tail holds the worst days
    worst = list(reversed(by_day[len(best):]))[:limit]

    table = Table(title="Daily P&L", show_header=True, header_style="bold cyan")
    table.add_column("Day", style="bold")
    table.add_column("P&L", justify="right")

    for day, pnl in best:
        table.add_row(day, _signed(pnl))
    if worst:
        table.add_section()
        for day, pnl in worst:
            table.add_row(day, _signed(pnl))

    console.print(table)
    console.print(f"\n[bold]Trading days:[/bold] {len(by_day)}")


@click.command()
@account_option
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write to this file instead of stdout.",
)
def export(account: Optional[str], output: Optional[Path]) -> None:
    """Export the metrics summary as JSON.

    The document is shaped for prompting an analytics assistant:
    rates as percentages, unbounded ratios exported as 0.

    \b
    Examples:
      mt5metrics export -a 123456
      mt5metrics export -o metrics.json
    """
    from datetime import datetime, timezone

    from mt5metrics.analytics import build_metrics_summary

    result = _load_metrics(account)
    if result is None:
        raise SystemExit(1)

    summary = build_metrics_summary(
        result,
        account_id=account,
        last_updated=datetime.now(timezone.utc).isoformat(),
    )
    text = json.dumps(summary, indent=2, ensure_ascii=False)

    if output is None:
        click.echo(text)
        return

    output.write_text(text + "\n", encoding="utf-8")
    console.print(f"[green]✓[/green] Metrics written to [bold]{output}[/bold]")
