"""Ledger ingestion commands for MT5Metrics CLI.

Imports trade logs from local files or fetches them from the
configured log storage.
"""

from pathlib import Path

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


@click.command("import")
@click.argument("account_number")
@click.argument("log_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def import_log(account_number: str, log_file: Path) -> None:
    """Import a local JSON trade log into an account.

    The account is registered if needed; its stored ledger is replaced.

    \b
    Examples:
      mt5metrics import 123456 ./123456.json
    """
    from mt5metrics.ingest import TradeLogError, load_trade_log_file
    from mt5metrics.models import Account

    try:
        trades = load_trade_log_file(log_file, account_number)
    except TradeLogError as e:
        console.print(Panel(
            f"[red]Could not read trade log:[/red]\n\n{e}",
            title="[bold red]Error[/bold red]",
            border_style="red",
        ))
        raise SystemExit(1)

    store = _get_data_store()
    store.add_account(Account(account_number=account_number))
    count = store.replace_trades(account_number, trades)

    console.print(
        f"[green]✓[/green] Imported [bold]{count}[/bold] records into account "
        f"[bold]{account_number}[/bold]"
    )


@click.command()
@click.argument("account_numbers", nargs=-1)
def sync(account_numbers: tuple[str, ...]) -> None:
    """Fetch trade logs from storage and refresh stored ledgers.

    Syncs the given accounts, or every registered account when none
    are given. Accounts whose log cannot be fetched keep their stored
    ledger and are reported as failed.

    \b
    Examples:
      mt5metrics sync            # All registered accounts
      mt5metrics sync 123456     # One account
    """
    from mt5metrics.config import get_config, get_fetch_settings, get_logs_url
    from mt5metrics.ingest import fetch_accounts_trades
    from mt5metrics.models import Account

    config = get_config()
    logs_url = get_logs_url(config)

    if logs_url is None:
        console.print(Panel(
            "[yellow]Log storage not configured.[/yellow]\n\n"
            "Set [cyan]storage.logs_url[/cyan] in ~/.config/mt5metrics/config.toml",
            title="[bold yellow]Configuration Required[/bold yellow]",
            border_style="yellow",
        ))
        raise SystemExit(1)

    store = _get_data_store()
    numbers = list(account_numbers) or [a.account_number for a in store.get_accounts()]

    if not numbers:
        console.print(Panel(
            "[dim]No accounts registered[/dim]",
            title="[bold]Sync[/bold]",
            border_style="dim",
        ))
        return

    timeout, max_workers = get_fetch_settings(config)
    console.print(f"[dim]Fetching {len(numbers)} trade log(s)...[/dim]")
    data = fetch_accounts_trades(numbers, logs_url, max_workers=max_workers, timeout=timeout)

    table = Table(title="Sync Complete", show_header=True, header_style="bold cyan")
    table.add_column("Account", style="bold")
    table.add_column("Records", justify="right")
    table.add_column("Status")

    failed = set(data.failed)
    for number in numbers:
        store.add_account(Account(account_number=number))
        if number in failed:
            kept = len(store.get_trades(account_id=number))
            table.add_row(number, f"[dim]{kept}[/dim]", "[red]failed[/red]")
            continue
        trades = [t for t in data.trades if t.account_id == number]
        count = store.replace_trades(number, trades)
        table.add_row(
            number, str(count) if count else "[dim]0[/dim]", "[green]synced[/green]"
        )

    console.print(table)
    console.print(f"\n[bold]Total deposits:[/bold] ${data.total_deposits:,.2f}")

    if failed:
        console.print(
            f"[yellow]{len(failed)} account(s) could not be fetched; "
            "their stored ledgers were kept[/yellow]"
        )
