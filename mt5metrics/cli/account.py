"""Account management commands for MT5Metrics CLI."""

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


@click.group()
def account() -> None:
    """Manage registered MT5 accounts.

    \b
    Examples:
      mt5metrics account add 123456 --email me@example.com
      mt5metrics account list
      mt5metrics account remove 123456
    """
    pass


@account.command("add")
@click.argument("account_number")
@click.option("--email", default=None, help="Owner e-mail.")
@click.option("--label", default=None, help="Display label.")
def add_account(account_number: str, email: Optional[str], label: Optional[str]) -> None:
    """Register an account.

    ACCOUNT_NUMBER is the MT5 login number.
    """
    from mt5metrics.models import Account

    account_number = account_number.strip()
    if not account_number.isdigit():
        console.print(f"[red]Invalid account number: {account_number}[/red]")
        raise SystemExit(1)

    store = _get_data_store()
    added = store.add_account(
        Account(account_number=account_number, email=email, label=label)
    )

    if added:
        console.print(f"[green]✓[/green] Registered account [bold]{account_number}[/bold]")
    else:
        console.print(f"[yellow]Account {account_number} is already registered[/yellow]")


@account.command("list")
@click.option("--email", default=None, help="Only show accounts of this owner.")
def list_accounts(email: Optional[str]) -> None:
    """List registered accounts."""
    store = _get_data_store()
    accounts = store.get_accounts(email=email)

    if not accounts:
        console.print(Panel(
            "[dim]No accounts registered[/dim]\n\n"
            "Run [cyan]mt5metrics account add NUMBER[/cyan] to register one.",
            title="[bold]Accounts[/bold]",
            border_style="dim",
        ))
        return

    table = Table(title="Accounts", show_header=True, header_style="bold cyan")
    table.add_column("Account", style="bold")
    table.add_column("Label")
    table.add_column("Owner", style="dim")
    table.add_column("Records", justify="right")
    table.add_column("Registered", style="dim")

    for acc in accounts:
        table.add_row(
            acc.account_number,
            acc.label or "-",
            acc.email or "-",
            str(len(store.get_trades(account_id=acc.account_number))),
            acc.created_at.strftime("%Y-%m-%d"),
        )

    console.print(table)


@account.command("remove")
@click.argument("account_number")
def remove_account(account_number: str) -> None:
    """Remove an account and its stored ledger."""
    store = _get_data_store()

    if store.remove_account(account_number):
        console.print(f"[green]✓[/green] Removed account [bold]{account_number}[/bold]")
    else:
        console.print(f"[yellow]Account {account_number} not found[/yellow]")
