"""Parsing and fetching of per-account MT5 trade logs.

Each account publishes its ledger as one JSON array of trade-like objects
(``{"date", "type", "profit", "symbol", "volume"}``) stored under
``<logs_url>/<account_number>.json``.
"""

import heapq
import json
import logging
import math
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional

import httpx
from pydantic import ValidationError

from mt5metrics.models import AccountsData, Trade

logger = logging.getLogger(__name__)

# Formats seen in MT5 exports, tried strictly before a lenient ISO parse.
DATE_FORMATS = (
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%d %H:%M:%S",
    "%Y.%m.%d %H:%M:%S",
)


class TradeLogError(ValueError):
    """Raised when a trade log is not a JSON array of records."""


def _parse_datetime(value: str) -> Optional[datetime]:
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def normalize_date(value: str) -> str:
    """Normalize a log timestamp to a UTC ISO string.

    Naive timestamps are taken as UTC. Values that cannot be parsed are
    returned unchanged.

    Example:
        >>> normalize_date("2024.01.05 10:30:00")
        '2024-01-05T10:30:00.000Z'
    """
    parsed = _parse_datetime(value.strip())
    if parsed is None:
        return value

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    else:
        parsed = parsed.astimezone(timezone.utc)

    return f"{parsed:%Y-%m-%dT%H:%M:%S}.{parsed.microsecond // 1000:03d}Z"


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def parse_trade_log(raw: Any, account_id: str) -> list[Trade]:
    """Convert a decoded JSON log into Trade records.

    Items without a ``date`` or with a non-numeric or non-finite ``profit``
    are dropped. A non-finite ``volume`` is treated as missing. Ids are
    built as ``<account>-<iso date>-<index>`` where index counts the kept
    items.

    Args:
        raw: Decoded JSON document.
        account_id: Account the log belongs to.

    Returns:
        Trades in log order.

    Raises:
        TradeLogError: If ``raw`` is not a list.
    """
    if not isinstance(raw, list):
        raise TradeLogError(f"Trade log for account {account_id} is not a JSON array")

    account_id = str(account_id)
    trades: list[Trade] = []

    for item in raw:
        if not isinstance(item, dict):
            continue
        date = item.get("date")
        profit = item.get("profit")
        if not date or not _is_number(profit):
            continue

        iso_date = normalize_date(str(date))
        symbol = item.get("symbol")
        volume = item.get("volume")

        try:
            trade = Trade(
                id=f"{account_id}-{iso_date}-{len(trades)}",
                date=iso_date,
                type=str(item.get("type", "")),
                profit=profit,
                account_id=account_id,
                symbol=str(symbol) if symbol is not None else None,
                volume=volume if _is_number(volume) else None,
            )
        except ValidationError as e:
            logger.debug("Skipping malformed record in account %s: %s", account_id, e)
            continue

        trades.append(trade)

    return trades


def load_trade_log_file(path: Path, account_id: str) -> list[Trade]:
    """Load and parse a trade log stored on disk.

    Raises:
        TradeLogError: If the file cannot be read, is not UTF-8 encoded
            JSON, or is not an array.
    """
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise TradeLogError(f"Invalid JSON in {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise TradeLogError(f"{path} is not UTF-8 encoded: {e}") from e
    except OSError as e:
        raise TradeLogError(f"Cannot read {path}: {e}") from e

    return parse_trade_log(raw, account_id)


def fetch_account_log(
    client: httpx.Client, base_url: str, account_number: str
) -> Optional[list[Trade]]:
    """Fetch and parse one account's log.

    Any failure is logged and yields ``None``, so a single missing or broken
    log never prevents metrics for the other accounts, and callers can tell
    a failed fetch from an account with an empty log.
    """
    url = f"{base_url.rstrip('/')}/{account_number}.json"
    try:
        response = client.get(url)
        response.raise_for_status()
        return parse_trade_log(response.json(), str(account_number))
    except httpx.HTTPError as e:
        logger.warning("Failed to fetch trade log for %s: %s", account_number, e)
    except (json.JSONDecodeError, TradeLogError) as e:
        logger.warning("Unusable trade log for %s: %s", account_number, e)
    return None


def merge_ledgers(ledgers: Iterable[Iterable[Trade]]) -> list[Trade]:
    """Interleave several account ledgers chronologically.

    Each ledger keeps its own order. Records with equal dates keep the order
    of the ledgers they come from.
    """
    return list(heapq.merge(*ledgers, key=lambda trade: trade.date))


def summarize_accounts(
    trades: Iterable[Trade], failed: Iterable[str] = ()
) -> AccountsData:
    """Build daily P&L and deposit totals for a merged ledger."""
    trades = tuple(trades)
    daily_pnls: dict[str, float] = {}
    total_deposits = 0.0

    for trade in trades:
        if trade.type == "deposit":
            total_deposits += trade.profit
            continue
        daily_pnls[trade.day] = daily_pnls.get(trade.day, 0.0) + trade.profit

    return AccountsData(
        trades=trades,
        daily_pnls=daily_pnls,
        total_deposits=total_deposits,
        failed=tuple(failed),
    )


def fetch_accounts_trades(
    account_numbers: Iterable[str],
    base_url: str,
    max_workers: int = 4,
    timeout: float = 10.0,
    transport: Optional[httpx.BaseTransport] = None,
) -> AccountsData:
    """Fetch the logs of several accounts concurrently and merge them.

    Args:
        account_numbers: Accounts to fetch.
        base_url: Location of the ``<account>.json`` documents.
        max_workers: Upper bound on concurrent requests.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (used by tests).

    Returns:
        AccountsData with the chronologically merged ledger, its daily
        aggregates and the accounts whose logs could not be fetched.
    """
    account_numbers = [str(a) for a in account_numbers]
    if not account_numbers:
        return AccountsData()

    workers = max(1, min(max_workers, len(account_numbers)))
    logger.debug("Fetching %d trade logs with %d workers", len(account_numbers), workers)

    with httpx.Client(timeout=timeout, transport=transport) as client:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(
                executor.map(
                    lambda number: fetch_account_log(client, base_url, number),
                    account_numbers,
                )
            )

    ledgers: list[list[Trade]] = []
    failed: list[str] = []
    for number, trades in zip(account_numbers, results):
        if trades is None:
            failed.append(number)
            continue
        logger.debug("Account %s: %d records", number, len(trades))
        ledgers.append(trades)

    return summarize_accounts(merge_ledgers(ledgers), failed=failed)
