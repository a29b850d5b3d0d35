"""Trade-log ingestion."""

from mt5metrics.ingest.logs import (
    TradeLogError,
    fetch_account_log,
    fetch_accounts_trades,
    load_trade_log_file,
    merge_ledgers,
    normalize_date,
    parse_trade_log,
    summarize_accounts,
)

__all__ = [
    "TradeLogError",
    "fetch_account_log",
    "fetch_accounts_trades",
    "load_trade_log_file",
    "merge_ledgers",
    "normalize_date",
    "parse_trade_log",
    "summarize_accounts",
]
