"""SQLite data store for MT5Metrics.

Holds registered accounts and their ingested ledgers. Computed metrics are
never stored; they are recomputed from the ledger on every request.
"""

import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

from mt5metrics.ingest.logs import merge_ledgers
from mt5metrics.models import Account, Trade

logger = logging.getLogger(__name__)


class DataStore:
    """SQLite-based data store for MT5Metrics."""

    REQUIRED_TABLES = [
        "accounts",
        "trades",
    ]

    def __init__(self, db_path: Path):
        """Initialize the data store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS accounts (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    account_number TEXT NOT NULL UNIQUE,
                    email TEXT,
                    label TEXT,
                    created_at TEXT NOT NULL
                )
            """)

            # seq keeps the ledger in log order
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS trades (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    account_id TEXT NOT NULL,
                    seq INTEGER NOT NULL,
                    trade_id TEXT NOT NULL,
                    date TEXT NOT NULL,
                    type TEXT NOT NULL,
                    profit REAL NOT NULL,
                    symbol TEXT,
                    volume REAL,
                    UNIQUE(account_id, seq)
                )
            """)

            conn.commit()
        finally:
            conn.close()

    def get_tables(self) -> list[str]:
        """Get list of all tables in the database."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()

    # ==================== Accounts ====================

    def add_account(self, account: Account) -> bool:
        """Register an account.

        Returns:
            True if added, False if the account number already exists.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT OR IGNORE INTO accounts (account_number, email, label, created_at)
                VALUES (?, ?, ?, ?)
                """,
                (
                    account.account_number,
                    account.email,
                    account.label,
                    account.created_at.isoformat(),
                ),
            )
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def _row_to_account(self, row: sqlite3.Row) -> Account:
        return Account(
            account_number=row["account_number"],
            email=row["email"],
            label=row["label"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def get_account(self, account_number: str) -> Optional[Account]:
        """Get a single account by number."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT * FROM accounts WHERE account_number = ?", (account_number,)
            )
            row = cursor.fetchone()
            return self._row_to_account(row) if row else None
        finally:
            conn.close()

    def get_accounts(self, email: Optional[str] = None) -> list[Account]:
        """Get registered accounts in registration order.

        Args:
            email: Only return accounts owned by this e-mail.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            if email is not None:
                cursor.execute(
                    "SELECT * FROM accounts WHERE email = ? ORDER BY id", (email,)
                )
            else:
                cursor.execute("SELECT * FROM accounts ORDER BY id")
            return [self._row_to_account(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def remove_account(self, account_number: str) -> bool:
        """Remove an account and its ledger.

        Returns:
            True if the account existed.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM trades WHERE account_id = ?", (account_number,))
            cursor.execute(
                "DELETE FROM accounts WHERE account_number = ?", (account_number,)
            )
            removed = cursor.rowcount > 0
            conn.commit()
            return removed
        finally:
            conn.close()

    # ==================== Trades ====================

    def replace_trades(self, account_id: str, trades: Iterable[Trade]) -> int:
        """Replace the stored ledger of an account.

        Args:
            account_id: Account whose ledger is replaced.
            trades: New ledger, in log order.

        Returns:
            Number of records stored.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM trades WHERE account_id = ?", (account_id,))
            count = 0
            for seq, trade in enumerate(trades):
                cursor.execute(
                    """
                    INSERT INTO trades
                    (account_id, seq, trade_id, date, type, profit, symbol, volume)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        account_id,
                        seq,
                        trade.id,
                        trade.date,
                        trade.type,
                        trade.profit,
                        trade.symbol,
                        trade.volume,
                    ),
                )
                count += 1
            conn.commit()
            logger.debug("Stored %d records for account %s", count, account_id)
            return count
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get_trades(self, account_id: Optional[str] = None) -> list[Trade]:
        """Get stored ledgers.

        Args:
            account_id: Only return this account's ledger.

        Returns:
            One account's ledger in log order, or every ledger merged
            chronologically with each account keeping its log order.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            query = """
                SELECT t.* FROM trades t
                LEFT JOIN accounts a ON a.account_number = t.account_id
            """
            params: tuple = ()
            if account_id is not None:
                query += " WHERE t.account_id = ?"
                params = (account_id,)
            query += " ORDER BY COALESCE(a.id, 0), t.account_id, t.seq"
            cursor.execute(query, params)

            trades = [
                Trade(
                    id=row["trade_id"],
                    date=row["date"],
                    type=row["type"],
                    profit=row["profit"],
                    account_id=row["account_id"],
                    symbol=row["symbol"],
                    volume=row["volume"],
                )
                for row in cursor.fetchall()
            ]
        finally:
            conn.close()

        if account_id is not None:
            return trades

        ledgers: dict[str, list[Trade]] = {}
        for trade in trades:
            ledgers.setdefault(trade.account_id, []).append(trade)
        return merge_ledgers(ledgers.values())
