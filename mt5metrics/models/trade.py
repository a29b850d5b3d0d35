"""Trade data model."""

from typing import Optional
from pydantic import BaseModel, Field

CASHFLOW_TYPES = frozenset({"deposit", "withdraw", "withdrawal"})


class Trade(BaseModel):
    """Represents one entry of an account's trade ledger.

    Entries are either trading results (``buy``, ``sell`` or any other tag)
    or cash-flow records (``deposit``, ``withdraw``, ``withdrawal``).
    """

    id: str = Field(..., description="Opaque identifier (account-date-index)")
    date: str = Field(..., description="Timestamp string, ISO when normalized")
    type: str = Field(..., description="Record type (buy/sell/deposit/withdraw...)")
    profit: float = Field(..., description="Signed P&L impact in account currency")
    account_id: str = Field(..., alias="accountId", description="Owning account")
    symbol: Optional[str] = Field(default=None, description="Instrument identifier")
    volume: Optional[float] = Field(default=None, ge=0, description="Traded size")

    model_config = {"frozen": True, "populate_by_name": True}

    @property
    def is_cashflow(self) -> bool:
        """True for deposits (of any sign) and withdrawals."""
        return self.type in CASHFLOW_TYPES

    @property
    def day(self) -> str:
        """Calendar-day bucket key: the date portion before ``T`` or a space."""
        return self.date.split("T", 1)[0].split(" ", 1)[0]
