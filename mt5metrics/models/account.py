"""Account data models."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from mt5metrics.models.trade import Trade


class Account(BaseModel):
    """Represents a registered MT5 trading account."""

    account_number: str = Field(..., min_length=1, description="MT5 account number")
    email: Optional[str] = Field(default=None, description="Owner e-mail")
    label: Optional[str] = Field(default=None, description="Display label")
    created_at: datetime = Field(
        default_factory=datetime.now, description="Registration timestamp"
    )

    model_config = {"frozen": True}


class AccountsData(BaseModel):
    """Merged ledger of several accounts with quick daily aggregates."""

    trades: tuple[Trade, ...] = Field(default=(), description="Merged trade ledger")
    daily_pnls: dict[str, float] = Field(
        default_factory=dict, description="Profit per day, deposits excluded"
    )
    total_deposits: float = Field(default=0.0, description="Signed sum of deposits")
    failed: tuple[str, ...] = Field(
        default=(), description="Accounts whose logs could not be fetched"
    )

    model_config = {"frozen": True}
