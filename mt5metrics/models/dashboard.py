"""Dashboard summary model."""

from pydantic import BaseModel, Field


class DashboardSummary(BaseModel):
    """Balance, month-to-date growth and the daily P&L calendar."""

    month: str = Field(..., description="Month summarized, as YYYY-MM")
    balance: float = Field(..., description="Deposits plus every non-deposit record")
    total_deposits: float = Field(..., description="Signed sum of deposits")
    pnl_this_month: float = Field(..., description="Non-deposit P&L inside the month")
    capital_before_month: float = Field(
        ..., description="Non-deposit P&L before the month started"
    )
    growth_pct: float = Field(
        ..., description="Month P&L as a percentage of the capital before it"
    )
    growth_positive: bool = Field(..., description="Month P&L is zero or positive")
    daily_pnls: tuple[tuple[str, float], ...] = Field(
        default=(), description="Per-day P&L, oldest first"
    )

    model_config = {"frozen": True}
