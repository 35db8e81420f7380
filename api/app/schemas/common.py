"""Common schema definitions."""

import datetime as dt
from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, Field

from core.trading_types import DailyReturn, Trade, TradeType, TradingSystem

T = TypeVar("T")


class Meta(BaseModel):
    """Response metadata."""

    timestamp: str = Field(
        default_factory=lambda: dt.datetime.now(dt.timezone.utc).replace(tzinfo=None).isoformat() + "Z"
    )


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T
    meta: Meta = Field(default_factory=Meta)


class ErrorDetail(BaseModel):
    """Error detail."""

    code: str
    message: str


class ErrorResponse(BaseModel):
    """Error response."""

    error: ErrorDetail
    meta: Meta = Field(default_factory=Meta)


class TradeInput(BaseModel):
    """Closed trade as sent by clients."""

    entry_date: dt.datetime = Field(alias="entryDate")
    exit_date: dt.datetime = Field(alias="exitDate")
    gross_profit: float = Field(alias="grossProfit")
    trade_type: Literal["long", "short"] = Field(alias="tradeType")

    def to_trade(self) -> Trade:
        return Trade(
            entry_date=self.entry_date,
            exit_date=self.exit_date,
            gross_profit=self.gross_profit,
            trade_type=TradeType.parse(self.trade_type),
        )


class DailyReturnInput(BaseModel):
    """Gross profit of one day."""

    day: dt.date = Field(alias="date")
    gross_profit: float = Field(alias="grossProfit")

    def to_daily_return(self) -> DailyReturn:
        return DailyReturn(date=self.day, gross_profit=self.gross_profit)


class TradingSystemInput(BaseModel):
    """Trading system settings relevant to the analysis."""

    name: str = ""
    cost_per_operation: float = Field(0.0, alias="costPerOperation", ge=0)
    timezone: str = "UTC"

    def to_trading_system(self, ts_id: int) -> TradingSystem:
        return TradingSystem(
            id=ts_id,
            name=self.name,
            cost_per_operation=self.cost_per_operation,
            timezone=self.timezone,
        )
