"""Performance and quality analysis schemas."""

import datetime as dt

from pydantic import BaseModel, Field

from evaluation.quality import MarketRegime

from .common import DailyReturnInput, TradeInput, TradingSystemInput


class MarketRegimeInput(BaseModel):
    """Regime label of one trading day."""

    day: dt.date = Field(alias="date")
    direction: int = Field(ge=-2, le=2)
    volatility: int = Field(ge=0, le=3)

    def to_regime(self) -> MarketRegime:
        return MarketRegime(date=self.day, direction=self.direction, volatility=self.volatility)


class PerformanceAnalysisRequest(BaseModel):
    """Request of a performance analysis."""

    trading_system: TradingSystemInput = Field(default_factory=TradingSystemInput, alias="tradingSystem")
    trades: list[TradeInput]
    daily_returns: list[DailyReturnInput] = Field(default_factory=list, alias="dailyReturns")


class QualityAnalysisRequest(BaseModel):
    """Request of a quality analysis."""

    trading_system: TradingSystemInput = Field(default_factory=TradingSystemInput, alias="tradingSystem")
    trades: list[TradeInput]
    regimes: list[MarketRegimeInput] = Field(default_factory=list)
