"""Simulation schemas."""

from pydantic import BaseModel, Field

from evaluation.simulation import (
    MAX_DAYS_BACK,
    MAX_HEIGHT,
    MAX_RUNS,
    MAX_WIDTH,
    SimulationRequest,
)

from .common import TradeInput, TradingSystemInput


class SimulationStartRequest(BaseModel):
    """Request to start a bootstrap simulation."""

    trading_system: TradingSystemInput = Field(default_factory=TradingSystemInput, alias="tradingSystem")
    trades: list[TradeInput]
    days_back: int = Field(0, alias="daysBack", ge=0, le=MAX_DAYS_BACK)
    runs: int = Field(1000, ge=0, le=MAX_RUNS)
    width: int = Field(800, gt=0, le=MAX_WIDTH)
    height: int = Field(600, gt=0, le=MAX_HEIGHT)
    initial_capital: float = Field(10000.0, alias="initialCapital", ge=1)
    ruin_percentage: int = Field(50, alias="ruinPercentage", ge=5, le=95)

    def to_request(self) -> SimulationRequest:
        return SimulationRequest(
            days_back=self.days_back,
            runs=self.runs,
            width=self.width,
            height=self.height,
            initial_capital=self.initial_capital,
            ruin_percentage=self.ruin_percentage,
        ).validate()


class SimulationStopResponse(BaseModel):
    """Outcome of a stop request."""

    stopped: bool
