# API Schemas
from .common import APIResponse, ErrorResponse, TradeInput, DailyReturnInput, TradingSystemInput
from .analysis import MarketRegimeInput, PerformanceAnalysisRequest, QualityAnalysisRequest
from .simulation import SimulationStartRequest, SimulationStopResponse

__all__ = [
    "APIResponse",
    "ErrorResponse",
    "TradeInput",
    "DailyReturnInput",
    "TradingSystemInput",
    "MarketRegimeInput",
    "PerformanceAnalysisRequest",
    "QualityAnalysisRequest",
    "SimulationStartRequest",
    "SimulationStopResponse",
]
