"""Core module for Portfolio Analytics."""

from .equity import build_equity, build_drawdown, trunc2d
from .risk import calc_risk, calc_r_multiples
from .trading_types import (
    TradeType,
    Trade,
    DailyReturn,
    TradingSystem,
    # Exception hierarchy
    AnalyticsError,
    ValidationError,
    NoLossesError,
    NoTradesError,
    WorkerPoolFullError,
    ChartRenderError,
)

__all__ = [
    'build_equity',
    'build_drawdown',
    'trunc2d',
    'calc_risk',
    'calc_r_multiples',
    'TradeType',
    'Trade',
    'DailyReturn',
    'TradingSystem',
    # Exception hierarchy
    'AnalyticsError',
    'ValidationError',
    'NoLossesError',
    'NoTradesError',
    'WorkerPoolFullError',
    'ChartRenderError',
]
