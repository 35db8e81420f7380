"""
Portfolio Analytics - Equity and Drawdown Builder
Turns profit sequences into cumulative equity curves and drawdown series.
"""

import math
from datetime import datetime
from typing import List, Sequence, Tuple, Union

import numpy as np

from core.trading_types import Trade, TradeType


def trunc2d(value: float) -> float:
    """Truncate to two decimals toward negative infinity (1.239 -> 1.23, -1.231 -> -1.24)."""
    return math.floor(value * 100) / 100


def build_gross_profits(
    trades: Sequence[Trade],
    trade_type: TradeType
) -> Tuple[List[datetime], np.ndarray]:
    """Collect exit dates and gross profits of the trades in a partition."""
    times = []
    profits = []

    for trade in trades:
        if trade.matches(trade_type):
            times.append(trade.exit_date)
            profits.append(trade.gross_profit)

    return times, np.asarray(profits, dtype=float)


def build_net_profits(gross_profits: np.ndarray, cost_per_operation: float) -> np.ndarray:
    """Subtract the per-side cost twice from every gross profit."""
    return np.asarray(gross_profits, dtype=float) - 2 * cost_per_operation


def build_equity(profits: Union[Sequence[float], np.ndarray]) -> np.ndarray:
    """
    Build the cumulative equity curve of a profit sequence.

    A 2-D input is treated as one profit sequence per row.
    """
    return np.cumsum(np.asarray(profits, dtype=float), axis=-1)


def build_drawdown(equity: np.ndarray) -> Tuple[np.ndarray, Union[float, np.ndarray]]:
    """
    Build the drawdown series of an equity curve.

    The running peak starts at 0 and is raised whenever the equity reaches
    or exceeds it, so the drawdown is exactly 0 at every new peak and
    negative elsewhere.

    Args:
        equity: Equity curve, or a 2-D array with one curve per row

    Returns:
        Tuple of (drawdown series, max drawdown). The max drawdown is the most
        negative drawdown value (0 for an empty curve); for 2-D input it is an
        array with one value per row.
    """
    equity = np.asarray(equity, dtype=float)

    if equity.shape[-1] == 0:
        drawdown = np.zeros(equity.shape)
        if equity.ndim == 1:
            return drawdown, 0.0
        return drawdown, np.zeros(equity.shape[:-1])

    peak = np.maximum.accumulate(np.maximum(equity, 0.0), axis=-1)
    drawdown = equity - peak
    max_drawdown = np.minimum(drawdown.min(axis=-1), 0.0)

    if equity.ndim == 1:
        return drawdown, float(max_drawdown)
    return drawdown, max_drawdown


def calc_winning_percentage(profits: Sequence[float]) -> float:
    """Percentage of winning trades, ignoring flat ones."""
    traded = [p for p in profits if p != 0]
    if not traded:
        return 0.0

    winners = sum(1 for p in traded if p > 0)
    return (winners * 10000 // len(traded)) / 100


def calc_average_trade(profits: Sequence[float]) -> float:
    """Average of the non-flat trades, truncated toward zero to 2 decimals."""
    traded = [p for p in profits if p != 0]
    if not traded:
        return 0.0

    return int(sum(traded) * 100 / len(traded)) / 100
