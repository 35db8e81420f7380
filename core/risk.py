"""
Portfolio Analytics - Risk Unit Estimation
Derives the risk unit (typical stop loss) and R multiples from a trade history.
"""

import logging
from collections import Counter
from typing import List, Sequence

from core.trading_types import DailyReturn, NoLossesError, Trade, TradeType

logger = logging.getLogger(__name__)


def calc_risk(trades: Sequence[Trade]) -> float:
    """
    Estimate the risk unit as the magnitude of the most frequent loss.

    Losses are bucketed by exact value, so near-equal losses produced by
    varying costs land in different buckets. Ties go to the loss seen first.

    Raises:
        NoLossesError: If no trade has a negative gross profit
    """
    losses = Counter(t.gross_profit for t in trades if t.gross_profit < 0)

    if not losses:
        raise NoLossesError("no losses found")

    stop_loss, hits = losses.most_common(1)[0]
    logger.debug(f"Risk unit {abs(stop_loss)} found with {hits} hits out of {len(losses)} loss buckets")

    return abs(stop_loss)


def calc_r_multiples(
    trades: Sequence[Trade],
    trade_type: TradeType,
    risk: float,
    cost_per_operation: float = 0.0
) -> List[float]:
    """Express each trade of a partition as a multiple of the risk unit."""
    return [
        t.net_profit(cost_per_operation) / risk
        for t in trades
        if t.matches(trade_type)
    ]


def non_zero_daily_returns(returns: Sequence[DailyReturn]) -> List[float]:
    """Daily gross profits, skipping the days without trading activity."""
    return [r.gross_profit for r in returns if r.gross_profit != 0]
