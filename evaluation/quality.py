"""
Portfolio Analytics - Quality Analysis
System Quality Number (SQN) and drawdown of R multiples, broken down by
the market regime (direction x volatility) of each trade's entry day.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import IntEnum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from core.equity import build_drawdown, build_equity, trunc2d
from core.risk import calc_risk
from core.trading_types import Trade, TradeType, TradingSystem, localize_trades

logger = logging.getLogger(__name__)

SQN_SAMPLE_CAP = 100


class Direction(IntEnum):
    """Market direction of a day. ALL selects every classified day."""
    STRONG_BEAR = -2
    BEAR = -1
    NEUTRAL = 0
    BULL = 1
    STRONG_BULL = 2
    ALL = 3
    UNCLASSIFIED = 10


class Volatility(IntEnum):
    """Market volatility of a day. ALL selects every classified day."""
    QUIET = 0
    NORMAL = 1
    VOLATILE = 2
    VERY_VOLATILE = 3
    ALL = 4
    UNCLASSIFIED = 10


DIRECTIONS = [Direction.STRONG_BEAR, Direction.BEAR, Direction.NEUTRAL, Direction.BULL, Direction.STRONG_BULL]
VOLATILITIES = [Volatility.QUIET, Volatility.NORMAL, Volatility.VOLATILE, Volatility.VERY_VOLATILE]

GRID_ROWS = len(DIRECTIONS) + 1
GRID_COLUMNS = len(VOLATILITIES) + 1


@dataclass(frozen=True)
class MarketRegime:
    """Classification of a trading day supplied by the regime feed."""
    date: date
    direction: int
    volatility: int


@dataclass
class QualityMetrics:
    """Quality figures of the trades falling in one grid cell."""
    trades: int = 0
    trades_perc: float = 0.0
    sqn: float = 0.0
    sqn100: float = 0.0
    max_drawdown: float = 0.0

    def to_dict(self) -> Dict:
        return {
            'trades': self.trades,
            'tradesPerc': self.trades_perc,
            'sqn': self.sqn,
            'sqn100': self.sqn100,
            'maxDrawdown': self.max_drawdown,
        }


def new_grid() -> List[List[Optional[QualityMetrics]]]:
    return [[None] * GRID_COLUMNS for _ in range(GRID_ROWS)]


@dataclass
class QualityAnalysis:
    """
    Quality grids of a trading system.

    Each grid is indexed as ``grid[direction + 2][volatility]``; the row for
    Direction.ALL and the column for Volatility.ALL hold the marginals.
    """
    trading_system: TradingSystem
    risk: float = 0.0
    all_gross: List[List[Optional[QualityMetrics]]] = field(default_factory=new_grid)
    long_gross: List[List[Optional[QualityMetrics]]] = field(default_factory=new_grid)
    short_gross: List[List[Optional[QualityMetrics]]] = field(default_factory=new_grid)
    all_net: List[List[Optional[QualityMetrics]]] = field(default_factory=new_grid)
    long_net: List[List[Optional[QualityMetrics]]] = field(default_factory=new_grid)
    short_net: List[List[Optional[QualityMetrics]]] = field(default_factory=new_grid)

    def cell(self, grid: str, direction: int, volatility: int) -> QualityMetrics:
        return getattr(self, grid)[direction + 2][volatility]

    def to_dict(self) -> Dict:
        def render(grid):
            return [[c.to_dict() if c is not None else None for c in row] for row in grid]

        return {
            'tradingSystemId': self.trading_system.id,
            'risk': self.risk,
            'qualityAllGross': render(self.all_gross),
            'qualityLongGross': render(self.long_gross),
            'qualityShortGross': render(self.short_gross),
            'qualityAllNet': render(self.all_net),
            'qualityLongNet': render(self.long_net),
            'qualityShortNet': render(self.short_net),
        }


def build_market_map(regimes: Iterable[MarketRegime]) -> Dict[date, MarketRegime]:
    return {r.date: r for r in regimes}


def map_trade(trade: Trade, market_map: Dict[date, MarketRegime]) -> Tuple[int, int]:
    """Regime of the trade's entry day, or the unclassified sentinel."""
    entry = trade.entry_date
    day = entry.date() if isinstance(entry, datetime) else entry

    regime = market_map.get(day)
    if regime is None:
        return Direction.UNCLASSIFIED, Volatility.UNCLASSIFIED

    return regime.direction, regime.volatility


def _selects(selector: int, value: int, all_value: int, unclassified: int) -> bool:
    if value == unclassified:
        return False
    return selector == all_value or selector == value


def calc_sqn(r_multiples: Sequence[float]) -> Tuple[float, float]:
    """SQN of the sample and SQN with the sample size capped at 100."""
    values = np.asarray(r_multiples, dtype=float)
    size = len(values)
    if size < 2:
        return 0.0, 0.0

    mean = float(values.mean())
    std = float(values.std(ddof=1))

    if std <= 0:
        return 0.0, 0.0

    capped = min(size, SQN_SAMPLE_CAP)

    return mean / std * math.sqrt(size), mean / std * math.sqrt(capped)


class QualityAnalyzer:
    """Builds the regime quality grids of a trade history."""

    def analyze(
        self,
        trading_system: TradingSystem,
        trades: Sequence[Trade],
        regimes: Iterable[MarketRegime]
    ) -> QualityAnalysis:
        """
        Trades are matched to regimes by their entry day in the trading
        system's timezone.

        Raises:
            NoLossesError: If the risk unit cannot be estimated
        """
        risk = calc_risk(trades)
        trades = localize_trades(trades, trading_system.zone)
        market_map = build_market_map(regimes)
        cost = trading_system.cost_per_operation

        mapped = [(t, *map_trade(t, market_map)) for t in trades]
        unclassified = sum(1 for _, d, _v in mapped if d == Direction.UNCLASSIFIED)
        if unclassified:
            logger.info(f"{unclassified} trades have no market regime and are left out of every cell")

        res = QualityAnalysis(trading_system=trading_system, risk=risk)

        for direction in DIRECTIONS:
            for volatility in VOLATILITIES:
                self._calc_cell(res, mapped, len(trades), direction, volatility, risk, cost)

        for direction in DIRECTIONS:
            self._calc_cell(res, mapped, len(trades), direction, Volatility.ALL, risk, cost)

        for volatility in VOLATILITIES:
            self._calc_cell(res, mapped, len(trades), Direction.ALL, volatility, risk, cost)

        self._calc_cell(res, mapped, len(trades), Direction.ALL, Volatility.ALL, risk, cost)

        return res

    def _calc_cell(self, res, mapped, total_trades, direction, volatility, risk, cost):
        row, col = direction + 2, volatility

        for trade_type, gross_grid, net_grid in (
            (TradeType.ALL, res.all_gross, res.all_net),
            (TradeType.LONG, res.long_gross, res.long_net),
            (TradeType.SHORT, res.short_gross, res.short_net),
        ):
            gross_grid[row][col] = self._calc_metrics(mapped, total_trades, trade_type, direction, volatility, risk, 0.0)
            net_grid[row][col] = self._calc_metrics(mapped, total_trades, trade_type, direction, volatility, risk, cost)

    def _calc_metrics(
        self,
        mapped: List[Tuple[Trade, int, int]],
        total_trades: int,
        trade_type: TradeType,
        direction: int,
        volatility: int,
        risk: float,
        cost: float
    ) -> QualityMetrics:
        r_multiples = [
            trade.net_profit(cost) / risk
            for trade, trade_dir, trade_vol in mapped
            if trade.matches(trade_type)
            and _selects(direction, trade_dir, Direction.ALL, Direction.UNCLASSIFIED)
            and _selects(volatility, trade_vol, Volatility.ALL, Volatility.UNCLASSIFIED)
        ]

        cell = QualityMetrics(trades=len(r_multiples))
        if not r_multiples:
            return cell

        cell.trades_perc = trunc2d(100 * len(r_multiples) / total_trades)

        sqn, sqn100 = calc_sqn(r_multiples)
        cell.sqn = trunc2d(sqn)
        cell.sqn100 = trunc2d(sqn100)

        _, max_dd = build_drawdown(build_equity(r_multiples))
        cell.max_drawdown = trunc2d(max_dd)

        return cell
