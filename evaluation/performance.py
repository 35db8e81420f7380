"""
Portfolio Analytics - Performance Analysis
Equity curves, profit summaries, calendar aggregates and distributions
for the All/Long/Short partitions of a trade history.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence

import numpy as np

from core.equity import (
    build_drawdown,
    build_equity,
    build_gross_profits,
    build_net_profits,
    calc_average_trade,
    calc_winning_percentage,
    trunc2d,
)
from core.risk import non_zero_daily_returns
from core.trading_types import DailyReturn, Trade, TradeType, TradingSystem, localize_trades, to_int_date
from evaluation.statistics import Distribution, calc_distribution

logger = logging.getLogger(__name__)

# Daily figures are annualized with sqrt(256 trading days).
ANNUALIZATION_FACTOR = 16

DAYS_PER_WEEK = 7
MONTHS_PER_YEAR = 12


def _optional_dict(value) -> Optional[Dict]:
    return value.to_dict() if value is not None else None


@dataclass
class TotalLongShort:
    """A figure split by partition."""
    total: float = 0.0
    long: float = 0.0
    short: float = 0.0

    def to_dict(self, truncate: bool = False) -> Dict:
        if truncate:
            return {'total': trunc2d(self.total), 'long': trunc2d(self.long), 'short': trunc2d(self.short)}
        return {'total': self.total, 'long': self.long, 'short': self.short}


@dataclass
class ProfitSummary:
    """Profit, average trade and max drawdown for one of gross/net."""
    profit: TotalLongShort = field(default_factory=TotalLongShort)
    average_trade: TotalLongShort = field(default_factory=TotalLongShort)
    max_drawdown: TotalLongShort = field(default_factory=TotalLongShort)

    def to_dict(self) -> Dict:
        return {
            'profit': self.profit.to_dict(),
            'averageTrade': self.average_trade.to_dict(),
            'maxDrawdown': self.max_drawdown.to_dict(),
        }


@dataclass
class Equities:
    """Equity and drawdown curves of a partition, indexed by exit time."""
    time: List[datetime]
    gross_equity: np.ndarray
    net_equity: np.ndarray
    gross_drawdown: np.ndarray
    net_drawdown: np.ndarray
    trades: int

    def to_dict(self) -> Dict:
        return {
            'time': [to_int_date(t) for t in self.time],
            'grossEquity': self.gross_equity.tolist(),
            'netEquity': self.net_equity.tolist(),
            'grossDrawdown': self.gross_drawdown.tolist(),
            'netDrawdown': self.net_drawdown.tolist(),
            'trades': self.trades,
        }


@dataclass
class AnnualAggregate:
    """
    Trades of a single calendar year (by exit date).

    Trades are added one by one while the year lasts; consolidate() computes
    the summary figures once the year is over.
    """
    year: int
    cost_per_operation: float
    gross_profits: List[float] = field(default_factory=list)
    trades: int = 0
    gross_profit: float = 0.0
    net_profit: float = 0.0
    gross_average_trade: float = 0.0
    net_average_trade: float = 0.0
    gross_max_drawdown: float = 0.0
    net_max_drawdown: float = 0.0
    winning_percentage: float = 0.0

    @classmethod
    def from_trade(cls, trade: Trade, cost_per_operation: float) -> 'AnnualAggregate':
        aggregate = cls(year=trade.exit_date.year, cost_per_operation=cost_per_operation)
        aggregate.add_trade(trade)
        return aggregate

    def add_trade(self, trade: Trade):
        self.gross_profits.append(trade.gross_profit)

    def consolidate(self):
        gross = np.asarray(self.gross_profits, dtype=float)
        net = build_net_profits(gross, self.cost_per_operation)

        _, gross_dd = build_drawdown(build_equity(gross))
        _, net_dd = build_drawdown(build_equity(net))

        self.trades = len(gross)
        self.gross_profit = trunc2d(float(gross.sum()))
        self.net_profit = trunc2d(float(net.sum()))
        self.gross_average_trade = calc_average_trade(gross.tolist())
        self.net_average_trade = calc_average_trade(net.tolist())
        self.gross_max_drawdown = trunc2d(gross_dd)
        self.net_max_drawdown = trunc2d(net_dd)
        self.winning_percentage = calc_winning_percentage(gross.tolist())

    def to_dict(self) -> Dict:
        return {
            'year': self.year,
            'trades': self.trades,
            'grossProfit': self.gross_profit,
            'netProfit': self.net_profit,
            'grossAverageTrade': self.gross_average_trade,
            'netAverageTrade': self.net_average_trade,
            'grossMaxDrawdown': self.gross_max_drawdown,
            'netMaxDrawdown': self.net_max_drawdown,
            'winningPercentage': self.winning_percentage,
        }


@dataclass
class RollingInfo:
    """Trade count and returns accumulated into one calendar bucket."""
    trades: TotalLongShort = field(default_factory=TotalLongShort)
    gross_returns: TotalLongShort = field(default_factory=TotalLongShort)
    net_returns: TotalLongShort = field(default_factory=TotalLongShort)

    def update(self, trade: Trade, cost_per_operation: float):
        gross = trade.gross_profit
        net = trade.net_profit(cost_per_operation)

        self.trades.total += 1
        self.gross_returns.total += gross
        self.net_returns.total += net

        if trade.trade_type == TradeType.LONG:
            self.trades.long += 1
            self.gross_returns.long += gross
            self.net_returns.long += net
        else:
            self.trades.short += 1
            self.gross_returns.short += gross
            self.net_returns.short += net

    def to_dict(self) -> Dict:
        return {
            'trades': {k: int(v) for k, v in self.trades.to_dict().items()},
            'grossReturns': self.gross_returns.to_dict(truncate=True),
            'netReturns': self.net_returns.to_dict(truncate=True),
        }


@dataclass
class YoYRolling:
    """Calendar buckets of a single year."""
    year: int
    data: List[RollingInfo]

    def to_dict(self) -> Dict:
        return {'year': self.year, 'data': [ri.to_dict() for ri in self.data]}


@dataclass
class Rolling:
    daily: List[RollingInfo] = field(default_factory=lambda: [RollingInfo() for _ in range(DAYS_PER_WEEK)])
    monthly: List[RollingInfo] = field(default_factory=lambda: [RollingInfo() for _ in range(MONTHS_PER_YEAR)])
    day_yoy: List[YoYRolling] = field(default_factory=list)
    month_yoy: List[YoYRolling] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            'daily': [ri.to_dict() for ri in self.daily],
            'monthly': [ri.to_dict() for ri in self.monthly],
            'dayYoY': [y.to_dict() for y in self.day_yoy],
            'monthYoY': [y.to_dict() for y in self.month_yoy],
        }


@dataclass
class Distributions:
    daily: Optional[Distribution] = None
    annual_sharpe_ratio: float = 0.0
    annual_standard_dev: float = 0.0
    trades_all_gross: Optional[Distribution] = None
    trades_all_net: Optional[Distribution] = None
    trades_long_gross: Optional[Distribution] = None
    trades_long_net: Optional[Distribution] = None
    trades_short_gross: Optional[Distribution] = None
    trades_short_net: Optional[Distribution] = None

    def to_dict(self) -> Dict:
        return {
            'daily': _optional_dict(self.daily),
            'annualSharpeRatio': self.annual_sharpe_ratio,
            'annualStandardDev': self.annual_standard_dev,
            'tradesAllGross': _optional_dict(self.trades_all_gross),
            'tradesAllNet': _optional_dict(self.trades_all_net),
            'tradesLongGross': _optional_dict(self.trades_long_gross),
            'tradesLongNet': _optional_dict(self.trades_long_net),
            'tradesShortGross': _optional_dict(self.trades_short_gross),
            'tradesShortNet': _optional_dict(self.trades_short_net),
        }


@dataclass
class PerformanceAnalysis:
    """Complete performance report of a trading system."""
    trading_system: TradingSystem
    all_equities: Equities
    long_equities: Equities
    short_equities: Equities
    gross: ProfitSummary = field(default_factory=ProfitSummary)
    net: ProfitSummary = field(default_factory=ProfitSummary)
    annual: List[AnnualAggregate] = field(default_factory=list)
    from_date: Optional[int] = None
    to_date: Optional[int] = None
    distributions: Distributions = field(default_factory=Distributions)
    rolling: Rolling = field(default_factory=Rolling)

    def to_dict(self) -> Dict:
        return {
            'tradingSystemId': self.trading_system.id,
            'general': {'fromDate': self.from_date, 'toDate': self.to_date},
            'allEquities': self.all_equities.to_dict(),
            'longEquities': self.long_equities.to_dict(),
            'shortEquities': self.short_equities.to_dict(),
            'gross': self.gross.to_dict(),
            'net': self.net.to_dict(),
            'aggregates': {'annual': [a.to_dict() for a in self.annual]},
            'distributions': self.distributions.to_dict(),
            'rolling': self.rolling.to_dict(),
        }


class PerformanceAnalyzer:
    """
    Builds the performance report of a trade history.

    Trades must be supplied in date order: annual aggregates and the
    year-over-year buckets are built in a single forward pass.
    Calendar figures use the trading system's timezone.
    """

    def analyze(
        self,
        trading_system: TradingSystem,
        trades: Sequence[Trade],
        daily_returns: Sequence[DailyReturn] = ()
    ) -> PerformanceAnalysis:
        cost = trading_system.cost_per_operation
        trades = localize_trades(trades, trading_system.zone)

        all_eq, all_gross_dd, all_net_dd = self._calc_equities(trades, TradeType.ALL, cost)
        long_eq, long_gross_dd, long_net_dd = self._calc_equities(trades, TradeType.LONG, cost)
        short_eq, short_gross_dd, short_net_dd = self._calc_equities(trades, TradeType.SHORT, cost)

        res = PerformanceAnalysis(
            trading_system=trading_system,
            all_equities=all_eq,
            long_equities=long_eq,
            short_equities=short_eq
        )

        res.gross.max_drawdown = TotalLongShort(trunc2d(all_gross_dd), trunc2d(long_gross_dd), trunc2d(short_gross_dd))
        res.net.max_drawdown = TotalLongShort(trunc2d(all_net_dd), trunc2d(long_net_dd), trunc2d(short_net_dd))

        res.gross.profit = TotalLongShort(
            self._calc_profit(all_eq.gross_equity),
            self._calc_profit(long_eq.gross_equity),
            self._calc_profit(short_eq.gross_equity)
        )
        res.net.profit = TotalLongShort(
            self._calc_profit(all_eq.net_equity),
            self._calc_profit(long_eq.net_equity),
            self._calc_profit(short_eq.net_equity)
        )

        for summary in (res.gross, res.net):
            summary.average_trade = TotalLongShort(
                self._calc_avg_trade(summary.profit.total, all_eq.trades),
                self._calc_avg_trade(summary.profit.long, long_eq.trades),
                self._calc_avg_trade(summary.profit.short, short_eq.trades)
            )
            summary.profit = TotalLongShort(
                trunc2d(summary.profit.total),
                trunc2d(summary.profit.long),
                trunc2d(summary.profit.short)
            )

        res.annual = self._calc_year_aggregates(trades, cost)

        if trades:
            res.from_date = to_int_date(trades[0].exit_date)
            res.to_date = to_int_date(trades[-1].exit_date)

        res.distributions = self._calc_distributions(trades, daily_returns, cost)
        res.rolling = self._calc_rolling(trades, cost)

        logger.info(
            f"Performance analysis of trading system {trading_system.id}: "
            f"{len(trades)} trades, {len(res.annual)} years"
        )
        return res

    def _calc_equities(self, trades: Sequence[Trade], trade_type: TradeType, cost: float):
        times, gross_profits = build_gross_profits(trades, trade_type)
        net_profits = build_net_profits(gross_profits, cost)

        gross_equity = build_equity(gross_profits)
        net_equity = build_equity(net_profits)

        gross_dd, max_gross_dd = build_drawdown(gross_equity)
        net_dd, max_net_dd = build_drawdown(net_equity)

        equities = Equities(
            time=times,
            gross_equity=gross_equity,
            net_equity=net_equity,
            gross_drawdown=gross_dd,
            net_drawdown=net_dd,
            trades=len(times)
        )
        return equities, max_gross_dd, max_net_dd

    @staticmethod
    def _calc_profit(equity: np.ndarray) -> float:
        if len(equity) == 0:
            return 0.0
        return float(equity[-1])

    @staticmethod
    def _calc_avg_trade(value: float, count: int) -> float:
        if count == 0:
            return 0.0
        return trunc2d(value / count)

    def _calc_year_aggregates(self, trades: Sequence[Trade], cost: float) -> List[AnnualAggregate]:
        aggregates = []
        current = None

        for trade in trades:
            if current is not None and current.year == trade.exit_date.year:
                current.add_trade(trade)
                continue

            if current is not None:
                current.consolidate()
            current = AnnualAggregate.from_trade(trade, cost)
            aggregates.append(current)

        if current is not None:
            current.consolidate()

        return aggregates

    def _calc_distributions(
        self,
        trades: Sequence[Trade],
        daily_returns: Sequence[DailyReturn],
        cost: float
    ) -> Distributions:
        dist = Distributions()
        dist.daily = calc_distribution(non_zero_daily_returns(daily_returns))

        if dist.daily is not None:
            dist.annual_sharpe_ratio = trunc2d(dist.daily.sharpe_ratio * ANNUALIZATION_FACTOR)
            dist.annual_standard_dev = trunc2d(dist.daily.standard_dev * ANNUALIZATION_FACTOR)

        for trade_type, gross_attr, net_attr in (
            (TradeType.ALL, 'trades_all_gross', 'trades_all_net'),
            (TradeType.LONG, 'trades_long_gross', 'trades_long_net'),
            (TradeType.SHORT, 'trades_short_gross', 'trades_short_net'),
        ):
            _, gross = build_gross_profits(trades, trade_type)
            net = build_net_profits(gross, cost)
            setattr(dist, gross_attr, calc_distribution(gross))
            setattr(dist, net_attr, calc_distribution(net))

        return dist

    def _calc_rolling(self, trades: Sequence[Trade], cost: float) -> Rolling:
        rolling = Rolling()

        for trade in trades:
            entry = trade.entry_date
            year = entry.year
            # Sunday = 0, like the day-of-week labels shown to users
            dow = entry.isoweekday() % 7
            month = entry.month - 1

            rolling.daily[dow].update(trade, cost)
            rolling.monthly[month].update(trade, cost)

            self._update_yoy(rolling.day_yoy, year, trade, dow, cost, DAYS_PER_WEEK)
            self._update_yoy(rolling.month_yoy, year, trade, month, cost, MONTHS_PER_YEAR)

        return rolling

    @staticmethod
    def _update_yoy(
        yoy_list: List[YoYRolling],
        year: int,
        trade: Trade,
        slot: int,
        cost: float,
        slots: int
    ):
        if not yoy_list or yoy_list[-1].year != year:
            yoy_list.append(YoYRolling(year=year, data=[RollingInfo() for _ in range(slots)]))

        yoy_list[-1].data[slot].update(trade, cost)
