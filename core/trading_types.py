"""
Portfolio Analytics - Shared Trading Types
Common record types and exceptions used across the analytics engine.
"""

from dataclasses import dataclass, replace
from datetime import date, datetime, timezone, tzinfo
from enum import Enum
from typing import Iterable, List, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


class TradeType(str, Enum):
    """Trade direction stored on each trade.

    ``ALL`` is a query-time selector, never a stored value.
    """
    ALL = "all"
    LONG = "long"
    SHORT = "short"

    @classmethod
    def parse(cls, value: Union[str, 'TradeType']) -> 'TradeType':
        """Parse a trade type from its (case-insensitive) name."""
        if isinstance(value, TradeType):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown trade type: {value}") from None


# =============================================================================
# Exception Hierarchy for Analytics Operations
# =============================================================================
# All analytics exceptions inherit from AnalyticsError for unified catching.
# Always log exceptions using logger.exception() when catching.


class AnalyticsError(Exception):
    """
    Base exception for all analytics-related errors.

        try:
            analyzer.analyze(...)
        except AnalyticsError as e:
            logger.exception("Analysis failed")
    """
    pass


class ValidationError(AnalyticsError):
    """
    Raised when the caller supplied input the engine cannot work with.

    Surfaced to API clients as a rejected request, never as a crash.
    """
    pass


class NoLossesError(ValidationError):
    """
    Raised when the risk unit cannot be estimated because no trade lost money.

    Example:
        if not losses:
            raise NoLossesError("no losses found")
    """
    pass


class NoTradesError(ValidationError):
    """
    Raised when a simulation is requested on an empty trade list.
    """
    pass


class WorkerPoolFullError(AnalyticsError):
    """
    Raised when the worker pool queue cannot accept another job.
    """
    pass


class ChartRenderError(AnalyticsError):
    """
    Raised by chart renderers when an image cannot be produced.
    """
    pass


# =============================================================================
# Records
# =============================================================================


@dataclass(frozen=True)
class Trade:
    """A closed trade, immutable once read from storage."""
    entry_date: datetime
    exit_date: datetime
    gross_profit: float
    trade_type: TradeType

    def net_profit(self, cost_per_operation: float) -> float:
        """Profit after paying the cost on both the entry and the exit side."""
        return self.gross_profit - 2 * cost_per_operation

    def matches(self, trade_type: TradeType) -> bool:
        return trade_type == TradeType.ALL or self.trade_type == trade_type

    def localize(self, zone: tzinfo) -> 'Trade':
        """Same trade with both timestamps expressed in ``zone``."""
        return replace(
            self,
            entry_date=as_utc(self.entry_date).astimezone(zone),
            exit_date=as_utc(self.exit_date).astimezone(zone),
        )


@dataclass(frozen=True)
class DailyReturn:
    """Gross profit of a trading system for a single calendar day."""
    date: date
    gross_profit: float


@dataclass(frozen=True)
class TradingSystem:
    """Read-only description of the trading system being analyzed."""
    id: int
    name: str = ""
    cost_per_operation: float = 0.0
    timezone: str = "UTC"

    @property
    def zone(self) -> tzinfo:
        """
        Timezone of the exchange, used for every calendar bucket.

        Raises:
            ValidationError: If the timezone name is unknown
        """
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValidationError(f"Unknown timezone: {self.timezone}") from None


def as_utc(value: datetime) -> datetime:
    """Naive timestamps are taken as UTC."""
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def sort_by_exit(trades: Iterable[Trade]) -> List[Trade]:
    """Trades in exit order; trades closed at the same instant keep their order."""
    return sorted(trades, key=lambda t: as_utc(t.exit_date))


def localize_trades(trades: Iterable[Trade], zone: tzinfo) -> List[Trade]:
    return [t.localize(zone) for t in trades]


def to_int_date(value: Union[date, datetime]) -> int:
    """Render a date as the integer YYYYMMDD used in reports."""
    return value.year * 10000 + value.month * 100 + value.day
