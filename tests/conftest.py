"""
Portfolio Analytics - Shared Test Fixtures
"""

from datetime import date, datetime

import pytest

from core.trading_types import Trade, TradeType, TradingSystem
from evaluation.quality import MarketRegime
from evaluation.simulation import Details


def make_trade(entry, exit, profit, trade_type=TradeType.LONG):
    """Build a trade from 'YYYY-MM-DD' strings."""
    return Trade(
        entry_date=datetime.fromisoformat(entry),
        exit_date=datetime.fromisoformat(exit),
        gross_profit=profit,
        trade_type=trade_type,
    )


class StubRenderer:
    """Chart renderer returning fixed bytes and recording each call."""

    def __init__(self, image=b"png"):
        self.image = image
        self.calls = []

    def render(self, series, x_labels, x_title, y_title, width, height):
        self.calls.append({
            'series': series,
            'x_labels': x_labels,
            'x_title': x_title,
            'y_title': y_title,
            'width': width,
            'height': height,
        })
        return self.image


class StubSimulator:
    """Simulator recording the R multiples of each phase."""

    def __init__(self, on_run=None):
        self.calls = []
        self.on_run = on_run

    def run(self, r_multiples, request):
        self.calls.append(list(r_multiples))
        if self.on_run is not None:
            self.on_run(len(self.calls))
        return Details(equities="stub")


class ManualPool:
    """Worker pool stand-in that runs queued tasks only when asked."""

    def __init__(self):
        self.tasks = []

    def start(self):
        pass

    def submit(self, task):
        self.tasks.append(task)

    def run_all(self):
        tasks, self.tasks = self.tasks, []
        for task in tasks:
            task()

    def shutdown(self, timeout=None):
        pass


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def trading_system():
    """Trading system charging 1.0 per side."""
    return TradingSystem(id=7, name="Breakout", cost_per_operation=1.0)


@pytest.fixture
def sample_trades():
    """
    Four trades over two exit years.

    Entry days: Monday, Wednesday, Friday (Dec 2023, exits in 2024), Monday.
    """
    return [
        make_trade("2023-01-02T10:00:00", "2023-01-03T16:00:00", 100.0, TradeType.LONG),
        make_trade("2023-01-04T10:00:00", "2023-01-05T16:00:00", -50.0, TradeType.SHORT),
        make_trade("2023-12-29T10:00:00", "2024-01-02T16:00:00", 30.0, TradeType.LONG),
        make_trade("2024-02-05T10:00:00", "2024-02-06T16:00:00", -20.0, TradeType.SHORT),
    ]


@pytest.fixture
def sample_regimes():
    """Regimes for every sample trade entry day except 2023-12-29."""
    return [
        MarketRegime(date=date(2023, 1, 2), direction=1, volatility=1),
        MarketRegime(date=date(2023, 1, 4), direction=-1, volatility=2),
        MarketRegime(date=date(2024, 2, 5), direction=1, volatility=1),
    ]
