"""
Portfolio Analytics - Bootstrap Simulation
Monte Carlo robustness analysis: resamples R-multiple sequences with
replacement and summarizes the ensemble of simulated equity paths.
"""

import base64
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from core.equity import build_drawdown, build_equity
from core.trading_types import ChartRenderError, ValidationError
from evaluation.charts import ChartRenderer, MatplotlibChartRenderer
from evaluation.statistics import Histogram

logger = logging.getLogger(__name__)

X_AXIS_TITLE = "Trades"
Y_AXIS_TITLE = "Cumulative R multiples"

# Resampled paths are generated in blocks to bound temporary memory.
SAMPLE_BLOCK = 1000

MAX_DAYS_BACK = 20000
MAX_RUNS = 50000
MAX_WIDTH = 4000
MAX_HEIGHT = 3000


class SimulationStatus(str, Enum):
    """Lifecycle of a simulation job."""
    IDLE = "idle"
    WAITING = "waiting"
    RUNNING = "running"
    COMPLETE = "complete"


@dataclass
class SimulationRequest:
    """Parameters of a simulation run."""
    days_back: int = 0
    runs: int = 1000
    width: int = 800
    height: int = 600
    initial_capital: float = 10000.0
    ruin_percentage: int = 50

    def validate(self) -> 'SimulationRequest':
        """
        Check the request bounds.

        Raises:
            ValidationError: If any field is out of range
        """
        errors = []
        if not 0 <= self.days_back <= MAX_DAYS_BACK:
            errors.append(f"daysBack must be between 0 and {MAX_DAYS_BACK}")
        if not 0 <= self.runs <= MAX_RUNS:
            errors.append(f"runs must be between 0 and {MAX_RUNS}")
        if not 0 < self.width <= MAX_WIDTH:
            errors.append(f"width must be between 1 and {MAX_WIDTH}")
        if not 0 < self.height <= MAX_HEIGHT:
            errors.append(f"height must be between 1 and {MAX_HEIGHT}")
        if self.initial_capital < 1:
            errors.append("initialCapital must be at least 1")
        if not 5 <= self.ruin_percentage <= 95:
            errors.append("ruinPercentage must be between 5 and 95")

        if errors:
            raise ValidationError("; ".join(errors))
        return self


@dataclass
class Details:
    """
    Outcome of one gross/net x all/long/short combination.

    ``error`` is set when the equity chart could not be produced; the
    drawdown histogram is still reported in that case.
    """
    equities: str = ""
    max_drawdowns: Optional[Histogram] = None
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def to_dict(self) -> Dict:
        return {
            'equities': self.equities,
            'maxDrawdowns': self.max_drawdowns.to_dict() if self.max_drawdowns is not None else None,
            'error': self.error,
        }


@dataclass
class SimulationResult:
    """
    Live result of a simulation job.

    The running job fills the Details in one at a time; readers may see
    ``step`` ahead of the matching Details and must accept None entries.
    """
    status: SimulationStatus = SimulationStatus.IDLE
    first_trade_date: Optional[int] = None
    last_trade_date: Optional[int] = None
    runs: int = 0
    initial_capital: float = 0.0
    ruin_percentage: int = 0
    risk: float = 0.0
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    step: int = 0
    gross_all: Optional[Details] = None
    gross_long: Optional[Details] = None
    gross_short: Optional[Details] = None
    net_all: Optional[Details] = None
    net_long: Optional[Details] = None
    net_short: Optional[Details] = None

    def to_dict(self) -> Dict:
        def details(value: Optional[Details]):
            return value.to_dict() if value is not None else None

        return {
            'status': self.status.value,
            'firstTradeDate': self.first_trade_date,
            'lastTradeDate': self.last_trade_date,
            'runs': self.runs,
            'initialCapital': self.initial_capital,
            'ruinPercentage': self.ruin_percentage,
            'risk': self.risk,
            'startTime': self.start_time.isoformat() if self.start_time else None,
            'endTime': self.end_time.isoformat() if self.end_time else None,
            'step': self.step,
            'grossAll': details(self.gross_all),
            'grossLong': details(self.gross_long),
            'grossShort': details(self.gross_short),
            'netAll': details(self.net_all),
            'netLong': details(self.net_long),
            'netShort': details(self.net_short),
        }


def build_drawdown_histogram(max_drawdowns: Sequence[float]) -> Histogram:
    """
    Count max drawdowns in 1R bins, from the deepest one up to 0R.

    A drawdown of -2.5R is truncated toward zero and lands in the "-2R" bin.
    """
    if len(max_drawdowns) == 0:
        return Histogram()

    deepest = min(max_drawdowns)
    size = int(math.trunc(abs(deepest))) + 1

    x_axis = [f"{-size + i}R" for i in range(1, size + 1)]
    y_axis = [0.0] * size

    for value in max_drawdowns:
        y_axis[size + int(math.trunc(value)) - 1] += 1

    return Histogram(x_axis=x_axis, y_axis=y_axis)


def mean_and_std(ensemble: np.ndarray, size: int) -> Tuple[np.ndarray, np.ndarray]:
    """Cross-run mean and sample standard deviation at each trade index."""
    runs = ensemble.shape[0]
    if runs == 0:
        return np.zeros(size), np.zeros(size)

    mean = ensemble.mean(axis=0)
    if runs < 2:
        return mean, np.zeros(size)

    return mean, ensemble.std(axis=0, ddof=1)


class BootstrapSimulator:
    """
    Bootstrap resampling of R-multiple sequences.

    Args:
        renderer: Chart renderer used for the equity ensemble image
        rng: Random generator; pass a seeded one for reproducible runs
        seed: Seed used when no generator is given
    """

    def __init__(
        self,
        renderer: Optional[ChartRenderer] = None,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None
    ):
        self.renderer = renderer or MatplotlibChartRenderer()
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def build_sample_set(self, r_multiples: Sequence[float], runs: int) -> Tuple[np.ndarray, np.ndarray]:
        """
        Draw ``runs`` paths of ``len(r_multiples)`` values with replacement.

        Returns:
            Tuple of (equity ensemble with one path per row, max drawdown per path)
        """
        values = np.asarray(r_multiples, dtype=float)
        size = len(values)

        ensemble = np.empty((runs, size))
        max_drawdowns = np.empty(runs)

        for start in range(0, runs, SAMPLE_BLOCK):
            stop = min(start + SAMPLE_BLOCK, runs)
            indices = self.rng.integers(0, size, size=(stop - start, size))
            equity = build_equity(values[indices])
            _, max_dd = build_drawdown(equity)

            ensemble[start:stop] = equity
            max_drawdowns[start:stop] = max_dd

        return ensemble, max_drawdowns

    def add_mean_and_std(self, ensemble: np.ndarray, size: int) -> np.ndarray:
        """Append zero baseline, mean, mean + std and mean - std to the ensemble."""
        mean, std = mean_and_std(ensemble, size)
        return np.vstack([ensemble.reshape(-1, size), np.zeros(size), mean, mean + std, mean - std])

    def run(self, r_multiples: Sequence[float], request: SimulationRequest) -> Details:
        """Simulate one R-multiple sequence and render its equity ensemble."""
        size = len(r_multiples)
        if size == 0:
            return Details()

        ensemble, max_drawdowns = self.build_sample_set(r_multiples, request.runs)
        series = self.add_mean_and_std(ensemble, size)
        histogram = build_drawdown_histogram(max_drawdowns)

        x_labels = [str(i) for i in range(1, size + 1)]

        try:
            image = self.renderer.render(
                series, x_labels, X_AXIS_TITLE, Y_AXIS_TITLE, request.width, request.height
            )
        except ChartRenderError as e:
            logger.error(f"Equity chart rendering failed: {e}")
            return Details(max_drawdowns=histogram, error=str(e))

        return Details(
            equities=base64.b64encode(image).decode('ascii'),
            max_drawdowns=histogram
        )
