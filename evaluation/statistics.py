"""
Portfolio Analytics - Distribution Statistics
Descriptive statistics, tail ratios and histograms for numeric samples.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Union

import numpy as np

from core.equity import trunc2d

# Tail ratios of a normal distribution are close to this value, so dividing
# by it makes a gaussian sample report tails of about 1.
TAIL_NORMALIZATION = 4.43


@dataclass
class Histogram:
    """Bins (x axis labels) and counts (y axis) of a sample."""
    x_axis: List[Union[str, float]] = field(default_factory=list)
    y_axis: List[float] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {'xAxis': list(self.x_axis), 'yAxis': list(self.y_axis)}


@dataclass
class Distribution:
    """Snapshot of a sample's shape. All values are truncated to 2 decimals."""
    mean: float
    median: float
    standard_dev: float
    sharpe_ratio: float
    lower_tail: float
    upper_tail: float
    skewness: float
    histogram: Histogram

    def to_dict(self) -> Dict:
        return {
            'mean': self.mean,
            'median': self.median,
            'standardDev': self.standard_dev,
            'sharpeRatio': self.sharpe_ratio,
            'lowerTail': self.lower_tail,
            'upperTail': self.upper_tail,
            'skewness': self.skewness,
            'histogram': self.histogram.to_dict(),
        }


class Percentile:
    """Percentile estimator interpolating linearly on the sorted sample."""

    def __init__(self, data: Sequence[float]):
        self.sorted = np.sort(np.asarray(data, dtype=float))

    def get(self, rank: float) -> float:
        if len(self.sorted) == 0:
            return 0.0
        return float(np.percentile(self.sorted, rank))


def mean(data: Sequence[float]) -> float:
    return float(np.mean(data))


def median(data: Sequence[float]) -> float:
    return float(np.median(data))


def std_dev(data: Sequence[float], mean_value: Optional[float] = None) -> float:
    """Population standard deviation."""
    values = np.asarray(data, dtype=float)
    if mean_value is None:
        mean_value = float(values.mean())
    return float(np.sqrt(np.mean((values - mean_value) ** 2)))


def sharpe_ratio(mean_value: float, std_value: float) -> float:
    if std_value == 0:
        return 0.0
    return mean_value / std_value


def skewness(mean_value: float, median_value: float, std_value: float) -> float:
    """Pearson's second skewness coefficient."""
    if std_value == 0:
        return 0.0
    return 3 * (mean_value - median_value) / std_value


def _ratio(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return 0.0
    return numerator / denominator


def build_histogram(data: Sequence[float]) -> Histogram:
    """Histogram with Sturges binning, labelled by each bin's lower edge."""
    values = np.asarray(data, dtype=float)
    if len(values) == 0:
        return Histogram()

    counts, edges = np.histogram(values, bins='sturges')

    return Histogram(
        x_axis=[trunc2d(float(edge)) for edge in edges[:-1]],
        y_axis=[float(c) for c in counts]
    )


def calc_distribution(data: Sequence[float]) -> Optional[Distribution]:
    """
    Compute the distribution of a sample.

    Returns None for an empty sample: absent data is not an error.
    """
    if data is None or len(data) == 0:
        return None

    values = np.asarray(data, dtype=float)

    mean_value = mean(values)
    median_value = median(values)
    std_value = std_dev(values, mean_value)
    percentile = Percentile(values)

    perc01 = percentile.get(1) - mean_value
    perc30 = percentile.get(30) - mean_value
    perc70 = percentile.get(70) - mean_value
    perc99 = percentile.get(99) - mean_value

    lower_ratio = _ratio(perc01, perc30)
    upper_ratio = _ratio(perc99, perc70)

    return Distribution(
        mean=trunc2d(mean_value),
        median=trunc2d(median_value),
        standard_dev=trunc2d(std_value),
        sharpe_ratio=trunc2d(sharpe_ratio(mean_value, std_value)),
        lower_tail=trunc2d(lower_ratio / TAIL_NORMALIZATION),
        upper_tail=trunc2d(upper_ratio / TAIL_NORMALIZATION),
        skewness=trunc2d(skewness(mean_value, median_value, std_value)),
        histogram=build_histogram(values)
    )
