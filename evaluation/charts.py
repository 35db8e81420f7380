"""
Portfolio Analytics - Chart Rendering
Rasterizes a matrix of series (one row per line) into a PNG image.
"""

import io
import logging
from typing import List, Protocol, Sequence

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np

from core.trading_types import ChartRenderError

logger = logging.getLogger(__name__)

# The last four series of an ensemble chart are the statistics overlay:
# zero baseline, mean, mean + std and mean - std.
ENSEMBLE_COLOR = (192 / 255, 192 / 255, 192 / 255, 96 / 255)
OVERLAY_COLORS = [
    (128 / 255, 128 / 255, 128 / 255, 1.0),
    (16 / 255, 16 / 255, 16 / 255, 1.0),
    (80 / 255, 80 / 255, 80 / 255, 1.0),
    (80 / 255, 80 / 255, 80 / 255, 1.0),
]


class ChartRenderer(Protocol):
    """Anything able to turn a matrix of series into an encoded image."""

    def render(
        self,
        series: Sequence[Sequence[float]],
        x_labels: List[str],
        x_title: str,
        y_title: str,
        width: int,
        height: int
    ) -> bytes:
        ...


def build_colors(count: int) -> list:
    """Light grey for the simulated paths, darker greys for the overlay."""
    overlay = min(count, len(OVERLAY_COLORS))
    return [ENSEMBLE_COLOR] * (count - overlay) + OVERLAY_COLORS[len(OVERLAY_COLORS) - overlay:]


class MatplotlibChartRenderer:
    """Line chart renderer backed by matplotlib's Agg backend."""

    def __init__(self, dpi: int = 100, font_size: int = 8, line_width: float = 1.0):
        self.dpi = dpi
        self.font_size = font_size
        self.line_width = line_width

    def render(
        self,
        series: Sequence[Sequence[float]],
        x_labels: List[str],
        x_title: str,
        y_title: str,
        width: int,
        height: int
    ) -> bytes:
        if width <= 0 or height <= 0:
            raise ChartRenderError(f"Invalid chart size {width}x{height}")

        fig = plt.figure(figsize=(width / self.dpi, height / self.dpi), dpi=self.dpi)
        try:
            ax = fig.add_subplot(1, 1, 1)
            x = np.arange(1, len(x_labels) + 1)
            colors = build_colors(len(series))

            for values, color in zip(series, colors):
                ax.plot(x, values, color=color, linewidth=self.line_width)

            ax.set_xlabel(x_title, fontsize=self.font_size)
            ax.set_ylabel(y_title, fontsize=self.font_size)
            ax.tick_params(labelsize=self.font_size)

            buf = io.BytesIO()
            fig.savefig(buf, format='png', dpi=self.dpi)
            return buf.getvalue()
        except (ValueError, RuntimeError) as e:
            raise ChartRenderError(f"Cannot render chart: {e}") from e
        finally:
            plt.close(fig)
