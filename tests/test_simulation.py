"""
Portfolio Analytics - Bootstrap Simulation Tests
"""

import numpy as np
import pytest

from core.trading_types import ChartRenderError, ValidationError
from evaluation.charts import ENSEMBLE_COLOR, OVERLAY_COLORS, MatplotlibChartRenderer, build_colors
from evaluation.simulation import (
    X_AXIS_TITLE,
    BootstrapSimulator,
    Details,
    SimulationRequest,
    SimulationResult,
    SimulationStatus,
    build_drawdown_histogram,
    mean_and_std,
)
from evaluation.statistics import Histogram

from tests.conftest import StubRenderer

R_MULTIPLES = [1.5, -1.0, 2.0, -1.0, 0.5]


class FailingRenderer:
    def render(self, *args, **kwargs):
        raise ChartRenderError("boom")


@pytest.fixture
def renderer():
    return StubRenderer()


@pytest.fixture
def simulator(renderer):
    return BootstrapSimulator(renderer, seed=42)


# ============================================================================
# Drawdown histogram
# ============================================================================

class TestDrawdownHistogram:
    """Tests for the 1R max drawdown histogram."""

    def test_bins_from_deepest_to_zero(self):
        hist = build_drawdown_histogram([-2.5, -0.3, 0.0, -1.0])

        assert hist.x_axis == ["-2R", "-1R", "0R"]
        assert hist.y_axis == [1, 1, 2]

    def test_counts_cover_sample(self):
        values = np.random.default_rng(1).uniform(-7.0, 0.0, 500)
        hist = build_drawdown_histogram(values)

        assert sum(hist.y_axis) == 500
        assert hist.x_axis[-1] == "0R"

    def test_empty(self):
        assert build_drawdown_histogram([]) == Histogram()


# ============================================================================
# Sample set
# ============================================================================

class TestSampleSet:
    """Tests for resampling with replacement."""

    def test_shapes(self, simulator):
        ensemble, max_dd = simulator.build_sample_set(R_MULTIPLES, 50)

        assert ensemble.shape == (50, len(R_MULTIPLES))
        assert max_dd.shape == (50,)
        assert (max_dd <= 0).all()

    def test_steps_are_drawn_from_input(self, simulator):
        ensemble, _ = simulator.build_sample_set(R_MULTIPLES, 20)
        steps = np.diff(ensemble, axis=1, prepend=0.0)

        for value in steps.ravel():
            assert min(abs(value - r) for r in R_MULTIPLES) < 1e-9

    def test_reproducible_with_seed(self):
        first, _ = BootstrapSimulator(StubRenderer(), seed=7).build_sample_set(R_MULTIPLES, 30)
        second, _ = BootstrapSimulator(StubRenderer(), seed=7).build_sample_set(R_MULTIPLES, 30)

        np.testing.assert_array_equal(first, second)

    def test_more_runs_than_one_block(self, simulator):
        ensemble, max_dd = simulator.build_sample_set(R_MULTIPLES, 2500)

        assert ensemble.shape[0] == 2500
        assert len(max_dd) == 2500


class TestMeanAndStd:
    """Tests for the statistics overlay."""

    def test_overlay_rows(self, simulator):
        series = simulator.add_mean_and_std(np.array([[1.0, 2.0], [3.0, 4.0]]), 2)

        assert series.shape == (6, 2)
        np.testing.assert_allclose(series[2], [0.0, 0.0])
        np.testing.assert_allclose(series[3], [2.0, 3.0])
        np.testing.assert_allclose(series[4] - series[3], [np.sqrt(2), np.sqrt(2)])
        np.testing.assert_allclose(series[3] - series[5], [np.sqrt(2), np.sqrt(2)])

    def test_zero_runs(self):
        mean, std = mean_and_std(np.empty((0, 3)), 3)

        np.testing.assert_array_equal(mean, np.zeros(3))
        np.testing.assert_array_equal(std, np.zeros(3))


# ============================================================================
# Run
# ============================================================================

class TestRun:
    """Tests for a single simulated combination."""

    def test_renders_ensemble(self, simulator, renderer):
        details = simulator.run(R_MULTIPLES, SimulationRequest(runs=10, width=300, height=200))

        assert details.equities == "cG5n"
        assert details.error is None
        assert sum(details.max_drawdowns.y_axis) == 10

        call = renderer.calls[0]
        assert len(call['series']) == 14
        assert call['x_labels'] == ["1", "2", "3", "4", "5"]
        assert call['x_title'] == X_AXIS_TITLE
        assert (call['width'], call['height']) == (300, 200)

    def test_empty_sequence(self, simulator, renderer):
        details = simulator.run([], SimulationRequest(runs=10))

        assert details == Details()
        assert renderer.calls == []

    def test_zero_runs(self, simulator, renderer):
        details = simulator.run(R_MULTIPLES, SimulationRequest(runs=0))

        assert details.max_drawdowns == Histogram()
        assert len(renderer.calls[0]['series']) == 4

    def test_renderer_failure_is_recorded(self):
        simulator = BootstrapSimulator(FailingRenderer(), seed=1)
        details = simulator.run(R_MULTIPLES, SimulationRequest(runs=10))

        assert details.failed
        assert details.error == "boom"
        assert details.equities == ""
        assert details.max_drawdowns is not None


class TestSimulationRequest:
    """Tests for request bounds."""

    def test_defaults_are_valid(self):
        assert SimulationRequest().validate().runs == 1000

    @pytest.mark.parametrize("kwargs", [
        {'runs': 50001},
        {'days_back': 20001},
        {'width': 4001},
        {'height': 0},
        {'initial_capital': 0.5},
        {'ruin_percentage': 4},
        {'ruin_percentage': 96},
    ])
    def test_out_of_range(self, kwargs):
        with pytest.raises(ValidationError):
            SimulationRequest(**kwargs).validate()


def test_result_payload():
    result = SimulationResult(status=SimulationStatus.RUNNING, step=2, gross_all=Details(equities="x"))
    payload = result.to_dict()

    assert payload['status'] == "running"
    assert payload['step'] == 2
    assert payload['grossAll']['equities'] == "x"
    assert payload['netShort'] is None


# ============================================================================
# Chart rendering
# ============================================================================

class TestCharts:
    """Tests for the matplotlib renderer."""

    def test_overlay_colors_last(self):
        colors = build_colors(10)

        assert colors[:6] == [ENSEMBLE_COLOR] * 6
        assert colors[6:] == OVERLAY_COLORS

    def test_fewer_series_than_overlay(self):
        assert build_colors(2) == OVERLAY_COLORS[2:]

    def test_renders_png(self):
        image = MatplotlibChartRenderer().render(
            [[0.0, 1.0, 2.0], [0.0, -1.0, 0.5]], ["1", "2", "3"], "Trades", "R", 200, 150
        )
        assert image.startswith(b"\x89PNG")

    def test_invalid_size(self):
        with pytest.raises(ChartRenderError):
            MatplotlibChartRenderer().render([[0.0]], ["1"], "x", "y", 0, 100)
