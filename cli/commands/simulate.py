"""
Simulate command implementation.

This module handles the 'simulate' CLI command: runs a bootstrap simulation
through the job manager and waits for it to complete.
"""

import base64
import logging
import os
from typing import TYPE_CHECKING

from cli.loader import load_trades
from evaluation.charts import MatplotlibChartRenderer
from evaluation.job_manager import PHASES, SimulationJobManager, start_simulation
from evaluation.simulation import BootstrapSimulator, SimulationRequest

if TYPE_CHECKING:
    import argparse
    from config import SystemConfig

logger = logging.getLogger(__name__)


def save_charts(result, charts_dir: str) -> int:
    """Write the PNG of every simulated combination. Returns the number of files."""
    os.makedirs(charts_dir, exist_ok=True)

    written = 0
    for field_name, _, _ in PHASES:
        details = getattr(result, field_name)
        if details is None or not details.equities:
            continue

        path = os.path.join(charts_dir, f"{field_name}.png")
        with open(path, 'wb') as f:
            f.write(base64.b64decode(details.equities))
        written += 1

    return written


def execute_simulate(
    args: 'argparse.Namespace',
    config: 'SystemConfig',
    resolved: dict
) -> dict:
    """
    Execute the simulate command.

    Args:
        args: Parsed command-line arguments
        config: System configuration
        resolved: Resolved configuration values
    """
    trading_system = resolved['trading_system']
    sim = config.simulation
    chart = config.chart

    request = SimulationRequest(
        days_back=args.days_back,
        runs=resolved['runs'],
        width=resolved['width'],
        height=resolved['height'],
        initial_capital=sim.default_initial_capital,
        ruin_percentage=sim.default_ruin_percentage,
    ).validate()

    trades = load_trades(args.trades)

    renderer = MatplotlibChartRenderer(dpi=chart.dpi, font_size=chart.font_size, line_width=chart.line_width)
    manager = SimulationJobManager.from_config(
        sim,
        simulator_factory=lambda: BootstrapSimulator(renderer, seed=resolved['seed'])
    )

    try:
        process = start_simulation(manager, request, trading_system, trades)
        process.wait()
    finally:
        manager.shutdown()

    if args.charts_dir:
        written = save_charts(process.result, args.charts_dir)
        logger.info(f"Saved {written} equity charts to {args.charts_dir}")

    return process.result.to_dict()
