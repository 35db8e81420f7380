"""
Quality command implementation.

This module handles the 'quality' CLI command: SQN grids by market regime.
"""

import logging
from typing import TYPE_CHECKING

from cli.loader import load_regimes, load_trades
from evaluation.quality import QualityAnalyzer

if TYPE_CHECKING:
    import argparse
    from config import SystemConfig

logger = logging.getLogger(__name__)


def execute_quality(
    args: 'argparse.Namespace',
    config: 'SystemConfig',
    resolved: dict
) -> dict:
    """Execute the quality command."""
    trades = load_trades(args.trades)

    if args.regimes:
        regimes = load_regimes(args.regimes)
    else:
        logger.warning("No regimes file given: every trade is unclassified and all cells are empty")
        regimes = []

    logger.info("Running quality analysis...")
    analysis = QualityAnalyzer().analyze(resolved['trading_system'], trades, regimes)

    return analysis.to_dict()
