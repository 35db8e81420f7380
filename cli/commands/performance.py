"""
Performance command implementation.

This module handles the 'performance' CLI command: equities, aggregates,
distributions and rolling statistics of a trade history.
"""

import logging
from typing import TYPE_CHECKING

from cli.loader import load_daily_returns, load_trades
from evaluation.performance import PerformanceAnalyzer

if TYPE_CHECKING:
    import argparse
    from config import SystemConfig

logger = logging.getLogger(__name__)


def execute_performance(
    args: 'argparse.Namespace',
    config: 'SystemConfig',
    resolved: dict
) -> dict:
    """
    Execute the performance command.

    Args:
        args: Parsed command-line arguments
        config: System configuration
        resolved: Resolved configuration values
    """
    trading_system = resolved['trading_system']

    trades = load_trades(args.trades)
    daily_returns = load_daily_returns(args.daily_returns) if args.daily_returns else []

    logger.info("Running performance analysis...")
    analysis = PerformanceAnalyzer().analyze(trading_system, trades, daily_returns)

    return analysis.to_dict()
