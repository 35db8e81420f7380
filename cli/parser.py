"""
CLI argument parser and logging initialization.

This module handles command-line argument parsing, configuration resolution,
and logging setup for the analytics CLI.
"""

import argparse
import os
from typing import Any, Dict, Optional, Tuple

from config import (
    SystemConfig,
    get_config,
    load_simulation_config,
    load_chart_config,
    load_logging_config,
)
from core.trading_types import TradingSystem
from utils.logging_config import setup_logging


def initialize_logging(
    config: SystemConfig,
    log_level_override: Optional[str] = None,
    log_file_override: Optional[str] = None
) -> None:
    """
    Initialize logging based on configuration and CLI overrides.

    Args:
        config: System configuration
        log_level_override: CLI override for log level
        log_file_override: CLI override for log file path
    """
    log_config = config.logging

    # CLI overrides take precedence
    level = log_level_override or log_config.level

    logs_dir = None
    if log_config.log_to_file and not log_file_override:
        logs_dir = config.get_path('logs')

    setup_logging(
        level=level,
        log_file=log_file_override,
        logs_dir=logs_dir,
        max_bytes=log_config.max_file_size_mb * 1024 * 1024,
        backup_count=log_config.backup_count,
        console_output=log_config.log_to_console,
        log_filename_prefix=log_config.log_filename_prefix
    )


def create_parser() -> argparse.ArgumentParser:
    """
    Create the argument parser with all commands and options.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        description='Portfolio Analytics - Trading System Performance, Quality and Robustness',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py performance --trades trades.csv --daily-returns daily.csv --cost 2.5
  python main.py quality --trades trades.csv --regimes regimes.csv
  python main.py simulate --trades trades.csv --runs 5000 --charts-dir charts
        """
    )

    parser.add_argument(
        'command',
        choices=['performance', 'quality', 'simulate'],
        help='Command to execute'
    )

    parser.add_argument(
        '--trades',
        required=True,
        help='CSV file with entry_date, exit_date, gross_profit, trade_type columns'
    )

    parser.add_argument(
        '--daily-returns',
        default=None,
        help='CSV file with date, gross_profit columns (performance only)'
    )

    parser.add_argument(
        '--regimes',
        default=None,
        help='CSV file with date, direction, volatility columns (quality only)'
    )

    parser.add_argument(
        '--ts-id',
        type=int,
        default=1,
        help='Trading system id reported in the output (default: 1)'
    )

    parser.add_argument(
        '--name',
        default='',
        help='Trading system name'
    )

    parser.add_argument(
        '--timezone',
        default='UTC',
        help='Exchange timezone used for calendar figures (default: UTC)'
    )

    parser.add_argument(
        '--cost',
        type=float,
        default=None,
        help='Cost per operation, charged on entry and exit (default: from config or 0)'
    )

    # Simulation arguments
    parser.add_argument(
        '--runs',
        type=int,
        default=None,
        help='Number of bootstrap runs (default: from config or 1000)'
    )

    parser.add_argument(
        '--days-back',
        type=int,
        default=0,
        help='Only simulate trades entered in the last N days (0 = all)'
    )

    parser.add_argument(
        '--width',
        type=int,
        default=None,
        help='Equity chart width in pixels'
    )

    parser.add_argument(
        '--height',
        type=int,
        default=None,
        help='Equity chart height in pixels'
    )

    parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help='Random seed for reproducible simulations'
    )

    parser.add_argument(
        '--charts-dir',
        default=None,
        help='Write the simulated equity charts as PNG files to this directory'
    )

    # Modular config arguments
    parser.add_argument(
        '--config',
        help='Path to a full system config (JSON)'
    )

    parser.add_argument(
        '--simulation-config',
        help='Path to simulation config'
    )

    parser.add_argument(
        '--chart-config',
        help='Path to chart config'
    )

    parser.add_argument(
        '--logging-config',
        help='Path to logging config'
    )

    parser.add_argument(
        '--log-level', '-l',
        default=None,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: from config or INFO)'
    )

    parser.add_argument(
        '--log-file',
        help='Log file path'
    )

    parser.add_argument(
        '--output', '-o',
        default=None,
        help='Write the JSON report to this file instead of stdout'
    )

    return parser


def resolve_cli_config(args: argparse.Namespace) -> Tuple[SystemConfig, Dict[str, Any]]:
    """
    Resolve CLI arguments with config files into final configuration.

    Args:
        args: Parsed command-line arguments

    Returns:
        Tuple of (SystemConfig, resolved_args dict with computed values)
    """
    config = get_config()

    if args.config:
        if os.path.exists(args.config):
            config = SystemConfig.load(args.config)
        else:
            print(f"Warning: Config file not found: {args.config}")

    if args.simulation_config:
        if os.path.exists(args.simulation_config):
            config.simulation = load_simulation_config(args.simulation_config)
        else:
            print(f"Warning: Simulation config file not found: {args.simulation_config}")

    if args.chart_config:
        if os.path.exists(args.chart_config):
            config.chart = load_chart_config(args.chart_config)
        else:
            print(f"Warning: Chart config file not found: {args.chart_config}")

    if args.logging_config:
        if os.path.exists(args.logging_config):
            config.logging = load_logging_config(args.logging_config)
        else:
            print(f"Warning: Logging config file not found: {args.logging_config}")

    sim = config.simulation

    # Cost: CLI > config
    cost = args.cost if args.cost is not None else config.analysis.default_cost_per_operation

    resolved = {
        'trading_system': TradingSystem(
            id=args.ts_id, name=args.name, cost_per_operation=cost, timezone=args.timezone
        ),
        'runs': args.runs if args.runs is not None else sim.default_runs,
        'width': args.width if args.width is not None else sim.default_width,
        'height': args.height if args.height is not None else sim.default_height,
        'seed': args.seed if args.seed is not None else sim.seed,
    }

    return config, resolved
