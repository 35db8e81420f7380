"""
Portfolio Analytics - CLI Package

This package provides the command-line interface for the analytics engine.

Usage:
    python main.py performance --trades trades.csv --daily-returns daily.csv
    python main.py quality --trades trades.csv --regimes regimes.csv
    python main.py simulate --trades trades.csv --runs 5000
"""

import json
import logging
import sys
from typing import List, Optional

from core.trading_types import AnalyticsError

from .parser import create_parser, initialize_logging, resolve_cli_config
from .commands import execute_command

logger = logging.getLogger(__name__)


def write_report(report: dict, output: Optional[str] = None) -> None:
    """Print the report as JSON, or write it to ``output``."""
    text = json.dumps(report, indent=2)

    if output:
        with open(output, 'w') as f:
            f.write(text)
        logger.info(f"Report written to {output}")
    else:
        print(text)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    This function:
    1. Parses command-line arguments
    2. Loads and resolves configuration
    3. Initializes logging
    4. Dispatches to the appropriate command handler and writes its report

    Returns:
        Process exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    config, resolved = resolve_cli_config(args)

    initialize_logging(
        config=config,
        log_level_override=args.log_level,
        log_file_override=args.log_file
    )

    try:
        report = execute_command(args.command, args, config, resolved)
    except AnalyticsError as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    write_report(report, args.output)
    return 0


__all__ = [
    'main',
    'write_report',
    'initialize_logging',
    'create_parser',
    'resolve_cli_config',
    'execute_command',
]
