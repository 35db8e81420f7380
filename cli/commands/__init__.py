"""
CLI command implementations.

This module provides command handlers for all CLI commands and a registry
for command dispatch. Each handler returns the JSON-ready report.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import argparse
    from config import SystemConfig

from .performance import execute_performance
from .quality import execute_quality
from .simulate import execute_simulate

# Command registry mapping command names to handler functions
COMMANDS = {
    'performance': execute_performance,
    'quality': execute_quality,
    'simulate': execute_simulate,
}


def execute_command(
    command: str,
    args: 'argparse.Namespace',
    config: 'SystemConfig',
    resolved: dict
) -> dict:
    """
    Execute a CLI command.

    Args:
        command: Command name (performance, quality, simulate)
        args: Parsed command-line arguments
        config: System configuration
        resolved: Resolved configuration values from CLI/config

    Returns:
        The command's report
    """
    handler = COMMANDS.get(command)
    if handler is None:
        raise ValueError(f"Unknown command: {command}")
    return handler(args, config, resolved)


__all__ = [
    'execute_command',
    'execute_performance',
    'execute_quality',
    'execute_simulate',
    'COMMANDS',
]
