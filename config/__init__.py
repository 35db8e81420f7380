"""Configuration module for Portfolio Analytics."""

from .settings import (
    SystemConfig,
    AnalysisConfig,
    SimulationConfig,
    ChartConfig,
    LoggingConfig,
    get_config,
    # Standalone config loaders
    load_simulation_config,
    load_chart_config,
    load_logging_config,
)

__all__ = [
    'SystemConfig',
    'AnalysisConfig',
    'SimulationConfig',
    'ChartConfig',
    'LoggingConfig',
    'get_config',
    # Standalone config loaders
    'load_simulation_config',
    'load_chart_config',
    'load_logging_config',
]
