"""
Portfolio Analytics - Configuration Settings
Centralized configuration management for the analytics engine.
"""

from dataclasses import dataclass, field, asdict
from typing import Optional
import json
import os


@dataclass
class AnalysisConfig:
    """Performance and quality analysis configuration."""
    default_cost_per_operation: float = 0.0


@dataclass
class SimulationConfig:
    """Bootstrap simulation and job manager configuration."""
    num_workers: int = 4
    queue_size: int = 100  # Waiting jobs before new ones are rejected
    purge_interval_seconds: float = 300.0
    result_ttl_seconds: float = 1800.0

    # Request defaults
    default_runs: int = 1000
    default_width: int = 800
    default_height: int = 600
    default_initial_capital: float = 10000.0
    default_ruin_percentage: int = 50

    # Set for reproducible runs
    seed: Optional[int] = None


@dataclass
class ChartConfig:
    """Equity chart rendering configuration."""
    dpi: int = 100
    font_size: int = 8
    line_width: float = 1.0


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    log_to_file: bool = True
    log_to_console: bool = True
    log_filename_prefix: str = "analytics"
    max_file_size_mb: int = 10
    backup_count: int = 5


@dataclass
class SystemConfig:
    """Main system configuration."""
    # Paths
    base_dir: str = field(default_factory=lambda: os.getcwd())
    logs_dir: str = "logs"

    # Sub-configs
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    chart: ChartConfig = field(default_factory=ChartConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def save(self, path: str):
        """Save configuration to JSON file."""
        with open(path, 'w') as f:
            json.dump(asdict(self), f, indent=2)

    @classmethod
    def load(cls, path: str) -> 'SystemConfig':
        """Load configuration from JSON file."""
        with open(path, 'r') as f:
            data = json.load(f)

        config = cls(
            analysis=AnalysisConfig(**data.get('analysis', {})),
            simulation=SimulationConfig(**data.get('simulation', {})),
            chart=ChartConfig(**data.get('chart', {})),
            logging=LoggingConfig(**data.get('logging', {}))
        )

        for key in ['base_dir', 'logs_dir']:
            if key in data:
                setattr(config, key, data[key])

        return config

    def get_path(self, subdir: str) -> str:
        """Get full path for a subdirectory."""
        path = os.path.join(self.base_dir, getattr(self, f"{subdir}_dir", subdir))
        os.makedirs(path, exist_ok=True)
        return path


def _load_section(path: str, section: str, config_cls):
    """Load one section of a JSON config file, falling back to defaults."""
    if path is None or not os.path.exists(path):
        return config_cls()

    with open(path, 'r') as f:
        data = json.load(f)

    return config_cls(**data.get(section, {}))


def load_simulation_config(path: Optional[str] = None) -> SimulationConfig:
    """Load the simulation section of a config file."""
    return _load_section(path, 'simulation', SimulationConfig)


def load_chart_config(path: Optional[str] = None) -> ChartConfig:
    """Load the chart section of a config file."""
    return _load_section(path, 'chart', ChartConfig)


def load_logging_config(path: Optional[str] = None) -> LoggingConfig:
    """Load the logging section of a config file."""
    return _load_section(path, 'logging', LoggingConfig)


# Default configuration instance
def get_config() -> SystemConfig:
    """Get default system configuration."""
    return SystemConfig()
