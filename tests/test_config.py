"""
Portfolio Analytics - Configuration Tests
"""

import json

from config import (
    SystemConfig,
    get_config,
    load_chart_config,
    load_logging_config,
    load_simulation_config,
)


class TestSystemConfig:
    """Tests for the dataclass configuration."""

    def test_defaults(self):
        config = get_config()

        assert config.simulation.num_workers == 4
        assert config.simulation.queue_size == 100
        assert config.simulation.purge_interval_seconds == 300.0
        assert config.simulation.result_ttl_seconds == 1800.0
        assert config.logging.level == "INFO"

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "config.json"
        config = get_config()
        config.simulation.seed = 99
        config.chart.dpi = 72
        config.logs_dir = "custom_logs"

        config.save(str(path))
        loaded = SystemConfig.load(str(path))

        assert loaded.simulation.seed == 99
        assert loaded.chart.dpi == 72
        assert loaded.logs_dir == "custom_logs"

    def test_get_path_creates_directory(self, tmp_path):
        config = SystemConfig(base_dir=str(tmp_path))
        path = config.get_path('logs')

        assert (tmp_path / "logs").is_dir()
        assert path == str(tmp_path / "logs")


class TestSectionLoaders:
    """Tests for the standalone section loaders."""

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_simulation_config(str(tmp_path / "missing.json")).num_workers == 4
        assert load_chart_config(None).dpi == 100

    def test_loads_section(self, tmp_path):
        path = tmp_path / "sections.json"
        path.write_text(json.dumps({
            "simulation": {"num_workers": 2, "result_ttl_seconds": 60.0},
            "logging": {"level": "DEBUG", "log_to_file": False},
        }))

        simulation = load_simulation_config(str(path))
        logging_config = load_logging_config(str(path))

        assert simulation.num_workers == 2
        assert simulation.result_ttl_seconds == 60.0
        assert simulation.queue_size == 100
        assert logging_config.level == "DEBUG"
        assert not logging_config.log_to_file
