"""
Portfolio Analytics - CLI Tests
"""

import json
import logging

import pytest

from cli import main
from cli.loader import load_daily_returns, load_regimes, load_trades
from core.trading_types import TradeType, ValidationError

TRADES_CSV = """entry_date,exit_date,gross_profit,trade_type
2023-12-29 10:00:00,2024-01-02 16:00:00,30.0,long
2023-01-02 10:00:00,2023-01-03 16:00:00,100.0,Long
2023-01-04 10:00:00,2023-01-05 16:00:00,-50.0,short
2024-02-05 10:00:00,2024-02-06 16:00:00,-20.0,SHORT
"""

WINNERS_CSV = """entry_date,exit_date,gross_profit,trade_type
2023-01-02 10:00:00,2023-01-03 16:00:00,100.0,long
"""

DAILY_CSV = """date,gross_profit
2023-01-03,100.0
2023-01-05,-50.0
"""

REGIMES_CSV = """Date,Direction,Volatility
2023-01-02,1,1
2023-01-04,-1,2
"""


@pytest.fixture(autouse=True)
def restore_root_logger():
    """main() reconfigures the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def files(tmp_path):
    paths = {}
    for name, content in [
        ('trades', TRADES_CSV),
        ('winners', WINNERS_CSV),
        ('daily', DAILY_CSV),
        ('regimes', REGIMES_CSV),
    ]:
        path = tmp_path / f"{name}.csv"
        path.write_text(content)
        paths[name] = str(path)

    paths['output'] = str(tmp_path / "report.json")
    paths['log'] = str(tmp_path / "logs" / "cli.log")
    return paths


def run(command, files, *extra):
    return main([
        command,
        '--output', files['output'],
        '--log-file', files['log'],
        '--log-level', 'WARNING',
        *extra,
    ])


def read_report(files):
    with open(files['output']) as f:
        return json.load(f)


# ============================================================================
# Loaders
# ============================================================================

class TestLoaders:
    """Tests for the CSV loaders."""

    def test_trades_sorted_by_exit(self, files):
        trades = load_trades(files['trades'])

        assert [t.gross_profit for t in trades] == [100.0, -50.0, 30.0, -20.0]
        assert trades[0].trade_type == TradeType.LONG
        assert trades[3].trade_type == TradeType.SHORT

    def test_missing_column(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("entry_date,gross_profit\n2023-01-02,1.0\n")

        with pytest.raises(ValidationError, match="exit_date"):
            load_trades(str(path))

    def test_daily_returns(self, files):
        returns = load_daily_returns(files['daily'])
        assert [r.gross_profit for r in returns] == [100.0, -50.0]

    def test_regime_columns_are_case_insensitive(self, files):
        regimes = load_regimes(files['regimes'])

        assert len(regimes) == 2
        assert regimes[1].direction == -1
        assert regimes[1].volatility == 2


# ============================================================================
# Commands
# ============================================================================

class TestCommands:
    """End-to-end tests for main()."""

    def test_performance(self, files):
        code = run('performance', files, '--trades', files['trades'],
                   '--daily-returns', files['daily'], '--ts-id', '3', '--cost', '1.0')

        assert code == 0
        report = read_report(files)
        assert report['tradingSystemId'] == 3
        assert report['gross']['profit']['total'] == 60.0
        assert report['net']['profit']['total'] == 52.0
        assert report['distributions']['daily']['mean'] == 25.0

    def test_quality(self, files):
        code = run('quality', files, '--trades', files['trades'], '--regimes', files['regimes'])

        assert code == 0
        report = read_report(files)
        assert report['risk'] == 50.0
        assert report['qualityAllGross'][3][1]['trades'] == 1

    def test_quality_without_losses_fails(self, files, capsys):
        code = run('quality', files, '--trades', files['winners'])

        assert code == 1
        assert "no losses found" in capsys.readouterr().err

    def test_simulate(self, files, tmp_path):
        charts_dir = tmp_path / "charts"
        code = run('simulate', files, '--trades', files['trades'], '--runs', '20', '--seed', '1',
                   '--width', '200', '--height', '150', '--charts-dir', str(charts_dir))

        assert code == 0
        report = read_report(files)
        assert report['status'] == 'complete'
        assert report['step'] == 6
        assert report['runs'] == 20
        assert report['grossAll']['error'] is None
        assert (charts_dir / "gross_all.png").read_bytes().startswith(b"\x89PNG")

    def test_simulate_empty_window_fails(self, files, capsys):
        code = run('simulate', files, '--trades', files['trades'], '--days-back', '1')

        assert code == 1
        assert "no trades found" in capsys.readouterr().err

    def test_log_file_written(self, files):
        run('quality', files, '--trades', files['winners'])

        with open(files['log']) as f:
            assert "no losses found" in f.read()

    def test_timezone(self, files):
        code = run('performance', files, '--trades', files['trades'], '--timezone', 'Pacific/Auckland')

        assert code == 0
        assert read_report(files)['general'] == {'fromDate': 20230104, 'toDate': 20240207}

    def test_unknown_timezone_fails(self, files, capsys):
        code = run('performance', files, '--trades', files['trades'], '--timezone', 'Mars/Olympus')

        assert code == 1
        assert "Unknown timezone" in capsys.readouterr().err
