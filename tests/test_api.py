"""
Portfolio Analytics - API Tests
"""

import pytest
from fastapi.testclient import TestClient

from api.app.main import app
from api.app.services.simulation_service import simulation_service
from evaluation.job_manager import SimulationJobManager
from utils.worker_pool import WorkerPool

from tests.conftest import StubSimulator

PREFIX = "/api/v1/trading-systems"

TRADES = [
    {"entryDate": "2023-01-02T10:00:00", "exitDate": "2023-01-03T16:00:00", "grossProfit": 100.0, "tradeType": "long"},
    {"entryDate": "2023-01-04T10:00:00", "exitDate": "2023-01-05T16:00:00", "grossProfit": -50.0, "tradeType": "short"},
    {"entryDate": "2023-12-29T10:00:00", "exitDate": "2024-01-02T16:00:00", "grossProfit": 30.0, "tradeType": "long"},
    {"entryDate": "2024-02-05T10:00:00", "exitDate": "2024-02-06T16:00:00", "grossProfit": -20.0, "tradeType": "short"},
]

TRADING_SYSTEM = {"name": "Breakout", "costPerOperation": 1.0}


@pytest.fixture
def manager(monkeypatch):
    manager = SimulationJobManager(num_workers=1, queue_size=4, simulator_factory=StubSimulator)
    monkeypatch.setattr(simulation_service, "_manager", manager)
    yield manager
    manager.shutdown()


@pytest.fixture
def client(manager):
    with TestClient(app) as client:
        yield client


# ============================================================================
# Analysis endpoints
# ============================================================================

class TestAnalysisRoutes:
    """Tests for the synchronous analysis endpoints."""

    def test_performance(self, client):
        resp = client.post(
            f"{PREFIX}/7/performance-analysis",
            json={"tradingSystem": TRADING_SYSTEM, "trades": TRADES},
        )

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["tradingSystemId"] == 7
        assert data["gross"]["profit"]["total"] == 60.0
        assert data["net"]["profit"]["total"] == 52.0
        assert data["general"] == {"fromDate": 20230103, "toDate": 20240206}

    def test_performance_with_daily_returns(self, client):
        resp = client.post(
            f"{PREFIX}/7/performance-analysis",
            json={
                "trades": TRADES,
                "dailyReturns": [
                    {"date": "2023-01-03", "grossProfit": 100.0},
                    {"date": "2023-01-05", "grossProfit": -50.0},
                ],
            },
        )

        assert resp.status_code == 200
        assert resp.json()["data"]["distributions"]["daily"]["mean"] == 25.0

    def test_quality(self, client):
        resp = client.post(
            f"{PREFIX}/7/quality-analysis",
            json={
                "trades": TRADES,
                "regimes": [{"date": "2023-01-02", "direction": 1, "volatility": 1}],
            },
        )

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["risk"] == 50.0
        assert len(data["qualityAllGross"]) == 6
        assert data["qualityAllGross"][3][1]["trades"] == 1

    def test_quality_without_losses(self, client):
        resp = client.post(f"{PREFIX}/7/quality-analysis", json={"trades": TRADES[:1]})

        assert resp.status_code == 422
        assert resp.json()["error"] == {"code": "UNPROCESSABLE_ENTITY", "message": "no losses found"}

    def test_trades_out_of_order(self, client):
        shuffled = [TRADES[2], TRADES[0], TRADES[3], TRADES[1]]
        resp = client.post(f"{PREFIX}/7/performance-analysis", json={"trades": shuffled})

        data = resp.json()["data"]
        assert [a["year"] for a in data["aggregates"]["annual"]] == [2023, 2024]
        assert data["general"] == {"fromDate": 20230103, "toDate": 20240206}
        assert [y["year"] for y in data["rolling"]["monthYoY"]] == [2023, 2024]

    def test_timezone(self, client):
        trade = dict(TRADES[0], entryDate="2023-01-02T02:00:00Z", exitDate="2023-01-02T03:00:00Z")
        resp = client.post(
            f"{PREFIX}/7/performance-analysis",
            json={"tradingSystem": {"timezone": "America/New_York"}, "trades": [trade]},
        )

        assert resp.json()["data"]["general"]["fromDate"] == 20230101

    def test_unknown_timezone(self, client):
        resp = client.post(
            f"{PREFIX}/7/performance-analysis",
            json={"tradingSystem": {"timezone": "Mars/Olympus"}, "trades": TRADES},
        )

        assert resp.status_code == 422
        assert resp.json()["error"]["code"] == "UNPROCESSABLE_ENTITY"

    def test_invalid_trade_type(self, client):
        trade = dict(TRADES[0], tradeType="sideways")
        resp = client.post(f"{PREFIX}/7/performance-analysis", json={"trades": [trade]})

        assert resp.status_code == 422
        assert resp.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_invalid_regime(self, client):
        resp = client.post(
            f"{PREFIX}/7/quality-analysis",
            json={"trades": TRADES, "regimes": [{"date": "2023-01-02", "direction": 3, "volatility": 1}]},
        )
        assert resp.status_code == 422


# ============================================================================
# Simulation endpoints
# ============================================================================

class TestSimulationRoutes:
    """Tests for the asynchronous simulation endpoints."""

    def test_unknown_simulation_is_idle(self, client):
        resp = client.get(f"{PREFIX}/99/simulation")

        assert resp.status_code == 200
        assert resp.json()["data"]["status"] == "idle"

    def test_start_and_poll(self, client, manager):
        resp = client.post(
            f"{PREFIX}/7/simulation",
            json={"tradingSystem": TRADING_SYSTEM, "trades": TRADES, "runs": 20},
        )

        assert resp.status_code == 202
        started = resp.json()["data"]
        assert started["status"] in ("waiting", "running", "complete")
        assert started["risk"] == 50.0
        assert started["runs"] == 20

        assert manager.get_job(7).wait(timeout=5)

        result = client.get(f"{PREFIX}/7/simulation").json()["data"]
        assert result["status"] == "complete"
        assert result["step"] == 6
        assert result["grossAll"]["equities"] == "stub"

    def test_start_with_trades_out_of_order(self, client, manager):
        shuffled = [TRADES[3], TRADES[1], TRADES[0], TRADES[2]]
        started = client.post(f"{PREFIX}/7/simulation", json={"trades": shuffled, "runs": 10}).json()["data"]

        assert started["firstTradeDate"] == 20230103
        assert started["lastTradeDate"] == 20240206
        assert started["risk"] == 50.0
        manager.get_job(7).wait(timeout=5)

    def test_stop(self, client, manager):
        client.post(f"{PREFIX}/7/simulation", json={"trades": TRADES, "runs": 10})
        manager.get_job(7).wait(timeout=5)

        resp = client.delete(f"{PREFIX}/7/simulation")

        assert resp.json()["data"] == {"stopped": True}
        assert client.get(f"{PREFIX}/7/simulation").json()["data"]["status"] == "idle"

    def test_stop_unknown(self, client):
        assert client.delete(f"{PREFIX}/99/simulation").json()["data"] == {"stopped": False}

    def test_runs_out_of_range(self, client):
        resp = client.post(f"{PREFIX}/7/simulation", json={"trades": TRADES, "runs": 50001})
        assert resp.status_code == 422

    def test_no_trades_in_window(self, client):
        resp = client.post(f"{PREFIX}/7/simulation", json={"trades": TRADES, "daysBack": 1})

        assert resp.status_code == 422
        assert resp.json()["error"]["message"] == "no trades found for given time"

    def test_queue_full(self, monkeypatch):
        manager = SimulationJobManager(
            simulator_factory=StubSimulator,
            pool=WorkerPool(num_workers=1, queue_size=1),
            autostart=False,
        )
        monkeypatch.setattr(simulation_service, "_manager", manager)

        with TestClient(app) as client:
            first = client.post(f"{PREFIX}/1/simulation", json={"trades": TRADES, "runs": 10})
            second = client.post(f"{PREFIX}/2/simulation", json={"trades": TRADES, "runs": 10})

        assert first.status_code == 202
        assert second.status_code == 503
        assert second.json()["error"]["code"] == "SERVICE_UNAVAILABLE"


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"
