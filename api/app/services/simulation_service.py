"""Simulation service."""

import logging
import threading
from typing import Any, Optional

from evaluation.job_manager import SimulationJobManager, start_simulation
from evaluation.simulation import BootstrapSimulator

from ..core.config import settings
from ..schemas.simulation import SimulationStartRequest

logger = logging.getLogger(__name__)


class SimulationService:
    """Service wrapping the process-wide simulation job manager."""

    def __init__(self, manager: Optional[SimulationJobManager] = None):
        self._manager = manager
        self._lock = threading.Lock()

    @property
    def manager(self) -> SimulationJobManager:
        with self._lock:
            if self._manager is None:
                seed = settings.SIMULATION_SEED
                self._manager = SimulationJobManager(
                    num_workers=settings.SIMULATION_WORKERS,
                    queue_size=settings.SIMULATION_QUEUE_SIZE,
                    purge_interval=settings.SIMULATION_PURGE_INTERVAL,
                    result_ttl=settings.SIMULATION_RESULT_TTL,
                    simulator_factory=lambda: BootstrapSimulator(seed=seed),
                )
                logger.info("Simulation job manager created")
            return self._manager

    def start(self, ts_id: int, body: SimulationStartRequest) -> dict[str, Any]:
        trading_system = body.trading_system.to_trading_system(ts_id)
        trades = [t.to_trade() for t in body.trades]

        process = start_simulation(self.manager, body.to_request(), trading_system, trades)
        return process.result.to_dict()

    def stop(self, ts_id: int) -> bool:
        return self.manager.stop(ts_id)

    def get_result(self, ts_id: int) -> dict[str, Any]:
        return self.manager.get_result(ts_id).to_dict()

    def shutdown(self):
        with self._lock:
            manager, self._manager = self._manager, None
        if manager is not None:
            manager.shutdown()


simulation_service = SimulationService()
