"""Job manager for asynchronous bootstrap simulations."""

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional, Sequence

from core.risk import calc_r_multiples, calc_risk
from core.trading_types import (
    NoTradesError,
    Trade,
    TradeType,
    TradingSystem,
    as_utc,
    sort_by_exit,
    to_int_date,
)
from evaluation.simulation import (
    BootstrapSimulator,
    Details,
    SimulationRequest,
    SimulationResult,
    SimulationStatus,
)
from utils.worker_pool import WorkerPool

logger = logging.getLogger(__name__)

DEFAULT_PURGE_INTERVAL = 5 * 60.0
DEFAULT_RESULT_TTL = 30 * 60.0

# Phases of a simulation job, run in this order: (result field, partition, net of costs)
PHASES = [
    ('gross_all', TradeType.ALL, False),
    ('gross_long', TradeType.LONG, False),
    ('gross_short', TradeType.SHORT, False),
    ('net_all', TradeType.ALL, True),
    ('net_long', TradeType.LONG, True),
    ('net_short', TradeType.SHORT, True),
]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def filter_by_days_back(
    trades: Sequence[Trade],
    days_back: int,
    now: Optional[datetime] = None
) -> List[Trade]:
    """Trades entered within the last ``days_back`` days; 0 keeps every trade."""
    if days_back == 0:
        return list(trades)

    from_time = as_utc((now or utc_now()) - timedelta(days=days_back))
    return [t for t in trades if as_utc(t.entry_date) >= from_time]


class SimulationProcess:
    """
    One simulation job of a trading system.

    The job runs the six phases sequentially and checks its stop flag only
    between phases: a phase in progress always completes.
    """

    def __init__(
        self,
        trading_system: TradingSystem,
        trades: Sequence[Trade],
        request: SimulationRequest,
        risk: float,
        simulator: Optional[BootstrapSimulator] = None,
        clock: Callable[[], datetime] = utc_now
    ):
        if not trades:
            raise NoTradesError("no trades found for given time")

        self.trading_system = trading_system
        self.trades = trades
        self.request = request
        self.risk = risk
        self.simulator = simulator or BootstrapSimulator()
        self._clock = clock
        self._stop_event = threading.Event()
        self._done = threading.Event()

        zone = trading_system.zone
        self.result = SimulationResult(
            status=SimulationStatus.WAITING,
            first_trade_date=to_int_date(as_utc(trades[0].exit_date).astimezone(zone)),
            last_trade_date=to_int_date(as_utc(trades[-1].exit_date).astimezone(zone)),
            runs=request.runs,
            initial_capital=request.initial_capital,
            ruin_percentage=request.ruin_percentage,
            risk=risk,
        )

    @property
    def ts_id(self) -> int:
        return self.trading_system.id

    @property
    def stopping(self) -> bool:
        return self._stop_event.is_set()

    def stop(self) -> None:
        """Ask the job to stop at the next phase boundary."""
        self._stop_event.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the job is complete. Returns False on timeout."""
        return self._done.wait(timeout)

    def run(self) -> None:
        """Job body, executed by a worker thread."""
        logger.info(f"Simulation of trading system {self.ts_id} started ({self.request.runs} runs)")

        result = self.result
        result.start_time = self._clock()
        result.status = SimulationStatus.RUNNING

        try:
            for field_name, trade_type, net in PHASES:
                if self.stopping:
                    logger.info(f"Simulation of trading system {self.ts_id} stopped at step {result.step}")
                    break

                setattr(result, field_name, self._run_phase(field_name, trade_type, net))
                result.step += 1
        finally:
            result.end_time = self._clock()
            result.status = SimulationStatus.COMPLETE
            self._done.set()
            logger.info(f"Simulation of trading system {self.ts_id} ended")

    def _run_phase(self, name: str, trade_type: TradeType, net: bool) -> Details:
        cost = self.trading_system.cost_per_operation if net else 0.0
        r_multiples = calc_r_multiples(self.trades, trade_type, self.risk, cost)

        try:
            return self.simulator.run(r_multiples, self.request)
        except Exception as e:
            logger.exception(f"Phase {name} of trading system {self.ts_id} failed")
            return Details(error=str(e))


class SimulationJobManager:
    """
    Runs at most one simulation per trading system on a worker pool.

    The job table is guarded by a single lock held only for the duration of
    each operation. Completed jobs are kept for ``result_ttl`` seconds so
    that clients can fetch the result, then evicted by a periodic sweep.
    """

    def __init__(
        self,
        num_workers: int = 4,
        queue_size: int = 100,
        purge_interval: float = DEFAULT_PURGE_INTERVAL,
        result_ttl: float = DEFAULT_RESULT_TTL,
        simulator_factory: Callable[[], BootstrapSimulator] = BootstrapSimulator,
        pool: Optional[WorkerPool] = None,
        clock: Callable[[], datetime] = utc_now,
        autostart: bool = True
    ):
        self.purge_interval = purge_interval
        self.result_ttl = result_ttl
        self.simulator_factory = simulator_factory

        self._jobs: Dict[int, SimulationProcess] = {}
        self._lock = threading.Lock()
        self._pool = pool or WorkerPool(num_workers, queue_size, name="simulation")
        self._clock = clock
        self._sweeper: Optional[threading.Thread] = None
        self._stop_sweeper = threading.Event()

        if autostart:
            self.start_workers()

    @classmethod
    def from_config(cls, config, **kwargs) -> 'SimulationJobManager':
        """Create a manager from a SimulationConfig."""
        return cls(
            num_workers=config.num_workers,
            queue_size=config.queue_size,
            purge_interval=config.purge_interval_seconds,
            result_ttl=config.result_ttl_seconds,
            **kwargs
        )

    def start_workers(self) -> None:
        """Start the worker pool and the periodic sweep."""
        self._pool.start()

        if self._sweeper is None:
            self._stop_sweeper.clear()
            self._sweeper = threading.Thread(target=self._sweep_loop, name="simulation-sweeper", daemon=True)
            self._sweeper.start()

    def shutdown(self) -> None:
        """Stop every job, the sweep and the worker pool."""
        with self._lock:
            for process in self._jobs.values():
                process.stop()

        self._stop_sweeper.set()
        if self._sweeper is not None:
            self._sweeper.join(timeout=5.0)
            self._sweeper = None

        self._pool.shutdown()
        logger.info("Simulation job manager shut down")

    def start(
        self,
        request: SimulationRequest,
        trading_system: TradingSystem,
        trades: Sequence[Trade],
        risk: float
    ) -> SimulationProcess:
        """
        Start a simulation, replacing any job of the same trading system.

        Raises:
            NoTradesError: If there are no trades to simulate
            WorkerPoolFullError: If the pool cannot accept the job; the job
                table is left untouched
        """
        process = SimulationProcess(
            trading_system, trades, request, risk,
            simulator=self.simulator_factory(),
            clock=self._clock
        )

        with self._lock:
            self._pool.submit(process.run)

            previous = self._jobs.pop(trading_system.id, None)
            if previous is not None:
                logger.warning(f"Stopping a previous simulation process for trading system {trading_system.id}")
                previous.stop()

            self._jobs[trading_system.id] = process

        logger.info(f"Queued simulation for trading system {trading_system.id}")
        return process

    def stop(self, ts_id: int) -> bool:
        """Stop and forget the job of a trading system. Returns False if there is none."""
        with self._lock:
            process = self._jobs.pop(ts_id, None)
            if process is None:
                return False
            process.stop()

        logger.info(f"Stopped simulation for trading system {ts_id}")
        return True

    def get_result(self, ts_id: int) -> SimulationResult:
        """Live result of the trading system's job, or an idle result."""
        with self._lock:
            process = self._jobs.get(ts_id)

        if process is None:
            return SimulationResult(status=SimulationStatus.IDLE)
        return process.result

    def get_job(self, ts_id: int) -> Optional[SimulationProcess]:
        with self._lock:
            return self._jobs.get(ts_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

    def purge(self, now: Optional[datetime] = None) -> int:
        """
        Evict completed jobs older than the result TTL.

        Waiting and running jobs are never evicted. Returns the number of
        evicted jobs.
        """
        now = now or self._clock()

        with self._lock:
            expired = [
                ts_id for ts_id, process in self._jobs.items()
                if process.result.status == SimulationStatus.COMPLETE
                and process.result.end_time is not None
                and (now - process.result.end_time).total_seconds() >= self.result_ttl
            ]
            for ts_id in expired:
                logger.info(f"Purging simulation process entry for trading system {ts_id}")
                del self._jobs[ts_id]

        return len(expired)

    def _sweep_loop(self) -> None:
        while not self._stop_sweeper.wait(self.purge_interval):
            try:
                self.purge()
            except Exception:
                logger.exception("Simulation purge failed")


def start_simulation(
    manager: SimulationJobManager,
    request: SimulationRequest,
    trading_system: TradingSystem,
    trades: Sequence[Trade],
    now: Optional[datetime] = None
) -> SimulationProcess:
    """
    Start a simulation on the trades inside the request's lookback window.

    Trades are put in exit order first, so callers may pass them unsorted.

    Raises:
        NoTradesError: If no trade falls inside the lookback window
        NoLossesError: If the risk unit cannot be estimated
        WorkerPoolFullError: If the job cannot be queued
    """
    logger.info(f"Starting simulation for trading system {trading_system.id} ({request.runs} runs)")

    selected = filter_by_days_back(sort_by_exit(trades), request.days_back, now)
    if not selected:
        raise NoTradesError("no trades found for given time")

    risk = calc_risk(selected)
    logger.info(f"Risk unit of trading system {trading_system.id}: {risk}")
    return manager.start(request, trading_system, selected, risk)
