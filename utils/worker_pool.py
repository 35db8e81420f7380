"""
Portfolio Analytics - Worker Pool
Fixed number of worker threads consuming a bounded task queue.
"""

import logging
import queue
import threading
from typing import Callable, List, Optional

from core.trading_types import WorkerPoolFullError

logger = logging.getLogger(__name__)

# Sentinel telling a worker thread to exit
_SHUTDOWN = object()


class WorkerPool:
    """
    Runs submitted callables on a fixed set of daemon threads.

    The task queue is bounded: once ``queue_size`` tasks are waiting,
    submit() rejects new tasks with WorkerPoolFullError instead of blocking
    the caller.

    Usage:
        pool = WorkerPool(num_workers=4, queue_size=100)
        pool.start()
        pool.submit(job.run)
        pool.shutdown()
    """

    def __init__(self, num_workers: int = 4, queue_size: int = 100, name: str = "worker"):
        if num_workers < 1:
            raise ValueError("num_workers must be at least 1")
        if queue_size < 1:
            raise ValueError("queue_size must be at least 1")

        self.num_workers = num_workers
        self.queue_size = queue_size
        self.name = name

        self._queue: queue.Queue = queue.Queue(maxsize=queue_size)
        self._threads: List[threading.Thread] = []
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return any(t.is_alive() for t in self._threads)

    def start(self) -> None:
        """Start the worker threads (no-op when already running)."""
        with self._lock:
            if self._threads:
                return

            for i in range(self.num_workers):
                thread = threading.Thread(
                    target=self._worker_loop,
                    name=f"{self.name}-{i}",
                    daemon=True,
                )
                thread.start()
                self._threads.append(thread)

        logger.info(f"Worker pool '{self.name}' started with {self.num_workers} workers")

    def submit(self, task: Callable[[], None]) -> None:
        """
        Queue a task for execution.

        Raises:
            WorkerPoolFullError: If the queue is at capacity
        """
        try:
            self._queue.put_nowait(task)
        except queue.Full:
            raise WorkerPoolFullError(
                f"Worker pool '{self.name}' queue is full ({self.queue_size} tasks waiting)"
            ) from None

    def pending(self) -> int:
        """Number of tasks waiting for a worker."""
        return self._queue.qsize()

    def shutdown(self, timeout: Optional[float] = 5.0) -> None:
        """Stop the workers once the tasks queued so far have been taken."""
        with self._lock:
            threads, self._threads = self._threads, []

        for _ in threads:
            try:
                self._queue.put(_SHUTDOWN, timeout=timeout)
            except queue.Full:
                logger.warning(f"Worker pool '{self.name}' queue still full, not every worker was told to stop")
                break

        for thread in threads:
            thread.join(timeout=timeout)
            if thread.is_alive():
                logger.warning(f"Worker thread {thread.name} did not stop gracefully")

        if threads:
            logger.info(f"Worker pool '{self.name}' stopped")

    def _worker_loop(self) -> None:
        while True:
            task = self._queue.get()
            try:
                if task is _SHUTDOWN:
                    return
                task()
            except Exception:
                logger.exception(f"Task failed in worker pool '{self.name}'")
            finally:
                self._queue.task_done()
