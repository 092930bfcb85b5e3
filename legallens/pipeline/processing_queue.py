"""Bounded pool of asyncio workers for background document processing.

Uploads return as soon as their bytes are stored; the heavy work (extract,
index, summarise) is queued here and picked up by ``workers`` long-lived
tasks.  A job is a zero-argument coroutine function.  A job that raises is
logged and dropped; the worker keeps running.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import structlog

from legallens.utils.logging import get_logger

Job = Callable[[], Awaitable[None]]

logger: structlog.BoundLogger = get_logger(__name__)


class ProcessingQueue:
    """FIFO job queue drained by a fixed number of worker tasks."""

    def __init__(self, workers: int = 2) -> None:
        self._worker_count = max(1, workers)
        self._queue: asyncio.Queue[tuple[str, Job]] | None = None
        self._workers: list[asyncio.Task[None]] = []

    @property
    def is_running(self) -> bool:
        return bool(self._workers)

    @property
    def pending(self) -> int:
        return self._queue.qsize() if self._queue is not None else 0

    def start(self) -> None:
        """Spawn the worker tasks.  Must be called from a running event loop."""
        if self._workers:
            return
        self._queue = asyncio.Queue()
        self._workers = [
            asyncio.create_task(self._worker(i), name=f"legallens-worker-{i}")
            for i in range(self._worker_count)
        ]
        logger.info("processing_queue_started", workers=self._worker_count)

    def submit(self, job: Job, label: str = "job") -> None:
        """Enqueue *job*, starting the workers on first use."""
        if not self._workers:
            self.start()
        assert self._queue is not None
        self._queue.put_nowait((label, job))
        logger.debug("job_submitted", label=label, pending=self._queue.qsize())

    async def join(self) -> None:
        """Wait until every submitted job has finished."""
        if self._queue is not None:
            await self._queue.join()

    async def stop(self) -> None:
        """Cancel the workers.  Jobs still queued are discarded."""
        for task in self._workers:
            task.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers = []
        self._queue = None
        logger.info("processing_queue_stopped")

    async def _worker(self, worker_id: int) -> None:
        assert self._queue is not None
        queue = self._queue
        while True:
            label, job = await queue.get()
            try:
                await job()
            except asyncio.CancelledError:
                raise
            except Exception as exc:  # noqa: BLE001 -- one bad job must not kill the worker
                logger.error(
                    "job_failed",
                    worker=worker_id,
                    label=label,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
            finally:
                queue.task_done()
