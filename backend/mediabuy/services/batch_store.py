from __future__ import annotations

import asyncio
import itertools
import logging
import threading
from typing import Callable, Iterable, TypeVar

from mediabuy.services.records import Batch, Record, build_batch

logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT")

MAX_COMPUTE_ATTEMPTS = 3


class BatchStore:
    """Holds the current immutable batch.

    Readers take the reference and never lock; a refresh builds a whole new
    batch and swaps it in. A refresh that started before a newer one was
    published is dropped (last write wins).
    """

    def __init__(self) -> None:
        self._batch = Batch()
        self._generations = itertools.count(1)
        self._generation_lock = threading.Lock()

    @property
    def current(self) -> Batch:
        return self._batch

    def begin_refresh(self) -> int:
        with self._generation_lock:
            return next(self._generations)

    def publish(self, batch: Batch) -> bool:
        with self._generation_lock:
            if batch.generation <= self._batch.generation:
                logger.info(
                    "Discarding stale batch generation=%s (current=%s)",
                    batch.generation,
                    self._batch.generation,
                )
                return False
            self._batch = batch
        logger.info(
            "Published batch generation=%s records=%s anchor=%s source=%s",
            batch.generation,
            len(batch),
            batch.anchor,
            batch.source,
        )
        return True

    def replace(self, records: Iterable[Record], source: str = "database") -> Batch:
        generation = self.begin_refresh()
        batch = build_batch(records, generation=generation, source=source)
        self.publish(batch)
        return self._batch

    def refresh(self, loader: Callable[[], Iterable[Record]], source: str = "database") -> Batch:
        generation = self.begin_refresh()
        records = loader()
        self.publish(build_batch(records, generation=generation, source=source))
        return self._batch

    def compute(self, fn: Callable[[Batch], ResultT]) -> ResultT:
        """Run ``fn`` on the current batch, rerunning while it gets superseded."""
        batch = self._batch
        result = fn(batch)
        for _ in range(MAX_COMPUTE_ATTEMPTS - 1):
            latest = self._batch
            if latest is batch:
                return result
            logger.debug(
                "Batch generation %s superseded by %s during computation, recomputing",
                batch.generation,
                latest.generation,
            )
            batch = latest
            result = fn(batch)
        if self._batch is not batch:
            logger.warning(
                "Batch kept changing during computation; returning result for "
                "generation %s (current=%s)",
                batch.generation,
                self._batch.generation,
            )
        return result

    def reset(self) -> None:
        with self._generation_lock:
            self._batch = Batch()
            self._generations = itertools.count(1)


batch_store = BatchStore()


def get_batch_store() -> BatchStore:
    return batch_store


class RefreshScheduler:
    def __init__(
        self,
        store: BatchStore,
        loader: Callable[[], Iterable[Record]],
        interval_seconds: int,
    ) -> None:
        self.store = store
        self.loader = loader
        self.interval_seconds = interval_seconds
        self._task: asyncio.Task | None = None
        self._stop = asyncio.Event()

    async def refresh_once(self) -> Batch | None:
        try:
            return await asyncio.to_thread(self.store.refresh, self.loader)
        except Exception as exc:
            logger.error("Batch refresh failed: %s", exc, exc_info=True)
            return None

    async def _loop(self) -> None:
        logger.info("Refresh loop started (interval=%ss)", self.interval_seconds)
        while not self._stop.is_set():
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=self.interval_seconds)
            except asyncio.TimeoutError:
                await self.refresh_once()
        logger.info("Refresh loop stopped")

    def start(self) -> None:
        if self.interval_seconds <= 0:
            logger.info("Refresh loop disabled")
            return
        self._stop.clear()
        self._task = asyncio.get_running_loop().create_task(self._loop())

    async def stop(self) -> None:
        self._stop.set()
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
