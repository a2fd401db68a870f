# src/restore/orchestrator.py — v1
"""Batch orchestrator: restore every entry concurrently and collect the result.

Workflow:
    1. Start one task per entry; all restores are in flight at once
    2. Wait until every task settles, or until the first one fails
    3. On failure, cancel the tasks still running and re-raise the failure of
       the earliest failing entry; no BatchResult is produced
    4. Otherwise publish outcomes (logs, state) in input order and return the
       BatchResult with hits and misses in input order

The matched-key state slot is shared by all entries. Only the first hit in
input order is written to it, so the value does not depend on which restore
finished last.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence

from cacherestore.cache.base_restore_backend import BaseRestoreBackend
from cacherestore.core.models import BatchResult, CacheEntry, Hit, Miss
from cacherestore.logging.context import set_entry_context
from cacherestore.restore.processor import EntryProcessor
from cacherestore.state.base_state_sink import BaseStateSink

logger = logging.getLogger(__name__)


class BatchOrchestrator:
    """Fan an EntryProcessor out over a batch of entries.

    Args:
        backend: Restore backend.
        state_sink: Receives the matched key of the first hit. None = no state.
        processor: Custom processor (defaults to EntryProcessor(backend)).
    """

    def __init__(
        self,
        backend: BaseRestoreBackend,
        state_sink: BaseStateSink | None = None,
        processor: EntryProcessor | None = None,
    ) -> None:
        self._backend = backend
        self._state_sink = state_sink
        self._processor = processor or EntryProcessor(backend)

    async def run_batch(self, entries: Sequence[CacheEntry]) -> BatchResult:
        """Restore all entries and return their hits and misses.

        Raises:
            CacheMissError: An entry missed with fail-on-cache-miss set.
            BackendError: The backend failed for an entry.
        """
        if not entries:
            return BatchResult()

        t0 = time.perf_counter()
        tasks = [
            asyncio.create_task(self._run_entry(index, entry), name=f"restore-{index}")
            for index, entry in enumerate(entries)
        ]

        try:
            await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        except asyncio.CancelledError:
            await _cancel_all(tasks)
            raise

        failures = [
            (index, task.exception())
            for index, task in enumerate(tasks)
            if task.done() and not task.cancelled() and task.exception() is not None
        ]
        if failures:
            await _cancel_all(tasks)
            index, error = failures[0]
            logger.error(
                "Entry %d failed, cancelled %d in-flight restores",
                index, sum(1 for t in tasks if t.cancelled()),
            )
            raise error

        outcomes: list[Hit | Miss] = [task.result() for task in tasks]
        result = self._collect(entries, outcomes)

        logger.info(
            "Batch complete: %d entries, %d hits, %d misses, %.2fs",
            result.total, len(result.hits), len(result.misses),
            time.perf_counter() - t0,
        )
        return result

    async def _run_entry(self, index: int, entry: CacheEntry) -> Hit | Miss:
        set_entry_context(index, entry.primary_key)
        return await self._processor.process(entry)

    def _collect(
        self, entries: Sequence[CacheEntry], outcomes: Sequence[Hit | Miss]
    ) -> BatchResult:
        result = BatchResult()
        state_written = False
        for index, (entry, outcome) in enumerate(zip(entries, outcomes)):
            set_entry_context(index, entry.primary_key)
            sink = None
            if isinstance(outcome, Hit) and not state_written:
                sink = self._state_sink
                state_written = True
            self._processor.publish(entry, outcome, state_sink=sink)
            result.add(entry, outcome)
        set_entry_context(None, None)
        return result


async def _cancel_all(tasks: Sequence[asyncio.Task]) -> None:
    """Cancel unfinished tasks and wait for them so none outlives the batch."""
    for task in tasks:
        if not task.done():
            task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)


async def run_batch(
    entries: Sequence[CacheEntry],
    backend: BaseRestoreBackend,
    state_sink: BaseStateSink | None = None,
) -> BatchResult:
    """Convenience wrapper around BatchOrchestrator.run_batch()."""
    return await BatchOrchestrator(backend, state_sink=state_sink).run_batch(entries)
