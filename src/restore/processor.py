# src/restore/processor.py — v1
"""Entry processor: one restore for one CacheEntry.

process() talks to the backend and classifies the outcome; it is safe to run
many of these concurrently. publish() emits the entry's log record and state
write and is called by the orchestrator in input order once every entry has
settled.
"""

from __future__ import annotations

import logging

from cacherestore.cache.base_restore_backend import BaseRestoreBackend
from cacherestore.core.errors import BackendError, CacheMissError, RestoreError
from cacherestore.core.keys import is_exact_key_match
from cacherestore.core.models import CacheEntry, Hit, Miss
from cacherestore.state.base_state_sink import CACHE_MATCHED_KEY, BaseStateSink

logger = logging.getLogger(__name__)


class EntryProcessor:
    """Drive the restore backend for single entries.

    Args:
        backend: Restore backend shared by every entry of the run.
        exact_key: Key hits are compared against for exactness. Single-entry
            runs pass the top-level key; batches leave it None so each entry
            is compared against its own primary key.
    """

    def __init__(
        self,
        backend: BaseRestoreBackend,
        exact_key: str | None = None,
    ) -> None:
        self._backend = backend
        self._exact_key = exact_key

    async def process(self, entry: CacheEntry) -> Hit | Miss:
        """Restore one entry and classify the result.

        Raises:
            CacheMissError: Nothing matched and fail-on-cache-miss is set.
            BackendError: The backend failed.
        """
        options = entry.options
        try:
            matched_key = await self._backend.restore(
                list(entry.paths),
                entry.primary_key,
                list(entry.restore_keys),
                lookup_only=options.lookup_only,
                cross_os_archive=options.cross_os_archive,
            )
        except RestoreError:
            raise
        except Exception as exc:
            raise BackendError(
                f"Failed to restore cache entry for {entry.display_path}: {exc}",
                key=entry.primary_key,
            ) from exc

        if not matched_key:
            if options.fail_on_cache_miss:
                raise CacheMissError(entry.display_path, entry.primary_key)
            return Miss()

        exact_key = self._exact_key or entry.primary_key
        return Hit(
            matched_key=matched_key,
            exact=is_exact_key_match(exact_key, matched_key),
        )

    def publish(
        self,
        entry: CacheEntry,
        outcome: Hit | Miss,
        state_sink: BaseStateSink | None = None,
    ) -> None:
        """Log the outcome and, for hits, record the matched key in ``state_sink``."""
        if isinstance(outcome, Miss):
            logger.info(
                "Cache not found for input path: %s keys: %s",
                entry.display_path, ", ".join(entry.keys),
            )
            return

        if state_sink is not None:
            state_sink.set_state(CACHE_MATCHED_KEY, outcome.matched_key)

        if entry.options.lookup_only:
            logger.info(
                "Cache found for %s and can be restored from key: %s",
                entry.display_path, outcome.matched_key,
            )
        else:
            logger.info(
                "Cache restored for %s from key: %s",
                entry.display_path, outcome.matched_key,
            )
