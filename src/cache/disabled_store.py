# src/cache/disabled_store.py — v1
"""Backend used when no cache store is configured (CACHE_BACKEND=disabled)."""

from __future__ import annotations

from collections.abc import Sequence

from cacherestore.cache.base_restore_backend import BaseRestoreBackend
from cacherestore.core.errors import FeatureUnavailableError


class DisabledRestoreBackend(BaseRestoreBackend):
    """Reports the cache feature as unavailable."""

    def is_available(self) -> bool:
        return False

    async def restore(
        self,
        paths: Sequence[str],
        primary_key: str,
        restore_keys: Sequence[str],
        lookup_only: bool = False,
        cross_os_archive: bool = False,
    ) -> str | None:
        raise FeatureUnavailableError("Cache service is not available")
