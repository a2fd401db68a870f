# src/cache/cache_factory.py — v1
"""Factory for restore backend instantiation."""

from __future__ import annotations

from cacherestore.cache.base_restore_backend import BaseRestoreBackend
from cacherestore.config.settings import Settings


def create_restore_backend(settings: Settings | None = None) -> BaseRestoreBackend:
    """Instantiate the configured restore backend.

    Args:
        settings: Application settings. Defaults to a local store under
            ``.cache-restore`` in the current directory.

    Returns:
        Configured BaseRestoreBackend implementation.
    """
    backend = "local" if settings is None else settings.cache_backend

    if backend == "local":
        from cacherestore.cache.local_store import LocalArchiveBackend
        if settings is None:
            return LocalArchiveBackend(cache_root=".cache-restore", workspace=".")
        return LocalArchiveBackend(
            cache_root=settings.cache_root,
            workspace=settings.workspace,
            compression=settings.cache_compression,
        )

    if backend == "disabled":
        from cacherestore.cache.disabled_store import DisabledRestoreBackend
        return DisabledRestoreBackend()

    raise ValueError(f"Unsupported cache backend: {backend!r}")
