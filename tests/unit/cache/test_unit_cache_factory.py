# tests/unit/cache/test_unit_cache_factory.py — v1
"""Tests for cache/cache_factory.py and cache/disabled_store.py."""

from __future__ import annotations

import pytest

from cacherestore.cache.cache_factory import create_restore_backend
from cacherestore.cache.disabled_store import DisabledRestoreBackend
from cacherestore.cache.local_store import LocalArchiveBackend
from cacherestore.config.settings import Settings
from cacherestore.core.errors import FeatureUnavailableError


class TestCreateRestoreBackend:
    def test_default_local(self):
        backend = create_restore_backend()
        assert isinstance(backend, LocalArchiveBackend)

    def test_local_uses_settings(self, tmp_path):
        s = Settings(_env_file=None, cache_backend="local", cache_root=tmp_path / "store")
        backend = create_restore_backend(s)
        assert isinstance(backend, LocalArchiveBackend)
        assert backend.root == tmp_path / "store"

    def test_disabled(self):
        s = Settings(_env_file=None, cache_backend="disabled")
        backend = create_restore_backend(s)
        assert isinstance(backend, DisabledRestoreBackend)
        assert backend.is_available() is False

    def test_unsupported_backend(self):
        """Settings validation rejects invalid backends before the factory is reached."""
        with pytest.raises((ValueError, Exception)):
            s = Settings(_env_file=None, cache_backend="nonexistent")
            create_restore_backend(s)


class TestDisabledRestoreBackend:
    @pytest.mark.asyncio
    async def test_restore_raises(self):
        with pytest.raises(FeatureUnavailableError):
            await DisabledRestoreBackend().restore(["p"], "k", [])
