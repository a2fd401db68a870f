# tests/conftest.py — v1
"""Shared test fixtures for all unit and integration tests.

Provides sample entries, a scriptable fake backend, a local archive store
seeder and temp directories. No network access; all I/O stays in tmp_path.
"""

from __future__ import annotations

import asyncio
import io
import tarfile
from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from cacherestore.cache.base_restore_backend import BaseRestoreBackend
from cacherestore.cache.cache_version import compute_version
from cacherestore.cache.local_store import MANIFEST_NAME, entry_id
from cacherestore.cache.models import ArchiveManifest
from cacherestore.config.settings import Settings
from cacherestore.core.models import CacheEntry, RestoreOptions
from cacherestore.logging.context import clear_context


# === Fake backend ===


class FakeBackend(BaseRestoreBackend):
    """Backend answering from a dict keyed by primary key.

    A response may be a matched key, None (miss) or an exception to raise.
    ``delays`` holds per-key sleeps so tests can control completion order.
    """

    def __init__(
        self,
        responses: dict[str, object] | None = None,
        delays: dict[str, float] | None = None,
        available: bool = True,
    ) -> None:
        self.responses = responses or {}
        self.delays = delays or {}
        self.available = available
        self.calls: list[dict[str, object]] = []
        self.completed: list[str] = []
        self.cancelled: list[str] = []

    def is_available(self) -> bool:
        return self.available

    async def restore(
        self,
        paths: Sequence[str],
        primary_key: str,
        restore_keys: Sequence[str],
        lookup_only: bool = False,
        cross_os_archive: bool = False,
    ) -> str | None:
        self.calls.append(
            {
                "paths": list(paths),
                "primary_key": primary_key,
                "restore_keys": list(restore_keys),
                "lookup_only": lookup_only,
                "cross_os_archive": cross_os_archive,
            }
        )
        try:
            await asyncio.sleep(self.delays.get(primary_key, 0))
        except asyncio.CancelledError:
            self.cancelled.append(primary_key)
            raise
        response = self.responses.get(primary_key)
        self.completed.append(primary_key)
        if isinstance(response, BaseException):
            raise response
        return response  # type: ignore[return-value]

    def call_for(self, primary_key: str) -> dict[str, object]:
        return next(c for c in self.calls if c["primary_key"] == primary_key)


# === FIXTURES: Context ===


@pytest.fixture(autouse=True)
def _reset_log_context():
    clear_context()
    yield
    clear_context()


# === FIXTURES: Sample data ===


@pytest.fixture
def sample_entry() -> CacheEntry:
    """Minimal valid CacheEntry."""
    return CacheEntry(
        paths=("node_modules",),
        primary_key="npm-linux-abc123",
        restore_keys=("npm-linux-", "npm-"),
        source={
            "path": "node_modules",
            "key": "npm-linux-abc123",
            "restore-keys": ["npm-linux-", "npm-"],
        },
    )


@pytest.fixture
def sample_entries() -> list[CacheEntry]:
    """Three entries with disjoint paths."""
    return [
        CacheEntry(
            paths=(f"build/{name}",),
            primary_key=f"{name}-v1",
            restore_keys=(f"{name}-",),
            options=RestoreOptions(),
            source={"path": f"build/{name}", "key": f"{name}-v1", "restore-keys": [f"{name}-"]},
        )
        for name in ("alpha", "beta", "gamma")
    ]


# === FIXTURES: Backends ===


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def mock_backend() -> MagicMock:
    """Mock backend that misses by default."""
    backend = MagicMock(spec=BaseRestoreBackend)
    backend.restore = AsyncMock(return_value=None)
    backend.is_available = MagicMock(return_value=True)
    return backend


# === FIXTURES: Temp dirs and local store ===


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Directory archives are extracted into."""
    ws = tmp_path / "workspace"
    ws.mkdir()
    return ws


@pytest.fixture
def store_root(tmp_path: Path) -> Path:
    """Local archive store root."""
    root = tmp_path / "store"
    root.mkdir()
    return root


@pytest.fixture
def seed_entry(store_root: Path):
    """Write an archive + manifest into the local store, as a save step would."""

    def _seed(
        key: str,
        paths: Sequence[str],
        files: dict[str, str],
        created_at: datetime | None = None,
        cross_os_archive: bool = False,
    ) -> ArchiveManifest:
        version = compute_version(paths, "gzip", cross_os_archive)
        manifest = ArchiveManifest(
            key=key,
            version=version,
            created_at=created_at or datetime.now(timezone.utc),
        )
        entry_dir = store_root / entry_id(key, version)
        entry_dir.mkdir(parents=True, exist_ok=True)

        archive_path = entry_dir / manifest.archive
        with tarfile.open(archive_path, "w:gz") as tar:
            for name, content in files.items():
                data = content.encode("utf-8")
                info = tarfile.TarInfo(name)
                info.size = len(data)
                info.mtime = 1_700_000_000
                tar.addfile(info, io.BytesIO(data))

        manifest.size_bytes = archive_path.stat().st_size
        (entry_dir / MANIFEST_NAME).write_text(
            manifest.model_dump_json(indent=2), encoding="utf-8"
        )
        return manifest

    return _seed


@pytest.fixture
def settings(tmp_path: Path, store_root: Path, workspace: Path) -> Settings:
    """Settings pointing at temp dirs, with a valid trigger ref."""
    return Settings(
        _env_file=None,
        cache_backend="local",
        cache_root=store_root,
        workspace=workspace,
        github_ref="refs/heads/main",
        github_event_name="push",
        github_state=tmp_path / "state.txt",
        github_output=tmp_path / "output.txt",
        state_backend="file",
    )
