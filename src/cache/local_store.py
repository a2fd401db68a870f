# src/cache/local_store.py — v1
"""Local directory archive store (default CACHE_BACKEND=local).

Layout under CACHE_ROOT, one directory per saved entry:

    <cache_root>/<entry-id>/manifest.json   ArchiveManifest
    <cache_root>/<entry-id>/cache.tar.gz    archive, members relative to the workspace

``entry-id`` is a SHA-256 of the key and version, so the same key saved with
different paths lives in separate entries.

Key resolution:
    1. an entry whose key equals the primary key
    2. for each restore key in order, the newest entry whose key starts with it
Only entries whose version matches the caller's paths are considered.
"""

from __future__ import annotations

import asyncio
import hashlib
import json
import logging
import tarfile
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from cacherestore.cache.base_restore_backend import BaseRestoreBackend
from cacherestore.cache.cache_version import compute_version
from cacherestore.cache.models import ArchiveManifest
from cacherestore.core.errors import BackendError
from cacherestore.core.keys import validate_keys

logger = logging.getLogger(__name__)

MANIFEST_NAME = "manifest.json"


def entry_id(key: str, version: str) -> str:
    """Directory name for a key/version pair."""
    return hashlib.sha256(f"{key}\n{version}".encode("utf-8")).hexdigest()[:32]


class LocalArchiveBackend(BaseRestoreBackend):
    """Restore backend reading tar.gz archives from a local directory."""

    def __init__(
        self,
        cache_root: Path | str,
        workspace: Path | str = ".",
        compression: str = "gzip",
    ) -> None:
        self._root = Path(cache_root).expanduser()
        self._workspace = Path(workspace).expanduser()
        self._compression = compression

    @property
    def root(self) -> Path:
        return self._root

    def is_available(self) -> bool:
        """The store is usable once a save step has created its root."""
        if not self._root.is_dir():
            logger.warning("Cache root %s does not exist or is not a directory", self._root)
            return False
        return True

    async def restore(
        self,
        paths: Sequence[str],
        primary_key: str,
        restore_keys: Sequence[str],
        lookup_only: bool = False,
        cross_os_archive: bool = False,
    ) -> str | None:
        keys = [primary_key, *restore_keys]
        validate_keys(keys)

        version = compute_version(paths, self._compression, cross_os_archive)
        manifest = await asyncio.to_thread(self.find_entry, keys, version)
        if manifest is None:
            return None

        if lookup_only:
            logger.debug("Lookup only: %s matched, skipping extraction", manifest.key)
            return manifest.key

        await asyncio.to_thread(self._extract, manifest)
        return manifest.key

    def find_entry(
        self, keys: Sequence[str], version: str
    ) -> ArchiveManifest | None:
        """Return the manifest best matching ``keys`` for ``version``."""
        if not keys:
            return None

        candidates = [m for m in self.list_entries() if m.version == version]
        if not candidates:
            return None

        primary_key, *restore_keys = keys
        for manifest in candidates:
            if manifest.key == primary_key:
                return manifest

        # Restore keys in order; within one prefix the newest entry wins.
        for prefix in restore_keys:
            matches = [m for m in candidates if m.key.startswith(prefix)]
            if matches:
                return max(matches, key=lambda m: m.created_at)

        return None

    def list_entries(self) -> list[ArchiveManifest]:
        """List all readable manifests in the store."""
        entries: list[ArchiveManifest] = []
        if not self._root.is_dir():
            return entries

        for path in sorted(self._root.glob(f"*/{MANIFEST_NAME}")):
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
                entries.append(ArchiveManifest(**data))
            except (OSError, json.JSONDecodeError, ValidationError) as e:
                logger.warning("Skipping unreadable manifest %s: %s", path, e)

        return entries

    def entry_dir(self, manifest: ArchiveManifest) -> Path:
        return self._root / entry_id(manifest.key, manifest.version)

    def _extract(self, manifest: ArchiveManifest) -> None:
        archive_path = self.entry_dir(manifest) / manifest.archive
        if not archive_path.is_file():
            raise BackendError(
                f"Archive missing for cache entry {manifest.key}: {archive_path}",
                key=manifest.key,
            )

        self._workspace.mkdir(parents=True, exist_ok=True)
        try:
            with tarfile.open(archive_path, "r:gz") as archive:
                archive.extractall(self._workspace, filter="data")
        except (OSError, tarfile.TarError) as e:
            raise BackendError(
                f"Failed to extract cache entry {manifest.key}: {e}",
                key=manifest.key,
            ) from e

        logger.debug(
            "Extracted %s (%d bytes) into %s",
            archive_path.name, manifest.size_bytes, self._workspace,
        )
