# src/cache/models.py — v1
"""Cache store models: ArchiveManifest."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, field_validator


class ArchiveManifest(BaseModel):
    """Metadata stored next to each archive in the local store."""

    key: str
    version: str
    created_at: datetime
    archive: str = "cache.tar.gz"
    size_bytes: int = 0

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Naive timestamps are read as UTC so manifests stay comparable."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v
