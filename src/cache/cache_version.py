# src/cache/cache_version.py — v1
"""Cache entry version: ties an entry to its path list and archive format.

A restore only matches entries whose version equals the version computed
from the caller's paths, so a key reused with different paths never hits.
"""

from __future__ import annotations

import hashlib
import os
from collections.abc import Sequence

VERSION_SALT = "1.0"
WINDOWS_ONLY_MARKER = "windows-only"


def compute_version(
    paths: Sequence[str],
    compression: str = "gzip",
    cross_os_archive: bool = False,
    windows: bool | None = None,
) -> str:
    """SHA-256 over paths, compression method and the platform marker.

    Args:
        paths: Cache paths, in the order the caller supplied them.
        compression: Archive compression method.
        cross_os_archive: When False on Windows, the entry is Windows-only.
        windows: Override platform detection (defaults to ``os.name == "nt"``).
    """
    if windows is None:
        windows = os.name == "nt"

    components = [*paths, compression]
    if windows and not cross_os_archive:
        components.append(WINDOWS_ONLY_MARKER)
    components.append(VERSION_SALT)

    return hashlib.sha256("|".join(components).encode("utf-8")).hexdigest()
