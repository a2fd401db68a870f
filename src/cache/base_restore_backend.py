# src/cache/base_restore_backend.py — v1
"""Abstract restore backend interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence


class BaseRestoreBackend(ABC):
    """Resolves keys to a stored cache entry and extracts it to the paths."""

    @abstractmethod
    async def restore(
        self,
        paths: Sequence[str],
        primary_key: str,
        restore_keys: Sequence[str],
        lookup_only: bool = False,
        cross_os_archive: bool = False,
    ) -> str | None:
        """Restore the best match for the keys.

        Args:
            paths: Paths the entry was saved from; part of the entry version.
            primary_key: Key tried first, as an exact match.
            restore_keys: Fallback key prefixes, tried in order.
            lookup_only: Only check that a match exists; never extract.
            cross_os_archive: Allow entries saved on another OS family.

        Returns:
            The key of the matched entry, or None when nothing matched.

        Raises:
            BackendError: I/O or archive failure.
            KeyValidationError: A key violates the store's constraints.
        """

    def is_available(self) -> bool:
        """Whether this environment can use the store at all."""
        return True
