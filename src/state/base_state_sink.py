# src/state/base_state_sink.py — v1
"""Abstract key/value sink used for pipeline state and step outputs."""

from __future__ import annotations

from abc import ABC, abstractmethod

# State names read by the paired save step.
CACHE_PRIMARY_KEY = "CACHE_KEY"
CACHE_MATCHED_KEY = "CACHE_RESULT"

# Output names. State names are published under these when state is
# routed to step outputs.
OUTPUT_CACHE_HIT = "cache-hit"
OUTPUT_CACHE_HITS = "cache-hits"
OUTPUT_CACHE_MISSES = "cache-misses"
OUTPUT_PRIMARY_KEY = "cache-primary-key"
OUTPUT_MATCHED_KEY = "cache-matched-key"

STATE_TO_OUTPUT: dict[str, str] = {
    CACHE_PRIMARY_KEY: OUTPUT_PRIMARY_KEY,
    CACHE_MATCHED_KEY: OUTPUT_MATCHED_KEY,
}


class BaseStateSink(ABC):
    """Write-mostly key/value store. Later writes to a name replace earlier ones."""

    @abstractmethod
    def set_state(self, name: str, value: str) -> None:
        """Record ``value`` under ``name``."""

    @abstractmethod
    def get_state(self, name: str) -> str | None:
        """Return the last value recorded under ``name``, if any."""

    def close(self) -> None:
        """Release any connection held by the sink."""
