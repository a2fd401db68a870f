# src/core/errors.py — v1
"""Error taxonomy for restore runs.

FeatureUnavailableError and InvalidTriggerContextError end a run early without
failing it. MalformedInputError, BackendError and CacheMissError fail the run.
"""

from __future__ import annotations


class RestoreError(Exception):
    """Base class for all restore errors."""

    fatal: bool = True


class FeatureUnavailableError(RestoreError):
    """The environment has no usable cache store."""

    fatal = False


class InvalidTriggerContextError(RestoreError):
    """The run was triggered by an event that is not tied to a branch or tag ref."""

    fatal = False

    def __init__(self, event_name: str) -> None:
        self.event_name = event_name
        super().__init__(
            f"Event Validation Error: The event type {event_name} is not supported "
            "because it's not tied to a branch or tag ref."
        )


class MalformedInputError(RestoreError, ValueError):
    """Input could not be parsed into cache entries."""


class KeyValidationError(MalformedInputError):
    """A cache key violates the store's key constraints."""


class CacheMissError(RestoreError):
    """No cache entry matched and fail-on-cache-miss is set for the entry."""

    def __init__(self, path: str, key: str) -> None:
        self.path = path
        self.key = key
        super().__init__(
            "Failed to restore cache entry. Exiting as fail-on-cache-miss is set. "
            f"Input path: {path}. Input key: {key}"
        )


class BackendError(RestoreError):
    """The restore backend failed (I/O, corrupt archive, extraction)."""

    def __init__(self, message: str, key: str | None = None) -> None:
        self.key = key
        super().__init__(message)
