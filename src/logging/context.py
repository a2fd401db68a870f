# src/logging/context.py — v1
"""Contextual logging support: attach run_id, mode and entry to log records.

Each entry restore runs in its own asyncio task, which copies the current
context, so entry-level values set inside a task stay local to it.
"""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

_run_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "run_id", default=None
)
_mode: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "mode", default=None
)
_entry_index: contextvars.ContextVar[int | None] = contextvars.ContextVar(
    "entry_index", default=None
)
_entry_key: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "entry_key", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    run_id: str | None = None
    mode: str | None = None
    entry_index: int | None = None
    entry_key: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        run_id=_run_id.get(),
        mode=_mode.get(),
        entry_index=_entry_index.get(),
        entry_key=_entry_key.get(),
    )


def set_run_context(run_id: str, mode: str | None = None) -> None:
    """Set run-level context (called once per restore run)."""
    _run_id.set(run_id)
    _mode.set(mode)


def set_entry_context(index: int | None, key: str | None) -> None:
    """Set entry-level context (called per entry)."""
    _entry_index.set(index)
    _entry_key.set(key)


def clear_context() -> None:
    """Reset all context variables."""
    _run_id.set(None)
    _mode.set(None)
    _entry_index.set(None)
    _entry_key.set(None)
