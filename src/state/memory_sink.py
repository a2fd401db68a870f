# src/state/memory_sink.py — v1
"""In-process sinks: a dict-backed sink and a stream printer."""

from __future__ import annotations

import sys
from typing import TextIO

from cacherestore.state.base_state_sink import BaseStateSink


class MemoryStateSink(BaseStateSink):
    """Keeps values in a dict; also records every write in order."""

    def __init__(self) -> None:
        self.values: dict[str, str] = {}
        self.writes: list[tuple[str, str]] = []

    def set_state(self, name: str, value: str) -> None:
        self.values[name] = value
        self.writes.append((name, value))

    def get_state(self, name: str) -> str | None:
        return self.values.get(name)


class ConsoleStateSink(MemoryStateSink):
    """Prints ``name=value`` lines, for runs without a runner output file."""

    def __init__(self, stream: TextIO | None = None) -> None:
        super().__init__()
        self._stream = stream

    def set_state(self, name: str, value: str) -> None:
        super().set_state(name, value)
        stream = self._stream or sys.stdout
        print(f"{name}={value}", file=stream)
