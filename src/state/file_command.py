# src/state/file_command.py — v1
"""File-command sink: appends ``name<<delimiter`` records to a runner file.

This is the format CI runners read from the files named by GITHUB_STATE and
GITHUB_OUTPUT:

    name<<ghadelimiter_<uuid>
    value
    ghadelimiter_<uuid>
"""

from __future__ import annotations

import logging
import os
import uuid
from pathlib import Path

from cacherestore.state.base_state_sink import BaseStateSink

logger = logging.getLogger(__name__)

DELIMITER_PREFIX = "ghadelimiter_"


def format_file_command(name: str, value: str, delimiter: str | None = None) -> str:
    """Render one heredoc-style record, newline-terminated.

    Raises:
        ValueError: The name or value contains the delimiter.
    """
    delimiter = delimiter or f"{DELIMITER_PREFIX}{uuid.uuid4()}"
    if delimiter in name:
        raise ValueError(f"Unexpected input: name should not contain the delimiter {delimiter!r}")
    if delimiter in value:
        raise ValueError(f"Unexpected input: value should not contain the delimiter {delimiter!r}")
    return f"{name}<<{delimiter}{os.linesep}{value}{os.linesep}{delimiter}{os.linesep}"


def parse_file_commands(text: str) -> dict[str, str]:
    """Parse a file-command file; later records win. Accepts ``name=value`` lines too."""
    values: dict[str, str] = {}
    lines = text.splitlines()
    i = 0
    while i < len(lines):
        line = lines[i]
        if "<<" in line:
            name, delimiter = line.split("<<", 1)
            body: list[str] = []
            i += 1
            while i < len(lines) and lines[i] != delimiter:
                body.append(lines[i])
                i += 1
            values[name] = "\n".join(body)
        elif "=" in line:
            name, value = line.split("=", 1)
            values[name] = value
        i += 1
    return values


class FileCommandStateSink(BaseStateSink):
    """Append-only sink backed by a runner command file."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def set_state(self, name: str, value: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("a", encoding="utf-8") as fh:
            fh.write(format_file_command(name, value))
        logger.debug("Recorded %s in %s", name, self._path)

    def get_state(self, name: str) -> str | None:
        if not self._path.is_file():
            return None
        return parse_file_commands(self._path.read_text(encoding="utf-8")).get(name)
