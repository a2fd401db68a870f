# src/inputs/parser.py — v1
"""Turn raw restore inputs into typed CacheEntry lists.

Three input shapes are supported:
    - single: top-level key / restore-keys / path / paths
    - array:  ``json`` holds a JSON list of entry objects sharing global options
    - map:    ``json`` holds a JSON object of entry objects, each able to
              override options for itself

Entry objects need ``path`` and ``key``; ``restore-keys`` is optional.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError

from cacherestore.core.errors import MalformedInputError
from cacherestore.core.models import (
    CacheEntry,
    EntryOverrides,
    GlobalDefaults,
    RestoreOptions,
    parse_input_bool,
)
from cacherestore.core.options import resolve_options

logger = logging.getLogger(__name__)

InputMode = Literal["single", "array", "map"]

# Singular-path entries are folded into one composite path with this separator.
PATH_JOIN_SEPARATOR = "|"


def get_input_as_array(value: str | None) -> list[str]:
    """Split a multi-line input into trimmed, non-empty lines."""
    if not value:
        return []
    return [line.strip() for line in value.split("\n") if line.strip()]


def get_input_as_bool(value: str | bool | None) -> bool:
    """Input booleans are true only for a case-insensitive ``true``."""
    return parse_input_bool(value) is True


class RestoreInputs(BaseModel):
    """Raw inputs of a restore run, already split into lists and booleans."""

    key: str = ""
    restore_keys: list[str] = Field(default_factory=list)
    path: list[str] = Field(default_factory=list)
    paths: list[str] = Field(default_factory=list)
    json_input: str = ""
    enable_cross_os_archive: bool = False
    fail_on_cache_miss: bool = False
    lookup_only: bool = False

    @property
    def defaults(self) -> GlobalDefaults:
        return GlobalDefaults(
            cross_os_archive=self.enable_cross_os_archive,
            fail_on_cache_miss=self.fail_on_cache_miss,
            lookup_only=self.lookup_only,
            restore_keys=tuple(self.restore_keys),
        )

    @property
    def is_batch(self) -> bool:
        return bool(self.json_input.strip())


class ParsedInput(BaseModel):
    """Entries ready for the orchestrator, tagged with the input shape."""

    mode: InputMode
    entries: list[CacheEntry] = Field(default_factory=list)
    primary_key: str | None = None


def parse_inputs(inputs: RestoreInputs, list_only: bool = False) -> ParsedInput:
    """Dispatch on input shape.

    Args:
        inputs: Raw run inputs.
        list_only: Require a JSON array (``restore-list``).

    Raises:
        MalformedInputError: JSON does not parse, has the wrong shape, or an
            entry lacks a required field.
    """
    if list_only and not inputs.is_batch:
        raise MalformedInputError("Input required and not supplied: json")

    if not inputs.is_batch:
        entry = build_single_entry(inputs)
        return ParsedInput(mode="single", entries=[entry], primary_key=entry.primary_key)

    data = load_json(inputs.json_input)
    defaults = inputs.defaults

    if isinstance(data, list):
        return ParsedInput(mode="array", entries=parse_array_entries(data, defaults))

    if isinstance(data, Mapping):
        if list_only:
            raise MalformedInputError(
                "Expected a JSON array of cache entries, got a JSON object"
            )
        return ParsedInput(mode="map", entries=parse_map_entries(data, defaults))

    raise MalformedInputError(
        f"Expected a JSON array or object of cache entries, got {type(data).__name__}"
    )


def load_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedInputError(f"Invalid json input: {exc}") from exc


def build_single_entry(inputs: RestoreInputs) -> CacheEntry:
    """Build the one entry of a non-batch run.

    ``paths`` entries are kept as-is; the ``path`` entries are joined with
    ``|`` and appended as one extra path.
    """
    if not inputs.key:
        raise MalformedInputError("Input required and not supplied: key")

    paths = list(inputs.paths)
    if inputs.path:
        paths.append(PATH_JOIN_SEPARATOR.join(inputs.path))
    if not paths:
        raise MalformedInputError("Input required and not supplied: path")

    return CacheEntry(
        paths=tuple(paths),
        primary_key=inputs.key,
        restore_keys=tuple(inputs.restore_keys),
        options=inputs.defaults.options,
    )


def parse_array_entries(
    items: Sequence[Any], defaults: GlobalDefaults
) -> list[CacheEntry]:
    """Array form: entries share the global options and have no overrides."""
    entries: list[CacheEntry] = []
    options = defaults.options
    for position, item in enumerate(items):
        label = f"json[{position}]"
        if not isinstance(item, Mapping):
            logger.warning("Skipping %s: not an object", label)
            continue
        entries.append(
            entry_from_object(
                item,
                label=label,
                restore_keys=_restore_keys_of(item, label),
                options=options,
            )
        )
    return entries


def parse_map_entries(
    items: Mapping[str, Any], defaults: GlobalDefaults
) -> list[CacheEntry]:
    """Map form: each entry may override any option for itself."""
    entries: list[CacheEntry] = []
    for name, item in items.items():
        label = f"json[{name!r}]"
        if not isinstance(item, Mapping):
            logger.warning("Skipping %s: not an object", label)
            continue
        try:
            resolved = resolve_options(item, defaults)
        except MalformedInputError as exc:
            raise MalformedInputError(f"Entry {label}: {exc}") from exc
        entries.append(
            entry_from_object(
                item,
                label=label,
                restore_keys=resolved.restore_keys,
                options=resolved.restore_options,
            )
        )
    return entries


def entry_from_object(
    item: Mapping[str, Any],
    label: str,
    restore_keys: Sequence[str],
    options: RestoreOptions,
) -> CacheEntry:
    """Validate required fields of one entry object and build the CacheEntry."""
    key = item.get("key")
    if not isinstance(key, str) or not key:
        raise MalformedInputError(f"Entry {label}: missing required field 'key'")

    paths = _coerce_paths(item.get("path"), label)
    if not paths:
        raise MalformedInputError(f"Entry {label}: missing required field 'path'")

    return CacheEntry(
        paths=tuple(paths),
        primary_key=key,
        restore_keys=tuple(restore_keys),
        options=options,
        source=dict(item),
    )


def _restore_keys_of(item: Mapping[str, Any], label: str) -> tuple[str, ...]:
    try:
        overrides = EntryOverrides.model_validate(
            {"restore-keys": item.get("restore-keys")}
        )
    except ValidationError as exc:
        raise MalformedInputError(f"Entry {label}: invalid restore-keys: {exc}") from exc
    return overrides.restore_keys or ()


def _coerce_paths(value: Any, label: str) -> list[str]:
    if isinstance(value, str):
        return get_input_as_array(value)
    if isinstance(value, Sequence):
        if not all(isinstance(p, str) and p.strip() for p in value):
            raise MalformedInputError(f"Entry {label}: path items must be non-empty strings")
        return [p.strip() for p in value]
    return []
