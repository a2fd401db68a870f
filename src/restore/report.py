# src/restore/report.py — v1
"""Serialize a BatchResult into the cache-hits / cache-misses outputs.

Each output is a JSON array of the entry objects as the caller supplied them.
Hit objects gain a ``matched-key`` field.
"""

from __future__ import annotations

import json
from typing import Any

from cacherestore.core.errors import MalformedInputError
from cacherestore.core.models import BatchResult

MATCHED_KEY_FIELD = "matched-key"


def hit_records(result: BatchResult) -> list[dict[str, Any]]:
    return [
        {**hit.entry.source_object(), MATCHED_KEY_FIELD: hit.matched_key}
        for hit in result.hits
    ]


def miss_records(result: BatchResult) -> list[dict[str, Any]]:
    return [entry.source_object() for entry in result.misses]


def dump_records(records: list[dict[str, Any]]) -> str:
    return json.dumps(records, separators=(",", ":"), ensure_ascii=False)


def serialize_batch_result(result: BatchResult) -> tuple[str, str]:
    """Return ``(cache_hits_json, cache_misses_json)``."""
    return dump_records(hit_records(result)), dump_records(miss_records(result))


def parse_report(
    hits_json: str, misses_json: str
) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    """Parse the two outputs back into lists of entry objects.

    Raises:
        MalformedInputError: Either output is not a JSON array of objects.
    """
    return _parse_records(hits_json, "cache-hits"), _parse_records(
        misses_json, "cache-misses"
    )


def _parse_records(text: str, name: str) -> list[dict[str, Any]]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedInputError(f"Invalid {name} output: {exc}") from exc
    if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
        raise MalformedInputError(f"Invalid {name} output: expected a JSON array of objects")
    return data
