# src/core/options.py — v1
"""Option resolver: per-entry overrides on top of global defaults."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from cacherestore.core.errors import MalformedInputError
from cacherestore.core.models import EffectiveOptions, EntryOverrides, GlobalDefaults


def resolve_options(
    overrides: EntryOverrides | Mapping[str, Any] | None,
    defaults: GlobalDefaults,
) -> EffectiveOptions:
    """Merge entry-level overrides with the run defaults.

    Each option resolves on its own: an explicit entry value wins, anything
    the entry leaves out comes from ``defaults``.

    Raises:
        MalformedInputError: An override has a value of the wrong type.
    """
    if overrides is None:
        overrides = EntryOverrides()
    elif not isinstance(overrides, EntryOverrides):
        try:
            overrides = EntryOverrides.model_validate(dict(overrides))
        except ValidationError as exc:
            raise MalformedInputError(f"Invalid entry options: {exc}") from exc

    return EffectiveOptions(
        cross_os_archive=_pick(overrides.cross_os_archive, defaults.cross_os_archive),
        fail_on_cache_miss=_pick(
            overrides.fail_on_cache_miss, defaults.fail_on_cache_miss
        ),
        lookup_only=_pick(overrides.lookup_only, defaults.lookup_only),
        restore_keys=_pick(overrides.restore_keys, defaults.restore_keys),
    )


def _pick(value: Any, default: Any) -> Any:
    return default if value is None else value
