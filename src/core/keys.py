# src/core/keys.py — v1
"""Cache key helpers: exact-match test and key constraint checks."""

from __future__ import annotations

from collections.abc import Sequence

from cacherestore.core.errors import KeyValidationError

MAX_KEYS = 10
MAX_KEY_LENGTH = 512


def is_exact_key_match(key: str, matched_key: str | None) -> bool:
    """Return True when the matched key is the primary key.

    Comparison ignores case but not accents, so ``Linux-deps`` matches
    ``linux-deps`` while ``cafe`` does not match ``café``.
    """
    if not matched_key:
        return False
    return matched_key.casefold() == key.casefold()


def validate_keys(keys: Sequence[str]) -> None:
    """Check the key list against the store limits.

    Raises:
        KeyValidationError: Too many keys, a key too long, or a key with a comma.
    """
    if len(keys) > MAX_KEYS:
        raise KeyValidationError(
            f"Key Validation Error: Keys are limited to a maximum of {MAX_KEYS}."
        )
    for key in keys:
        if len(key) > MAX_KEY_LENGTH:
            raise KeyValidationError(
                f"Key Validation Error: {key} cannot be larger than "
                f"{MAX_KEY_LENGTH} characters."
            )
        if "," in key:
            raise KeyValidationError(
                f"Key Validation Error: {key} cannot contain commas."
            )
