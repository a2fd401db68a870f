# src/core/models.py — v1
"""Restore domain models: CacheEntry, RestoreOutcome, BatchResult.

Entries are built once from parsed input and never mutated afterwards.
A BatchResult is assembled by the orchestrator after every entry settles.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    field_validator,
)


def split_lines(value: Any) -> Any:
    """Turn a newline-separated string into a list of trimmed, non-empty lines."""
    if isinstance(value, str):
        return [line.strip() for line in value.splitlines() if line.strip()]
    return value


def parse_input_bool(value: Any) -> Any:
    """Strings are true only for a case-insensitive ``true``; other values pass through."""
    if isinstance(value, str):
        return value.strip().upper() == "TRUE"
    return value


class RestoreOptions(BaseModel):
    """Effective per-entry restore flags."""

    model_config = ConfigDict(frozen=True)

    lookup_only: bool = False
    cross_os_archive: bool = False
    fail_on_cache_miss: bool = False


class GlobalDefaults(BaseModel):
    """Run-wide defaults used when an entry does not override an option."""

    model_config = ConfigDict(frozen=True)

    cross_os_archive: bool = False
    fail_on_cache_miss: bool = False
    lookup_only: bool = False
    restore_keys: tuple[str, ...] = ()

    @property
    def options(self) -> RestoreOptions:
        return RestoreOptions(
            lookup_only=self.lookup_only,
            cross_os_archive=self.cross_os_archive,
            fail_on_cache_miss=self.fail_on_cache_miss,
        )


class EntryOverrides(BaseModel):
    """Per-entry option overrides accepted in map-form batches.

    Every field is optional: ``None`` means "use the global default".
    Both the camelCase input names and their kebab-case spellings are accepted.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    cross_os_archive: StrictBool | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "enableCrossOsArchive", "enable-cross-os-archive", "cross_os_archive"
        ),
    )
    fail_on_cache_miss: StrictBool | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "failOnCacheMiss", "fail-on-cache-miss", "fail_on_cache_miss"
        ),
    )
    lookup_only: StrictBool | None = Field(
        default=None,
        validation_alias=AliasChoices("lookupOnly", "lookup-only", "lookup_only"),
    )
    restore_keys: tuple[str, ...] | None = Field(
        default=None,
        validation_alias=AliasChoices("restore-keys", "restoreKeys", "restore_keys"),
    )

    @field_validator("cross_os_archive", "fail_on_cache_miss", "lookup_only", mode="before")
    @classmethod
    def parse_flags(cls, v: Any) -> Any:
        return parse_input_bool(v)

    @field_validator("restore_keys", mode="before")
    @classmethod
    def split_restore_keys(cls, v: Any) -> Any:
        return split_lines(v)


class EffectiveOptions(RestoreOptions):
    """Resolved options plus the restore keys chosen for an entry."""

    restore_keys: tuple[str, ...] = ()

    @property
    def restore_options(self) -> RestoreOptions:
        return RestoreOptions(
            lookup_only=self.lookup_only,
            cross_os_archive=self.cross_os_archive,
            fail_on_cache_miss=self.fail_on_cache_miss,
        )


class CacheEntry(BaseModel):
    """One logical restore request: a path set, a primary key, fallback keys."""

    model_config = ConfigDict(frozen=True)

    paths: tuple[str, ...]
    primary_key: str
    restore_keys: tuple[str, ...] = ()
    options: RestoreOptions = Field(default_factory=RestoreOptions)
    # Entry object exactly as supplied by the caller, echoed back in reports.
    source: dict[str, Any] = Field(default_factory=dict)

    @field_validator("paths")
    @classmethod
    def validate_paths(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if not v:
            raise ValueError("at least one path is required")
        return v

    @field_validator("primary_key")
    @classmethod
    def validate_primary_key(cls, v: str) -> str:
        if not v:
            raise ValueError("key must not be empty")
        return v

    @property
    def keys(self) -> list[str]:
        """Primary key followed by restore keys, in lookup order."""
        return [self.primary_key, *self.restore_keys]

    @property
    def display_path(self) -> str:
        return ", ".join(self.paths)

    def source_object(self) -> dict[str, Any]:
        """Return the caller's entry object, or a synthesized one for single mode."""
        if self.source:
            return dict(self.source)
        return {
            "path": list(self.paths),
            "key": self.primary_key,
            "restore-keys": list(self.restore_keys),
        }


class Hit(BaseModel):
    """The backend matched a cache entry."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["hit"] = "hit"
    matched_key: str
    exact: bool


class Miss(BaseModel):
    """No cache entry matched any of the keys."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["miss"] = "miss"


RestoreOutcome = Annotated[Hit | Miss, Field(discriminator="kind")]


class EntryHit(BaseModel):
    """A hit paired with the entry that produced it."""

    entry: CacheEntry
    matched_key: str
    exact: bool


class BatchResult(BaseModel):
    """Hits and misses of a completed batch, in input order."""

    hits: list[EntryHit] = Field(default_factory=list)
    misses: list[CacheEntry] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.hits) + len(self.misses)

    def add(self, entry: CacheEntry, outcome: Hit | Miss) -> None:
        if isinstance(outcome, Hit):
            self.hits.append(
                EntryHit(entry=entry, matched_key=outcome.matched_key, exact=outcome.exact)
            )
        else:
            self.misses.append(entry)
