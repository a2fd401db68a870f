# src/config/settings.py — v1
"""Typed configuration loaded from the environment and .env via pydantic-settings.

Single source of truth for deployment-specific settings: which cache store to
restore from, where the runner keeps its state and output files, and logging.
Per-run inputs (keys, paths, JSON batches) are not settings; see
cacherestore.inputs.parser.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Cache store ===
    cache_backend: Literal["local", "disabled"] = "local"
    cache_root: Path = Path("~/.cache-restore/store")
    cache_compression: Literal["gzip"] = "gzip"
    workspace: Path = Field(
        default=Path("."),
        validation_alias=AliasChoices("GITHUB_WORKSPACE", "workspace"),
    )

    # === Runner context ===
    github_ref: str = ""
    github_event_name: str = ""
    github_state: Path | None = None
    github_output: Path | None = None
    # Outside a CI runner there is no ref; set VALIDATE_EVENT=false to skip the check.
    validate_event: bool = True

    # === State sink ===
    state_backend: Literal["file", "output", "memory", "redis"] = "file"
    state_redis_url: str = ""
    state_redis_namespace: str = "cacherestore:state"

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.state_backend == "redis" and not self.state_redis_url:
            errors.append("STATE_BACKEND=redis requires STATE_REDIS_URL")

        if self.log_retention < 0:
            errors.append("LOG_RETENTION must be >= 0")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self


def load_settings(**overrides: object) -> Settings:
    """Load settings from the environment with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or embedding).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
