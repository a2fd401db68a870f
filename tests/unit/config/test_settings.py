# tests/unit/config/test_settings.py — v1
"""Tests for config/settings.py — defaults, env loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from cacherestore.config.settings import ConfigurationError, Settings, load_settings


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "CACHE_BACKEND", "CACHE_ROOT", "GITHUB_WORKSPACE", "GITHUB_REF",
        "GITHUB_EVENT_NAME", "GITHUB_STATE", "GITHUB_OUTPUT", "STATE_BACKEND",
        "STATE_REDIS_URL", "LOG_LEVEL", "LOG_FORMAT", "VALIDATE_EVENT",
    ):
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    def test_defaults(self, clean_env):
        s = Settings(_env_file=None)
        assert s.cache_backend == "local"
        assert s.state_backend == "file"
        assert s.github_ref == ""
        assert s.github_state is None
        assert s.validate_event is True
        assert s.log_format == "text"


class TestEnvLoading:
    def test_runner_variables(self, clean_env, monkeypatch, tmp_path):
        monkeypatch.setenv("GITHUB_REF", "refs/heads/main")
        monkeypatch.setenv("GITHUB_STATE", str(tmp_path / "state"))
        monkeypatch.setenv("GITHUB_WORKSPACE", str(tmp_path))
        monkeypatch.setenv("CACHE_BACKEND", "disabled")
        s = Settings(_env_file=None)
        assert s.github_ref == "refs/heads/main"
        assert s.github_state == tmp_path / "state"
        assert s.workspace == tmp_path
        assert s.cache_backend == "disabled"

    def test_log_level_case_insensitive(self, clean_env, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert Settings(_env_file=None).log_level == "DEBUG"

    def test_invalid_backend_rejected(self, clean_env):
        with pytest.raises(ValueError):
            Settings(_env_file=None, cache_backend="s3")


class TestValidation:
    def test_redis_requires_url(self, clean_env):
        with pytest.raises(ConfigurationError, match="STATE_REDIS_URL"):
            Settings(_env_file=None, state_backend="redis")

    def test_negative_retention(self, clean_env):
        with pytest.raises(ConfigurationError, match="LOG_RETENTION"):
            Settings(_env_file=None, log_retention=-1)

    def test_redis_with_url(self, clean_env):
        s = Settings(
            _env_file=None, state_backend="redis", state_redis_url="redis://localhost"
        )
        assert s.state_backend == "redis"


def test_load_settings_overrides(clean_env):
    s = load_settings(_env_file=None, cache_root=Path("/tmp/store"))
    assert s.cache_root == Path("/tmp/store")
