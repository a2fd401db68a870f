# tests/unit/test_main.py — v1
"""Tests for main.py — CLI entry point."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from cacherestore.main import _build_parser, _env_input, build_inputs, main
from cacherestore.restore.action import RunReport
from cacherestore.state.file_command import parse_file_commands


@pytest.fixture
def clean_env(monkeypatch, tmp_path: Path):
    """Strip runner variables and point settings at tmp_path."""
    for name in ("KEY", "RESTORE-KEYS", "PATH", "PATHS", "JSON",
                 "ENABLECROSSOSARCHIVE", "FAIL-ON-CACHE-MISS", "LOOKUP-ONLY"):
        monkeypatch.delenv(f"INPUT_{name}", raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CACHE_ROOT", str(tmp_path / "store"))
    monkeypatch.setenv("GITHUB_WORKSPACE", str(tmp_path / "ws"))
    monkeypatch.setenv("GITHUB_REF", "refs/heads/main")
    monkeypatch.setenv("GITHUB_STATE", str(tmp_path / "state.txt"))
    monkeypatch.setenv("GITHUB_OUTPUT", str(tmp_path / "output.txt"))
    monkeypatch.setenv("STATE_BACKEND", "file")
    (tmp_path / "ws").mkdir()
    (tmp_path / "store").mkdir()
    return tmp_path


# ---------------------------------------------------------------------------
# Parser tests
# ---------------------------------------------------------------------------

class TestBuildParser:
    def test_version_flag(self):
        parser = _build_parser()
        with pytest.raises(SystemExit) as exc_info:
            parser.parse_args(["--version"])
        assert exc_info.value.code == 0

    def test_restore_subcommand(self):
        args = _build_parser().parse_args([
            "restore", "--key", "k", "--restore-keys", "a-", "--restore-keys", "b-",
            "--path", "dist",
        ])
        assert args.command == "restore"
        assert args.key == "k"
        assert args.restore_keys == ["a-", "b-"]
        assert args.path == ["dist"]
        assert args.list_only is False

    def test_restore_list_subcommand(self):
        args = _build_parser().parse_args(["restore-list", "--json", "[]", "--lookup-only", "true"])
        assert args.command == "restore-list"
        assert args.json_input == "[]"
        assert args.lookup_only == "true"
        assert args.list_only is True
        assert args.key is None


# ---------------------------------------------------------------------------
# Input merging
# ---------------------------------------------------------------------------

class TestBuildInputs:
    def test_flags(self, clean_env):
        args = _build_parser().parse_args([
            "restore", "--key", " k ", "--path", "a\nb", "--fail-on-cache-miss", "TRUE",
        ])
        inputs = build_inputs(args)
        assert inputs.key == "k"
        assert inputs.path == ["a", "b"]
        assert inputs.fail_on_cache_miss is True
        assert inputs.lookup_only is False

    def test_env_fallback(self, clean_env, monkeypatch):
        monkeypatch.setenv("INPUT_KEY", "env-key")
        monkeypatch.setenv("INPUT_RESTORE-KEYS", "one-\n\n two- \n")
        monkeypatch.setenv("INPUT_ENABLECROSSOSARCHIVE", "true")
        inputs = build_inputs(_build_parser().parse_args(["restore"]))
        assert inputs.key == "env-key"
        assert inputs.restore_keys == ["one-", "two-"]
        assert inputs.enable_cross_os_archive is True

    def test_flag_beats_env(self, clean_env, monkeypatch):
        monkeypatch.setenv("INPUT_LOOKUP-ONLY", "true")
        args = _build_parser().parse_args(["restore", "--lookup-only", "false"])
        assert build_inputs(args).lookup_only is False

    def test_env_input_name(self, monkeypatch):
        monkeypatch.setenv("INPUT_FAIL-ON-CACHE-MISS", "yes")
        assert _env_input("fail-on-cache-miss") == "yes"
        monkeypatch.delenv("INPUT_MISSING", raising=False)
        assert _env_input("missing") == ""


# ---------------------------------------------------------------------------
# main() integration
# ---------------------------------------------------------------------------

class TestMain:
    def test_no_command_returns_1(self):
        assert main([]) == 1

    def test_failed_report_returns_1(self, clean_env):
        report = RunReport(run_id="r", status="aborted", failed=True, message="boom")
        with patch("cacherestore.restore.action.run_restore", AsyncMock(return_value=report)):
            assert main(["restore", "--key", "k", "--path", "p"]) == 1

    def test_interrupt_returns_130(self, clean_env):
        with patch(
            "cacherestore.restore.action.run_restore",
            AsyncMock(side_effect=KeyboardInterrupt),
        ):
            assert main(["restore", "--key", "k", "--path", "p"]) == 130

    def test_miss_writes_outputs(self, clean_env):
        assert main(["restore", "--key", "k", "--path", "p"]) == 0
        outputs = parse_file_commands((clean_env / "output.txt").read_text())
        state = parse_file_commands((clean_env / "state.txt").read_text())
        assert outputs["cache-hit"] == "false"
        assert state == {"CACHE_KEY": "k"}

    def test_fail_on_cache_miss_returns_1(self, clean_env):
        assert main([
            "restore", "--key", "k", "--path", "p", "--fail-on-cache-miss", "true",
        ]) == 1

    def test_restore_list_batch(self, clean_env):
        entries = [{"path": "a", "key": "k1"}]
        assert main(["restore-list", "--json", json.dumps(entries)]) == 0
        outputs = parse_file_commands((clean_env / "output.txt").read_text())
        assert json.loads(outputs["cache-misses"]) == entries
        assert json.loads(outputs["cache-hits"]) == []
