# src/main.py — v1
"""CLI entry point: restore, restore-list commands.

Usage:
    cache-restore restore --key <key> [--restore-keys <prefix>] --path <path>
    cache-restore restore --json '<array or object of entries>'
    cache-restore restore-list --json '<array of entries>'

Every flag falls back to the matching INPUT_* environment variable, the way
CI runners hand step inputs to actions (e.g. INPUT_KEY, INPUT_RESTORE-KEYS).
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import TYPE_CHECKING

from cacherestore.version import __version__

if TYPE_CHECKING:
    from cacherestore.config.settings import Settings
    from cacherestore.inputs.parser import RestoreInputs

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        from cacherestore.config.settings import load_settings

        settings = load_settings()
        _setup_logging(settings, args.verbose)
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="cache-restore",
        description=f"cache-restore v{__version__}: restore cached build paths by key",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- restore ---
    p_restore = subparsers.add_parser(
        "restore", help="Restore one entry, or a JSON batch of entries",
    )
    p_restore.add_argument(
        "--key", default=None,
        help="Primary cache key (env INPUT_KEY)",
    )
    p_restore.add_argument(
        "--restore-keys", action="append", default=None,
        help="Fallback key prefix; repeat or pass newline-separated (env INPUT_RESTORE-KEYS)",
    )
    p_restore.add_argument(
        "--path", action="append", default=None,
        help="Path joined with '|' into one composite path (env INPUT_PATH)",
    )
    p_restore.add_argument(
        "--paths", action="append", default=None,
        help="Path restored as its own path entry (env INPUT_PATHS)",
    )
    p_restore.add_argument(
        "--json", dest="json_input", default=None,
        help="JSON array or object of {path, key, restore-keys} entries (env INPUT_JSON)",
    )
    _add_option_flags(p_restore)
    p_restore.set_defaults(func=_cmd_restore, list_only=False)

    # --- restore-list ---
    p_list = subparsers.add_parser(
        "restore-list", help="Restore a JSON array of entries, state as outputs",
    )
    p_list.add_argument(
        "--json", dest="json_input", default=None,
        help="JSON array of {path, key, restore-keys} entries (env INPUT_JSON)",
    )
    _add_option_flags(p_list)
    p_list.set_defaults(
        func=_cmd_restore, list_only=True, key=None, restore_keys=None,
        path=None, paths=None,
    )

    return parser


def _add_option_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--enable-cross-os-archive", default=None, metavar="BOOL",
        help="Allow restoring archives saved on another OS (env INPUT_ENABLECROSSOSARCHIVE)",
    )
    parser.add_argument(
        "--fail-on-cache-miss", default=None, metavar="BOOL",
        help="Fail the run when an entry misses (env INPUT_FAIL-ON-CACHE-MISS)",
    )
    parser.add_argument(
        "--lookup-only", default=None, metavar="BOOL",
        help="Check for a match without extracting (env INPUT_LOOKUP-ONLY)",
    )


def build_inputs(args: argparse.Namespace) -> RestoreInputs:
    """Merge CLI flags with INPUT_* environment variables."""
    from cacherestore.inputs.parser import (
        RestoreInputs,
        get_input_as_array,
        get_input_as_bool,
    )

    def _lines(values: list[str] | None, name: str) -> list[str]:
        if values:
            return [line for value in values for line in get_input_as_array(value)]
        return get_input_as_array(_env_input(name))

    def _flag(value: str | None, name: str) -> bool:
        return get_input_as_bool(value if value is not None else _env_input(name))

    return RestoreInputs(
        key=(args.key if args.key is not None else _env_input("key")).strip(),
        restore_keys=_lines(args.restore_keys, "restore-keys"),
        path=_lines(args.path, "path"),
        paths=_lines(args.paths, "paths"),
        json_input=(
            args.json_input if args.json_input is not None else _env_input("json")
        ),
        enable_cross_os_archive=_flag(args.enable_cross_os_archive, "enableCrossOsArchive"),
        fail_on_cache_miss=_flag(args.fail_on_cache_miss, "fail-on-cache-miss"),
        lookup_only=_flag(args.lookup_only, "lookup-only"),
    )


async def _cmd_restore(args: argparse.Namespace, settings: Settings) -> int:
    """Execute a restore run and map its report to an exit status."""
    from cacherestore.restore.action import run_restore

    inputs = build_inputs(args)
    report = await run_restore(inputs, settings, list_only=args.list_only)

    if report.failed:
        logger.error("Restore failed: %s", report.message)
        return 1
    return 0


def _env_input(name: str) -> str:
    """Value of a step input as exported by the runner: INPUT_<NAME>, upper-cased."""
    return os.environ.get(f"INPUT_{name.replace(' ', '_').upper()}", "")


def _setup_logging(settings: Settings, verbose: bool) -> None:
    """Configure logging for CLI usage."""
    from cacherestore.logging.logger import setup_logging

    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


if __name__ == "__main__":
    sys.exit(main())
