# src/state/sink_factory.py — v1
"""Factories for the state sink and the output sink."""

from __future__ import annotations

import logging

from cacherestore.config.settings import Settings
from cacherestore.state.base_state_sink import BaseStateSink

logger = logging.getLogger(__name__)


def create_output_sink(settings: Settings | None = None) -> BaseStateSink:
    """Output file named by GITHUB_OUTPUT, or stdout when none is set."""
    if settings is not None and settings.github_output is not None:
        from cacherestore.state.file_command import FileCommandStateSink
        return FileCommandStateSink(settings.github_output)

    from cacherestore.state.memory_sink import ConsoleStateSink
    return ConsoleStateSink()


def create_state_sink(
    settings: Settings | None = None,
    outputs: BaseStateSink | None = None,
) -> BaseStateSink:
    """Instantiate the configured state sink.

    Args:
        settings: Application settings. Defaults to an in-memory sink.
        outputs: Output sink, required for ``state_backend="output"``.

    Returns:
        Configured BaseStateSink implementation.
    """
    backend = "memory" if settings is None else settings.state_backend

    if backend == "file":
        if settings.github_state is None:
            logger.warning("GITHUB_STATE is not set, state will not reach the save step")
            from cacherestore.state.memory_sink import MemoryStateSink
            return MemoryStateSink()
        from cacherestore.state.file_command import FileCommandStateSink
        return FileCommandStateSink(settings.github_state)

    if backend == "output":
        from cacherestore.state.output_sink import OutputStateSink
        return OutputStateSink(outputs or create_output_sink(settings))

    if backend == "memory":
        from cacherestore.state.memory_sink import MemoryStateSink
        return MemoryStateSink()

    if backend == "redis":
        from cacherestore.state.redis_sink import RedisStateSink
        return RedisStateSink(
            redis_url=settings.state_redis_url,
            namespace=settings.state_redis_namespace,
        )

    raise ValueError(f"Unsupported state backend: {backend!r}")
