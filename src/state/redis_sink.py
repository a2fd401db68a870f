# src/state/redis_sink.py — v1
"""Redis-based state sink (STATE_BACKEND=redis).

Requires 'redis' package: pip install redis.
Lets the save step run on a different machine than the restore step.
Values are kept in one hash per namespace.
"""

from __future__ import annotations

import logging

from cacherestore.state.base_state_sink import BaseStateSink

logger = logging.getLogger(__name__)


class RedisStateSink(BaseStateSink):
    """Redis-backed state sink for distributed pipelines."""

    def __init__(self, redis_url: str, namespace: str = "cacherestore:state") -> None:
        try:
            import redis
        except ImportError as e:
            raise ImportError(
                "redis package required: pip install redis"
            ) from e

        self._client = redis.Redis.from_url(redis_url, decode_responses=True)
        self._namespace = namespace

    def set_state(self, name: str, value: str) -> None:
        self._client.hset(self._namespace, name, value)
        logger.debug("Recorded %s in redis hash %s", name, self._namespace)

    def get_state(self, name: str) -> str | None:
        return self._client.hget(self._namespace, name)

    def close(self) -> None:
        """Close the Redis connection."""
        self._client.close()
