# src/state/output_sink.py — v1
"""State sink that publishes state as step outputs instead of saved state.

Used by ``restore-list``, which has no paired save step: the matched and
primary keys become the ``cache-matched-key`` / ``cache-primary-key`` outputs.
"""

from __future__ import annotations

import logging

from cacherestore.state.base_state_sink import STATE_TO_OUTPUT, BaseStateSink

logger = logging.getLogger(__name__)


class OutputStateSink(BaseStateSink):
    """Maps state names to output names and writes them to an output sink."""

    def __init__(self, outputs: BaseStateSink) -> None:
        self._outputs = outputs

    def set_state(self, name: str, value: str) -> None:
        output_name = STATE_TO_OUTPUT.get(name)
        if output_name is None:
            logger.debug("State %s has no output mapping, dropped", name)
            return
        self._outputs.set_state(output_name, value)

    def get_state(self, name: str) -> str | None:
        output_name = STATE_TO_OUTPUT.get(name)
        if output_name is None:
            return None
        return self._outputs.get_state(output_name)
