# src/restore/action.py — v1
"""Restore run facade: single entry point for a restore step.

Usage:
    from cacherestore.restore.action import run_restore
    report = await run_restore(inputs, settings)

Run states:
    Init -> Validating -> FeatureUnavailable | EventInvalid | Processing
    Processing -> Completed | Aborted

FeatureUnavailable and EventInvalid end the run without contacting the
backend and without failing it. Aborted means a fatal error (malformed input,
backend failure, fail-on-cache-miss); no hit/miss outputs are written then.
"""

from __future__ import annotations

import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field

from cacherestore.cache.base_restore_backend import BaseRestoreBackend
from cacherestore.config.settings import Settings, load_settings
from cacherestore.core.errors import InvalidTriggerContextError, RestoreError
from cacherestore.core.models import BatchResult
from cacherestore.inputs.parser import InputMode, RestoreInputs, parse_inputs
from cacherestore.logging.context import set_run_context
from cacherestore.restore.orchestrator import BatchOrchestrator
from cacherestore.restore.processor import EntryProcessor
from cacherestore.restore.report import serialize_batch_result
from cacherestore.state.base_state_sink import (
    CACHE_PRIMARY_KEY,
    OUTPUT_CACHE_HIT,
    OUTPUT_CACHE_HITS,
    OUTPUT_CACHE_MISSES,
    BaseStateSink,
)

logger = logging.getLogger(__name__)

RunStatus = Literal["completed", "aborted", "feature_unavailable", "event_invalid"]


class RunReport(BaseModel):
    """Return value of run_restore()."""

    run_id: str
    status: RunStatus
    mode: InputMode | None = None
    failed: bool = False
    message: str = ""
    result: BatchResult | None = None
    outputs: dict[str, str] = Field(default_factory=dict)
    duration_seconds: float = 0.0


def is_cache_feature_available(backend: BaseRestoreBackend) -> bool:
    return backend.is_available()


def is_valid_event(settings: Settings) -> bool:
    """Runs must be tied to a branch or tag ref unless validation is disabled."""
    if not settings.validate_event:
        return True
    return bool(settings.github_ref)


async def run_restore(
    inputs: RestoreInputs,
    settings: Settings | None = None,
    backend: BaseRestoreBackend | None = None,
    state_sink: BaseStateSink | None = None,
    output_sink: BaseStateSink | None = None,
    list_only: bool = False,
) -> RunReport:
    """Run one restore step end-to-end.

    Args:
        inputs: Raw step inputs (single entry or ``json`` batch).
        settings: Global settings. Loaded from the environment if None.
        backend: Restore backend. Built from settings if None.
        state_sink: Receives primary/matched keys for the save step.
        output_sink: Receives step outputs.
        list_only: ``restore-list`` behaviour: require a JSON array and
            publish state as outputs.

    Returns:
        RunReport describing the final state of the run. Fatal errors are
        reported through ``failed`` and ``message``, not raised.
    """
    from cacherestore.cache.cache_factory import create_restore_backend
    from cacherestore.state.sink_factory import create_output_sink, create_state_sink

    settings = settings or load_settings()
    backend = backend or create_restore_backend(settings)

    # Sinks built here are closed here; caller-supplied sinks stay open.
    owned_sinks: list[BaseStateSink] = []
    if output_sink is None:
        output_sink = create_output_sink(settings)
        owned_sinks.append(output_sink)
    if state_sink is None:
        if list_only:
            from cacherestore.state.output_sink import OutputStateSink
            state_sink = OutputStateSink(output_sink)
        else:
            state_sink = create_state_sink(settings, outputs=output_sink)
            owned_sinks.append(state_sink)

    try:
        return await _execute(inputs, settings, backend, state_sink, output_sink, list_only)
    finally:
        for sink in owned_sinks:
            sink.close()


async def _execute(
    inputs: RestoreInputs,
    settings: Settings,
    backend: BaseRestoreBackend,
    state_sink: BaseStateSink,
    output_sink: BaseStateSink,
    list_only: bool,
) -> RunReport:
    run_id = _generate_run_id()
    set_run_context(run_id)
    t0 = time.perf_counter()

    # --- Validating ---
    if not is_cache_feature_available(backend):
        logger.warning("Cache service is not available, reporting no cache hit")
        outputs = _unavailable_outputs(inputs, list_only)
        _write_outputs(output_sink, outputs)
        return RunReport(
            run_id=run_id,
            status="feature_unavailable",
            outputs=outputs,
            duration_seconds=_elapsed(t0),
        )

    if not is_valid_event(settings):
        error = InvalidTriggerContextError(settings.github_event_name or "unknown")
        logger.warning("%s", error)
        return RunReport(
            run_id=run_id,
            status="event_invalid",
            message=str(error),
            duration_seconds=_elapsed(t0),
        )

    # --- Processing ---
    mode: InputMode | None = None
    try:
        parsed = parse_inputs(inputs, list_only=list_only)
        mode = parsed.mode
        set_run_context(run_id, mode)
        logger.info("Restoring %d cache entries (%s mode)", len(parsed.entries), mode)

        processor = None
        if mode == "single":
            state_sink.set_state(CACHE_PRIMARY_KEY, parsed.primary_key)
            processor = EntryProcessor(backend, exact_key=parsed.primary_key)

        orchestrator = BatchOrchestrator(
            backend, state_sink=state_sink, processor=processor
        )
        result = await orchestrator.run_batch(parsed.entries)
    except RestoreError as exc:
        if exc.fatal:
            logger.error("%s", exc)
            status: RunStatus = "aborted"
        else:
            logger.warning("%s", exc)
            status = "feature_unavailable"
        return RunReport(
            run_id=run_id,
            status=status,
            mode=mode,
            failed=exc.fatal,
            message=str(exc),
            duration_seconds=_elapsed(t0),
        )

    outputs = build_outputs(mode, result)
    _write_outputs(output_sink, outputs)
    if mode != "single":
        logger.info("Cache misses: %s", outputs[OUTPUT_CACHE_MISSES])

    return RunReport(
        run_id=run_id,
        status="completed",
        mode=mode,
        result=result,
        outputs=outputs,
        duration_seconds=_elapsed(t0),
    )


def build_outputs(mode: InputMode, result: BatchResult) -> dict[str, str]:
    """Step outputs for a completed run."""
    if mode == "single":
        exact = bool(result.hits) and result.hits[0].exact
        return {OUTPUT_CACHE_HIT: str(exact).lower()}

    hits_json, misses_json = serialize_batch_result(result)
    return {OUTPUT_CACHE_HITS: hits_json, OUTPUT_CACHE_MISSES: misses_json}


def _unavailable_outputs(inputs: RestoreInputs, list_only: bool) -> dict[str, str]:
    if list_only or inputs.is_batch:
        return {OUTPUT_CACHE_HITS: "[]", OUTPUT_CACHE_MISSES: "[]"}
    return {OUTPUT_CACHE_HIT: "false"}


def _write_outputs(output_sink: BaseStateSink, outputs: dict[str, str]) -> None:
    for name, value in outputs.items():
        output_sink.set_state(name, value)


def _generate_run_id() -> str:
    """Generate a run ID: yyyymmdd_hhmmss_{uuid4_short}."""
    ts = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    return f"{ts}_{uuid.uuid4().hex[:8]}"


def _elapsed(t0: float) -> float:
    return round(time.perf_counter() - t0, 3)
