"""
Utilities for tracing and tick event logging inside the inference pipeline.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any

DEBUG = False
_LAST_TICK_TIME: float | None = None


def _dbg(msg: str, *, tick: int | None = None) -> None:
    """Print a trace line when DEBUG is enabled, with wall time since the last one."""
    if not DEBUG:
        return
    global _LAST_TICK_TIME
    now = time.monotonic()
    gap = 0.0 if _LAST_TICK_TIME is None else now - _LAST_TICK_TIME
    _LAST_TICK_TIME = now
    where = "pipeline" if tick is None else f"pipeline tick={int(tick)}"
    print(f"[{where} +{gap * 1000.0:.1f}ms] {msg}")


TICK_LOGGER = logging.getLogger("wmagent.pipeline")
TICK_LOGGER_START = time.perf_counter()


def _log_tick_event(event: str, details: dict[str, Any]) -> None:
    """Emit a JSON payload when the tick logger is configured."""
    if not TICK_LOGGER.handlers:
        return
    payload: dict[str, Any] = {"event": event}
    payload["timestamp"] = float(time.perf_counter() - TICK_LOGGER_START)
    payload.update(details)
    try:
        TICK_LOGGER.info(json.dumps(payload, sort_keys=True))
    except (TypeError, ValueError):
        TICK_LOGGER.info(f"{event} {details}")
