from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator

# Attributes every LogRecord already carries; extras must not overwrite them.
RESERVED_LOG_KEYS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime"}

EVENT_LOGGER = "sodium_mcp.observability"


def log_event(event: str, logger: logging.Logger | None = None, **fields: Any) -> None:
    """Emit ``event`` at INFO with ``fields`` attached as record attributes."""
    log = logger or logging.getLogger(EVENT_LOGGER)
    extra = {k: v for k, v in fields.items() if k not in RESERVED_LOG_KEYS}
    log.info(event, extra=extra)


@contextmanager
def timed_call(
    event: str, logger: logging.Logger | None = None, **fields: Any
) -> Iterator[Dict[str, Any]]:
    """
    Time the enclosed block and emit ``event`` when it exits.

    The yielded dict collects fields only known at the end (``status``).
    An escaping exception is logged with ``status="exception"`` and its
    ``error_type`` before propagating.
    """
    outcome: Dict[str, Any] = {}
    start = time.perf_counter()
    try:
        yield outcome
    except Exception as exc:
        outcome["status"] = "exception"
        outcome["error_type"] = type(exc).__name__
        raise
    finally:
        outcome["duration_ms"] = int((time.perf_counter() - start) * 1000)
        log_event(event, logger, **{**fields, **outcome})


__all__ = ["EVENT_LOGGER", "log_event", "timed_call"]
