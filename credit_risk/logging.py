"""
Structured logging for the credit risk engine.

Every entry is a JSON object carrying:
- timestamp: ISO 8601
- event: snake_case event name (first positional argument to the logger)
- level, logger
- request_id: bound by the HTTP middleware for the life of a request
- customer_id: bound by customer-scoped endpoints

Request-scoped fields live in structlog's contextvars store, so any logger
used while handling a request picks them up without being passed around.
"""
import logging
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, Optional

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars, merge_contextvars


def configure_logging(level: str = "INFO") -> None:
    """Route structlog through the stdlib root logger and render JSON."""
    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger().setLevel(level)

    structlog.configure(
        processors=[
            merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def new_request_id() -> str:
    return str(uuid.uuid4())


def bind_request(request_id: str) -> None:
    """Start a fresh logging context for an incoming request."""
    clear_contextvars()
    bind_contextvars(request_id=request_id)


def bind_customer(customer_id: str) -> None:
    """Tag the rest of the request's log entries with a customer."""
    bind_contextvars(customer_id=customer_id)


def clear_request() -> None:
    clear_contextvars()


@dataclass
class Timing:
    """Wall-clock duration of a timed block, filled in when the block exits."""
    started: float
    duration_seconds: float = 0.0

    @property
    def duration_ms(self) -> float:
        return round(self.duration_seconds * 1000, 2)


@contextmanager
def timed_operation(
    event: str,
    logger: Optional[structlog.stdlib.BoundLogger] = None,
    **fields: Any,
) -> Iterator[Timing]:
    """
    Log `<event>_completed` (or `<event>_failed`) with the block's duration.

    Example:
        with timed_operation("risk_profile", logger, customer_id="c-1") as timing:
            profile = profiler.profile(...)
        metrics.record_scoring_latency("risk_profile", timing.duration_seconds)
    """
    log = logger or get_logger()
    timing = Timing(started=time.perf_counter())
    log.debug(f"{event}_started", **fields)

    try:
        yield timing
    except Exception as exc:
        timing.duration_seconds = time.perf_counter() - timing.started
        log.error(f"{event}_failed", duration_ms=timing.duration_ms, error=str(exc), **fields)
        raise

    timing.duration_seconds = time.perf_counter() - timing.started
    log.info(f"{event}_completed", duration_ms=timing.duration_ms, **fields)
