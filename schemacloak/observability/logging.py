"""Structured logging and operation tracing built on structlog."""

from __future__ import annotations

import logging
import sys
import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Optional

import structlog

from .config import LoggingConfig, get_config

CORRELATION_KEY = "correlation_id"


def _processors(config: LoggingConfig) -> list[Any]:
    processors: list[Any] = [structlog.stdlib.filter_by_level]
    if config.enable_correlation:
        processors.append(structlog.contextvars.merge_contextvars)
    processors.extend(
        [
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
        ]
    )

    if config.format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    return processors


def _handler(config: LoggingConfig) -> logging.Handler:
    if config.output == "file" and config.file_path:
        return logging.FileHandler(config.file_path, encoding="utf-8")
    return logging.StreamHandler(sys.stderr if config.output == "stderr" else sys.stdout)


def configure_logging(config: Optional[LoggingConfig] = None) -> None:
    """Render structlog events through a single handler on the root logger.

    Args:
        config: Logging settings; defaults to the global observability config
    """
    if config is None:
        config = get_config().logging

    structlog.configure(
        processors=_processors(config),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(
        format="%(message)s", level=config.level, handlers=[_handler(config)], force=True
    )


def get_logger(name: str) -> Any:
    """Get a structlog logger instance.

    Until :func:`configure_logging` has run, events are routed through the
    standard library logger of the same name, so an application that never
    configures SchemaCloak only sees what its own logging setup lets through.
    """
    if structlog.is_configured():
        return structlog.get_logger(name)
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.KeyValueRenderer(key_order=["event"]),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
    )


@contextmanager
def correlation_context(corr_id: Optional[str] = None) -> Iterator[str]:
    """Bind a correlation ID to every event logged inside the block."""
    corr_id = corr_id or str(uuid.uuid4())
    with structlog.contextvars.bound_contextvars(**{CORRELATION_KEY: corr_id}):
        yield corr_id


def current_correlation_id() -> str:
    """Return the correlation ID bound by the innermost correlation_context."""
    return structlog.contextvars.get_contextvars().get(CORRELATION_KEY, "")


@dataclass
class TraceContext:
    """A traced operation and the attributes reported when it completes."""

    operation: str
    trace_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    attributes: dict[str, Any] = field(default_factory=dict)

    def set_attribute(self, key: str, value: Any) -> None:
        self.attributes[key] = value


@contextmanager
def trace_operation(operation: str, **attributes: Any) -> Iterator[TraceContext]:
    """Log the start, completion or failure of an operation at debug level.

    Failures are logged as errors and re-raised.
    """
    context = TraceContext(operation, attributes=dict(attributes))
    if not get_config().logging.enable_tracing:
        yield context
        return

    log = get_logger(__name__).bind(operation=operation, trace_id=context.trace_id)
    log.debug("Operation started", **context.attributes)
    started = time.perf_counter()

    try:
        yield context
    except Exception as e:
        log.error(
            "Operation failed",
            duration_seconds=time.perf_counter() - started,
            status="error",
            error=str(e),
            error_type=type(e).__name__,
        )
        raise

    log.debug(
        "Operation completed",
        duration_seconds=time.perf_counter() - started,
        status="success",
        **context.attributes,
    )
