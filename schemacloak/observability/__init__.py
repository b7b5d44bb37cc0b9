"""SchemaCloak logging and tracing."""

from .config import LoggingConfig, ObservabilityConfig, get_config, load_config, set_config
from .logging import (
    TraceContext,
    configure_logging,
    correlation_context,
    current_correlation_id,
    get_logger,
    trace_operation,
)

__all__ = [
    "LoggingConfig",
    "ObservabilityConfig",
    "get_config",
    "set_config",
    "load_config",
    "configure_logging",
    "correlation_context",
    "current_correlation_id",
    "TraceContext",
    "get_logger",
    "trace_operation",
]
