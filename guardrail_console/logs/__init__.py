"""
Guardrail Console logging.

Structured or human-readable console output, optional file output, and a
per-operation trace id so one scan, load or wake can be followed end to end.
"""

from .config import LogConfig, load_config
from .exception_handler import format_error_message, log_error_with_context
from .manager import LoggingManager, initialize
from .tracing import TracingContext, get_trace_id, set_trace_id

__all__ = [
    "LoggingManager",
    "initialize",
    "LogConfig",
    "load_config",
    "format_error_message",
    "log_error_with_context",
    "TracingContext",
    "get_trace_id",
    "set_trace_id",
]
