"""Helpers for logging caught exceptions with context."""

import logging
from typing import Any, Dict, Optional

from .tracing import get_trace_id


def format_error_message(
    message: str,
    exc: Optional[BaseException] = None,
    *,
    max_context_items: int = 8,
    **context: Any,
) -> str:
    """Build an error message with trace_id and context for easier tracing.

    Returns a single string like:
        "Dashboard load failed (url=/metrics token=3 trace_id=load_abc): HTTP 503"
    """
    parts = [message]
    trace_id = get_trace_id()
    if trace_id:
        context = {**context, "trace_id": trace_id}
    if context:
        items = []
        for k, v in list(context.items())[:max_context_items]:
            if isinstance(v, str) and len(v) > 64:
                items.append(f"{k}={v[:61]}...")
            else:
                items.append(f"{k}={v}")
        parts.append(" (" + " ".join(items) + ")")
    if exc is not None and str(exc):
        parts.append(f": {exc}")
    return "".join(parts)


def log_error_with_context(
    log: logging.Logger,
    message: str,
    exc: Optional[BaseException] = None,
    *,
    exc_info: bool = False,
    level: int = logging.ERROR,
    **context: Any,
) -> None:
    """Log a caught failure with its context in both the message and the record.

    Orchestrators use this wherever they convert an exception into a result
    value, so the failure still reaches the operator's log.
    """
    extra: Dict[str, Any] = dict(context)
    extra["error_type"] = type(exc).__name__ if exc is not None else None
    full_message = format_error_message(message, exc=exc, **context)
    log.log(level, full_message, exc_info=exc_info and exc is not None, extra=extra)
