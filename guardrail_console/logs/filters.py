"""Logging filters for guardrail console logging."""

import logging

from .tracing import get_trace_id


class TraceIdFilter(logging.Filter):
    """Attach the current trace_id to every record passing through a handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id = get_trace_id()  # type: ignore[attr-defined]
        return True
