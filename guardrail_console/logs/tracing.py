"""Per-operation trace ids for correlating log lines."""

import uuid
from contextvars import ContextVar
from typing import Optional

_trace_id: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)


def get_trace_id() -> Optional[str]:
    return _trace_id.get()


def set_trace_id(trace_id: Optional[str]) -> None:
    _trace_id.set(trace_id)


class TracingContext:
    """
    Scope a trace id to one public operation.

    Usage:
        with TracingContext("scan") as trace_id:
            ...

    The previous trace id is restored on exit, so nested operations
    (a scan triggering a dashboard refresh) keep their own ids.
    """

    def __init__(self, prefix: str = "op"):
        self.prefix = prefix
        self.trace_id: Optional[str] = None
        self._token = None

    def __enter__(self) -> str:
        self.trace_id = f"{self.prefix}_{uuid.uuid4().hex[:12]}"
        self._token = _trace_id.set(self.trace_id)
        return self.trace_id

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._token is not None:
            _trace_id.reset(self._token)
            self._token = None
