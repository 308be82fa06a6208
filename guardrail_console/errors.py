"""
Guardrail Console - Error taxonomy.

Transport and normalizer code raise these; the orchestrators (dashboard,
scan, chat, wake) catch them at their boundary and turn them into Outcome
values, so nothing escapes to the presentation layer.
"""

from typing import Optional


class GuardrailError(Exception):
    """Base guardrail console error."""
    pass


class UnconfiguredError(GuardrailError):
    """No backend base URL is configured; network features are disabled."""
    pass


class TransportError(GuardrailError):
    """Base transport error."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class RequestTimeoutError(TransportError):
    """No response arrived within the per-call timeout."""

    def __init__(self, message: str, url: Optional[str] = None, timeout: Optional[float] = None):
        super().__init__(message, url=url)
        self.timeout = timeout


class NetworkError(TransportError):
    """DNS, connection refused, TLS or other network-level failure."""
    pass


class HttpError(TransportError):
    """Backend answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str = "", url: Optional[str] = None):
        snippet = body[:200] if body else ""
        message = f"HTTP {status_code}"
        if snippet:
            message = f"{message}: {snippet}"
        super().__init__(message, url=url)
        self.status_code = status_code
        self.body = body


class NormalizationError(GuardrailError):
    """Payload has the wrong shape and cannot be mapped onto the internal model."""
    pass


class InputValidationError(GuardrailError):
    """Empty or whitespace-only input was rejected before any network call."""
    pass


def validate_input(text: Optional[str], field: str = "prompt") -> str:
    """Reject empty or whitespace-only input; returns the text unchanged."""
    if text is None or not text.strip():
        raise InputValidationError(f"{field} must not be empty")
    return text


def describe_failure(exc: BaseException) -> str:
    """Operator-facing one-line description of a failed request."""
    if isinstance(exc, UnconfiguredError):
        return str(exc) or "No guardrail backend is configured."
    if isinstance(exc, RequestTimeoutError):
        return "Request timed out. The backend may be waking up; try again shortly."
    if isinstance(exc, HttpError):
        return f"Request failed: backend returned HTTP {exc.status_code}."
    if isinstance(exc, NetworkError):
        return "Request failed: could not reach the guardrail backend."
    if isinstance(exc, NormalizationError):
        return "Request failed: backend returned an unexpected response."
    return "Request failed. See logs for details."
