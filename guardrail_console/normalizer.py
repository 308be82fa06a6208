"""
Response Normalizer - map heterogeneous backend payloads onto the internal model.

Backend deployments have renamed fields and endpoints over time. Each
concept below lists the field names it may arrive under, in precedence
order; the first one present wins and the rest are ignored. Supporting a
new backend field name is a one-line edit to FIELD_ALIASES.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .errors import NormalizationError
from .models import ChatResult, IncidentRecord, Metrics, RedactionTag, ScanResult

logger = logging.getLogger(__name__)

FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    # Metrics
    "total_requests": ("total_requests", "total"),
    "flagged_count": ("flagged_count", "flagged_outputs"),
    "flag_rate": ("flag_rate", "rate"),
    # Incident records
    "incident_id": ("id", "incident_id"),
    "timestamp": ("time", "timestamp", "created_at"),
    "provider": ("provider", "model"),
    "flagged": ("flagged",),
    "redactions": ("redactions", "redaction_types", "pii_types"),
    "tag": ("type", "tag"),
    # List envelopes ({"incidents": [...]} instead of a bare list)
    "incident_list": ("incidents", "logs", "items", "data"),
    # Scan / chat
    "raw_output": ("raw_output", "raw"),
    "redacted_output": ("redacted_output", "redacted"),
    "scan_incidents": ("incidents",),
    "answer": ("answer", "response", "reply"),
}

# Tried in order by the dashboard loader; 404/405 moves on to the next one.
INCIDENT_ENDPOINTS: Tuple[str, ...] = ("/incidents", "/logs")
FALLBACK_STATUSES = (404, 405)

# Detector labels some backends emit instead of the short tag names.
TAG_SYNONYMS: Dict[str, RedactionTag] = {
    "email_address": RedactionTag.EMAIL,
    "phone_number": RedactionTag.PHONE,
    "us_ssn": RedactionTag.SSN,
    "creditcard": RedactionTag.CREDIT_CARD,
    "credit-card": RedactionTag.CREDIT_CARD,
    "person": RedactionTag.NAME,
}

_TRUE_STRINGS = ("true", "1", "yes", "y", "on")
_FALSE_STRINGS = ("false", "0", "no", "n", "off", "")


def pick(payload: Dict[str, Any], concept: str, default: Any = None) -> Any:
    """Return the first non-null field for `concept`, in alias precedence order."""
    for key in FIELD_ALIASES[concept]:
        value = payload.get(key)
        if value is not None:
            return value
    return default


def _require_object(payload: Any, what: str) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise NormalizationError(
            f"{what} payload must be an object, got {type(payload).__name__}"
        )
    return payload


def _as_count(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise NormalizationError(f"{field} must be a number, got a boolean")
    if isinstance(value, int):
        return max(value, 0)
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        raise NormalizationError(f"{field} must be a number, got {value!r}")
    if not math.isfinite(number):
        raise NormalizationError(f"{field} must be finite, got {value!r}")
    return max(int(number), 0)


def _as_rate(value: Any) -> float:
    if isinstance(value, bool):
        raise NormalizationError("flag_rate must be a number, got a boolean")
    try:
        rate = float(value)
    except (TypeError, ValueError, OverflowError):
        raise NormalizationError(f"flag_rate must be a number, got {value!r}")
    if not math.isfinite(rate):
        raise NormalizationError(f"flag_rate must be finite, got {value!r}")
    return min(max(rate, 0.0), 1.0)


def _as_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise NormalizationError(f"{field} must be a boolean, got {value!r}")


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse ISO-8601 strings or epoch seconds/milliseconds into an aware datetime."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            seconds = value / 1000 if value > 1e12 else value
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            raise NormalizationError(f"Timestamp out of range: {value!r}")
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise NormalizationError(f"Unrecognized timestamp: {value!r}")
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    raise NormalizationError(f"Unrecognized timestamp: {value!r}")


def normalize_tag(value: Any) -> RedactionTag:
    """
    Collapse a bare tag or a {type, value} object to its RedactionTag.

    Unknown labels map to OTHER; the original value of an object is dropped.
    """
    if isinstance(value, dict):
        value = pick(value, "tag")
        if value is None:
            raise NormalizationError("Redaction object has no type field")
    if isinstance(value, RedactionTag):
        return value
    if not isinstance(value, str):
        raise NormalizationError(f"Redaction tag must be a string or object, got {value!r}")

    key = value.strip().lower()
    try:
        return RedactionTag(key)
    except ValueError:
        pass
    return TAG_SYNONYMS.get(key, RedactionTag.OTHER)


def normalize_redactions(value: Any) -> List[RedactionTag]:
    """Normalize a redaction list; absent means empty."""
    if value is None:
        return []
    if isinstance(value, (str, dict)):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise NormalizationError(f"Redactions must be a list, got {type(value).__name__}")
    return [normalize_tag(item) for item in value]


def unique_tags(tags: Iterable[RedactionTag]) -> List[RedactionTag]:
    """Ordered de-duplication."""
    seen: List[RedactionTag] = []
    for tag in tags:
        if tag not in seen:
            seen.append(tag)
    return seen


def normalize_metrics(payload: Any) -> Metrics:
    """Normalize a /metrics payload."""
    data = _require_object(payload, "Metrics")

    total = _as_count(pick(data, "total_requests", 0), "total_requests")
    flagged = _as_count(pick(data, "flagged_count", 0), "flagged_count")
    rate = _as_rate(pick(data, "flag_rate", 0.0))

    if flagged > total:
        # Backends that omit the total still report flagged counts.
        logger.debug(f"flagged_count {flagged} exceeds total_requests {total}; raising total")
        total = flagged

    return Metrics(total_requests=total, flagged_count=flagged, flag_rate=rate)


def normalize_incident(payload: Any) -> IncidentRecord:
    """Normalize one incident (or log) record."""
    data = _require_object(payload, "Incident")

    raw_id = pick(data, "incident_id")
    if raw_id is None:
        raise NormalizationError("Incident record has no id")
    incident_id = _as_count(raw_id, "id")

    return IncidentRecord(
        id=incident_id,
        timestamp=parse_timestamp(pick(data, "timestamp")),
        provider=_as_text(pick(data, "provider", "")),
        flagged=_as_bool(pick(data, "flagged", False), "flagged"),
        redactions=normalize_redactions(pick(data, "redactions")),
    )


def _unwrap_list(payload: Any, what: str) -> Sequence[Any]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        inner = pick(payload, "incident_list")
        if isinstance(inner, list):
            return inner
    raise NormalizationError(f"{what} payload must be a list, got {type(payload).__name__}")


def normalize_incidents(payload: Any, limit: Optional[int] = None) -> List[IncidentRecord]:
    """Normalize an /incidents or /logs payload, keeping at most `limit` records."""
    records = _unwrap_list(payload, "Incident list")
    if limit is not None:
        records = records[:limit]
    return [normalize_incident(record) for record in records]


def normalize_scan_result(payload: Any) -> ScanResult:
    """Normalize a /scan response."""
    data = _require_object(payload, "Scan")

    incidents_payload = pick(data, "scan_incidents")
    incidents = [] if incidents_payload is None else normalize_incidents(incidents_payload)

    redactions_payload = pick(data, "redactions")
    if redactions_payload is not None:
        redactions = normalize_redactions(redactions_payload)
    else:
        redactions = unique_tags(tag for incident in incidents for tag in incident.redactions)

    return ScanResult(
        raw_output=_as_text(pick(data, "raw_output", "")),
        redacted_output=_as_text(pick(data, "redacted_output", "")),
        flagged=_as_bool(pick(data, "flagged", False), "flagged"),
        incidents=incidents,
        redactions=redactions,
    )


def normalize_chat_result(payload: Any) -> ChatResult:
    """Normalize a /chat response."""
    data = _require_object(payload, "Chat")

    return ChatResult(
        answer=_as_text(pick(data, "answer", "")),
        flagged=_as_bool(pick(data, "flagged", False), "flagged"),
        redactions=normalize_redactions(pick(data, "redactions")),
    )
