"""
Guardrail Console - Pydantic Models

Stable internal model every backend payload is normalized onto.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

PLACEHOLDER = "—"


class RedactionTag(str, Enum):
    """Category of sensitive content the backend redacted."""
    EMAIL = "email"
    PHONE = "phone"
    SSN = "ssn"
    CREDIT_CARD = "credit_card"
    NAME = "name"
    OTHER = "other"


class Metrics(BaseModel):
    """Aggregate KPIs reported by the backend."""
    total_requests: int = Field(default=0, ge=0)
    flagged_count: int = Field(default=0, ge=0)
    flag_rate: float = Field(default=0.0, ge=0.0, le=1.0)


class IncidentRecord(BaseModel):
    """One logged exchange the backend recorded or flagged."""
    id: int
    timestamp: Optional[datetime] = None
    provider: str = ""
    flagged: bool = False
    redactions: List[RedactionTag] = Field(default_factory=list)


class ScanResult(BaseModel):
    """Raw vs. redacted output for one submitted prompt."""
    raw_output: str = ""
    redacted_output: str = ""
    flagged: bool = False
    incidents: List[IncidentRecord] = Field(default_factory=list)
    redactions: List[RedactionTag] = Field(default_factory=list)

    @classmethod
    def placeholder(cls, message: str) -> "ScanResult":
        """Renderable stand-in for a scan that failed."""
        return cls(raw_output=PLACEHOLDER, redacted_output=message, flagged=False)


class ChatResult(BaseModel):
    """Reply to a chat message."""
    answer: str = ""
    flagged: bool = False
    redactions: List[RedactionTag] = Field(default_factory=list)

    @classmethod
    def placeholder(cls, message: str) -> "ChatResult":
        """Renderable stand-in for a chat exchange that failed."""
        return cls(answer=message, flagged=False)


class DashboardSnapshot(BaseModel):
    """Metrics and incidents fetched together by one dashboard load."""
    metrics: Metrics = Field(default_factory=Metrics)
    incidents: List[IncidentRecord] = Field(default_factory=list)
    token: int = 0
    loaded_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class WakePhase(str, Enum):
    """Phase of the wake state machine."""
    IDLE = "idle"
    POLLING = "polling"
    SUCCEEDED = "succeeded"
    TIMED_OUT = "timed_out"


class WakeState(BaseModel):
    """Transient wake controller state."""
    phase: WakePhase = WakePhase.IDLE
    deadline: Optional[float] = None
    attempts: int = 0


T = TypeVar("T")


@dataclass
class Outcome(Generic[T]):
    """Result value returned by every public orchestrator operation."""
    value: Optional[T] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: Exception, value: Optional[T] = None) -> "Outcome[T]":
        return cls(value=value, error=error)
