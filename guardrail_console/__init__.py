"""
Guardrail Console

Client-side orchestration for a moderation/guardrail backend: prompt scans,
raw vs. redacted output, KPI and incident dashboards, quick chat, and
waking a cold backend.
"""

__version__ = "0.1.0"

from .chat import ChatOrchestrator
from .config import ConfigState, ConsoleConfig, load_config
from .console import GuardrailConsole
from .dashboard import DashboardLoader
from .errors import (
    GuardrailError,
    HttpError,
    InputValidationError,
    NetworkError,
    NormalizationError,
    RequestTimeoutError,
    TransportError,
    UnconfiguredError,
)
from .models import (
    ChatResult,
    DashboardSnapshot,
    IncidentRecord,
    Metrics,
    Outcome,
    RedactionTag,
    ScanResult,
    WakePhase,
    WakeState,
)
from .scan import ScanOrchestrator
from .transport import RawResponse, Transport
from .wake import WakeController

__all__ = [
    "__version__",
    "GuardrailConsole",
    # Components
    "Transport",
    "RawResponse",
    "DashboardLoader",
    "ScanOrchestrator",
    "ChatOrchestrator",
    "WakeController",
    # Configuration
    "ConsoleConfig",
    "ConfigState",
    "load_config",
    # Models
    "Metrics",
    "RedactionTag",
    "IncidentRecord",
    "ScanResult",
    "ChatResult",
    "DashboardSnapshot",
    "WakePhase",
    "WakeState",
    "Outcome",
    # Errors
    "GuardrailError",
    "TransportError",
    "RequestTimeoutError",
    "NetworkError",
    "HttpError",
    "NormalizationError",
    "InputValidationError",
    "UnconfiguredError",
]
