"""
Presentation helpers.

Pure functions turning normalized models into the strings the operator
sees. KPI values fall back to zero when no snapshot exists, and show the
placeholder only while a load is in flight.
"""

from typing import Iterable, List, Optional, Sequence, Tuple

from .models import (
    PLACEHOLDER,
    ChatResult,
    DashboardSnapshot,
    IncidentRecord,
    Metrics,
    RedactionTag,
    ScanResult,
)

LOADING_TEXT = "Loading…"
NO_INCIDENTS_TEXT = "No incidents yet."
INCIDENT_COLUMNS = ("ID", "Time", "Provider", "Flagged", "Redactions")


def format_rate(rate: Optional[float]) -> str:
    """0.125 -> '12.5%'."""
    return f"{(rate or 0) * 100:.1f}%"


def format_redactions(tags: Iterable[RedactionTag], empty: str = PLACEHOLDER) -> str:
    """Comma-joined tag names, or `empty` when there are none."""
    names = [tag.value if isinstance(tag, RedactionTag) else str(tag) for tag in tags]
    return ", ".join(names) if names else empty


def kpi_cards(snapshot: Optional[DashboardSnapshot], loading: bool = False) -> List[Tuple[str, str]]:
    """(label, value) pairs for the three KPI cards."""
    if loading:
        return [
            ("Total Requests", PLACEHOLDER),
            ("Flagged Outputs", PLACEHOLDER),
            ("Flag Rate", PLACEHOLDER),
        ]
    metrics = snapshot.metrics if snapshot else Metrics()
    return [
        ("Total Requests", str(metrics.total_requests)),
        ("Flagged Outputs", str(metrics.flagged_count)),
        ("Flag Rate", format_rate(metrics.flag_rate)),
    ]


def incident_row(incident: IncidentRecord) -> Tuple[str, ...]:
    timestamp = (
        incident.timestamp.astimezone().strftime("%Y-%m-%d %H:%M:%S")
        if incident.timestamp
        else PLACEHOLDER
    )
    return (
        str(incident.id),
        timestamp,
        incident.provider or PLACEHOLDER,
        "Yes" if incident.flagged else "No",
        format_redactions(incident.redactions),
    )


def incident_rows(incidents: Sequence[IncidentRecord]) -> List[Tuple[str, ...]]:
    return [incident_row(incident) for incident in incidents]


def empty_incidents_text(loading: bool) -> str:
    return LOADING_TEXT if loading else NO_INCIDENTS_TEXT


def scan_panels(result: ScanResult) -> List[Tuple[str, str]]:
    """(title, body) pairs for the raw and redacted output panels."""
    redacted_title = "Redacted Output"
    if result.flagged:
        redacted_title += " • Flagged"
    return [
        ("Raw Output", result.raw_output),
        (redacted_title, result.redacted_output),
    ]


def chat_footer(result: ChatResult) -> str:
    status = "Flagged" if result.flagged else "Not flagged"
    return f"{status} • {format_redactions(result.redactions, empty='no redactions')}"


def format_table(rows: Sequence[Sequence[str]], headers: Sequence[str]) -> str:
    """Plain-text fixed-width table."""
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))
    lines = ["  ".join(h.ljust(widths[i]) for i, h in enumerate(headers))]
    lines.append("  ".join("-" * w for w in widths))
    for row in rows:
        lines.append("  ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)))
    return "\n".join(lines)
