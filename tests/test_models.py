"""
Model Tests
"""

import pytest
from pydantic import ValidationError

from guardrail_console.errors import NetworkError
from guardrail_console.models import (
    PLACEHOLDER,
    ChatResult,
    DashboardSnapshot,
    Metrics,
    Outcome,
    RedactionTag,
    ScanResult,
    WakePhase,
    WakeState,
)


class TestPlaceholders:
    """Tests for failure placeholders."""

    def test_scan_placeholder(self):
        """Test a scan placeholder is unflagged with the message in the redacted panel."""
        result = ScanResult.placeholder("Request timed out.")
        assert result.raw_output == PLACEHOLDER
        assert result.redacted_output == "Request timed out."
        assert result.flagged is False
        assert result.redactions == []
        assert result.incidents == []

    def test_chat_placeholder(self):
        """Test a chat placeholder carries the message as its answer."""
        result = ChatResult.placeholder("Request failed.")
        assert result.answer == "Request failed."
        assert result.flagged is False
        assert result.redactions == []


class TestModels:
    """Tests for model defaults and constraints."""

    def test_metrics_reject_negative_counts(self):
        """Test counts cannot be negative."""
        with pytest.raises(ValidationError):
            Metrics(total_requests=-1)

    def test_metrics_reject_rate_above_one(self):
        """Test the rate is a fraction."""
        with pytest.raises(ValidationError):
            Metrics(flag_rate=1.5)

    def test_snapshot_defaults(self):
        """Test an empty snapshot has zero metrics and a UTC load time."""
        snapshot = DashboardSnapshot()
        assert snapshot.metrics.total_requests == 0
        assert snapshot.incidents == []
        assert snapshot.loaded_at.tzinfo is not None

    def test_tag_values(self):
        """Test tags serialize as plain strings."""
        assert RedactionTag("credit_card") is RedactionTag.CREDIT_CARD
        assert ScanResult(redactions=[RedactionTag.EMAIL]).model_dump(mode="json")["redactions"] == ["email"]

    def test_wake_state_defaults(self):
        """Test the wake controller starts idle."""
        state = WakeState()
        assert state.phase == WakePhase.IDLE
        assert state.deadline is None
        assert state.attempts == 0


class TestOutcome:
    """Tests for Outcome."""

    def test_success(self):
        """Test a successful outcome."""
        outcome = Outcome.success(3)
        assert outcome.ok
        assert outcome.value == 3
        assert outcome.error is None

    def test_failure_keeps_value(self):
        """Test a failure can still carry a renderable value."""
        error = NetworkError("refused", url="/scan")
        placeholder = ScanResult.placeholder("Request failed.")
        outcome = Outcome.failure(error, value=placeholder)
        assert not outcome.ok
        assert outcome.error is error
        assert outcome.value is placeholder

    def test_failure_without_value(self):
        """Test a failure defaults to no value."""
        assert Outcome.failure(ValueError("x")).value is None
