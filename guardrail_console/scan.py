"""
Scan Orchestrator - submit a prompt, return raw vs. redacted output.

A successful scan schedules a background dashboard refresh so the KPIs
include it; the scan result never waits on that refresh. A failed scan
still yields a renderable placeholder result.
"""

import logging
from typing import Optional

from .config import ConsoleConfig
from .dashboard import DashboardLoader
from .errors import (
    GuardrailError,
    InputValidationError,
    UnconfiguredError,
    describe_failure,
    validate_input,
)
from .logs import TracingContext, log_error_with_context
from .models import Outcome, ScanResult
from .normalizer import normalize_scan_result
from .transport import Transport

logger = logging.getLogger(__name__)


class ScanOrchestrator:
    """Runs guardrail scans against POST /scan."""

    path = "/scan"

    def __init__(self, transport: Transport, loader: DashboardLoader, config: ConsoleConfig):
        self.transport = transport
        self.loader = loader
        self.config = config
        self.last_result: Optional[ScanResult] = None

    def clear(self) -> None:
        self.last_result = None

    async def scan(self, prompt: str) -> Outcome[ScanResult]:
        """
        Scan a prompt.

        Returns:
            Outcome with the ScanResult on success; on failure the error
            plus a placeholder ScanResult. Empty input returns an
            InputValidationError outcome without touching the network.
        """
        try:
            validate_input(prompt, "prompt")
        except InputValidationError as e:
            return Outcome.failure(e)

        if not self.config.configured:
            error = UnconfiguredError(self.config.unconfigured_warning())
            placeholder = ScanResult.placeholder(describe_failure(error))
            self.last_result = placeholder
            return Outcome.failure(error, value=placeholder)

        with TracingContext("scan"):
            try:
                response = await self.transport.request(
                    self.path,
                    method="POST",
                    body={"prompt": prompt},
                    timeout=self.config.scan_timeout,
                )
                result = normalize_scan_result(response.data)
            except GuardrailError as e:
                log_error_with_context(
                    logger,
                    "Scan failed",
                    e,
                    url=self.path,
                    prompt_chars=len(prompt),
                )
                placeholder = ScanResult.placeholder(describe_failure(e))
                self.last_result = placeholder
                return Outcome.failure(e, value=placeholder)

            logger.info(
                f"Scan complete: flagged={result.flagged}, "
                f"redactions={[tag.value for tag in result.redactions]}"
            )
            self.last_result = result
            self.loader.schedule_load()
            return Outcome.success(result)
