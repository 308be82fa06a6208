"""
Chat Orchestrator - single request/response exchange against POST /chat.

Chat does not refresh the dashboard unless config.chat_refreshes_dashboard
is set (for backends whose incident log records chat traffic).
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
from .models import ChatResult, Outcome
from .normalizer import normalize_chat_result
from .transport import Transport

logger = logging.getLogger(__name__)


class ChatOrchestrator:
    """Sends chat messages through the guardrail backend."""

    path = "/chat"

    def __init__(self, transport: Transport, loader: DashboardLoader, config: ConsoleConfig):
        self.transport = transport
        self.loader = loader
        self.config = config
        self.last_result: Optional[ChatResult] = None

    async def send(self, message: str) -> Outcome[ChatResult]:
        """Send one message; same empty-input and placeholder policy as scans."""
        try:
            validate_input(message, "message")
        except InputValidationError as e:
            return Outcome.failure(e)

        if not self.config.configured:
            error = UnconfiguredError(self.config.unconfigured_warning())
            placeholder = ChatResult.placeholder(describe_failure(error))
            self.last_result = placeholder
            return Outcome.failure(error, value=placeholder)

        with TracingContext("chat"):
            try:
                response = await self.transport.request(
                    self.path,
                    method="POST",
                    body={"user": self.config.chat_user, "message": message},
                    timeout=self.config.chat_timeout,
                )
                result = normalize_chat_result(response.data)
            except GuardrailError as e:
                log_error_with_context(logger, "Chat failed", e, url=self.path)
                placeholder = ChatResult.placeholder(describe_failure(e))
                self.last_result = placeholder
                return Outcome.failure(e, value=placeholder)

            self.last_result = result
            if self.config.chat_refreshes_dashboard:
                self.loader.schedule_load()
            return Outcome.success(result)
