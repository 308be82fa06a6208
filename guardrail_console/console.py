"""
GuardrailConsole - wires the components around one shared Transport.
"""

import logging
from typing import Optional

import httpx

from .chat import ChatOrchestrator
from .config import ConsoleConfig
from .dashboard import DashboardLoader
from .scan import ScanOrchestrator
from .transport import Transport
from .wake import Clock, Sleep, WakeController

logger = logging.getLogger(__name__)


class GuardrailConsole:
    """
    Operator console for a guardrail backend.

    Provides:
    - dashboard: metrics + incident snapshots
    - scanner: prompt scans (refreshes the dashboard on success)
    - chat: quick chat exchange
    - waker: cold-start wake polling
    """

    def __init__(
        self,
        config: ConsoleConfig,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Optional[Clock] = None,
        sleep: Optional[Sleep] = None,
    ):
        self.config = config
        self.transport = Transport(config, http_transport=http_transport)
        self.dashboard = DashboardLoader(self.transport, config)
        self.scanner = ScanOrchestrator(self.transport, self.dashboard, config)
        self.chat = ChatOrchestrator(self.transport, self.dashboard, config)

        wake_kwargs = {}
        if clock is not None:
            wake_kwargs["clock"] = clock
        if sleep is not None:
            wake_kwargs["sleep"] = sleep
        self.waker = WakeController(self.transport, self.dashboard, config, **wake_kwargs)

    @property
    def configured(self) -> bool:
        return self.config.configured

    @property
    def warning(self) -> Optional[str]:
        """Configuration warning to show the operator, if any."""
        return self.config.unconfigured_warning()

    async def initialize(self) -> None:
        logger.info("Guardrail console initializing...")
        await self.transport.initialize()
        if not self.configured:
            logger.warning(self.warning)
        logger.info("Guardrail console initialized")

    async def shutdown(self) -> None:
        logger.info("Guardrail console shutting down...")
        await self.dashboard.wait_pending()
        await self.transport.shutdown()

    async def __aenter__(self) -> "GuardrailConsole":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.shutdown()
