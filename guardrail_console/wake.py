"""
Wake Controller - bounded health-check polling for a cold backend.

    IDLE -> POLLING -> SUCCEEDED | TIMED_OUT -> IDLE

Probe failures are expected while the backend cold-starts and are only
logged at debug level. The deadline is checked between probes; it does not
cancel a probe already in flight (the probe's own timeout bounds that).
Whatever the outcome, one dashboard refresh follows so a now-warm backend
shows up immediately. The clock and sleep are injectable for tests.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, List

from .config import ConsoleConfig
from .dashboard import DashboardLoader
from .errors import GuardrailError
from .logs import TracingContext
from .models import WakePhase, WakeState
from .transport import Transport

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]
PhaseListener = Callable[[WakeState], None]


class WakeController:
    """Polls GET / until the backend answers 2xx or the deadline passes."""

    def __init__(
        self,
        transport: Transport,
        loader: DashboardLoader,
        config: ConsoleConfig,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ):
        self.transport = transport
        self.loader = loader
        self.config = config
        self._clock = clock
        self._sleep = sleep
        self._state = WakeState()
        self._listeners: List[PhaseListener] = []

    @property
    def state(self) -> WakeState:
        return self._state.model_copy()

    @property
    def polling(self) -> bool:
        return self._state.phase is WakePhase.POLLING

    def on_phase_change(self, callback: PhaseListener) -> None:
        self._listeners.append(callback)

    def _transition(self, phase: WakePhase, **changes) -> None:
        self._state = self._state.model_copy(update={"phase": phase, **changes})
        logger.debug(f"Wake phase -> {phase.value} (attempts={self._state.attempts})")
        for callback in list(self._listeners):
            try:
                callback(self.state)
            except Exception as e:
                logger.error(f"Wake listener error: {e}")

    async def start(self) -> WakeState:
        """
        Wake the backend.

        Returns the terminal state (SUCCEEDED or TIMED_OUT) of this run. If a
        wake is already polling, returns the current state without starting
        another one. The controller is back in IDLE when this returns.
        """
        if self.polling:
            logger.debug("Wake already in progress")
            return self.state

        if not self.config.configured:
            logger.warning(self.config.unconfigured_warning())
            return self.state

        deadline = self._clock() + self.config.wake_deadline
        self._transition(WakePhase.POLLING, deadline=deadline, attempts=0)

        with TracingContext("wake"):
            logger.info(f"Waking backend (deadline {self.config.wake_deadline:g}s)")
            try:
                phase = await self._poll(deadline)
                self._transition(phase)
                terminal = self.state

                if phase is WakePhase.SUCCEEDED:
                    logger.info(f"Backend awake after {terminal.attempts} probe(s)")
                else:
                    logger.warning(
                        f"Backend did not wake within {self.config.wake_deadline:g}s "
                        f"({terminal.attempts} probe(s))"
                    )
            finally:
                # The refresh and the return to IDLE happen even if polling blew up.
                try:
                    await self.loader.load()
                finally:
                    self._transition(WakePhase.IDLE, deadline=None)

        return terminal

    async def _poll(self, deadline: float) -> WakePhase:
        while self._clock() < deadline:
            self._state = self._state.model_copy(update={"attempts": self._state.attempts + 1})
            try:
                await self.transport.probe()
                return WakePhase.SUCCEEDED
            except GuardrailError as e:
                logger.debug(f"Wake probe {self._state.attempts} failed: {e}")

            if self._clock() >= deadline:
                break
            await self._sleep(self.config.wake_interval)

        return WakePhase.TIMED_OUT
