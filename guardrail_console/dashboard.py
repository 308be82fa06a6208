"""
Dashboard Loader - metrics + incident history as one consistent snapshot.

Both reads run concurrently and are published together or not at all. A
failed load keeps the previous snapshot on screen and is logged for the
operator. Every load gets a monotonically increasing token; a completed
load is applied only if its token is newer than the snapshot already
applied, so a slow early refresh can never overwrite a later one.
"""

import asyncio
import logging
from typing import Callable, List, Optional, Set

from .config import ConsoleConfig
from .errors import GuardrailError, HttpError, UnconfiguredError
from .logs import TracingContext, log_error_with_context
from .models import DashboardSnapshot, IncidentRecord, Metrics, Outcome
from .normalizer import (
    FALLBACK_STATUSES,
    INCIDENT_ENDPOINTS,
    normalize_incidents,
    normalize_metrics,
)
from .transport import Transport

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[DashboardSnapshot], object]


class DashboardLoader:
    """
    Loads and publishes dashboard snapshots.

    Provides:
    - load(): concurrent metrics + incidents fetch, last-issued-wins apply
    - schedule_load(): fire-and-forget load used after scans and chats
    - subscribe(): snapshot listeners for the presentation layer
    """

    def __init__(self, transport: Transport, config: ConsoleConfig):
        self.transport = transport
        self.config = config
        self._snapshot: Optional[DashboardSnapshot] = None
        self._issued = 0
        self._applied = 0
        self._in_flight = 0
        self._last_error: Optional[Exception] = None
        self._listeners: List[SnapshotListener] = []
        self._pending: Set[asyncio.Task] = set()

    @property
    def snapshot(self) -> Optional[DashboardSnapshot]:
        """Last applied snapshot, or None before the first successful load."""
        return self._snapshot

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    @property
    def last_error(self) -> Optional[Exception]:
        """Error of the most recent failed load, cleared by the next applied one."""
        return self._last_error

    def subscribe(self, callback: SnapshotListener) -> None:
        """Register a callback invoked with each newly applied snapshot."""
        self._listeners.append(callback)

    def unsubscribe(self, callback: SnapshotListener) -> None:
        try:
            self._listeners.remove(callback)
        except ValueError:
            pass

    async def _fetch_metrics(self) -> Metrics:
        response = await self.transport.request("/metrics")
        return normalize_metrics(response.data)

    async def _fetch_incidents(self) -> List[IncidentRecord]:
        limit = self.config.incident_limit
        last = len(INCIDENT_ENDPOINTS) - 1
        for index, endpoint in enumerate(INCIDENT_ENDPOINTS):
            try:
                response = await self.transport.request(endpoint, params={"limit": limit})
            except HttpError as e:
                if e.status_code in FALLBACK_STATUSES and index < last:
                    logger.debug(f"{endpoint} returned {e.status_code}; trying next endpoint")
                    continue
                raise
            return normalize_incidents(response.data, limit=limit)
        return []

    async def load(self) -> Outcome[DashboardSnapshot]:
        """
        Fetch metrics and incidents concurrently and apply them as one snapshot.

        Never raises GuardrailError. On failure the outcome carries the error
        and the previously applied snapshot (possibly None).
        """
        if not self.config.configured:
            error = UnconfiguredError(self.config.unconfigured_warning())
            self._last_error = error
            return Outcome.failure(error, value=self._snapshot)

        self._issued += 1
        token = self._issued
        self._in_flight += 1

        with TracingContext("load"):
            try:
                metrics, incidents = await asyncio.gather(
                    self._fetch_metrics(),
                    self._fetch_incidents(),
                    return_exceptions=True,
                )
            finally:
                self._in_flight -= 1

            for result in (metrics, incidents):
                if isinstance(result, BaseException) and not isinstance(result, GuardrailError):
                    raise result

            error = next(
                (r for r in (metrics, incidents) if isinstance(r, GuardrailError)),
                None,
            )
            if error is not None:
                log_error_with_context(
                    logger,
                    "Dashboard load failed; keeping previous snapshot",
                    error,
                    level=logging.WARNING,
                    token=token,
                    url=getattr(error, "url", None),
                )
                if token > self._applied:
                    self._last_error = error
                return Outcome.failure(error, value=self._snapshot)

            if token <= self._applied:
                logger.debug(f"Discarding stale dashboard load {token} (applied {self._applied})")
                return Outcome.success(self._snapshot)

            snapshot = DashboardSnapshot(metrics=metrics, incidents=incidents, token=token)
            self._snapshot = snapshot
            self._applied = token
            self._last_error = None
            logger.info(
                f"Dashboard snapshot {token}: {metrics.total_requests} requests, "
                f"{metrics.flagged_count} flagged, {len(incidents)} incidents"
            )
            await self._notify(snapshot)
            return Outcome.success(snapshot)

    async def _notify(self, snapshot: DashboardSnapshot) -> None:
        for callback in list(self._listeners):
            try:
                result = callback(snapshot)
                if hasattr(result, "__await__"):
                    await result
            except Exception as e:
                logger.error(f"Snapshot listener error: {e}")

    def schedule_load(self) -> asyncio.Task:
        """Start a load in the background; the task is tracked until it finishes."""
        task = asyncio.ensure_future(self.load())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def wait_pending(self) -> None:
        """Wait for every background load started by schedule_load()."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
