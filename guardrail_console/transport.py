"""
Transport - httpx wrapper for the guardrail backend.

One call per invocation, never retried here. Every call is bounded by a
total wall-clock timeout; failures surface as RequestTimeoutError,
NetworkError or HttpError.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from .config import ConsoleConfig
from .errors import HttpError, NetworkError, RequestTimeoutError, UnconfiguredError

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


@dataclass
class RawResponse:
    """A 2xx backend response before normalization."""
    status_code: int
    url: str
    data: Any = None
    text: str = ""
    elapsed_ms: float = 0.0


class Transport:
    """
    Async HTTP transport bound to the configured backend base URL.
    """

    def __init__(
        self,
        config: ConsoleConfig,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self._http_transport = http_transport
        self._client: Optional[httpx.AsyncClient] = None

    async def initialize(self) -> None:
        """Create the HTTP client (no network traffic)."""
        if self._client is not None or not self.config.configured:
            return
        self._client = httpx.AsyncClient(
            base_url=self.config.api_url,
            timeout=self.config.request_timeout,
            transport=self._http_transport,
        )
        logger.debug(f"Transport ready: {self.config.api_url}")

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.debug("Transport closed")

    async def __aenter__(self) -> "Transport":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.shutdown()

    async def _get_client(self) -> httpx.AsyncClient:
        if not self.config.configured:
            raise UnconfiguredError(self.config.unconfigured_warning())
        if self._client is None:
            await self.initialize()
        return self._client

    async def request(
        self,
        path: str,
        method: str = "GET",
        body: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> RawResponse:
        """
        Issue exactly one HTTP call.

        Args:
            path: Path relative to the backend base URL (e.g. "/metrics")
            method: HTTP method
            body: JSON body (sent with Content-Type: application/json)
            params: Query parameters
            timeout: Total seconds allowed; defaults to config.request_timeout

        Raises:
            UnconfiguredError, RequestTimeoutError, NetworkError, HttpError
        """
        client = await self._get_client()
        timeout = timeout if timeout is not None else self.config.request_timeout
        method = method.upper()

        kwargs: Dict[str, Any] = {"params": params, "timeout": timeout}
        if body is not None or method == "POST":
            kwargs["json"] = body if body is not None else {}
            kwargs["headers"] = JSON_HEADERS

        started = time.perf_counter()
        try:
            response = await asyncio.wait_for(
                client.request(method, path, **kwargs),
                timeout=timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise RequestTimeoutError(
                f"{method} {path} timed out after {timeout:g}s",
                url=path,
                timeout=timeout,
            ) from e
        except httpx.RequestError as e:
            raise NetworkError(f"{method} {path} failed: {e}", url=path) from e

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug(f"{method} {path} -> {response.status_code} ({elapsed_ms:.0f}ms)")

        if not response.is_success:
            raise HttpError(response.status_code, response.text, url=path)

        data: Any = None
        if response.content:
            try:
                data = response.json()
            except ValueError:
                data = None

        return RawResponse(
            status_code=response.status_code,
            url=str(response.url),
            data=data,
            text=response.text,
            elapsed_ms=elapsed_ms,
        )

    async def probe(self) -> RawResponse:
        """Lightweight health probe against the service root."""
        return await self.request("/", timeout=self.config.probe_timeout)
