# src/offline_tasks/probes/http_probe.py

"""HTTP reachability checks, blocking and asyncio flavours."""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_PROBE_URL = "https://www.google.com/generate_204"
DEFAULT_TIMEOUT_SECONDS = 5.0


def _reachable(url: str, response: httpx.Response) -> bool:
    ok = response.status_code < 500
    logger.debug("Connection test %s status=%s connected=%s", url, response.status_code, ok)
    return ok


class HttpConnectionTest:
    """
    Blocking connection test: GET `url`, connected if the server answers below 500.

    Returns a bool, so the queue never waits for the callback. The request blocks
    the calling thread; inside an asyncio application use AsyncHttpConnectionTest.
    """

    def __init__(
        self,
        url: str = DEFAULT_PROBE_URL,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        client: httpx.Client | None = None,
    ) -> None:
        self.url = url
        self._client = client or httpx.Client(
            timeout=httpx.Timeout(timeout_seconds),
            follow_redirects=True,
        )

    def __call__(self, callback: Any = None) -> bool:
        try:
            response = self._client.get(self.url)
        except httpx.HTTPError as exc:
            logger.debug("Connection test %s failed: %s", self.url, exc)
            return False
        return _reachable(self.url, response)

    def close(self) -> None:
        self._client.close()


class AsyncHttpConnectionTest:
    """
    Same check on httpx.AsyncClient.

    Calling it returns a coroutine, which the queue schedules on the running loop.
    Without a running loop the check counts as offline.
    """

    def __init__(
        self,
        url: str = DEFAULT_PROBE_URL,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.url = url
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds),
            follow_redirects=True,
        )

    async def __call__(self, callback: Any = None) -> bool:
        try:
            response = await self._client.get(self.url)
        except httpx.HTTPError as exc:
            logger.debug("Connection test %s failed: %s", self.url, exc)
            return False
        return _reachable(self.url, response)

    async def aclose(self) -> None:
        await self._client.aclose()
