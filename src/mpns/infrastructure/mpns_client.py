from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Optional

import httpx

from mpns.config import Settings
from mpns.infrastructure.host_limiter import HostLimiter

logger = logging.getLogger(__name__)


class MpnsError(Exception):
    """Base exception for push notification delivery errors."""

    pass


class NetworkIOError(MpnsError):
    """The request never produced an HTTP response (connect, timeout, protocol)."""

    pass


class MpnsClient:
    """Pooled HTTP client for posting notifications to subscription URIs.

    Safe to share between threads. close() releases the pooled connections.
    """

    def __init__(
        self,
        max_connections: int = 20,
        max_connections_per_host: Optional[int] = None,
        timeout_seconds: float = 30.0,
        proxy_url: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        limits = httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_connections,
        )
        if transport is not None:
            self._client = httpx.Client(limits=limits, timeout=timeout_seconds, transport=transport)
        else:
            self._client = httpx.Client(limits=limits, timeout=timeout_seconds, proxy=proxy_url)
        self._limiter = HostLimiter(max_connections_per_host or max_connections)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "MpnsClient":
        return cls(
            max_connections=settings.max_connections,
            max_connections_per_host=settings.max_connections_per_host,
            timeout_seconds=settings.timeout_seconds,
            proxy_url=settings.proxy_url,
            transport=transport,
        )

    def post(
        self,
        url: str,
        headers: Sequence[tuple[str, str]],
        content: bytes,
    ) -> httpx.Response:
        """POST the payload; every header pair is sent, duplicates included.

        Raises NetworkIOError when no response was received. HTTP error
        statuses are returned, not raised.
        """
        host = httpx.URL(url).host
        try:
            with self._limiter.slot(host):
                resp = self._client.post(url, headers=list(headers), content=content)
        except httpx.TransportError as exc:
            raise NetworkIOError(f"Failed to deliver notification to {host}: {exc}") from exc
        logger.debug("POST %s -> %d", url, resp.status_code)
        return resp

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "MpnsClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
