from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Optional, Union

import httpx

from mpns.config import Settings, settings as default_settings
from mpns.infrastructure.mpns_client import MpnsClient, NetworkIOError
from mpns.notifications.models import MpnsNotification
from mpns.responses import Outcome, UnmatchedObserver, classify_response
from mpns.services.delegate import MpnsDelegate, fire_delegate

logger = logging.getLogger(__name__)


class MpnsService:
    """Posts notifications and reports each outcome to the delegate.

    Vendor-side failures go to delegate.message_failed and are returned;
    NetworkIOError is raised when no response was received at all.
    """

    def __init__(
        self,
        client: MpnsClient,
        delegate: Optional[MpnsDelegate] = None,
        on_unmatched: Optional[UnmatchedObserver] = None,
    ) -> None:
        self._client = client
        self._delegate = delegate
        self._on_unmatched = on_unmatched

    def send(self, subscription_uri: str, notification: MpnsNotification) -> Outcome:
        return self._push(
            subscription_uri,
            notification.headers,
            notification.request_body(),
            message=notification,
        )

    def send_payload(
        self,
        subscription_uri: str,
        payload: Union[bytes, str],
        headers: Sequence[tuple[str, str]] = (),
    ) -> Outcome:
        """Send a pre-built body; the delegate receives the payload as the message."""
        content = payload.encode("utf-8") if isinstance(payload, str) else payload
        return self._push(subscription_uri, headers, content, message=payload)

    def _push(
        self,
        subscription_uri: str,
        headers: Sequence[tuple[str, str]],
        content: bytes,
        message: Any,
    ) -> Outcome:
        resp = self._client.post(subscription_uri, headers, content)
        outcome = classify_response(resp, on_unmatched=self._on_unmatched)
        logger.debug("Notification to %s classified as %s", subscription_uri, outcome)
        fire_delegate(message, outcome, self._delegate)
        return outcome

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "MpnsService":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class QueuedMpnsService(MpnsService):
    """Delivers from a thread pool; send() returns a Future of the outcome."""

    def __init__(
        self,
        client: MpnsClient,
        delegate: Optional[MpnsDelegate] = None,
        on_unmatched: Optional[UnmatchedObserver] = None,
        max_workers: int = 1,
    ) -> None:
        super().__init__(client, delegate=delegate, on_unmatched=on_unmatched)
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="mpns")

    def send(self, subscription_uri: str, notification: MpnsNotification) -> "Future[Outcome]":
        future = self._executor.submit(super().send, subscription_uri, notification)
        future.add_done_callback(self._log_failure(subscription_uri))
        return future

    def send_payload(
        self,
        subscription_uri: str,
        payload: Union[bytes, str],
        headers: Sequence[tuple[str, str]] = (),
    ) -> "Future[Outcome]":
        future = self._executor.submit(super().send_payload, subscription_uri, payload, headers)
        future.add_done_callback(self._log_failure(subscription_uri))
        return future

    @staticmethod
    def _log_failure(subscription_uri: str):
        def _callback(future: Future) -> None:
            exc = future.exception()
            if isinstance(exc, NetworkIOError):
                logger.error(
                    "Failed to deliver notification to %s", subscription_uri, exc_info=exc
                )
            elif exc is not None:
                logger.error(
                    "Error handling outcome of notification to %s", subscription_uri, exc_info=exc
                )

        return _callback

    def close(self) -> None:
        """Wait for queued notifications, then release the connection pool."""
        self._executor.shutdown(wait=True)
        super().close()


def build_service(
    settings: Optional[Settings] = None,
    delegate: Optional[MpnsDelegate] = None,
    transport: Optional[httpx.BaseTransport] = None,
    on_unmatched: Optional[UnmatchedObserver] = None,
) -> MpnsService:
    """Construct a service from configuration."""
    settings = settings or default_settings
    client = MpnsClient.from_settings(settings, transport=transport)
    if settings.queued:
        return QueuedMpnsService(
            client,
            delegate=delegate,
            on_unmatched=on_unmatched,
            max_workers=settings.max_connections,
        )
    return MpnsService(client, delegate=delegate, on_unmatched=on_unmatched)
