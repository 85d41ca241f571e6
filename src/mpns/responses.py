"""Logical responses of the push notification service.

The service reports the fate of a notification through the HTTP status code
and three headers:

    X-NotificationStatus:      Received | QueueFull | Suppressed | Dropped
    X-DeviceConnectionStatus:  Connected | TempDisconnected | Disconnected | Inactive
    X-SubscriptionStatus:      Active | Expired

Each known combination is an entry of CATALOG. A field left as None in an
entry matches any header value, including a missing header.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

import httpx
from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

NOTIFICATION_STATUS_HEADER = "X-NotificationStatus"
DEVICE_CONNECTION_STATUS_HEADER = "X-DeviceConnectionStatus"
SUBSCRIPTION_STATUS_HEADER = "X-SubscriptionStatus"

UnmatchedObserver = Callable[[int, Optional[str], Optional[str], Optional[str]], None]


class Outcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    status_code: int
    notification_status: Optional[str] = None
    device_connection_status: Optional[str] = None
    subscription_status: Optional[str] = None
    success: bool
    should_retry: bool

    def matches(
        self,
        status_code: int,
        notification_status: Optional[str],
        device_connection_status: Optional[str],
        subscription_status: Optional[str],
    ) -> bool:
        if self.status_code != status_code:
            return False
        expected = (
            (self.notification_status, notification_status),
            (self.device_connection_status, device_connection_status),
            (self.subscription_status, subscription_status),
        )
        return all(want is None or want == got for want, got in expected)

    def __str__(self) -> str:
        return self.name


def _outcome(
    name: str,
    status_code: int,
    notification: Optional[str],
    device: Optional[str],
    subscription: Optional[str],
    success: bool,
    retry: bool,
) -> Outcome:
    return Outcome(
        name=name,
        status_code=status_code,
        notification_status=notification,
        device_connection_status=device,
        subscription_status=subscription,
        success=success,
        should_retry=retry,
    )


# Accepted and delivered to a connected device
RECEIVED = _outcome("RECEIVED", 200, "Received", "Connected", "Active", True, False)
# Accepted, device has been offline for more than a day
DISCONNECTED = _outcome("DISCONNECTED", 200, "Received", "Disconnected", "Active", True, False)
# Accepted and queued, device temporarily lost connectivity
QUEUED = _outcome("QUEUED", 200, "Received", "TempDisconnected", "Active", True, False)
# Per-device queue overflow; resend later with backoff
QUEUE_FULL = _outcome("QUEUE_FULL", 200, "QueueFull", None, "Active", False, True)
# Channel is configured to suppress this notification class
SUPPRESSED = _outcome("SUPPRESSED", 200, "Suppressed", None, "Active", False, False)
# Dropped on the device (background execution disabled, battery saver)
DROPPED_BY_CLIENT = _outcome("DROPPED_BY_CLIENT", 200, "Dropped", "Connected", "Active", False, False)
# Malformed XML payload or notification URI
BAD_REQUEST = _outcome("BAD_REQUEST", 400, None, None, None, False, False)
UNAUTHORIZED = _outcome("UNAUTHORIZED", 401, None, None, None, False, False)
# Subscription no longer exists; stop sending to it
EXPIRED = _outcome("EXPIRED", 404, None, None, "Expired", False, False)
# Only POST is accepted
METHOD_NOT_ALLOWED = _outcome("METHOD_NOT_ALLOWED", 405, None, None, None, False, False)
# Daily throttling limit of an unauthenticated sender; retry hourly
OVER_LIMIT = _outcome("OVER_LIMIT", 406, "Dropped", None, "Active", False, True)
# Device inactive; at most one retry per hour or the sender gets blocked
INACTIVATE_STATE = _outcome("INACTIVATE_STATE", 412, "Dropped", "Inactive", None, False, True)
SERVICE_UNAVAILABLE = _outcome("SERVICE_UNAVAILABLE", 503, None, None, None, False, True)
# Fallback for responses outside the matrix; never matched itself
UNDEFINED = _outcome("UNDEFINED", 0, None, None, None, False, True)

CATALOG: tuple[Outcome, ...] = (
    RECEIVED,
    DISCONNECTED,
    QUEUED,
    QUEUE_FULL,
    SUPPRESSED,
    DROPPED_BY_CLIENT,
    BAD_REQUEST,
    UNAUTHORIZED,
    EXPIRED,
    METHOD_NOT_ALLOWED,
    OVER_LIMIT,
    INACTIVATE_STATE,
    SERVICE_UNAVAILABLE,
    UNDEFINED,
)

_BY_NAME = {outcome.name: outcome for outcome in CATALOG}


def outcome_by_name(name: str) -> Outcome:
    return _BY_NAME[name]


def log_unmatched(
    status_code: int,
    notification_status: Optional[str],
    device_connection_status: Optional[str],
    subscription_status: Optional[str],
) -> None:
    logger.error(
        "Unmatched response - Notification status: [%s], Connection status: [%s], "
        "Subscription status: [%s], Status code: [%s]",
        notification_status,
        device_connection_status,
        subscription_status,
        status_code,
    )


def classify(
    status_code: int,
    notification_status: Optional[str],
    device_connection_status: Optional[str],
    subscription_status: Optional[str],
    on_unmatched: Optional[UnmatchedObserver] = None,
) -> Outcome:
    """Return the first catalog entry matching the response, or UNDEFINED.

    Header values are compared exactly and case-sensitively. Never raises.
    """
    for outcome in CATALOG:
        if outcome is UNDEFINED:
            continue
        if outcome.matches(status_code, notification_status, device_connection_status, subscription_status):
            return outcome

    observer = on_unmatched if on_unmatched is not None else log_unmatched
    observer(status_code, notification_status, device_connection_status, subscription_status)
    return UNDEFINED


def _first_header(response: httpx.Response, name: str) -> Optional[str]:
    values = response.headers.get_list(name)
    return values[0] if values else None


def classify_response(
    response: httpx.Response,
    on_unmatched: Optional[UnmatchedObserver] = None,
) -> Outcome:
    return classify(
        response.status_code,
        _first_header(response, NOTIFICATION_STATUS_HEADER),
        _first_header(response, DEVICE_CONNECTION_STATUS_HEADER),
        _first_header(response, SUBSCRIPTION_STATUS_HEADER),
        on_unmatched=on_unmatched,
    )
