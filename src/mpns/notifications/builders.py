"""Fluent builders for tile, toast and raw notifications.

Every setter appends a header pair. Nothing is replaced: calling a setter twice
sends the header twice, in the order the calls were made.
"""
from __future__ import annotations

from typing import Optional, TypeVar, Union

from mpns.notifications.models import (
    RAW_DELIVERY,
    TILE_DELIVERY,
    TOAST_DELIVERY,
    DeliveryClass,
    RawNotification,
    TileNotification,
    ToastNotification,
    delivery_value,
)
from mpns.notifications.xml import XML_CONTENT_TYPE

B = TypeVar("B", bound="NotificationBuilder")


class NotificationBuilder:
    """Header settings shared by all notification kinds."""

    delivery_values: dict[DeliveryClass, int] = TILE_DELIVERY

    def __init__(self, notification_type: Optional[str] = None) -> None:
        self._headers: list[tuple[str, str]] = []
        if notification_type is not None:
            self.notification_type(notification_type)

    def header(self: B, name: str, value: str) -> B:
        self._headers.append((name, value))
        return self

    def message_id(self: B, message_id: str) -> B:
        """Application-specific identifier echoed back for book-keeping."""
        return self.header("X-MessageId", message_id)

    def notification_class(self: B, delivery: Optional[DeliveryClass]) -> B:
        return self.header("X-NotificationClass", str(delivery_value(self.delivery_values, delivery)))

    def notification_type(self: B, notification_type: str) -> B:
        """Set the target: "token" for tiles, "toast" for toasts.

        The concrete builders already set this on construction.
        """
        return self.header("X-WindowsPhone-Target", notification_type)

    def ttl(self: B, seconds: int) -> B:
        """Expire the notification this many seconds after the service receives it."""
        return self.header("X-WNS-TTL", str(int(seconds)))

    def cache(self: B, enabled: bool) -> B:
        return self.header("X-WNS-Cache-Policy", "cache" if enabled else "no-cache")

    def request_for_status(self: B, enabled: bool) -> B:
        """Ask for device and connection status headers in the response."""
        return self.header("X-WNS-RequestForStatus", "true" if enabled else "false")

    def callback_uri(self: B, callback_uri: str) -> B:
        """Channel URI for the registered callback; required for authenticated senders."""
        return self.header("X-CallbackURI", callback_uri)

    def content_type(self: B, content_type: str) -> B:
        return self.header("Content-Type", content_type)

    @property
    def headers(self) -> tuple[tuple[str, str], ...]:
        return tuple(self._headers)


class TileNotificationBuilder(NotificationBuilder):
    delivery_values = TILE_DELIVERY

    def __init__(self) -> None:
        super().__init__("token")
        self.content_type(XML_CONTENT_TYPE)
        self._fields: dict[str, object] = {}

    def tile_id(self, tile_id: str) -> "TileNotificationBuilder":
        """Navigation URI of a secondary tile; the primary tile has no id."""
        self._fields["tile_id"] = tile_id
        return self

    def background_image(self, uri: str) -> "TileNotificationBuilder":
        self._fields["background_image"] = uri
        return self

    def count(self, count: int) -> "TileNotificationBuilder":
        self._fields["count"] = count
        self._fields["clear_count"] = False
        return self

    def title(self, title: str) -> "TileNotificationBuilder":
        self._fields["title"] = title
        return self

    def back_background_image(self, uri: str) -> "TileNotificationBuilder":
        self._fields["back_background_image"] = uri
        self._fields["clear_back_background_image"] = False
        return self

    def back_title(self, title: str) -> "TileNotificationBuilder":
        self._fields["back_title"] = title
        self._fields["clear_back_title"] = False
        return self

    def back_content(self, content: str) -> "TileNotificationBuilder":
        self._fields["back_content"] = content
        self._fields["clear_back_content"] = False
        return self

    def clear_count(self) -> "TileNotificationBuilder":
        self._fields["clear_count"] = True
        return self

    def clear_back_background_image(self) -> "TileNotificationBuilder":
        self._fields["clear_back_background_image"] = True
        return self

    def clear_back_title(self) -> "TileNotificationBuilder":
        self._fields["clear_back_title"] = True
        return self

    def clear_back_content(self) -> "TileNotificationBuilder":
        self._fields["clear_back_content"] = True
        return self

    def build(self) -> TileNotification:
        return TileNotification(headers=self.headers, **self._fields)


class ToastNotificationBuilder(NotificationBuilder):
    delivery_values = TOAST_DELIVERY

    def __init__(self) -> None:
        super().__init__("toast")
        self.content_type(XML_CONTENT_TYPE)
        self._title: Optional[str] = None
        self._subtitle: Optional[str] = None
        self._parameter: Optional[str] = None

    def title(self, title: str) -> "ToastNotificationBuilder":
        self._title = title
        return self

    def subtitle(self, subtitle: str) -> "ToastNotificationBuilder":
        self._subtitle = subtitle
        return self

    def parameter(self, parameter: str) -> "ToastNotificationBuilder":
        """Page to open when the toast is tapped, e.g. /Page.xaml?id=1."""
        self._parameter = parameter
        return self

    def build(self) -> ToastNotification:
        return ToastNotification(
            headers=self.headers,
            title=self._title,
            subtitle=self._subtitle,
            parameter=self._parameter,
        )


class RawNotificationBuilder(NotificationBuilder):
    delivery_values = RAW_DELIVERY

    def __init__(self) -> None:
        super().__init__()
        self._body = b""

    def body(self, body: Union[bytes, str]) -> "RawNotificationBuilder":
        self._body = body.encode("utf-8") if isinstance(body, str) else body
        return self

    def build(self) -> RawNotification:
        return RawNotification(headers=self.headers, body=self._body)
