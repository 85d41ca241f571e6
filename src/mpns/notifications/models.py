from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from mpns.notifications.xml import (
    escape_xml,
    if_non_null,
    notification_document,
    to_utf8,
    xml_clear_element,
    xml_element,
)


class DeliveryClass(str, Enum):
    """Batching interval requested for a notification."""

    IMMEDIATELY = "immediately"
    WITHIN_450 = "within_450"
    WITHIN_900 = "within_900"


TILE_DELIVERY = {
    DeliveryClass.IMMEDIATELY: 1,
    DeliveryClass.WITHIN_450: 11,
    DeliveryClass.WITHIN_900: 21,
}
TOAST_DELIVERY = {
    DeliveryClass.IMMEDIATELY: 2,
    DeliveryClass.WITHIN_450: 12,
    DeliveryClass.WITHIN_900: 22,
}
RAW_DELIVERY = {
    DeliveryClass.IMMEDIATELY: 3,
    DeliveryClass.WITHIN_450: 13,
    DeliveryClass.WITHIN_900: 23,
}


def delivery_value(table: dict[DeliveryClass, int], delivery: Optional[DeliveryClass]) -> int:
    """Wire value of X-NotificationClass; no delivery class means IMMEDIATELY."""
    return table[delivery or DeliveryClass.IMMEDIATELY]


class MpnsNotification(BaseModel):
    """A notification ready to be posted: ordered header pairs and a body."""

    model_config = ConfigDict(frozen=True)

    headers: tuple[tuple[str, str], ...] = ()

    def request_body(self) -> bytes:
        raise NotImplementedError


class TileNotification(MpnsNotification):
    tile_id: Optional[str] = None
    background_image: Optional[str] = None
    count: Optional[int] = None
    title: Optional[str] = None
    back_background_image: Optional[str] = None
    back_title: Optional[str] = None
    back_content: Optional[str] = None

    clear_count: bool = False
    clear_back_background_image: bool = False
    clear_back_title: bool = False
    clear_back_content: bool = False

    def _element(self, name: str, content: Optional[str], clear: bool) -> str:
        if clear:
            return xml_clear_element(name)
        return xml_element(name, content)

    def xml(self) -> str:
        count = str(self.count) if self.count is not None else None
        tile_id = if_non_null(self.tile_id, f' Id="{escape_xml(self.tile_id)}"')
        return notification_document(
            f"<wp:Tile{tile_id}>"
            + xml_element("BackgroundImage", self.background_image)
            + self._element("Count", count, self.clear_count)
            + xml_element("Title", self.title)
            + self._element("BackBackgroundImage", self.back_background_image, self.clear_back_background_image)
            + self._element("BackTitle", self.back_title, self.clear_back_title)
            + self._element("BackContent", self.back_content, self.clear_back_content)
            + "</wp:Tile>"
        )

    def request_body(self) -> bytes:
        return to_utf8(self.xml())


class ToastNotification(MpnsNotification):
    title: Optional[str] = None
    subtitle: Optional[str] = None
    parameter: Optional[str] = None

    def xml(self) -> str:
        return notification_document(
            "<wp:Toast>"
            + xml_element("Text1", self.title)
            + xml_element("Text2", self.subtitle)
            + xml_element("Param", self.parameter)
            + "</wp:Toast>"
        )

    def request_body(self) -> bytes:
        return to_utf8(self.xml())


class RawNotification(MpnsNotification):
    body: bytes = b""

    def request_body(self) -> bytes:
        return self.body
