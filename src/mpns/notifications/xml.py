from __future__ import annotations

from typing import Optional

XML_CONTENT_TYPE = "text/xml"

XML_HEADER = '<?xml version="1.0" encoding="utf-8"?>'

_ENTITIES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&apos;",
}


def escape_xml(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return "".join(_ENTITIES.get(ch, ch) for ch in value)


def xml_element(name: str, content: Optional[str]) -> str:
    """Render <wp:name>content</wp:name>, or "" when content is blank."""
    if content is None or not content.strip():
        return ""
    return f"<wp:{name}>{escape_xml(content)}</wp:{name}>"


def xml_clear_element(name: str) -> str:
    """Render an element that asks the device to reset the property."""
    return f'<wp:{name} Action="Clear"></wp:{name}>'


def if_non_null(cond: object, value: str) -> str:
    return value if cond is not None else ""


def notification_document(inner: str) -> str:
    return f'{XML_HEADER}<wp:Notification xmlns:wp="WPNotification">{inner}</wp:Notification>'


def to_utf8(content: str) -> bytes:
    return content.encode("utf-8")
