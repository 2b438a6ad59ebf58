"""Targets for the per-type actions offered on a scan result.

These helpers only compute the URI or text a platform handler needs; opening
URLs, dialing and clipboard access stay with the caller.
"""

from typing import Optional, Tuple
from urllib.parse import quote

from .types import ClassifiedPayload, ScanPayloadType

MAPS_URL = "https://maps.google.com/?q={lat},{lon}"

# Unreserved marks left unescaped in an SMS body
URI_COMPONENT_SAFE = "!~*'()"


def action_target(payload: ClassifiedPayload, raw: str) -> Optional[str]:
    """
    Resolve the URI opened by the primary "Open" action.

    Args:
        payload: Classified payload
        raw: Original decoded text

    Returns:
        URI to hand to the platform, or None when the type has no open action
    """
    fields = payload.fields

    if payload.type is ScanPayloadType.URL:
        return fields.get("url") or raw
    if payload.type is ScanPayloadType.EMAIL:
        return raw
    if payload.type is ScanPayloadType.PHONE:
        return f"tel:{fields.get('number', '')}"
    if payload.type is ScanPayloadType.SMS:
        target = f"sms:{fields.get('number', '')}"
        message = fields.get("message")
        if message:
            target += "?body=" + quote(message, safe=URI_COMPONENT_SAFE)
        return target
    if payload.type is ScanPayloadType.GEO:
        return MAPS_URL.format(lat=fields.get("lat", ""), lon=fields.get("lon", ""))
    return None


def copy_value(payload: ClassifiedPayload, raw: str) -> str:
    """Text placed on the clipboard by the primary "Copy" action."""
    if payload.type is ScanPayloadType.WIFI:
        return payload.fields.get("password", "")
    if payload.type is ScanPayloadType.PAYMENT:
        return payload.fields.get("pa", "")
    return raw


def contact_name_parts(payload: ClassifiedPayload) -> Tuple[str, str]:
    """Split a contact's display name into (first name, last name)."""
    name = payload.fields.get("name") or payload.fields.get("fullName") or ""
    first, _, last = name.partition(" ")
    return first, last
