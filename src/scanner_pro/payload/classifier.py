"""Classify raw scanned text into a typed, structured payload.

Dispatch is an ordered table of ``(pattern, builder)`` rules checked against
the trimmed payload; the first matching rule wins and plain text is the
fallback. ``classify`` never raises and keeps no state, so it is safe to call
from any thread.
"""

import logging
import math
import re
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Callable, Tuple

from . import parsers
from .types import ClassifiedPayload, ScanPayloadType

logger = logging.getLogger(__name__)

ELLIPSIS = "..."

URL_TITLE_LIMIT = 40
URL_SUBTITLE_LIMIT = 60
TEXT_TITLE_LIMIT = 40
TEXT_SUBTITLE_LIMIT = 80

# Leading decimal number, the way a lenient float parser reads "12.5abc"
_LEADING_FLOAT = re.compile(
    r"^\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))"
)
_FOUR_PLACES = Decimal("0.0001")
_MAX_FLOAT_DIGITS = 400

# Whitespace plus the byte order mark
_EDGE_SPACE = re.compile(r"^[\s\ufeff]+|[\s\ufeff]+$")


def truncate(text: str, limit: int) -> str:
    """
    Shorten text to ``limit`` characters plus an ellipsis.

    Args:
        text: Text to shorten
        limit: Maximum characters kept (the ellipsis is not counted)

    Returns:
        ``text`` unchanged if it fits, else its first ``limit`` characters
        followed by ``"..."``
    """
    if len(text) > limit:
        return text[:limit] + ELLIPSIS
    return text


def format_coordinate(value: str) -> str:
    """Format a coordinate with 4 decimals, or ``NaN`` when it is not numeric."""
    match = _LEADING_FLOAT.match(value)
    number = float(match.group(1).replace("Infinity", "inf")) if match else math.nan

    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"
    if number == 0:
        number = 0.0  # no "-0.0000"
    # Ties round away from zero; enough precision for any finite float
    rounded = Decimal(number).quantize(
        _FOUR_PLACES, rounding=ROUND_HALF_UP, context=Context(prec=_MAX_FLOAT_DIGITS)
    )
    return f"{rounded:f}"


def _build_url(raw: str) -> ClassifiedPayload:
    fields = parsers.parse_url(raw)
    if fields is None:
        logger.debug(f"Malformed URL, keeping raw value: {raw[:URL_TITLE_LIMIT]}")
        return ClassifiedPayload(
            type=ScanPayloadType.URL,
            fields={"url": raw},
            title=raw[:URL_TITLE_LIMIT],
            subtitle=raw,
        )

    return ClassifiedPayload(
        type=ScanPayloadType.URL,
        fields=fields,
        title=fields["host"],
        subtitle=truncate(raw, URL_SUBTITLE_LIMIT),
    )


def _build_wifi(raw: str) -> ClassifiedPayload:
    fields = parsers.parse_wifi(raw)
    security = fields.get("security")
    if security:
        protection = "Password protected" if fields.get("password") else "Open"
        subtitle = f"{security} · {protection}"
    else:
        subtitle = "Wi-Fi Network"

    return ClassifiedPayload(
        type=ScanPayloadType.WIFI,
        fields=fields,
        title=fields.get("ssid") or "Unknown Network",
        subtitle=subtitle,
    )


def _build_contact(raw: str) -> ClassifiedPayload:
    fields = parsers.parse_vcard(raw)
    details = [
        value
        for value in (fields.get("phone"), fields.get("email"), fields.get("org"))
        if value
    ]

    return ClassifiedPayload(
        type=ScanPayloadType.CONTACT,
        fields=fields,
        title=fields.get("fullName") or fields.get("name") or "Unknown Contact",
        subtitle=" · ".join(details[:2]) or "Contact",
    )


def _build_payment(raw: str) -> ClassifiedPayload:
    fields = parsers.parse_upi(raw)
    payee_name = fields.get("pn")
    if payee_name:
        amount = fields.get("am")
        subtitle = f"{payee_name} · ₹{amount}" if amount else payee_name
    else:
        subtitle = "UPI Payment"

    return ClassifiedPayload(
        type=ScanPayloadType.PAYMENT,
        fields=fields,
        title=fields.get("pa") or "UPI Payment",
        subtitle=subtitle,
    )


def _build_email(raw: str) -> ClassifiedPayload:
    fields = parsers.parse_mailto(raw)
    address = fields["email"]
    subject = fields.get("subject")

    return ClassifiedPayload(
        type=ScanPayloadType.EMAIL,
        fields=fields,
        title=address or "Email",
        subtitle=f"Subject: {subject}" if subject else address,
    )


def _build_phone(raw: str) -> ClassifiedPayload:
    fields = parsers.parse_tel(raw)
    return ClassifiedPayload(
        type=ScanPayloadType.PHONE,
        fields=fields,
        title=fields["number"],
        subtitle="Phone Number",
    )


def _build_sms(raw: str) -> ClassifiedPayload:
    fields = parsers.parse_sms(raw)
    return ClassifiedPayload(
        type=ScanPayloadType.SMS,
        fields=fields,
        title=fields["number"] or "SMS",
        subtitle=fields["message"] or "SMS Message",
    )


def _build_geo(raw: str) -> ClassifiedPayload:
    fields = parsers.parse_geo(raw)
    lat = format_coordinate(fields["lat"])
    lon = format_coordinate(fields["lon"])
    return ClassifiedPayload(
        type=ScanPayloadType.GEO,
        fields=fields,
        title=f"{lat}, {lon}",
        subtitle="Geographic Location",
    )


def _build_text(raw: str) -> ClassifiedPayload:
    return ClassifiedPayload(
        type=ScanPayloadType.TEXT,
        fields={"text": raw},
        title=truncate(raw, TEXT_TITLE_LIMIT),
        subtitle=truncate(raw, TEXT_SUBTITLE_LIMIT),
    )


# Checked in order, first match wins
RULES: Tuple[Tuple[re.Pattern, Callable[[str], ClassifiedPayload]], ...] = (
    (re.compile(r"^https?://", re.IGNORECASE), _build_url),
    (re.compile(r"^WIFI:", re.IGNORECASE), _build_wifi),
    (re.compile(r"^BEGIN:VCARD", re.IGNORECASE), _build_contact),
    (re.compile(r"^upi://pay", re.IGNORECASE), _build_payment),
    (re.compile(r"^mailto:", re.IGNORECASE), _build_email),
    (re.compile(r"^tel:", re.IGNORECASE), _build_phone),
    (re.compile(r"^(smsto:|sms:)", re.IGNORECASE), _build_sms),
    (re.compile(r"^geo:", re.IGNORECASE), _build_geo),
)


def classify(raw: str) -> ClassifiedPayload:
    """
    Classify raw decoded text.

    Args:
        raw: Text decoded from a QR code or barcode

    Returns:
        ClassifiedPayload; unrecognised input is classified as Text
    """
    trimmed = _EDGE_SPACE.sub("", raw or "")

    for pattern, build in RULES:
        if pattern.match(trimmed):
            return build(trimmed)

    return _build_text(trimmed)
