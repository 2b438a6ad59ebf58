"""Payload types produced by the classifier."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict


class ScanPayloadType(Enum):
    """Semantic type of a scanned payload."""

    URL = "URL"
    WIFI = "WiFi"
    CONTACT = "Contact"
    PAYMENT = "Payment"
    TEXT = "Text"             # Fallback when nothing else matches
    EMAIL = "Email"
    PHONE = "Phone"
    SMS = "SMS"
    GEO = "Geo"


TYPE_LABELS: Dict[ScanPayloadType, str] = {
    ScanPayloadType.URL: "URL",
    ScanPayloadType.WIFI: "Wi-Fi",
    ScanPayloadType.CONTACT: "Contact",
    ScanPayloadType.PAYMENT: "Payment",
    ScanPayloadType.TEXT: "Text",
    ScanPayloadType.EMAIL: "Email",
    ScanPayloadType.PHONE: "Phone",
    ScanPayloadType.SMS: "SMS",
    ScanPayloadType.GEO: "Location",
}

# Filter values offered by history views, in display order
FILTER_ALL = "All"
FILTER_CHOICES = (FILTER_ALL,) + tuple(t.value for t in ScanPayloadType)


@dataclass(frozen=True)
class ClassifiedPayload:
    """Typed, structured view of a raw scanned string."""

    type: ScanPayloadType
    fields: Dict[str, str] = field(default_factory=dict)
    title: str = ""
    subtitle: str = ""

    @property
    def label(self) -> str:
        """Human readable type label (e.g. "Wi-Fi")."""
        return TYPE_LABELS[self.type]
