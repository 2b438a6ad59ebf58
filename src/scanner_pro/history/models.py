"""Data models for scan history."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

from ..exceptions import RecordFormatError
from ..payload.types import ClassifiedPayload, ScanPayloadType


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO 8601 timestamp into a naive local datetime.

    Args:
        value: ISO string, with or without offset ("Z" accepted)

    Returns:
        Naive datetime in local time

    Raises:
        ValueError: If the string is not a valid ISO timestamp
    """
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def format_utc_timestamp(value: datetime) -> str:
    """Format a datetime as UTC ISO 8601 with milliseconds and a "Z" suffix.

    Naive values are taken as local time.
    """
    utc = value.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class ScanRecord:
    """Single scan history entry."""

    # Primary data (from ClassifiedPayload)
    raw_data: str
    type: ScanPayloadType
    fields: Dict[str, str]
    title: str
    subtitle: str

    # Metadata
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = field(default_factory=datetime.now)

    # User organization
    is_saved: bool = False

    @classmethod
    def from_payload(
        cls,
        raw_data: str,
        payload: ClassifiedPayload,
        record_id: Optional[str] = None,
        timestamp: Optional[datetime] = None,
    ) -> 'ScanRecord':
        """
        Create a ScanRecord from a classified payload.

        Args:
            raw_data: Original decoded text
            payload: Classifier output for ``raw_data``
            record_id: Optional identifier (fresh UUID4 when omitted)
            timestamp: Optional scan time (now when omitted)

        Returns:
            New, unsaved ScanRecord
        """
        return cls(
            raw_data=raw_data,
            type=payload.type,
            fields=dict(payload.fields),
            title=payload.title,
            subtitle=payload.subtitle,
            id=record_id or str(uuid.uuid4()),
            timestamp=timestamp or datetime.now(),
        )

    @property
    def payload(self) -> ClassifiedPayload:
        """Classified view of this record."""
        return ClassifiedPayload(
            type=self.type,
            fields=dict(self.fields),
            title=self.title,
            subtitle=self.subtitle,
        )

    def to_dict(self) -> dict:
        """
        Serialize to the persisted JSON shape.

        Returns:
            Dictionary with camelCase keys and a UTC ISO timestamp
        """
        return {
            "id": self.id,
            "type": self.type.value,
            "rawData": self.raw_data,
            "parsedData": dict(self.fields),
            "timestamp": format_utc_timestamp(self.timestamp),
            "isSaved": self.is_saved,
            "title": self.title,
            "subtitle": self.subtitle,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'ScanRecord':
        """
        Rebuild a record from its persisted JSON shape.

        Raises:
            RecordFormatError: If required keys are missing or malformed
        """
        if not isinstance(data, dict):
            raise RecordFormatError(f"Scan record must be an object, got {type(data).__name__}")

        try:
            record_type = ScanPayloadType(data["type"])
            timestamp = parse_timestamp(data["timestamp"])
            fields = data.get("parsedData") or {}
            if not isinstance(fields, dict):
                raise TypeError("parsedData must be an object")
            return cls(
                raw_data=str(data["rawData"]),
                type=record_type,
                fields={str(k): str(v) for k, v in fields.items()},
                title=str(data.get("title", "")),
                subtitle=str(data.get("subtitle", "")),
                id=str(data["id"]),
                timestamp=timestamp,
                is_saved=bool(data.get("isSaved", False)),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise RecordFormatError(f"Malformed scan record: {e}") from e


@dataclass
class DateGroup:
    """Records sharing a display date label (e.g. "TODAY")."""

    label: str
    records: List[ScanRecord] = field(default_factory=list)
