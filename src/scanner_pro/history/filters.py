"""Pure logic helpers for filtering scan history."""

from typing import Iterable, List, Union

from ..payload.types import FILTER_ALL, ScanPayloadType
from .models import ScanRecord

RECENT_LIMIT = 10


def filter_records(
    records: Iterable[ScanRecord],
    type_filter: Union[str, ScanPayloadType] = FILTER_ALL,
    query: str = "",
) -> List[ScanRecord]:
    """
    Filter records by payload type, then by text query (case-insensitive).

    The query matches against title, subtitle and raw data.
    """
    result = list(records)

    if isinstance(type_filter, ScanPayloadType):
        type_filter = type_filter.value
    if type_filter and type_filter != FILTER_ALL:
        result = [record for record in result if record.type.value == type_filter]

    normalized_query = (query or "").strip().lower()
    if normalized_query:
        result = [
            record
            for record in result
            if normalized_query in record.title.lower()
            or normalized_query in record.subtitle.lower()
            or normalized_query in record.raw_data.lower()
        ]

    return result


def saved_records(records: Iterable[ScanRecord]) -> List[ScanRecord]:
    """Records the user marked as saved."""
    return [record for record in records if record.is_saved]


def recent_records(records: Iterable[ScanRecord], limit: int = RECENT_LIMIT) -> List[ScanRecord]:
    """First ``limit`` records (history is stored newest first)."""
    return list(records)[:limit]
