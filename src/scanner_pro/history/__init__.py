"""Scan history models and display helpers."""

from .models import DateGroup, ScanRecord
from .history_logic import format_timestamp, group_by_date
from .filters import filter_records, recent_records, saved_records

__all__ = [
    "DateGroup",
    "ScanRecord",
    "format_timestamp",
    "group_by_date",
    "filter_records",
    "recent_records",
    "saved_records",
]
