"""Pure logic helpers for rendering scan history.

``now`` is an explicit parameter everywhere so results are deterministic in
tests; it defaults to the current local time.
"""

from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional

from .models import DateGroup, ScanRecord

TODAY_LABEL = "Today"
YESTERDAY_LABEL = "Yesterday"


def _require_datetime(value, name: str) -> datetime:
    if not isinstance(value, datetime):
        raise TypeError(f"{name} must be a datetime, got {type(value).__name__}")
    return value


def _to_reference_zone(instant: datetime, now: datetime) -> datetime:
    """Express ``instant`` in the same zone as ``now`` so dates are comparable."""
    if instant.tzinfo is None and now.tzinfo is None:
        return instant
    if now.tzinfo is None:
        # Aware instant against a naive local clock
        return instant.astimezone().replace(tzinfo=None)
    if instant.tzinfo is None:
        instant = instant.astimezone()
    return instant.astimezone(now.tzinfo)


def day_difference(instant: datetime, now: datetime) -> int:
    """Number of calendar days from ``instant`` to ``now`` (0 = same day)."""
    return (now.date() - _to_reference_zone(instant, now).date()).days


def format_time_of_day(instant: datetime) -> str:
    """Format as 12-hour time, e.g. "3:45 PM"."""
    hour = instant.hour % 12 or 12
    suffix = "AM" if instant.hour < 12 else "PM"
    return f"{hour}:{instant.minute:02d} {suffix}"


def format_short_date(day: date) -> str:
    """Format as abbreviated month and day, e.g. "Mar 4"."""
    return f"{day.strftime('%b')} {day.day}"


def format_long_date(day: date) -> str:
    """Format as full month, day and year, e.g. "March 4, 2026"."""
    return f"{day.strftime('%B')} {day.day}, {day.year}"


def format_timestamp(instant: datetime, now: Optional[datetime] = None) -> str:
    """
    Format a scan time relative to now.

    Args:
        instant: Scan time
        now: Reference time (defaults to the current local time)

    Returns:
        Time of day for today, "Yesterday" for the previous calendar day,
        otherwise a short date such as "Mar 4"

    Raises:
        TypeError: If ``instant`` or ``now`` is not a datetime
    """
    _require_datetime(instant, "instant")
    current = _require_datetime(now, "now") if now is not None else datetime.now()
    local = _to_reference_zone(instant, current)

    if local.date() == current.date():
        return format_time_of_day(local)
    if local.date() == current.date() - timedelta(days=1):
        return YESTERDAY_LABEL
    return format_short_date(local.date())


def group_by_date(
    records: Iterable[ScanRecord],
    now: Optional[datetime] = None,
) -> List[DateGroup]:
    """
    Group records into Today/Yesterday/date sections.

    Records keep their input order inside each group. Older dates appear in
    the order their label is first seen, not sorted by date. Labels are
    upper-cased.

    Args:
        records: Records, normally newest first
        now: Reference time (defaults to the current local time)

    Returns:
        Non-empty DateGroups: today, yesterday, then older dates
    """
    current = _require_datetime(now, "now") if now is not None else datetime.now()

    today: List[ScanRecord] = []
    yesterday: List[ScanRecord] = []
    older: Dict[str, List[ScanRecord]] = {}

    for record in records:
        timestamp = _require_datetime(record.timestamp, "timestamp")
        days = day_difference(timestamp, current)

        if days == 0:
            today.append(record)
        elif days == 1:
            yesterday.append(record)
        else:
            local_day = _to_reference_zone(timestamp, current).date()
            older.setdefault(format_long_date(local_day), []).append(record)

    groups: List[DateGroup] = []
    if today:
        groups.append(DateGroup(label=TODAY_LABEL.upper(), records=today))
    if yesterday:
        groups.append(DateGroup(label=YESTERDAY_LABEL.upper(), records=yesterday))
    for label, items in older.items():
        groups.append(DateGroup(label=label.upper(), records=items))

    return groups
