"""
Time helpers for report windows.

All timestamps are stored as UTC. Calendar boundaries (today, this month,
this year, the day a delivered order counts towards) are computed in the
configured report time zone and converted back to UTC for comparisons.
"""

from datetime import date, datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

UTC = timezone.utc


def utcnow() -> datetime:
    return datetime.now(UTC)


def as_utc(dt: datetime) -> datetime:
    """SQLite hands back naive datetimes; treat them as the UTC they were stored as."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def local_date(dt: datetime, zone: ZoneInfo) -> date:
    return as_utc(dt).astimezone(zone).date()


def start_of_day(zone: ZoneInfo, now: Optional[datetime] = None) -> datetime:
    local_now = (now or utcnow()).astimezone(zone)
    start = datetime(local_now.year, local_now.month, local_now.day, tzinfo=zone)
    return start.astimezone(UTC)


def start_of_month(zone: ZoneInfo, now: Optional[datetime] = None) -> datetime:
    local_now = (now or utcnow()).astimezone(zone)
    return datetime(local_now.year, local_now.month, 1, tzinfo=zone).astimezone(UTC)


def start_of_year(zone: ZoneInfo, now: Optional[datetime] = None) -> datetime:
    local_now = (now or utcnow()).astimezone(zone)
    return datetime(local_now.year, 1, 1, tzinfo=zone).astimezone(UTC)
