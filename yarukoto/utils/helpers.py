"""
Date and time helpers

Stored timestamps are naive UTC datetimes. Calendar days ("today", a
scheduled date, a month) are interpreted in the configured TIMEZONE and
converted to UTC windows when compared against timestamps.
"""
import calendar
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from yarukoto.config import get_settings

settings = get_settings()


def utcnow() -> datetime:
    """Current instant as a naive UTC datetime (storage convention)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def app_zone() -> ZoneInfo:
    return ZoneInfo(settings.TIMEZONE)


def today(now: Optional[datetime] = None) -> date:
    """Calendar date of `now` (naive UTC, defaults to the current instant) in the app zone"""
    now = now or utcnow()
    return now.replace(tzinfo=timezone.utc).astimezone(app_zone()).date()


def today_string(now: Optional[datetime] = None) -> str:
    return today(now).isoformat()


def get_day_range(day: date) -> tuple[datetime, datetime]:
    """Naive UTC [start, end) window covering `day` in the app zone"""
    zone = app_zone()
    start = datetime.combine(day, time.min, tzinfo=zone)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=zone)
    return (
        start.astimezone(timezone.utc).replace(tzinfo=None),
        end.astimezone(timezone.utc).replace(tzinfo=None),
    )


def get_month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last calendar day of a month"""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def to_iso_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Serialize a stored timestamp as ISO-8601 with an explicit UTC offset"""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()
