"""Business-calendar helpers.

"Today" is the server's local calendar day unless ``TIMEZONE`` names an IANA
zone. All scheduling columns hold naive wall-clock datetimes in that calendar.
"""

from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from app.config import settings


def business_now(tz_name: Optional[str] = None) -> datetime:
    """Current naive wall-clock time in the business calendar."""
    tz_name = tz_name if tz_name is not None else settings.TIMEZONE
    if tz_name:
        return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None)
    return datetime.now()


def business_today(tz_name: Optional[str] = None) -> date:
    return business_now(tz_name).date()


def local_day_window(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """Return ``[start_of_day, start_of_next_day)`` for the day containing ``now``."""
    now = now or business_now()
    start = datetime.combine(now.date(), time.min)
    return start, start + timedelta(days=1)


def to_business_naive(value: Optional[datetime], tz_name: Optional[str] = None) -> Optional[datetime]:
    """Convert an aware datetime to naive wall-clock time in the business calendar.

    Naive values are assumed to already be business-local and pass through.
    """
    if value is None or value.tzinfo is None:
        return value
    tz_name = tz_name if tz_name is not None else settings.TIMEZONE
    if tz_name:
        return value.astimezone(ZoneInfo(tz_name)).replace(tzinfo=None)
    return value.astimezone().replace(tzinfo=None)
