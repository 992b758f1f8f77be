"""Date window helpers.

All windows are computed on the server's local clock and are half-open:
``[start, end)``.
"""
import math
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple


def local_now() -> datetime:
    return datetime.now()


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    """Local midnight of ``day`` and the following midnight."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def today_bounds(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    now = to_local_naive(now) if now else local_now()
    return day_bounds(now.date())


def shift_months(moment: datetime, months: int) -> datetime:
    """Move ``moment`` by whole months, clamping the day to the target month."""
    total = moment.year * 12 + (moment.month - 1) + months
    year, month = divmod(total, 12)
    month += 1
    if month == 12:
        last_day = 31
    else:
        last_day = (date(year, month + 1, 1) - timedelta(days=1)).day
    return moment.replace(year=year, month=month, day=min(moment.day, last_day))


def days_in_span(start: datetime, end: datetime) -> int:
    """Whole days covered by ``[start, end]``, never less than one."""
    return max(1, math.ceil((end - start).total_seconds() / 86400))


def to_local_naive(moment: datetime) -> datetime:
    """Aware datetimes become naive local time; naive ones are taken as local already."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)
