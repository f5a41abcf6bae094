from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple

from ..core.constants import WEEK_START
from ..core.enums import Weekday


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_iso_datetime(value: str) -> datetime:
    return datetime.fromisoformat(value)


def now_local(now: Optional[datetime] = None) -> datetime:
    """Current local time, or `now` as naive local time.

    Stored anchors and timestamps are naive local, so aware inputs are
    converted before any comparison.

    Note: Wrapped so tests can patch/mocked easier.
    """
    if now is None:
        return datetime.now()
    if now.tzinfo is not None:
        return now.astimezone().replace(tzinfo=None)
    return now


def week_anchor(now: datetime, *, week_start: Weekday = WEEK_START) -> datetime:
    """Start of the billing week that contains `now`.

    Returns the most recent `week_start` day at midnight, on or before `now`.
    Saturday 00:00 maps to itself; Friday 23:59 maps to the Saturday before it.
    """

    days_back = (now.weekday() - week_start.position) % 7
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight - timedelta(days=days_back)


def end_of_day(d: date) -> datetime:
    return datetime.combine(d, time.max)


def start_of_day(d: date) -> datetime:
    return datetime.combine(d, time.min)


def previous_month(year: int, month: int) -> Tuple[int, int]:
    if month == 1:
        return year - 1, 12
    return year, month - 1


def month_bounds(year: int, month: int) -> Tuple[datetime, datetime]:
    """First and last instant (inclusive) of a calendar month."""
    last_day = calendar.monthrange(year, month)[1]
    return start_of_day(date(year, month, 1)), end_of_day(date(year, month, last_day))


def days_in_month(year: int, month: int):
    for day in range(1, calendar.monthrange(year, month)[1] + 1):
        yield date(year, month, day)


def weekday_of(d: date) -> Weekday:
    return Weekday.from_index(d.weekday())
