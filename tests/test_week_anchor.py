from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from src.tutor_billing.tutor_billing.common.datetime_utils import month_bounds, previous_month, week_anchor
from src.tutor_billing.tutor_billing.core.enums import Weekday


# 2024-01-06 is a Saturday.
SATURDAY = datetime(2024, 1, 6)


@pytest.mark.parametrize(
    "now",
    [
        datetime(2024, 1, 6, 0, 0),
        datetime(2024, 1, 6, 13, 45),
        datetime(2024, 1, 8, 9, 0),
        datetime(2024, 1, 12, 23, 59, 59, 999999),
    ],
)
def test_every_instant_of_the_week_maps_to_its_saturday(now):
    assert week_anchor(now) == SATURDAY


def test_saturday_midnight_is_inclusive_boundary():
    assert week_anchor(datetime(2024, 1, 13, 0, 0)) == datetime(2024, 1, 13)
    assert week_anchor(datetime(2024, 1, 13, 0, 0) - timedelta(microseconds=1)) == SATURDAY


def test_anchor_crosses_month_and_year():
    # Wednesday 2025-01-01 belongs to the week starting Saturday 2024-12-28.
    assert week_anchor(datetime(2025, 1, 1, 10, 0)) == datetime(2024, 12, 28)


def test_anchor_keeps_timezone():
    now = datetime(2024, 1, 9, 18, 30, tzinfo=timezone.utc)
    assert week_anchor(now) == datetime(2024, 1, 6, tzinfo=timezone.utc)


def test_custom_week_start():
    assert week_anchor(datetime(2024, 1, 10), week_start=Weekday.MONDAY) == datetime(2024, 1, 8)


def test_anchor_is_pure():
    now = datetime(2024, 1, 10, 7, 0)
    assert week_anchor(now) == week_anchor(now)
    assert now == datetime(2024, 1, 10, 7, 0)


def test_month_bounds_and_previous_month():
    start, end = month_bounds(2024, 2)
    assert start == datetime(2024, 2, 1)
    assert end.date() == date(2024, 2, 29)
    assert end.hour == 23 and end.minute == 59

    assert previous_month(2024, 1) == (2023, 12)
    assert previous_month(2024, 7) == (2024, 6)


def test_month_bounds_of_last_representable_month():
    start, end = month_bounds(9999, 12)
    assert start == datetime(9999, 12, 1)
    assert end.date() == date(9999, 12, 31)
