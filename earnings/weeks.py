"""Tuesday-aligned work weeks and calendar-day keys.

A work week runs Tuesday 00:00 through the following Monday. Python's
``weekday()`` numbers Monday as 0, so Tuesday is 1 and the distance back to
the week start is ``(weekday - 1) % 7``.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Union

import pandas as pd

WEEK_START_WEEKDAY = 1  # Tuesday
WEEK_SPAN = timedelta(days=6)

DateLike = Union[date, datetime, pd.Timestamp]


def day_of(value: DateLike) -> datetime:
    """Truncate to local midnight."""
    if isinstance(value, pd.Timestamp):
        value = value.to_pydatetime()
    if isinstance(value, datetime):
        return value.replace(hour=0, minute=0, second=0, microsecond=0)
    return datetime.combine(value, time.min)


def week_start_of(value: DateLike) -> datetime:
    day = day_of(value)
    return day - timedelta(days=(day.weekday() - WEEK_START_WEEKDAY) % 7)


def week_end_of(week_start: DateLike) -> datetime:
    return day_of(week_start) + WEEK_SPAN


def day_keys(ts: pd.Series) -> pd.Series:
    return ts.dt.normalize()


def week_start_keys(ts: pd.Series) -> pd.Series:
    days = ts.dt.normalize()
    return days - pd.to_timedelta((days.dt.weekday - WEEK_START_WEEKDAY) % 7, unit="D")
