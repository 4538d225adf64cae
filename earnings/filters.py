from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, List, Optional, Sequence, TypeVar

import pandas as pd

from earnings import settings
from earnings.data import parse_calendar_date
from earnings.errors import InvalidFilterError
from earnings.models import Entry, WeekBucket

T = TypeVar("T")

RANGE_OFFSETS = {
    "1m": pd.DateOffset(months=1),
    "3m": pd.DateOffset(months=3),
    "6m": pd.DateOffset(months=6),
    "1Y": pd.DateOffset(years=1),
    "ALL": None,
}
RANGES = tuple(RANGE_OFFSETS)

EARLIEST = datetime.min


@dataclass(frozen=True)
class TrackerFilters:
    time_range: str = settings.DEFAULT_TIME_RANGE
    goal_hours_per_week: float = settings.DEFAULT_GOAL_HOURS_PER_WEEK
    page: int = 1
    page_size: int = settings.DEFAULT_PAGE_SIZE


@dataclass(frozen=True)
class Page:
    items: List[Any]
    page: int
    page_size: int
    total_items: int
    total_pages: int


def since_date(time_range: str, now: Optional[datetime] = None) -> datetime:
    """Cutoff for a symbolic range; ``ALL`` maps to the earliest datetime."""
    if time_range not in RANGE_OFFSETS:
        raise InvalidFilterError(f"Unknown time range {time_range!r}; expected one of {', '.join(RANGES)}")
    offset = RANGE_OFFSETS[time_range]
    if offset is None:
        return EARLIEST
    now = now or datetime.now()
    return (pd.Timestamp(now) - offset).to_pydatetime()


def filter_entries(entries: Iterable[Entry], since: datetime) -> List[Entry]:
    if since <= EARLIEST:
        return list(entries)
    kept = []
    for entry in entries:
        worked = parse_calendar_date(entry.work_date)
        if worked is not None and worked >= since:
            kept.append(entry)
    return kept


def filter_weeks(weeks: Iterable[WeekBucket], since: datetime) -> List[WeekBucket]:
    return [w for w in weeks if w.week_end >= since]


def _positive_int(raw: dict, key: str, default: int) -> int:
    value = raw.get(key)
    if value is None:
        return default
    try:
        out = int(value)
    except (TypeError, ValueError):
        raise InvalidFilterError(f"{key} must be an integer, got {value!r}") from None
    if out < 1:
        raise InvalidFilterError(f"{key} must be at least 1, got {out}")
    return out


def normalize_filters(raw: Optional[dict]) -> TrackerFilters:
    """Validate caller selections. Invalid values raise instead of defaulting."""
    raw = raw or {}

    time_range = raw.get("time_range") or settings.DEFAULT_TIME_RANGE
    if time_range not in RANGE_OFFSETS:
        raise InvalidFilterError(f"Unknown time range {time_range!r}; expected one of {', '.join(RANGES)}")

    goal = raw.get("goal_hours_per_week")
    if goal is None:
        goal = settings.DEFAULT_GOAL_HOURS_PER_WEEK
    try:
        goal = float(goal)
    except (TypeError, ValueError):
        raise InvalidFilterError(f"goal_hours_per_week must be a number, got {goal!r}") from None
    if not math.isfinite(goal) or goal <= 0:
        raise InvalidFilterError(f"goal_hours_per_week must be a positive finite number, got {goal!r}")

    return TrackerFilters(
        time_range=str(time_range),
        goal_hours_per_week=goal,
        page=_positive_int(raw, "page", 1),
        page_size=_positive_int(raw, "page_size", settings.DEFAULT_PAGE_SIZE),
    )


def paginate(items: Sequence[T], page: int, page_size: int) -> Page:
    if page_size < 1:
        raise InvalidFilterError(f"page_size must be at least 1, got {page_size}")
    total_items = len(items)
    total_pages = max(1, math.ceil(total_items / page_size))
    page = max(1, min(page, total_pages))
    start = (page - 1) * page_size
    return Page(
        items=list(items[start:start + page_size]),
        page=page,
        page_size=page_size,
        total_items=total_items,
        total_pages=total_pages,
    )
