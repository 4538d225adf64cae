from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Literal

from earnings.export import hours_remaining_text
from earnings.filters import TrackerFilters, paginate
from earnings.models import Entry, WeekBucket
from earnings.rollups import aggregate_by_day


def _week_row(week: WeekBucket, goal: float) -> Dict[str, Any]:
    row = asdict(week)
    row["hours_remaining"] = week.total_hours - goal
    row["hours_remaining_text"] = hours_remaining_text(week.total_hours, goal)
    row["meets_goal"] = week.total_hours >= goal
    return row


def compute_breakdown(
    filters: TrackerFilters,
    ctx: Dict[str, Any],
    *,
    view: Literal["weekly", "daily"] = "weekly",
) -> Dict[str, Any]:
    filtered_weeks: List[WeekBucket] = ctx.get("filtered_weeks", [])
    filtered_entries: List[Entry] = ctx.get("filtered_entries", [])

    if view == "daily":
        rows = [asdict(d) for d in aggregate_by_day(filtered_entries)]
    else:
        rows = [_week_row(w, filters.goal_hours_per_week) for w in filtered_weeks]

    page = paginate(rows, filters.page, filters.page_size)
    return {
        "filters": asdict(filters),
        "view": view,
        "rows": page.items,
        "pagination": {
            "page": page.page,
            "page_size": page.page_size,
            "total_items": page.total_items,
            "total_pages": page.total_pages,
        },
    }
