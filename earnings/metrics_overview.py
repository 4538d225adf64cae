from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List

from earnings.charts import daily_chart, pay_types_chart, projects_chart, to_vega_spec, trends_chart
from earnings.filters import TrackerFilters
from earnings.models import Entry, WeekBucket
from earnings.rollups import (
    aggregate_by_pay_type,
    aggregate_by_project,
    daily_trend,
    summarize,
    weekly_trend,
)


def compute_overview(filters: TrackerFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    entries: List[Entry] = ctx.get("entries", [])
    weeks: List[WeekBucket] = ctx.get("weeks", [])
    filtered_entries: List[Entry] = ctx.get("filtered_entries", [])
    filtered_weeks: List[WeekBucket] = ctx.get("filtered_weeks", [])
    now = ctx["now"]
    goal = filters.goal_hours_per_week

    summary = summarize(
        filtered_weeks,
        filtered_entries,
        goal_hours_per_week=goal,
        all_weeks=weeks,
        all_entries=entries,
        now=now,
    )

    chart_data = {
        "trends": weekly_trend(filtered_weeks, goal),
        "projects": [asdict(p) for p in aggregate_by_project(filtered_entries)],
        "pay_types": [asdict(p) for p in aggregate_by_pay_type(filtered_entries)],
        "daily": daily_trend(entries, now),
    }

    charts: Dict[str, Any] = {}
    if chart_data["trends"]:
        charts["trends"] = to_vega_spec(trends_chart(chart_data["trends"], goal))
    if chart_data["projects"]:
        charts["projects"] = to_vega_spec(projects_chart(chart_data["projects"]))
    if chart_data["pay_types"]:
        charts["pay_types"] = to_vega_spec(pay_types_chart(chart_data["pay_types"]))
    if chart_data["daily"]:
        charts["daily"] = to_vega_spec(daily_chart(chart_data["daily"]))

    return {
        "filters": asdict(filters),
        "range": {"time_range": filters.time_range, "since": ctx.get("since")},
        "entries_in_range": len(filtered_entries),
        "summary": summary,
        "chart_data": chart_data,
        "charts": charts,
    }
