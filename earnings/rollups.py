from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

import pandas as pd

from earnings import settings
from earnings.data import entries_frame
from earnings.models import BucketTotals, DayBucket, Entry, PayTypeRollup, ProjectRollup, WeekBucket
from earnings.weeks import WEEK_SPAN, day_keys, week_start_keys

B = TypeVar("B", bound=BucketTotals)


def hourly_rate(earnings: float, hours: float) -> float:
    return earnings / hours if hours > 0 else 0.0


def _bucket_totals(group: pd.DataFrame) -> Dict[str, Any]:
    total_hours = float(group["hours"].sum())
    total_earnings = float(group["earnings"].sum())
    pay_types = group["pay_type"].dropna().value_counts()
    return {
        "total_hours": total_hours,
        "total_earnings": total_earnings,
        "entry_count": int(len(group)),
        "projects": sorted(str(p) for p in group["project_name"].dropna().unique()),
        "pay_type_counts": {str(k): int(v) for k, v in sorted(pay_types.items())},
        "avg_hourly_rate": hourly_rate(total_earnings, total_hours),
    }


def _aggregate(
    entries: Iterable[Entry],
    key: Callable[[pd.Series], pd.Series],
    build: Callable[[datetime, Dict[str, Any]], B],
    ascending: bool,
) -> List[B]:
    frame = entries_frame(entries).dropna(subset=["work_ts"])
    if frame.empty:
        return []
    frame = frame.assign(bucket=key(frame["work_ts"]))
    buckets = [
        build(bucket.to_pydatetime(), _bucket_totals(group))
        for bucket, group in frame.groupby("bucket", sort=True)
    ]
    return buckets if ascending else buckets[::-1]


def aggregate_by_week(entries: Iterable[Entry], *, ascending: bool = False) -> List[WeekBucket]:
    """Roll dated entries up into Tuesday-aligned weeks, most recent first by default."""
    return _aggregate(
        entries,
        week_start_keys,
        lambda start, totals: WeekBucket(week_start=start, week_end=start + WEEK_SPAN, **totals),
        ascending,
    )


def aggregate_by_day(entries: Iterable[Entry], *, ascending: bool = False) -> List[DayBucket]:
    return _aggregate(
        entries,
        day_keys,
        lambda day, totals: DayBucket(day=day, **totals),
        ascending,
    )


def _has_payout(frame: pd.DataFrame) -> pd.Series:
    return frame["payout"].fillna("").astype(bool)


def _paid(frame: pd.DataFrame, dimension: str) -> pd.DataFrame:
    return frame[frame[dimension].notna() & _has_payout(frame)]


def aggregate_by_project(entries: Iterable[Entry], *, limit: int = settings.TOP_PROJECTS) -> List[ProjectRollup]:
    frame = _paid(entries_frame(entries), "project_name")
    if frame.empty:
        return []
    grouped = (
        frame.groupby("project_name")
        .agg(earnings=("earnings", "sum"), hours=("hours", "sum"), entries=("hours", "size"))
        .reset_index()
        .sort_values(["earnings", "project_name"], ascending=[False, True])
        .head(limit)
    )
    return [
        ProjectRollup(name=str(r.project_name), earnings=float(r.earnings), hours=float(r.hours), entries=int(r.entries))
        for r in grouped.itertuples(index=False)
    ]


def aggregate_by_pay_type(entries: Iterable[Entry]) -> List[PayTypeRollup]:
    frame = _paid(entries_frame(entries), "pay_type")
    if frame.empty:
        return []
    grouped = (
        frame.groupby("pay_type", sort=False)
        .agg(value=("earnings", "sum"), n=("earnings", "size"))
        .reset_index()
    )
    return [
        PayTypeRollup(name=str(r.pay_type), value=float(r.value), count=int(r.n))
        for r in grouped.itertuples(index=False)
    ]


def daily_trend(entries: Iterable[Entry], now: datetime, *, days: int = settings.DAILY_TREND_DAYS) -> List[Dict[str, Any]]:
    """Oldest-first per-day hours/earnings over the trailing ``days`` window."""
    frame = entries_frame(entries).dropna(subset=["work_ts"])
    frame = frame[_has_payout(frame) & (frame["work_ts"] >= now - timedelta(days=days))]
    if frame.empty:
        return []
    daily = (
        frame.assign(date=day_keys(frame["work_ts"]))
        .groupby("date", sort=True)[["hours", "earnings"]]
        .sum()
        .reset_index()
    )
    return [
        {"date": r.date.date().isoformat(), "hours": float(r.hours), "earnings": float(r.earnings)}
        for r in daily.itertuples(index=False)
    ]


def weekly_trend(weeks: Iterable[WeekBucket], goal_hours_per_week: float) -> List[Dict[str, Any]]:
    ordered = sorted(weeks, key=lambda w: w.week_start)
    return [
        {
            "week": f"{w.week_start:%b} {w.week_start.day}",
            "week_start": w.week_start.date().isoformat(),
            "hours": w.total_hours,
            "earnings": w.total_earnings,
            "target": goal_hours_per_week,
            "surplus": w.total_hours - goal_hours_per_week,
        }
        for w in ordered
    ]


def summarize(
    weeks: List[WeekBucket],
    entries: List[Entry],
    *,
    goal_hours_per_week: float,
    all_weeks: Optional[List[WeekBucket]] = None,
    all_entries: Optional[List[Entry]] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Summary scalars for a (possibly range-filtered) set of weeks.

    ``all_weeks`` and ``all_entries`` feed the all-time and year-to-date
    earnings figures; they default to the in-range values.
    """
    now = now or datetime.now()
    all_weeks = weeks if all_weeks is None else all_weeks
    all_entries = entries if all_entries is None else all_entries

    total_hours = sum(w.total_hours for w in weeks)
    total_earnings = sum(w.total_earnings for w in weeks)
    week_count = len(weeks)
    avg_rate = hourly_rate(total_earnings, total_hours)

    frame = entries_frame(all_entries)
    ytd = frame[frame["work_ts"].dt.year == now.year]

    return {
        "total_hours": total_hours,
        "total_earnings": total_earnings,
        "total_entries": len(entries),
        "week_count": week_count,
        "avg_weekly_hours": total_hours / week_count if week_count else 0.0,
        "avg_weekly_earnings": total_earnings / week_count if week_count else 0.0,
        "avg_hourly_rate": avg_rate,
        "weekly_earnings_target": goal_hours_per_week * avg_rate,
        "total_earnings_all_time": sum(w.total_earnings for w in all_weeks),
        "ytd_earnings": float(ytd["earnings"].sum()),
    }
