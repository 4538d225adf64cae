from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional

from earnings import settings
from earnings.models import CycleStats, WeekBucket


def _progress(total_hours: float, target_hours: float) -> float:
    if target_hours <= 0:
        return 0.0
    return max(0.0, min(total_hours / target_hours * 100, 100.0))


def build_cycle(cycle_number: int, weeks: List[WeekBucket], goal_hours_per_week: float, now: datetime) -> CycleStats:
    total_hours = sum(w.total_hours for w in weeks)
    target_hours = len(weeks) * goal_hours_per_week
    end_week = weeks[-1].week_end
    return CycleStats(
        cycle_number=cycle_number,
        start_week=weeks[0].week_start,
        end_week=end_week,
        week_count=len(weeks),
        weeks=list(weeks),
        total_hours=total_hours,
        total_earnings=sum(w.total_earnings for w in weeks),
        target_hours=target_hours,
        hours_remaining=target_hours - total_hours,
        progress_percentage=_progress(total_hours, target_hours),
        is_complete=len(weeks) == settings.CYCLE_LENGTH_WEEKS,
        is_active=end_week >= now,
        has_ended=end_week < now,
    )


def compute_cycles(
    weeks: Iterable[WeekBucket],
    goal_hours_per_week: float,
    now: Optional[datetime] = None,
) -> List[CycleStats]:
    """Group week buckets into 4-week goal cycles, most recent cycle first.

    The oldest observed week is always left out: it is assumed to be a
    partial week. Cycles are chunks of consecutive observed buckets, so
    weeks without any entries do not occupy a slot. Activity flags depend
    on ``now``; recompute per request.
    """
    now = now or datetime.now()
    ordered = sorted(weeks, key=lambda w: w.week_start)
    size = settings.CYCLE_LENGTH_WEEKS

    cycles = [
        build_cycle(n, ordered[i:i + size], goal_hours_per_week, now)
        for n, i in enumerate(range(1, len(ordered), size), start=1)
    ]
    return cycles[::-1]
