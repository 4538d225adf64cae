from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List

from earnings.cycles import compute_cycles
from earnings.filters import TrackerFilters
from earnings.models import WeekBucket


def compute_cycle_progress(filters: TrackerFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    # Cycles always span the full history: numbering is anchored on the first observed week.
    weeks: List[WeekBucket] = ctx.get("weeks", [])
    cycles = compute_cycles(weeks, filters.goal_hours_per_week, now=ctx.get("now"))
    active = next((c for c in cycles if c.is_active), None)
    return {
        "filters": asdict(filters),
        "goal_hours_per_week": filters.goal_hours_per_week,
        "cycles": [asdict(c) for c in cycles],
        "active_cycle": asdict(active) if active is not None else None,
    }
