from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from earnings.filters import TrackerFilters, filter_entries, filter_weeks, normalize_filters, since_date
from earnings.models import Entry, WeekBucket


def prepare_context(
    filters: dict | TrackerFilters,
    entries: Iterable[Entry],
    weeks: Iterable[WeekBucket],
    *,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Apply the range selection to one consistent entries/weeks snapshot."""
    filt = filters if isinstance(filters, TrackerFilters) else normalize_filters(filters)
    now = now or datetime.now()
    entries = list(entries)
    weeks = list(weeks)
    since = since_date(filt.time_range, now)
    return {
        "filters": filt,
        "now": now,
        "since": since,
        "entries": entries,
        "weeks": weeks,
        "filtered_entries": filter_entries(entries, since),
        "filtered_weeks": filter_weeks(weeks, since),
    }
