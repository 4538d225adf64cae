from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Mapping, Optional

# A parsed CSV row: canonical field name (or raw header) -> text or None.
RawRecord = Dict[str, Optional[str]]


@dataclass(frozen=True)
class Entry:
    item_id: Optional[str] = None
    work_date: Optional[str] = None
    duration: Optional[str] = None
    payout: Optional[str] = None
    project_name: Optional[str] = None
    pay_type: Optional[str] = None
    # Unhashable, so left out of the hash; equality still compares it.
    extra: Mapping[str, Optional[str]] = field(default_factory=dict, hash=False)

    @property
    def identity_key(self) -> str:
        return f"{self.item_id}-{self.work_date}"


@dataclass(frozen=True)
class BucketTotals:
    total_hours: float
    total_earnings: float
    entry_count: int
    projects: List[str]
    pay_type_counts: Dict[str, int]
    avg_hourly_rate: float


@dataclass(frozen=True)
class WeekBucket(BucketTotals):
    week_start: datetime
    week_end: datetime


@dataclass(frozen=True)
class DayBucket(BucketTotals):
    day: datetime


@dataclass(frozen=True)
class ProjectRollup:
    name: str
    earnings: float
    hours: float
    entries: int


@dataclass(frozen=True)
class PayTypeRollup:
    name: str
    value: float
    count: int


@dataclass(frozen=True)
class CycleStats:
    cycle_number: int
    start_week: datetime
    end_week: datetime
    week_count: int
    weeks: List[WeekBucket]
    total_hours: float
    total_earnings: float
    target_hours: float
    hours_remaining: float
    progress_percentage: float
    is_complete: bool
    is_active: bool
    has_ended: bool
