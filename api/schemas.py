from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel

from earnings import settings


class TrackerFiltersModel(BaseModel):
    time_range: str = settings.DEFAULT_TIME_RANGE
    goal_hours_per_week: float = settings.DEFAULT_GOAL_HOURS_PER_WEEK
    page: int = 1
    page_size: int = settings.DEFAULT_PAGE_SIZE


class UploadStatusModel(BaseModel):
    ok: bool
    message: str
    source: Optional[str] = None
    added_count: int = 0
    duplicate_count: int = 0
    skipped_rows: int = 0


class UploadResponse(BaseModel):
    statuses: List[UploadStatusModel]
    entry_count: int
    week_count: int


class MetaRangesResponse(BaseModel):
    ranges: List[str]
    default_range: str
    default_goal_hours_per_week: float
    default_page_size: int
