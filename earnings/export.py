from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional

from earnings import settings
from earnings.models import WeekBucket

logger = logging.getLogger(__name__)

WEEKLY_REPORT_HEADERS = [
    "Week Start",
    "Week End",
    "Total Hours",
    "Hours Remaining/Extra",
    "Total Earnings",
    "Average Hourly Rate",
    "Entry Count",
    "Projects",
    "Pay Types",
]

NO_DATA_MESSAGE = "No data to export. Please upload some earnings data first."


@dataclass(frozen=True)
class ExportResult:
    filename: str
    content: Optional[str]
    message: str

    @property
    def ok(self) -> bool:
        return self.content is not None


def _quoted_list(values: Iterable[str]) -> str:
    # Values containing a double quote are written as-is; the reader has no "" escape.
    return '"' + "; ".join(values) + '"'


def hours_remaining_text(total_hours: float, goal_hours_per_week: float) -> str:
    diff = total_hours - goal_hours_per_week
    return f"+{diff:.2f}" if total_hours >= goal_hours_per_week else f"{diff:.2f}"


def weekly_report_row(week: WeekBucket, goal_hours_per_week: float) -> List[str]:
    return [
        week.week_start.date().isoformat(),
        week.week_end.date().isoformat(),
        f"{week.total_hours:.2f}",
        hours_remaining_text(week.total_hours, goal_hours_per_week),
        f"{week.total_earnings:.2f}",
        f"{week.avg_hourly_rate:.2f}",
        str(week.entry_count),
        _quoted_list(week.projects),
        _quoted_list(f"{pay_type}:{count}" for pay_type, count in week.pay_type_counts.items()),
    ]


def serialize_weekly_csv(weeks: Iterable[WeekBucket], goal_hours_per_week: float) -> str:
    rows = [",".join(WEEKLY_REPORT_HEADERS)]
    rows.extend(",".join(weekly_report_row(w, goal_hours_per_week)) for w in weeks)
    return "\n".join(rows)


def export_filename(today: Optional[date] = None) -> str:
    today = today or date.today()
    return settings.EXPORT_FILENAME_TEMPLATE.format(date=today.isoformat())


def export_weekly_report(
    weeks: List[WeekBucket],
    goal_hours_per_week: float,
    today: Optional[date] = None,
) -> ExportResult:
    filename = export_filename(today)
    if not weeks:
        logger.info("Weekly export requested with no data")
        return ExportResult(filename=filename, content=None, message=NO_DATA_MESSAGE)
    content = serialize_weekly_csv(weeks, goal_hours_per_week)
    logger.info("Exported weekly report %s (%d weeks)", filename, len(weeks))
    return ExportResult(
        filename=filename,
        content=content,
        message=f"Weekly report exported successfully! ({len(weeks)} weeks)",
    )
