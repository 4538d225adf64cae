from datetime import datetime, timedelta

import pytest

from earnings.models import Entry, WeekBucket
from earnings.weeks import WEEK_SPAN

SAMPLE_CSV = "\n".join(
    [
        "itemID,workDate,duration,payout,projectName,payType,notes",
        'A1,2025-01-06,2h 10m 0s,"$1,234.50",Apollo,hourly,first',
        "A2,2025-01-07,1h 30m,$45.00,Apollo,hourly,",
        'A3,2025-01-08,45m,$20.00,"Borealis, Inc",task,"has, comma"',
        "A4,not a date,1h,$10.00,Apollo,hourly,",
    ]
)


@pytest.fixture
def sample_csv():
    return SAMPLE_CSV


def make_entry(item_id, work_date, duration="1h", payout="$10.00", project_name=None, pay_type=None):
    return Entry(
        item_id=item_id,
        work_date=work_date,
        duration=duration,
        payout=payout,
        project_name=project_name,
        pay_type=pay_type,
    )


def make_week(start: datetime, hours: float, earnings: float = 0.0) -> WeekBucket:
    return WeekBucket(
        total_hours=hours,
        total_earnings=earnings,
        entry_count=1,
        projects=[],
        pay_type_counts={},
        avg_hourly_rate=earnings / hours if hours > 0 else 0.0,
        week_start=start,
        week_end=start + WEEK_SPAN,
    )


def consecutive_weeks(count: int, first: datetime = datetime(2025, 1, 7), hours: float = 30.0):
    """Oldest-first Tuesday-aligned weeks."""
    return [make_week(first + timedelta(weeks=i), hours) for i in range(count)]
