from datetime import date, datetime

import pytest

from earnings.data import parse_csv_records, read_csv_rows
from earnings.export import (
    NO_DATA_MESSAGE,
    WEEKLY_REPORT_HEADERS,
    export_weekly_report,
    hours_remaining_text,
    serialize_weekly_csv,
)
from earnings.ingest import ingest
from earnings.rollups import aggregate_by_week


@pytest.fixture
def weeks(sample_csv):
    return aggregate_by_week(ingest([], parse_csv_records(sample_csv)).merged)


class TestSerializeWeeklyCsv:
    def test_header_row(self, weeks):
        lines = serialize_weekly_csv(weeks, 30).split("\n")
        assert lines[0] == ",".join(WEEKLY_REPORT_HEADERS)
        assert len(lines) == 3

    def test_row_format(self, weeks):
        row = serialize_weekly_csv(weeks, 30).split("\n")[1]
        assert row == '2025-01-07,2025-01-13,2.25,-27.75,65.00,28.89,2,"Apollo; Borealis, Inc","hourly:1; task:1"'

    @pytest.mark.parametrize(
        "hours, expected",
        [(30, "+0.00"), (31.5, "+1.50"), (12.25, "-17.75")],
    )
    def test_hours_remaining_sign(self, hours, expected):
        assert hours_remaining_text(hours, 30) == expected

    def test_round_trip_preserves_totals(self, weeks):
        headers, rows = read_csv_rows(serialize_weekly_csv(weeks, 30))
        parsed = [dict(zip(headers, row)) for row in rows]
        assert len(parsed) == len(weeks)
        for week, row in zip(weeks, parsed):
            assert float(row["Total Hours"]) == round(week.total_hours, 2)
            assert float(row["Total Earnings"]) == round(week.total_earnings, 2)
            assert datetime.fromisoformat(row["Week Start"]) == week.week_start
            assert row["Projects"] == "; ".join(week.projects)


class TestExportWeeklyReport:
    def test_export(self, weeks):
        result = export_weekly_report(weeks, 30, today=date(2025, 1, 14))
        assert result.ok
        assert result.filename == "weekly_earnings_report_2025-01-14.csv"
        assert result.content == serialize_weekly_csv(weeks, 30)
        assert "2 weeks" in result.message

    def test_no_data_is_a_noop(self):
        result = export_weekly_report([], 30, today=date(2025, 1, 14))
        assert not result.ok
        assert result.content is None
        assert result.message == NO_DATA_MESSAGE
