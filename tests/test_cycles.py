from datetime import datetime, timedelta

import pytest

from earnings.cycles import compute_cycles

from conftest import consecutive_weeks, make_week

FIRST = datetime(2025, 1, 7)


class TestCycleGrouping:
    def test_nine_weeks_form_two_complete_cycles(self):
        weeks = consecutive_weeks(9)
        cycles = compute_cycles(weeks, 30, now=datetime(2030, 1, 1))
        assert [c.cycle_number for c in cycles] == [2, 1]
        recent, first = cycles
        assert first.start_week == weeks[1].week_start
        assert first.end_week == weeks[4].week_end
        assert recent.start_week == weeks[5].week_start
        assert recent.end_week == weeks[8].week_end
        assert first.is_complete and recent.is_complete
        assert first.week_count == recent.week_count == 4

    def test_seven_weeks_leave_partial_second_cycle(self):
        cycles = compute_cycles(consecutive_weeks(7), 30, now=datetime(2030, 1, 1))
        recent, first = cycles
        assert first.week_count == 4 and first.is_complete
        assert recent.week_count == 2
        assert not recent.is_complete
        assert recent.target_hours == 60

    def test_first_week_is_excluded(self):
        weeks = consecutive_weeks(5)
        (cycle,) = compute_cycles(weeks, 30, now=datetime(2030, 1, 1))
        assert weeks[0] not in cycle.weeks
        assert cycle.weeks == weeks[1:]

    @pytest.mark.parametrize("count", [0, 1])
    def test_too_few_weeks(self, count):
        assert compute_cycles(consecutive_weeks(count), 30) == []

    def test_input_order_does_not_matter(self):
        weeks = consecutive_weeks(6)
        now = datetime(2030, 1, 1)
        assert compute_cycles(weeks[::-1], 30, now=now) == compute_cycles(weeks, 30, now=now)


class TestCycleProgress:
    def test_targets_and_remaining(self):
        weeks = [make_week(FIRST + timedelta(weeks=i), hours) for i, hours in enumerate([5, 20, 25, 30, 35])]
        (cycle,) = compute_cycles(weeks, 30, now=datetime(2030, 1, 1))
        assert cycle.total_hours == 110
        assert cycle.target_hours == 120
        assert cycle.hours_remaining == 10
        assert cycle.progress_percentage == pytest.approx(110 / 120 * 100)

    @pytest.mark.parametrize("hours", [0, 12.5, 30, 45, 500])
    def test_progress_is_bounded(self, hours):
        cycles = compute_cycles(consecutive_weeks(9, hours=hours), 30, now=datetime(2030, 1, 1))
        for cycle in cycles:
            assert 0 <= cycle.progress_percentage <= 100

    def test_overtime_caps_at_100(self):
        (cycle,) = compute_cycles(consecutive_weeks(5, hours=60), 30, now=datetime(2030, 1, 1))
        assert cycle.progress_percentage == 100
        assert cycle.hours_remaining == -120

    def test_active_and_ended_flags(self):
        weeks = consecutive_weeks(9)
        now = weeks[6].week_start + timedelta(days=2)
        recent, first = compute_cycles(weeks, 30, now=now)
        assert recent.is_active and not recent.has_ended
        assert first.has_ended and not first.is_active
