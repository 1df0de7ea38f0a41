import pytest
from datetime import date

from teamwise.services.scheduling.types import ShiftStatus
from teamwise.services.scheduling.workload import (
    build_cycle_week_dates,
    build_weekly_worked_dates,
    build_workload_counts,
    counts_toward_workload,
    week_bounds,
)

from conftest import day_of_week, get_test_sunday, make_shift


class TestWeekBounds:
    def test_sunday_to_saturday(self):
        bounds = week_bounds(date(2026, 3, 4))
        assert bounds.week_start == date(2026, 3, 1)
        assert bounds.week_end == date(2026, 3, 7)

    def test_sunday_starts_its_own_week(self):
        assert week_bounds(get_test_sunday()).week_start == get_test_sunday()

    def test_invalid_input(self):
        assert week_bounds("nope") is None


class TestCountsTowardWorkload:
    def test_counting_statuses(self):
        assert counts_toward_workload(ShiftStatus.SCHEDULED) is True
        assert counts_toward_workload("on_call") is True

    def test_non_counting_statuses(self):
        assert counts_toward_workload(ShiftStatus.SICK) is False
        assert counts_toward_workload(ShiftStatus.CALLED_OFF) is False


class TestBuildWorkloadCounts:
    def test_counts_distinct_dates_in_week_and_cycle(self):
        shifts = [
            make_shift(1, day_of_week(1)),
            make_shift(1, day_of_week(2), status=ShiftStatus.ON_CALL),
            make_shift(1, date(2026, 3, 9)),
            make_shift(1, date(2026, 3, 10), status=ShiftStatus.CALLED_OFF),
            make_shift(2, date(2026, 3, 11), status=ShiftStatus.SICK),
        ]
        counts = build_workload_counts(shifts, "2026-03-01", "2026-03-07", "2026-03-01", "2026-03-14")
        assert counts[1].week_shift_count == 2
        assert counts[1].cycle_shift_count == 3
        assert 2 not in counts

    def test_shifts_outside_cycle_ignored(self):
        shifts = [make_shift(1, date(2026, 2, 28))]
        assert build_workload_counts(shifts, "2026-03-01", "2026-03-07", "2026-03-01", "2026-03-14") == {}

    def test_invalid_bounds_give_empty(self):
        shifts = [make_shift(1, day_of_week(1))]
        assert build_workload_counts(shifts, "bad", "2026-03-07", "2026-03-01", "2026-03-14") == {}


class TestWeeklyMaps:
    def test_weekly_worked_dates(self):
        shifts = [
            make_shift(1, day_of_week(1)),
            make_shift(1, day_of_week(1)),
            make_shift(1, date(2026, 3, 9)),
            make_shift(2, day_of_week(3), status=ShiftStatus.SICK),
        ]
        worked = build_weekly_worked_dates(shifts)
        assert worked[(1, date(2026, 3, 1))] == {day_of_week(1)}
        assert worked[(1, date(2026, 3, 8))] == {date(2026, 3, 9)}
        assert (2, date(2026, 3, 1)) not in worked

    def test_cycle_week_dates_partial_week(self):
        weeks = build_cycle_week_dates([date(2026, 3, 6), date(2026, 3, 7), date(2026, 3, 8)])
        assert weeks[date(2026, 3, 1)] == {date(2026, 3, 6), date(2026, 3, 7)}
        assert weeks[date(2026, 3, 8)] == {date(2026, 3, 8)}
