import pytest
from datetime import date

from teamwise.services.scheduling.types import (
    EmploymentType,
    OverrideType,
    ShiftType,
    WorkPattern,
    WorksDowMode,
)
from teamwise.services.scheduling.constants import NO_ELIGIBLE_CANDIDATES_REASON
from teamwise.services.scheduling.coverage import (
    fill_coverage_slot,
    pick_therapist_for_date,
    weekly_limit_for,
)

from conftest import day_of_week, force_override, get_test_sunday, make_therapist

MONDAY = day_of_week(1)


def pick(candidates, cursor=0, on_date=MONDAY, assigned=None, worked=None, limits=None, overrides=None):
    return pick_therapist_for_date(
        candidates, cursor, on_date, ShiftType.DAY, 1,
        overrides or {}, assigned or set(), worked or {}, limits or {},
    )


class TestWeeklyLimitFor:
    def test_employment_defaults(self):
        assert weekly_limit_for(make_therapist(1), {}) == 3
        assert weekly_limit_for(make_therapist(1, employment_type=EmploymentType.PART_TIME), {}) == 2
        assert weekly_limit_for(make_therapist(1, employment_type=EmploymentType.PRN), {}) == 1

    def test_personal_cap_and_map(self):
        therapist = make_therapist(1, max_work_days_per_week=4)
        assert weekly_limit_for(therapist, {}) == 4
        assert weekly_limit_for(therapist, {1: 5}) == 5
        assert weekly_limit_for(therapist, {1: 0}) == 4


class TestPickTherapistForDate:
    def test_round_robin_from_cursor(self, day_team):
        result = pick(day_team, cursor=2)
        assert result.therapist.id == 3
        assert result.next_cursor == 3

    def test_cursor_wraps(self, day_team):
        result = pick(day_team, cursor=4)
        assert result.therapist.id == 5
        assert result.next_cursor == 0

    def test_skips_assigned_today(self, day_team):
        result = pick(day_team, cursor=0, assigned={1, 2})
        assert result.therapist.id == 3

    def test_skips_weekly_cap(self, day_team):
        week = get_test_sunday()
        worked = {(1, week): {day_of_week(0), day_of_week(2), day_of_week(3)}}
        assert pick(day_team, worked=worked).therapist.id == 2

    def test_reconfirming_worked_date_ignores_cap(self):
        therapist = make_therapist(1)
        worked = {(1, get_test_sunday()): {day_of_week(0), MONDAY, day_of_week(3)}}
        assert pick([therapist], worked=worked).therapist.id == 1

    def test_preferred_weekday_ranks_first(self, day_team):
        day_team[3].preferred_weekdays = [1]
        result = pick(day_team, cursor=0)
        assert result.therapist.id == 4
        assert result.next_cursor == 4

    def test_lower_penalty_ranks_first(self):
        soft = make_therapist(1, pattern=WorkPattern(1, works_dow=[3], works_dow_mode=WorksDowMode.SOFT))
        plain = make_therapist(2)
        assert pick([soft, plain]).therapist.id == 2

    def test_fewer_worked_days_ranks_first(self):
        busy = make_therapist(1)
        idle = make_therapist(2)
        worked = {(1, get_test_sunday()): {day_of_week(0)}}
        assert pick([busy, idle], worked=worked).therapist.id == 2

    def test_force_off_skipped(self, day_team):
        overrides = {1: [force_override(1, MONDAY, OverrideType.FORCE_OFF)]}
        assert pick(day_team, overrides=overrides).therapist.id == 2

    def test_no_candidate_keeps_cursor(self, day_team):
        result = pick(day_team, cursor=3, assigned={t.id for t in day_team})
        assert result.therapist is None
        assert result.next_cursor == 3

    def test_empty_candidates(self):
        result = pick([], cursor=2)
        assert result.therapist is None
        assert result.next_cursor == 2


class TestFillCoverageSlot:
    def test_fills_to_target(self):
        pattern = WorkPattern(0, works_dow=[1])
        candidates = [make_therapist(1, "t-1", pattern=pattern), make_therapist(2, "t-2", pattern=pattern)]
        assigned, worked = set(), {}
        result = fill_coverage_slot(
            candidates, 0, date(2026, 3, 2), ShiftType.DAY, 1, {}, assigned, worked, {},
            current_coverage=0, target_coverage=2, min_coverage=1,
        )
        assert [t.id for t in result.picked] == [1, 2]
        assert result.coverage == 2
        assert result.unfilled_count == 0
        assert result.unfilled_reason is None
        assert assigned == {1, 2}
        assert worked[(1, date(2026, 3, 1))] == {date(2026, 3, 2)}

    def test_reports_unfilled_when_under_min(self):
        blocked = make_therapist(1, pattern=WorkPattern(1, works_dow=[2], works_dow_mode=WorksDowMode.HARD))
        result = fill_coverage_slot(
            [blocked], 0, date(2026, 3, 2), ShiftType.DAY, 1, {}, set(), {}, {},
            current_coverage=0, target_coverage=1, min_coverage=1,
        )
        assert result.picked == []
        assert result.unfilled_count == 1
        assert result.unfilled_reason == NO_ELIGIBLE_CANDIDATES_REASON

    def test_existing_coverage_counts(self, day_team):
        result = fill_coverage_slot(
            day_team, 0, MONDAY, ShiftType.DAY, 1, {}, set(), {}, {},
            current_coverage=2, target_coverage=3, min_coverage=3,
        )
        assert len(result.picked) == 1
        assert result.coverage == 3
        assert result.next_cursor == 1

    def test_short_of_target_but_above_min(self):
        result = fill_coverage_slot(
            [make_therapist(1)], 0, MONDAY, ShiftType.DAY, 1, {}, set(), {}, {},
            current_coverage=0, target_coverage=3, min_coverage=1,
        )
        assert result.coverage == 1
        assert result.unfilled_count == 0
