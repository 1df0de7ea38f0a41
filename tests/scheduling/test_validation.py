import pytest
from datetime import date

from teamwise.services.scheduling.types import (
    ShiftRole,
    ShiftStatus,
    ShiftType,
    SlotAssignment,
    SlotIssueReason,
)
from teamwise.services.scheduling.dates import build_date_range
from teamwise.services.scheduling.validation import (
    exceeds_coverage_limit,
    exceeds_weekly_limit,
    summarize_coverage_violations,
    summarize_shift_slot_violations,
    summarize_weekly_violations,
    validate_cycle_for_publish,
)
from teamwise.services.scheduling.workload import build_cycle_week_dates

MONDAY = date(2026, 3, 2)


def assignment(therapist_id, role=ShiftRole.STAFF, shift_type=ShiftType.DAY,
               status=ShiftStatus.SCHEDULED, eligible=True, on_date=MONDAY) -> SlotAssignment:
    return SlotAssignment(
        date=on_date,
        shift_type=shift_type,
        status=status,
        role=role,
        therapist_id=therapist_id,
        is_lead_eligible=eligible,
    )


def staffed_day_slot(lead_eligible=True) -> list[SlotAssignment]:
    return [
        assignment(1, role=ShiftRole.LEAD, eligible=lead_eligible),
        assignment(2),
        assignment(3),
    ]


class TestLimitHelpers:
    def test_exceeds_coverage_limit_at_max(self):
        assert exceeds_coverage_limit(5, 5) is True
        assert exceeds_coverage_limit(4, 5) is False

    def test_exceeds_weekly_limit(self):
        worked = {"2026-03-01", "2026-03-03", "2026-03-04"}
        assert exceeds_weekly_limit(worked, "2026-03-05", 3) is True
        assert exceeds_weekly_limit(worked, "2026-03-03", 3) is False
        assert exceeds_weekly_limit(worked, "2026-03-05", 4) is False


class TestSummarizeCoverageViolations:
    def test_counts_under_and_over(self):
        coverage = {
            ("2026-03-02", "day"): 2,
            ("2026-03-02", "night"): 3,
            (date(2026, 3, 3), ShiftType.DAY): 6,
            (date(2026, 3, 3), ShiftType.NIGHT): 4,
        }
        result = summarize_coverage_violations(["2026-03-02", "2026-03-03"], coverage, 3, 5)
        assert result.under_coverage == 1
        assert result.over_coverage == 1
        assert result.violations == 2

    def test_missing_slot_is_under(self):
        result = summarize_coverage_violations([MONDAY], {}, 3, 5, shift_types=[ShiftType.DAY])
        assert result.under_coverage == 1


class TestSummarizeWeeklyViolations:
    def test_under_and_over(self):
        cycle_week_dates = build_cycle_week_dates(build_date_range("2026-03-01", "2026-03-09"))
        worked = {
            (1, date(2026, 3, 1)): {date(2026, 3, 2), date(2026, 3, 3), date(2026, 3, 4)},
            (1, date(2026, 3, 8)): {date(2026, 3, 8), date(2026, 3, 9)},
            (2, date(2026, 3, 1)): {date(2026, 3, 2), date(2026, 3, 3), date(2026, 3, 4), date(2026, 3, 5)},
            (2, date(2026, 3, 8)): {date(2026, 3, 8), date(2026, 3, 9)},
        }
        result = summarize_weekly_violations([1, 2], cycle_week_dates, worked, 3)
        # t2 is over in week one; nobody is under
        assert result.over_count == 1
        assert result.under_count == 0
        assert result.violations == 1

    def test_partial_week_caps_at_dates_in_cycle(self):
        cycle_week_dates = build_cycle_week_dates(build_date_range("2026-03-01", "2026-03-09"))
        worked = {
            (1, date(2026, 3, 1)): {date(2026, 3, 2), date(2026, 3, 3), date(2026, 3, 4)},
            (1, date(2026, 3, 8)): {date(2026, 3, 8)},
        }
        result = summarize_weekly_violations([1], cycle_week_dates, worked, 3)
        assert result.under_count == 1
        assert result.over_count == 0

    def test_personal_limits(self):
        cycle_week_dates = build_cycle_week_dates(build_date_range("2026-03-01", "2026-03-07"))
        worked = {(1, date(2026, 3, 1)): {date(2026, 3, 2)}}
        result = summarize_weekly_violations([1], cycle_week_dates, worked, 3, weekly_limits={1: 1})
        assert result.violations == 0

    def test_full_and_partial_weeks_together(self):
        cycle_week_dates = build_cycle_week_dates(build_date_range("2026-03-01", "2026-03-09"))
        worked = {
            (1, date(2026, 3, 1)): {date(2026, 3, 2), date(2026, 3, 3), date(2026, 3, 4)},
            (1, date(2026, 3, 8)): {date(2026, 3, 9)},
            (2, date(2026, 3, 1)): {date(2026, 3, 2), date(2026, 3, 3), date(2026, 3, 4), date(2026, 3, 5)},
            (2, date(2026, 3, 8)): {date(2026, 3, 8), date(2026, 3, 9)},
        }
        result = summarize_weekly_violations([1, 2], cycle_week_dates, worked, 3)
        assert result.under_count == 1
        assert result.over_count == 1
        assert result.violations == 2


class TestSummarizeShiftSlotViolations:
    def test_empty_night_counts_missing_lead(self):
        result = summarize_shift_slot_violations([MONDAY], staffed_day_slot(), 3, 5)
        assert result.missing_lead == 1
        assert result.under_coverage == 1
        assert result.issues[0].shift_type == ShiftType.NIGHT

    def test_missing_lead_in_both_slots(self):
        rows = [assignment(1), assignment(2), assignment(3)]
        result = summarize_shift_slot_violations([MONDAY], rows, 3, 5)
        assert result.missing_lead == 2
        assert len(result.issues) == 2
        for issue in result.issues:
            assert SlotIssueReason.MISSING_LEAD in issue.reasons

    def test_ineligible_lead(self):
        result = summarize_shift_slot_violations([MONDAY], staffed_day_slot(lead_eligible=False), 3, 5, [ShiftType.DAY])
        assert result.ineligible_lead == 1
        assert result.missing_lead == 0
        assert result.issues[0].reasons == [SlotIssueReason.INELIGIBLE_LEAD]

    def test_multiple_leads(self):
        rows = staffed_day_slot() + [assignment(4, role=ShiftRole.LEAD)]
        result = summarize_shift_slot_violations([MONDAY], rows, 3, 5, [ShiftType.DAY])
        assert result.multiple_leads == 1
        assert result.violations == 1

    def test_non_counting_rows_ignored(self):
        rows = staffed_day_slot()
        rows[0].status = ShiftStatus.CALLED_OFF
        result = summarize_shift_slot_violations([MONDAY], rows, 3, 5, [ShiftType.DAY])
        assert result.missing_lead == 1
        assert result.under_coverage == 1
        assert set(result.issues[0].reasons) == {SlotIssueReason.UNDER_COVERAGE, SlotIssueReason.MISSING_LEAD}

    def test_over_coverage(self):
        rows = staffed_day_slot() + [assignment(i) for i in range(4, 7)]
        result = summarize_shift_slot_violations([MONDAY], rows, 3, 5, [ShiftType.DAY])
        assert result.over_coverage == 1

    def test_clean_slot(self):
        result = summarize_shift_slot_violations([MONDAY], staffed_day_slot(), 3, 5, [ShiftType.DAY])
        assert result.violations == 0
        assert result.issues == []


class TestValidateCycleForPublish:
    def _run(self, worked, override=False):
        cycle_dates = [MONDAY]
        rows = staffed_day_slot() + [
            assignment(4, role=ShiftRole.LEAD, shift_type=ShiftType.NIGHT),
            assignment(5, shift_type=ShiftType.NIGHT),
            assignment(6, shift_type=ShiftType.NIGHT),
        ]
        return validate_cycle_for_publish(
            cycle_dates, [1], build_cycle_week_dates(cycle_dates), worked, rows, 3, 5,
            override_weekly_rules=override,
        )

    def test_ok_when_clean(self):
        result = self._run({(1, date(2026, 3, 1)): {MONDAY}})
        assert result.ok is True
        assert result.weekly.violations == 0

    def test_weekly_violation_blocks(self):
        result = self._run({})
        assert result.ok is False
        assert result.weekly.under_count == 1

    def test_override_skips_weekly_rule(self):
        result = self._run({}, override=True)
        assert result.ok is True
        assert result.weekly is None
