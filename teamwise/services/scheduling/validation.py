"""
Rule validation for a schedule cycle.
Coverage per slot, weekly workload per therapist-week and designated-lead checks.
Everything here is read-only; results gate publishing.
"""

from collections import defaultdict
from datetime import date
from typing import Iterable, Mapping, Optional, Sequence

from .constants import MAX_WORK_DAYS_PER_WEEK, sanitize_weekly_limit
from .dates import DateLike, parse_iso_date
from .types import (
    CoverageValidation,
    PublishValidation,
    ShiftRole,
    ShiftType,
    SlotAssignment,
    SlotIssue,
    SlotIssueReason,
    SlotValidation,
    WeeklyValidation,
)
from .workload import counts_toward_workload

SLOT_SHIFT_TYPES = (ShiftType.DAY, ShiftType.NIGHT)


def _slot_key(value: DateLike, shift_type) -> tuple[Optional[date], str]:
    return parse_iso_date(value), getattr(shift_type, "value", shift_type)


def exceeds_coverage_limit(active_coverage: int, max_coverage_per_shift: int) -> bool:
    """True once a slot is at its maximum; adding one more would break it."""
    return active_coverage >= max_coverage_per_shift


def exceeds_weekly_limit(worked_dates: set, target_date: DateLike, max_work_days_per_week: int) -> bool:
    """True when target_date would be a new worked day beyond the weekly limit."""
    target = parse_iso_date(target_date)
    worked = {parse_iso_date(d) for d in worked_dates}
    return target not in worked and len(worked) >= max_work_days_per_week


def summarize_coverage_violations(
    cycle_dates: Iterable[DateLike],
    coverage_by_slot: Mapping[tuple, int],
    min_coverage_per_shift: int,
    max_coverage_per_shift: int,
    shift_types: Sequence = SLOT_SHIFT_TYPES,
) -> CoverageValidation:
    """
    Count slots under the minimum or over the maximum headcount.

    coverage_by_slot is keyed by (date, shift_type); dates may be date objects
    or ISO strings, shift types enums or plain strings.
    """
    counts = {_slot_key(d, s): n for (d, s), n in coverage_by_slot.items()}
    under = 0
    over = 0
    for value in cycle_dates:
        for shift_type in shift_types:
            count = counts.get(_slot_key(value, shift_type), 0)
            if count < min_coverage_per_shift:
                under += 1
            if count > max_coverage_per_shift:
                over += 1
    return CoverageValidation(under_coverage=under, over_coverage=over, violations=under + over)


def summarize_weekly_violations(
    therapist_ids: Iterable[int],
    cycle_week_dates: Mapping[date, set],
    weekly_worked_dates: Mapping[tuple, set],
    max_work_days_per_week: int = MAX_WORK_DAYS_PER_WEEK,
    weekly_limits: Optional[Mapping[int, int]] = None,
) -> WeeklyValidation:
    """
    Compare worked days to each therapist-week's cap.

    cap = min(limit, number of cycle dates in that week), so a partial week at
    a cycle boundary asks for fewer days. Both under and over are violations.
    """
    weekly_limits = weekly_limits or {}
    worked_by_key = {
        (therapist_id, parse_iso_date(week_start)): dates
        for (therapist_id, week_start), dates in weekly_worked_dates.items()
    }

    under = 0
    over = 0
    for therapist_id in therapist_ids:
        limit = sanitize_weekly_limit(weekly_limits.get(therapist_id), max_work_days_per_week)
        for week_start, week_dates in cycle_week_dates.items():
            cap = min(limit, len(week_dates))
            worked = len(worked_by_key.get((therapist_id, parse_iso_date(week_start)), ()))
            if worked < cap:
                under += 1
            if worked > cap:
                over += 1
    return WeeklyValidation(under_count=under, over_count=over, violations=under + over)


def summarize_shift_slot_violations(
    cycle_dates: Iterable[DateLike],
    assignments: Iterable[SlotAssignment],
    min_coverage_per_shift: int,
    max_coverage_per_shift: int,
    shift_types: Sequence = SLOT_SHIFT_TYPES,
) -> SlotValidation:
    """
    Per-slot coverage and designated-lead checks over every (date, shift) of a cycle.

    Only rows that occupy coverage (scheduled / on call) are scanned. A slot
    can report several reasons at once; every reason adds to its running total.
    """
    slots: dict[tuple, list[SlotAssignment]] = defaultdict(list)
    for assignment in assignments:
        if not counts_toward_workload(assignment.status):
            continue
        slots[_slot_key(assignment.date, assignment.shift_type)].append(assignment)

    result = SlotValidation()
    for value in cycle_dates:
        slot_date = parse_iso_date(value)
        if slot_date is None:
            continue
        for shift_type in shift_types:
            rows = slots.get(_slot_key(slot_date, shift_type), [])
            leads = [r for r in rows if getattr(r.role, "value", r.role) == ShiftRole.LEAD.value]
            reasons: list[SlotIssueReason] = []

            if len(rows) < min_coverage_per_shift:
                result.under_coverage += 1
                reasons.append(SlotIssueReason.UNDER_COVERAGE)
            if len(rows) > max_coverage_per_shift:
                result.over_coverage += 1
                reasons.append(SlotIssueReason.OVER_COVERAGE)
            if not leads:
                result.missing_lead += 1
                reasons.append(SlotIssueReason.MISSING_LEAD)
            if len(leads) > 1:
                result.multiple_leads += 1
                reasons.append(SlotIssueReason.MULTIPLE_LEADS)
            if any(not lead.is_lead_eligible for lead in leads):
                result.ineligible_lead += 1
                reasons.append(SlotIssueReason.INELIGIBLE_LEAD)

            if reasons:
                result.issues.append(SlotIssue(
                    date=slot_date,
                    shift_type=ShiftType(getattr(shift_type, "value", shift_type)),
                    reasons=reasons,
                ))

    result.violations = (
        result.under_coverage
        + result.over_coverage
        + result.missing_lead
        + result.multiple_leads
        + result.ineligible_lead
    )
    return result


def validate_cycle_for_publish(
    cycle_dates: Sequence[DateLike],
    therapist_ids: Iterable[int],
    cycle_week_dates: Mapping[date, set],
    weekly_worked_dates: Mapping[tuple, set],
    assignments: Iterable[SlotAssignment],
    min_coverage_per_shift: int,
    max_coverage_per_shift: int,
    max_work_days_per_week: int = MAX_WORK_DAYS_PER_WEEK,
    weekly_limits: Optional[Mapping[int, int]] = None,
    override_weekly_rules: bool = False,
) -> PublishValidation:
    """Run the pre-publish gate. The weekly rule can be overridden by a manager."""
    weekly = None
    if not override_weekly_rules:
        weekly = summarize_weekly_violations(
            therapist_ids,
            cycle_week_dates,
            weekly_worked_dates,
            max_work_days_per_week,
            weekly_limits,
        )

    slots = summarize_shift_slot_violations(
        cycle_dates,
        assignments,
        min_coverage_per_shift,
        max_coverage_per_shift,
    )

    ok = slots.violations == 0 and (weekly is None or weekly.violations == 0)
    return PublishValidation(ok=ok, weekly=weekly, slots=slots)
