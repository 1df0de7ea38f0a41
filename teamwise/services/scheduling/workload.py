"""
Workload metrics.
Counts distinct worked dates per therapist for Sunday-Saturday weeks and whole cycles.
"""

from collections import defaultdict
from datetime import date, timedelta
from typing import Iterable, Optional

from .constants import COUNTING_STATUSES
from .dates import DateLike, dow_index, parse_iso_date
from .types import Shift, WeekBounds, WorkloadCount


def week_bounds(value: DateLike) -> Optional[WeekBounds]:
    """Sunday-anchored week containing the date, or None on invalid input."""
    parsed = parse_iso_date(value)
    if parsed is None:
        return None
    week_start = parsed - timedelta(days=dow_index(parsed))
    return WeekBounds(week_start=week_start, week_end=week_start + timedelta(days=6))


def counts_toward_workload(status) -> bool:
    return getattr(status, "value", status) in COUNTING_STATUSES


def build_workload_counts(
    shifts: Iterable[Shift],
    week_start: DateLike,
    week_end: DateLike,
    cycle_start: DateLike,
    cycle_end: DateLike,
) -> dict[int, WorkloadCount]:
    """
    Distinct worked dates per therapist within a week and within a cycle.

    Only 'scheduled' and 'on_call' rows count; therapists without a counting
    row inside the cycle are left out of the result.
    """
    bounds = [parse_iso_date(v) for v in (week_start, week_end, cycle_start, cycle_end)]
    if any(b is None for b in bounds):
        return {}
    week_from, week_to, cycle_from, cycle_to = bounds

    week_dates: dict[int, set[date]] = defaultdict(set)
    cycle_dates: dict[int, set[date]] = defaultdict(set)

    for shift in shifts:
        if not counts_toward_workload(shift.status):
            continue
        shift_date = parse_iso_date(shift.date)
        if shift_date is None or shift_date < cycle_from or shift_date > cycle_to:
            continue

        cycle_dates[shift.therapist_id].add(shift_date)
        if week_from <= shift_date <= week_to:
            week_dates[shift.therapist_id].add(shift_date)

    return {
        therapist_id: WorkloadCount(
            week_shift_count=len(week_dates.get(therapist_id, ())),
            cycle_shift_count=len(dates),
        )
        for therapist_id, dates in cycle_dates.items()
    }


def build_weekly_worked_dates(shifts: Iterable[Shift]) -> dict[tuple[int, date], set[date]]:
    """(therapist_id, week_start) -> distinct worked dates from counting rows."""
    worked: dict[tuple[int, date], set[date]] = defaultdict(set)
    for shift in shifts:
        if not counts_toward_workload(shift.status):
            continue
        bounds = week_bounds(shift.date)
        if bounds is None:
            continue
        worked[(shift.therapist_id, bounds.week_start)].add(parse_iso_date(shift.date))
    return dict(worked)


def build_cycle_week_dates(cycle_dates: Iterable[DateLike]) -> dict[date, set[date]]:
    """week_start -> dates of that week that fall inside the cycle."""
    weeks: dict[date, set[date]] = defaultdict(set)
    for value in cycle_dates:
        bounds = week_bounds(value)
        if bounds is None:
            continue
        weeks[bounds.week_start].add(parse_iso_date(value))
    return dict(weeks)
