"""
Coverage slot filler.

Greedy round-robin over a candidate list: each pick scans at most one full
pass starting at the cursor, so filling a slot always terminates. The cursor
is an explicit value passed in and returned, never shared state.
"""

from datetime import date
from typing import Iterable, Mapping, MutableMapping, Optional

from .constants import NO_ELIGIBLE_CANDIDATES_REASON, default_weekly_limit, sanitize_weekly_limit
from .dates import DateLike, dow_index, parse_iso_date
from .eligibility import EligibilityStrategy, resolve_eligibility
from .types import AvailabilityOverride, FillSlotResult, PickResult, Therapist
from .workload import week_bounds


def weekly_limit_for(therapist: Therapist, weekly_limits: Mapping[int, int]) -> int:
    """Explicit limit map first, then the therapist's own cap, then the employment default."""
    fallback = sanitize_weekly_limit(
        therapist.max_work_days_per_week,
        default_weekly_limit(therapist.employment_type),
    )
    return sanitize_weekly_limit(weekly_limits.get(therapist.id), fallback)


def pick_therapist_for_date(
    candidates: list[Therapist],
    cursor: int,
    on_date: DateLike,
    shift_type,
    cycle_id: int,
    overrides_by_therapist: Mapping[int, Iterable[AvailabilityOverride]],
    assigned_today: set[int],
    weekly_worked_dates: Mapping[tuple[int, date], set[date]],
    weekly_limits: Mapping[int, int],
    strategy: Optional[EligibilityStrategy] = None,
) -> PickResult:
    """
    Choose one therapist for a date/shift.

    Ranking among eligible candidates:
        1. explicit preferred weekday includes the date
        2. lower advisory eligibility penalty
        3. fewer days already worked that week
        4. scan order from the cursor
    """
    if not candidates:
        return PickResult(therapist=None, next_cursor=cursor)

    target = parse_iso_date(on_date)
    bounds = week_bounds(target)
    if target is None or bounds is None:
        return PickResult(therapist=None, next_cursor=cursor)

    weekday = dow_index(target)
    start = cursor % len(candidates)
    best: Optional[tuple[tuple[int, int, int, int], int]] = None

    for offset in range(len(candidates)):
        index = (start + offset) % len(candidates)
        therapist = candidates[index]
        if therapist.id in assigned_today:
            continue

        resolution = resolve_eligibility(
            therapist,
            cycle_id,
            target,
            shift_type,
            overrides_by_therapist.get(therapist.id, ()),
            strategy,
        )
        if not resolution.allowed:
            continue

        worked = weekly_worked_dates.get((therapist.id, bounds.week_start), set())
        if target not in worked and len(worked) >= weekly_limit_for(therapist, weekly_limits):
            continue

        prefers_day = weekday in therapist.preferred_weekdays
        rank = (0 if prefers_day else 1, resolution.penalty, len(worked), offset)
        if best is None or rank < best[0]:
            best = (rank, index)

    if best is None:
        return PickResult(therapist=None, next_cursor=cursor)

    index = best[1]
    return PickResult(therapist=candidates[index], next_cursor=(index + 1) % len(candidates))


def fill_coverage_slot(
    candidates: list[Therapist],
    cursor: int,
    on_date: DateLike,
    shift_type,
    cycle_id: int,
    overrides_by_therapist: Mapping[int, Iterable[AvailabilityOverride]],
    assigned_today: set[int],
    weekly_worked_dates: MutableMapping[tuple[int, date], set[date]],
    weekly_limits: Mapping[int, int],
    current_coverage: int,
    target_coverage: int,
    min_coverage: int,
    strategy: Optional[EligibilityStrategy] = None,
) -> FillSlotResult:
    """
    Fill one (date, shift) slot up to target_coverage.

    assigned_today and weekly_worked_dates are updated in place with every
    pick so the caller can carry them into the next slot.
    """
    target = parse_iso_date(on_date)
    bounds = week_bounds(target)
    coverage = current_coverage
    picked: list[Therapist] = []

    while coverage < target_coverage:
        pick = pick_therapist_for_date(
            candidates,
            cursor,
            target,
            shift_type,
            cycle_id,
            overrides_by_therapist,
            assigned_today,
            weekly_worked_dates,
            weekly_limits,
            strategy,
        )
        cursor = pick.next_cursor
        if pick.therapist is None:
            break

        therapist = pick.therapist
        picked.append(therapist)
        assigned_today.add(therapist.id)
        if bounds is not None:
            weekly_worked_dates.setdefault((therapist.id, bounds.week_start), set()).add(target)
        coverage += 1

    if coverage >= min_coverage:
        return FillSlotResult(
            picked=picked,
            next_cursor=cursor,
            coverage=coverage,
            unfilled_count=0,
            unfilled_reason=None,
        )

    return FillSlotResult(
        picked=picked,
        next_cursor=cursor,
        coverage=coverage,
        unfilled_count=min_coverage - coverage,
        unfilled_reason=NO_ELIGIBLE_CANDIDATES_REASON,
    )
