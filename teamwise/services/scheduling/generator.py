"""
Draft schedule generator - main orchestration layer.

Walks every date of a cycle and fills each shift type with the coverage
slot filler, on top of whatever the draft already holds. Nothing is
written here; the caller persists `shifts_to_insert`.
"""

import logging
from collections import defaultdict
from datetime import date
from typing import Optional

from .coverage import fill_coverage_slot
from .dates import build_date_range, parse_iso_date
from .eligibility import EligibilityStrategy
from .errors import CyclePublishedError
from .types import (
    GenerationFeedback,
    GenerationResult,
    ScheduleContext,
    Shift,
    ShiftRole,
    ShiftStatus,
    ShiftType,
    SlotAssignment,
    Therapist,
    UnfilledSlot,
)
from .validation import summarize_shift_slot_violations
from .workload import build_weekly_worked_dates, counts_toward_workload

logger = logging.getLogger(__name__)


def _value(member) -> str:
    return getattr(member, "value", member)


def build_candidate_pools(therapists: list[Therapist], shift_types: list[ShiftType]) -> dict[ShiftType, list[Therapist]]:
    """Roster order per shift type: therapists of that shift type sorted by name."""
    pools = {}
    for shift_type in shift_types:
        pool = [t for t in therapists if _value(t.shift_type) == _value(shift_type)]
        pools[shift_type] = sorted(pool, key=lambda t: (t.full_name.lower(), t.id))
    return pools


def to_slot_assignments(shifts: list[Shift], therapists: list[Therapist]) -> list[SlotAssignment]:
    by_id = {t.id: t for t in therapists}
    assignments = []
    for shift in shifts:
        therapist = by_id.get(shift.therapist_id)
        assignments.append(SlotAssignment(
            date=shift.date,
            shift_type=shift.shift_type,
            status=shift.status,
            role=shift.role,
            therapist_id=shift.therapist_id,
            is_lead_eligible=therapist.is_lead_eligible if therapist else False,
            therapist_name=therapist.full_name if therapist else "",
        ))
    return assignments


def generate_draft_schedule(
    context: ScheduleContext,
    strategy: Optional[EligibilityStrategy] = None,
) -> GenerationResult:
    """
    Fill every (date, shift type) slot of an unpublished cycle.

    Each slot is filled up to min(target, max) starting from its current
    coverage. The first lead-eligible new pick in a slot that has no lead is
    inserted as the lead.

    Raises:
        CyclePublishedError: if the cycle is already published
    """
    cycle = context.cycle
    if cycle.published:
        raise CyclePublishedError(cycle.id)

    targets = context.targets
    fill_target = min(targets.target_coverage, targets.max_coverage)
    cycle_dates = build_date_range(cycle.start_date, cycle.end_date)

    overrides_by_therapist = defaultdict(list)
    for override in context.overrides:
        if override.cycle_id == cycle.id:
            overrides_by_therapist[override.therapist_id].append(override)

    weekly_worked = build_weekly_worked_dates(list(context.weekly_shifts) + list(context.existing_shifts))

    coverage_by_slot: dict[tuple[date, str], int] = defaultdict(int)
    lead_slots: set[tuple[date, str]] = set()
    assigned_by_date: dict[date, set[int]] = defaultdict(set)
    for shift in list(context.weekly_shifts) + list(context.existing_shifts):
        shift_date = parse_iso_date(shift.date)
        if shift_date is not None:
            assigned_by_date[shift_date].add(shift.therapist_id)
    for shift in context.existing_shifts:
        slot = (parse_iso_date(shift.date), _value(shift.shift_type))
        if counts_toward_workload(shift.status):
            coverage_by_slot[slot] += 1
        if _value(shift.role) == ShiftRole.LEAD.value:
            lead_slots.add(slot)

    pools = build_candidate_pools(context.therapists, context.shift_types)
    cursors = {shift_type: 0 for shift_type in context.shift_types}

    new_shifts: list[Shift] = []
    unfilled: list[UnfilledSlot] = []

    for slot_date in cycle_dates:
        assigned_today = assigned_by_date[slot_date]
        for shift_type in context.shift_types:
            slot = (slot_date, _value(shift_type))
            result = fill_coverage_slot(
                pools[shift_type],
                cursors[shift_type],
                slot_date,
                shift_type,
                cycle.id,
                overrides_by_therapist,
                assigned_today,
                weekly_worked,
                context.weekly_limits,
                coverage_by_slot[slot],
                fill_target,
                targets.min_coverage,
                strategy,
            )
            cursors[shift_type] = result.next_cursor
            coverage_by_slot[slot] = result.coverage

            has_lead = slot in lead_slots
            for therapist in result.picked:
                role = ShiftRole.STAFF
                if not has_lead and therapist.is_lead_eligible:
                    role = ShiftRole.LEAD
                    has_lead = True
                    lead_slots.add(slot)
                new_shifts.append(Shift(
                    cycle_id=cycle.id,
                    therapist_id=therapist.id,
                    date=slot_date,
                    shift_type=shift_type,
                    role=role,
                    status=ShiftStatus.SCHEDULED,
                ))

            if result.unfilled_count > 0:
                logger.debug(
                    "Cycle %s: %s %s short by %d (%s)",
                    cycle.id, slot_date, _value(shift_type), result.unfilled_count, result.unfilled_reason,
                )
                unfilled.append(UnfilledSlot(
                    date=slot_date,
                    shift_type=shift_type,
                    count=result.unfilled_count,
                    reason=result.unfilled_reason,
                ))

    slots = summarize_shift_slot_violations(
        cycle_dates,
        to_slot_assignments(list(context.existing_shifts) + new_shifts, context.therapists),
        targets.min_coverage,
        targets.max_coverage,
        context.shift_types,
    )
    feedback = GenerationFeedback(
        added=len(new_shifts),
        unfilled=sum(u.count for u in unfilled),
        under_coverage=slots.under_coverage,
        over_coverage=slots.over_coverage,
        lead_missing=slots.missing_lead,
        lead_multiple=slots.multiple_leads,
        lead_ineligible=slots.ineligible_lead,
    )
    logger.info(
        "Generated draft for cycle %s: added=%d unfilled=%d lead_missing=%d",
        cycle.id, feedback.added, feedback.unfilled, feedback.lead_missing,
    )
    return GenerationResult(shifts_to_insert=new_shifts, unfilled=unfilled, feedback=feedback)


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def format_generation_message(feedback: GenerationFeedback) -> str:
    """User-facing summary of an auto-generate run."""
    if feedback.added == 0 and feedback.unfilled == 0 and feedback.lead_missing == 0:
        return (
            "Auto-generate made no changes because this draft already has assignment coverage. "
            'Use "Clear draft and start over" to rebuild it.'
        )

    message = f"Draft generated with {feedback.added} new shifts."
    if feedback.unfilled > 0:
        message += f" {_plural(feedback.unfilled, 'slot')} still need manual fill."
    if feedback.lead_missing > 0:
        message += f" {_plural(feedback.lead_missing, 'shift')} still need a designated lead."
    return message
