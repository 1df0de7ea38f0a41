"""
Data loader for scheduling service.
Fetches all relevant data from the database and converts to internal types.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from teamwise.db.models.availability_overrides import AvailabilityOverrides
from teamwise.db.models.schedule_cycles import ScheduleCycles
from teamwise.db.models.shifts import Shifts
from teamwise.db.models.therapists import Therapists
from teamwise.db.models.work_patterns import WorkPatterns

from .coverage import weekly_limit_for
from .dates import build_date_range
from .generator import to_slot_assignments
from .types import (
    AvailabilityOverride,
    CoverageTargets,
    ScheduleContext,
    ScheduleCycle,
    Shift,
    ShiftType,
    SlotAssignment,
    Therapist,
)
from .work_patterns import normalize_dow_values, normalize_work_pattern
from .workload import build_cycle_week_dates, build_weekly_worked_dates, week_bounds


def to_schedule_cycle(row: ScheduleCycles) -> ScheduleCycle:
    return ScheduleCycle(
        id=row.id,
        label=row.label,
        start_date=row.start_date,
        end_date=row.end_date,
        published=row.published,
    )


def to_shift(row: Shifts) -> Shift:
    return Shift(
        id=row.id,
        cycle_id=row.cycle_id,
        therapist_id=row.therapist_id,
        date=row.date,
        shift_type=row.shift_type,
        role=row.role,
        status=row.status,
        assignment_status=row.assignment_status,
    )


def load_cycle(db: Session, cycle_id: int) -> Optional[ScheduleCycle]:
    row = db.get(ScheduleCycles, cycle_id)
    return to_schedule_cycle(row) if row else None


def load_therapists(db: Session) -> list[Therapist]:
    """Load every therapist with their normalized work pattern (if any)."""
    rows = db.execute(select(Therapists).order_by(Therapists.full_name, Therapists.id)).scalars().all()
    patterns = {p.therapist_id: p for p in db.execute(select(WorkPatterns)).scalars().all()}

    therapists = []
    for row in rows:
        pattern_row = patterns.get(row.id)
        therapists.append(Therapist(
            id=row.id,
            full_name=row.full_name,
            shift_type=row.shift_type,
            employment_type=row.employment_type,
            is_lead_eligible=row.is_lead_eligible,
            max_work_days_per_week=row.max_work_days_per_week,
            preferred_weekdays=normalize_dow_values(row.preferred_work_days),
            on_fmla=row.on_fmla,
            fmla_return_date=row.fmla_return_date,
            is_active=row.is_active,
            pattern=normalize_work_pattern(pattern_row) if pattern_row is not None else None,
        ))
    return therapists


def load_overrides(db: Session, cycle_id: int) -> list[AvailabilityOverride]:
    stmt = select(AvailabilityOverrides).where(AvailabilityOverrides.cycle_id == cycle_id)
    return [
        AvailabilityOverride(
            cycle_id=row.cycle_id,
            therapist_id=row.therapist_id,
            date=row.date,
            shift_type=row.shift_type,
            override_type=row.override_type,
            note=row.note,
            source=row.source,
        )
        for row in db.execute(stmt).scalars().all()
    ]


def load_cycle_shifts(db: Session, cycle_id: int) -> list[Shift]:
    stmt = select(Shifts).where(Shifts.cycle_id == cycle_id).order_by(Shifts.date, Shifts.id)
    return [to_shift(row) for row in db.execute(stmt).scalars().all()]


def load_shifts_between(db: Session, start: date, end: date) -> list[Shift]:
    """Shifts of every cycle inside [start, end], for weekly workload."""
    stmt = select(Shifts).where(Shifts.date >= start, Shifts.date <= end)
    return [to_shift(row) for row in db.execute(stmt).scalars().all()]


def _touched_weeks(cycle: ScheduleCycle) -> tuple[date, date]:
    first = week_bounds(cycle.start_date)
    last = week_bounds(cycle.end_date)
    return first.week_start, last.week_end


def load_schedule_context(
    db: Session,
    cycle_id: int,
    targets: Optional[CoverageTargets] = None,
) -> ScheduleContext:
    """
    Load everything needed to auto-generate one cycle.

    Raises:
        ValueError: if the cycle does not exist
    """
    cycle = load_cycle(db, cycle_id)
    if cycle is None:
        raise ValueError(f"Schedule cycle {cycle_id} not found")

    therapists = load_therapists(db)
    week_start, week_end = _touched_weeks(cycle)
    existing = load_cycle_shifts(db, cycle_id)
    existing_ids = {s.id for s in existing}
    weekly = [s for s in load_shifts_between(db, week_start, week_end) if s.id not in existing_ids]

    return ScheduleContext(
        cycle=cycle,
        therapists=therapists,
        overrides=load_overrides(db, cycle_id),
        existing_shifts=existing,
        weekly_shifts=weekly,
        targets=targets or CoverageTargets(),
        shift_types=[ShiftType.DAY, ShiftType.NIGHT],
        weekly_limits={t.id: weekly_limit_for(t, {}) for t in therapists},
    )


@dataclass
class ValidationInputs:
    """Arguments for validate_cycle_for_publish, loaded for one cycle."""
    cycle: ScheduleCycle
    cycle_dates: list[date]
    therapist_ids: list[int]
    cycle_week_dates: dict[date, set[date]]
    weekly_worked_dates: dict[tuple[int, date], set[date]]
    assignments: list[SlotAssignment]
    weekly_limits: dict[int, int] = field(default_factory=dict)


def load_validation_inputs(db: Session, cycle_id: int) -> ValidationInputs:
    """
    Load the data the publish gate checks.
    Weekly rules apply to active therapists who are not on FMLA.

    Raises:
        ValueError: if the cycle does not exist
    """
    cycle = load_cycle(db, cycle_id)
    if cycle is None:
        raise ValueError(f"Schedule cycle {cycle_id} not found")

    therapists = load_therapists(db)
    scheduled = [t for t in therapists if t.is_active and not t.on_fmla]
    cycle_dates = build_date_range(cycle.start_date, cycle.end_date)
    cycle_shifts = load_cycle_shifts(db, cycle_id)
    week_start, week_end = _touched_weeks(cycle)

    return ValidationInputs(
        cycle=cycle,
        cycle_dates=cycle_dates,
        therapist_ids=[t.id for t in scheduled],
        cycle_week_dates=build_cycle_week_dates(cycle_dates),
        weekly_worked_dates=build_weekly_worked_dates(load_shifts_between(db, week_start, week_end)),
        assignments=to_slot_assignments(cycle_shifts, therapists),
        weekly_limits={t.id: weekly_limit_for(t, {}) for t in scheduled},
    )
