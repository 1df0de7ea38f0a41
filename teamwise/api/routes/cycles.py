import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from teamwise.api.deps import get_db
from teamwise.core.config import settings
from teamwise.db.models.schedule_cycles import ScheduleCycles
from teamwise.db.models.shifts import Shifts
from teamwise.schemas.schedule import (
    CycleResponse,
    DesignatedLeadRequest,
    DesignatedLeadResponse,
    GenerationResponse,
    PublishRequest,
    UnfilledSlotResponse,
    ValidationResponse,
)
from teamwise.services.scheduling import (
    CoverageTargets,
    CyclePublishedError,
    LeadMutationReason,
    StorageError,
    format_generation_message,
    generate_draft_schedule,
    get_strategy,
    set_designated_lead,
    validate_cycle_for_publish,
)
from teamwise.services.scheduling.data_loader import load_schedule_context, load_validation_inputs
from teamwise.services.scheduling.storage import SqlAlchemyLeadStore, SqlAlchemyShiftStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cycles", tags=["cycles"])

LEAD_FAILURES = {
    LeadMutationReason.MULTIPLE_LEADS_PREVENTED: (
        status.HTTP_409_CONFLICT,
        "A designated lead already exists for that shift. Refresh and try again.",
    ),
    LeadMutationReason.LEAD_NOT_ELIGIBLE: (
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Selected therapist is not lead-eligible.",
    ),
    LeadMutationReason.INVALID_INPUT: (
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Invalid date or shift type.",
    ),
    LeadMutationReason.FAILED: (
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Could not set designated lead for that shift. Please try again.",
    ),
}


def coverage_targets() -> CoverageTargets:
    return CoverageTargets(
        min_coverage=settings.MIN_SHIFT_COVERAGE,
        target_coverage=settings.TARGET_SHIFT_COVERAGE,
        max_coverage=settings.MAX_SHIFT_COVERAGE,
    )


def get_cycle_or_404(db: Session, cycle_id: int) -> ScheduleCycles:
    cycle = db.get(ScheduleCycles, cycle_id)
    if not cycle:
        raise HTTPException(status_code=404, detail="Schedule cycle not found")
    return cycle


def run_validation(db: Session, cycle_id: int, override_weekly_rules: bool) -> ValidationResponse:
    targets = coverage_targets()
    inputs = load_validation_inputs(db, cycle_id)
    result = validate_cycle_for_publish(
        inputs.cycle_dates,
        inputs.therapist_ids,
        inputs.cycle_week_dates,
        inputs.weekly_worked_dates,
        inputs.assignments,
        targets.min_coverage,
        targets.max_coverage,
        weekly_limits=inputs.weekly_limits,
        override_weekly_rules=override_weekly_rules,
    )
    return ValidationResponse.model_validate(result)


@router.post("/{cycle_id}/auto-generate", response_model=GenerationResponse)
def auto_generate(cycle_id: int, db: Session = Depends(get_db)):
    get_cycle_or_404(db, cycle_id)

    context = load_schedule_context(db, cycle_id, coverage_targets())
    try:
        result = generate_draft_schedule(context, get_strategy(settings.ELIGIBILITY_STRATEGY))
    except CyclePublishedError:
        raise HTTPException(status_code=409, detail="Cannot auto-generate a published cycle")

    if result.shifts_to_insert:
        try:
            SqlAlchemyShiftStore(db).insert_shifts(result.shifts_to_insert)
        except StorageError as error:
            logger.error("Failed to insert auto-generated shifts for cycle %s: %r", cycle_id, error)
            raise HTTPException(status_code=500, detail="Auto-generate failed. Please try again.")

    return GenerationResponse(
        **asdict(result.feedback),
        message=format_generation_message(result.feedback),
        unfilled_slots=[UnfilledSlotResponse.model_validate(slot) for slot in result.unfilled],
    )


@router.delete("/{cycle_id}/draft")
def clear_draft(cycle_id: int, db: Session = Depends(get_db)):
    cycle = get_cycle_or_404(db, cycle_id)
    if cycle.published:
        raise HTTPException(status_code=409, detail="Cannot clear a published cycle")

    removed = db.execute(select(func.count()).select_from(Shifts).where(Shifts.cycle_id == cycle_id)).scalar_one()
    db.execute(delete(Shifts).where(Shifts.cycle_id == cycle_id))
    db.commit()
    return {"removed": removed}


@router.get("/{cycle_id}/validation", response_model=ValidationResponse)
def get_validation(cycle_id: int, override_weekly_rules: bool = False, db: Session = Depends(get_db)):
    get_cycle_or_404(db, cycle_id)
    return run_validation(db, cycle_id, override_weekly_rules)


@router.post("/{cycle_id}/publish", response_model=CycleResponse)
def publish_cycle(cycle_id: int, payload: PublishRequest, db: Session = Depends(get_db)):
    cycle = get_cycle_or_404(db, cycle_id)
    if cycle.published:
        return cycle

    validation = run_validation(db, cycle_id, payload.override_weekly_rules)
    if not validation.ok:
        raise HTTPException(status_code=409, detail=validation.model_dump(mode="json"))

    cycle.published = True
    db.commit()
    db.refresh(cycle)
    logger.info("Published cycle %s (weekly override=%s)", cycle_id, payload.override_weekly_rules)
    return cycle


@router.post("/{cycle_id}/unpublish", response_model=CycleResponse)
def unpublish_cycle(cycle_id: int, db: Session = Depends(get_db)):
    cycle = get_cycle_or_404(db, cycle_id)
    cycle.published = False
    db.commit()
    db.refresh(cycle)
    return cycle


@router.post("/{cycle_id}/lead", response_model=DesignatedLeadResponse)
def set_lead(cycle_id: int, payload: DesignatedLeadRequest, db: Session = Depends(get_db)):
    get_cycle_or_404(db, cycle_id)

    result = set_designated_lead(
        SqlAlchemyLeadStore(db),
        cycle_id,
        payload.date,
        payload.shift_type,
        payload.therapist_id,
    )
    if result.ok:
        return DesignatedLeadResponse(ok=True)

    status_code, message = LEAD_FAILURES[result.reason]
    raise HTTPException(
        status_code=status_code,
        detail={"reason": result.reason.value, "message": message},
    )
