import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from teamwise.api.deps import get_db
from teamwise.db.models.schedule_cycles import ScheduleCycles
from teamwise.db.models.shifts import Shifts
from teamwise.db.models.therapists import Therapists
from teamwise.schemas.shifts import ShiftCreate, ShiftResponse, ShiftStatusUpdate
from teamwise.services.scheduling import Shift
from teamwise.services.scheduling.assignment_status import (
    from_assignment_status,
    update_coverage_assignment_status,
)
from teamwise.services.scheduling.errors import UNIQUE_VIOLATION
from teamwise.services.scheduling.mutations import assign_coverage_shift, unassign_coverage_shift
from teamwise.services.scheduling.storage import SqlAlchemyShiftStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shifts", tags=["shifts"])


def get_shift_or_404(db: Session, shift_id: int) -> Shifts:
    shift = db.get(Shifts, shift_id)
    if not shift:
        raise HTTPException(status_code=404, detail="Shift not found")
    return shift


@router.post("", response_model=ShiftResponse, status_code=status.HTTP_201_CREATED)
def create_shift(payload: ShiftCreate, db: Session = Depends(get_db)):
    if not db.get(ScheduleCycles, payload.cycle_id):
        raise HTTPException(status_code=404, detail="Schedule cycle not found")
    if not db.get(Therapists, payload.therapist_id):
        raise HTTPException(status_code=404, detail="Therapist not found")

    shift = Shift(**payload.model_dump())
    error = assign_coverage_shift(SqlAlchemyShiftStore(db), shift)
    if error is not None:
        if error.code == UNIQUE_VIOLATION:
            raise HTTPException(status_code=409, detail="Therapist already has a shift on this date or the slot already has a lead")
        raise HTTPException(status_code=500, detail="Could not save shift")

    return get_shift_or_404(db, shift.id)


@router.delete("/{shift_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_shift(shift_id: int, db: Session = Depends(get_db)):
    get_shift_or_404(db, shift_id)
    error = unassign_coverage_shift(SqlAlchemyShiftStore(db), shift_id)
    if error is not None:
        raise HTTPException(status_code=500, detail="Could not remove shift")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{shift_id}/status", response_model=ShiftResponse)
def update_shift_status(shift_id: int, payload: ShiftStatusUpdate, db: Session = Depends(get_db)):
    shift = get_shift_or_404(db, shift_id)

    board = {shift_id: from_assignment_status(shift.assignment_status)}
    result = update_coverage_assignment_status(SqlAlchemyShiftStore(db), board, shift_id, payload.status)
    if not result.ok:
        raise HTTPException(status_code=500, detail=result.error_message)

    db.refresh(shift)
    return shift
