import datetime as dt
from pydantic import BaseModel
from typing import Optional

from teamwise.services.scheduling.assignment_status import CoverageUiStatus
from teamwise.services.scheduling.types import AssignmentStatus, ShiftRole, ShiftStatus, ShiftType


class ShiftBase(BaseModel):
    cycle_id: int
    therapist_id: int
    date: dt.date
    shift_type: ShiftType
    role: ShiftRole = ShiftRole.STAFF
    status: ShiftStatus = ShiftStatus.SCHEDULED


class ShiftCreate(ShiftBase):
    pass


class ShiftStatusUpdate(BaseModel):
    status: CoverageUiStatus


class ShiftResponse(ShiftBase):
    id: int
    assignment_status: Optional[AssignmentStatus] = None
    created_at: dt.datetime
    updated_at: dt.datetime

    class Config:
        from_attributes = True
