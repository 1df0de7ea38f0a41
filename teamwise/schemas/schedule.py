import datetime as dt
from pydantic import BaseModel
from typing import List, Optional

from teamwise.services.scheduling.types import LeadMutationReason, ShiftType, SlotIssueReason


class CycleResponse(BaseModel):
    id: int
    label: str
    start_date: dt.date
    end_date: dt.date
    published: bool

    class Config:
        from_attributes = True


class UnfilledSlotResponse(BaseModel):
    date: dt.date
    shift_type: ShiftType
    count: int
    reason: str

    class Config:
        from_attributes = True


class GenerationResponse(BaseModel):
    added: int
    unfilled: int
    under_coverage: int
    over_coverage: int
    lead_missing: int
    lead_multiple: int
    lead_ineligible: int
    message: str
    unfilled_slots: List[UnfilledSlotResponse] = []


class WeeklyValidationResponse(BaseModel):
    under_count: int
    over_count: int
    violations: int

    class Config:
        from_attributes = True


class SlotIssueResponse(BaseModel):
    date: dt.date
    shift_type: ShiftType
    reasons: List[SlotIssueReason]

    class Config:
        from_attributes = True


class SlotValidationResponse(BaseModel):
    under_coverage: int
    over_coverage: int
    missing_lead: int
    multiple_leads: int
    ineligible_lead: int
    violations: int
    issues: List[SlotIssueResponse] = []

    class Config:
        from_attributes = True


class ValidationResponse(BaseModel):
    ok: bool
    weekly: Optional[WeeklyValidationResponse] = None
    slots: SlotValidationResponse

    class Config:
        from_attributes = True


class PublishRequest(BaseModel):
    override_weekly_rules: bool = False


# date and shift_type stay strings so malformed values reach the lead mutation's own validation
class DesignatedLeadRequest(BaseModel):
    date: str
    shift_type: str
    therapist_id: int


class DesignatedLeadResponse(BaseModel):
    ok: bool
    reason: Optional[LeadMutationReason] = None
    message: Optional[str] = None
