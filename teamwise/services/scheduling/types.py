"""
Internal data types for scheduling logic.
decoupled from SQLAlchemy models for cleaner logic.

Weekday indices follow the stored pattern convention: 0 = Sunday ... 6 = Saturday.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional


class ShiftType(str, Enum):
    DAY = "day"
    NIGHT = "night"


class OverrideShiftType(str, Enum):
    DAY = "day"
    NIGHT = "night"
    BOTH = "both"


class OverrideType(str, Enum):
    FORCE_OFF = "force_off"
    FORCE_ON = "force_on"


class OverrideSource(str, Enum):
    MANAGER = "manager"
    THERAPIST = "therapist"


class EmploymentType(str, Enum):
    FULL_TIME = "full_time"
    PART_TIME = "part_time"
    PRN = "prn"


class WeekendRotation(str, Enum):
    NONE = "none"
    EVERY_OTHER = "every_other"


class WorksDowMode(str, Enum):
    HARD = "hard"
    SOFT = "soft"


class ShiftPreference(str, Enum):
    DAY = "day"
    NIGHT = "night"
    EITHER = "either"


class ShiftRole(str, Enum):
    LEAD = "lead"
    STAFF = "staff"


class ShiftStatus(str, Enum):
    SCHEDULED = "scheduled"
    ON_CALL = "on_call"
    SICK = "sick"
    CALLED_OFF = "called_off"


class AssignmentStatus(str, Enum):
    SCHEDULED = "scheduled"
    CALL_IN = "call_in"
    CANCELLED = "cancelled"
    ON_CALL = "on_call"
    LEFT_EARLY = "left_early"


class EligibilityReason(str, Enum):
    INACTIVE = "inactive"
    ON_FMLA = "on_fmla"
    OVERRIDE_FORCE_OFF = "override_force_off"
    OVERRIDE_FORCE_ON = "override_force_on"
    BLOCKED_OFFS_DOW = "blocked_offs_dow"
    BLOCKED_EVERY_OTHER_WEEKEND = "blocked_every_other_weekend"
    BLOCKED_OUTSIDE_WORKS_DOW_HARD = "blocked_outside_works_dow_hard"
    SOFT_OUTSIDE_WORKS_DOW = "soft_outside_works_dow"
    PRN_NOT_OFFERED_FOR_DATE = "prn_not_offered_for_date"
    ALLOWED = "allowed"


ALLOWING_REASONS = frozenset({
    EligibilityReason.ALLOWED,
    EligibilityReason.OVERRIDE_FORCE_ON,
    EligibilityReason.SOFT_OUTSIDE_WORKS_DOW,
})


class SlotIssueReason(str, Enum):
    UNDER_COVERAGE = "under_coverage"
    OVER_COVERAGE = "over_coverage"
    MISSING_LEAD = "missing_lead"
    MULTIPLE_LEADS = "multiple_leads"
    INELIGIBLE_LEAD = "ineligible_lead"


class LeadMutationReason(str, Enum):
    MULTIPLE_LEADS_PREVENTED = "multiple_leads_prevented"
    LEAD_NOT_ELIGIBLE = "lead_not_eligible"
    INVALID_INPUT = "invalid_input"
    FAILED = "failed"


@dataclass
class WorkPattern:
    therapist_id: int
    works_dow: list[int] = field(default_factory=list)
    offs_dow: list[int] = field(default_factory=list)
    weekend_rotation: WeekendRotation = WeekendRotation.NONE
    weekend_anchor_date: Optional[date] = None
    works_dow_mode: WorksDowMode = WorksDowMode.HARD
    shift_preference: ShiftPreference = ShiftPreference.EITHER


@dataclass
class Therapist:
    id: int
    full_name: str
    shift_type: ShiftType = ShiftType.DAY
    employment_type: EmploymentType = EmploymentType.FULL_TIME
    is_lead_eligible: bool = False
    max_work_days_per_week: Optional[int] = None  # None = employment type default
    preferred_weekdays: list[int] = field(default_factory=list)
    on_fmla: bool = False
    fmla_return_date: Optional[date] = None
    is_active: bool = True
    pattern: Optional[WorkPattern] = None


@dataclass
class AvailabilityOverride:
    cycle_id: int
    therapist_id: int
    date: date
    shift_type: OverrideShiftType
    override_type: OverrideType
    note: Optional[str] = None
    source: OverrideSource = OverrideSource.MANAGER


@dataclass
class ScheduleCycle:
    id: int
    label: str
    start_date: date
    end_date: date
    published: bool = False


@dataclass
class Shift:
    """A shift assignment (existing row or proposed insert)."""
    cycle_id: int
    therapist_id: int
    date: date
    shift_type: ShiftType
    role: ShiftRole = ShiftRole.STAFF
    status: ShiftStatus = ShiftStatus.SCHEDULED
    assignment_status: Optional[AssignmentStatus] = None
    id: Optional[int] = None


@dataclass
class CoverageTargets:
    """Headcount limits applied to every (date, shift type) slot."""
    min_coverage: int = 3
    target_coverage: int = 3
    max_coverage: int = 5


@dataclass
class EligibilityResolution:
    allowed: bool
    reason: EligibilityReason
    penalty: int = 0
    override_note: Optional[str] = None

    @property
    def offered_by_override(self) -> bool:
        return self.reason == EligibilityReason.OVERRIDE_FORCE_ON


@dataclass
class WeekBounds:
    week_start: date  # Sunday
    week_end: date  # Saturday


@dataclass
class WorkloadCount:
    week_shift_count: int = 0
    cycle_shift_count: int = 0


@dataclass
class PickResult:
    therapist: Optional[Therapist]
    next_cursor: int


@dataclass
class FillSlotResult:
    picked: list[Therapist]
    next_cursor: int
    coverage: int
    unfilled_count: int
    unfilled_reason: Optional[str] = None


@dataclass
class SlotAssignment:
    """Flattened shift row joined with the therapist's lead eligibility."""
    date: date
    shift_type: ShiftType
    status: ShiftStatus
    role: ShiftRole
    therapist_id: int
    is_lead_eligible: bool
    therapist_name: str = ""


@dataclass
class CoverageValidation:
    under_coverage: int = 0
    over_coverage: int = 0
    violations: int = 0


@dataclass
class WeeklyValidation:
    under_count: int = 0
    over_count: int = 0
    violations: int = 0


@dataclass
class SlotIssue:
    date: date
    shift_type: ShiftType
    reasons: list[SlotIssueReason] = field(default_factory=list)


@dataclass
class SlotValidation:
    under_coverage: int = 0
    over_coverage: int = 0
    missing_lead: int = 0
    multiple_leads: int = 0
    ineligible_lead: int = 0
    violations: int = 0
    issues: list[SlotIssue] = field(default_factory=list)


@dataclass
class PublishValidation:
    ok: bool
    weekly: Optional[WeeklyValidation]
    slots: SlotValidation


@dataclass
class UnfilledSlot:
    date: date
    shift_type: ShiftType
    count: int
    reason: str


@dataclass
class GenerationFeedback:
    added: int = 0
    unfilled: int = 0
    under_coverage: int = 0
    over_coverage: int = 0
    lead_missing: int = 0
    lead_multiple: int = 0
    lead_ineligible: int = 0


@dataclass
class ScheduleContext:
    """All data needed to auto-generate one cycle."""
    cycle: ScheduleCycle
    therapists: list[Therapist]
    overrides: list[AvailabilityOverride] = field(default_factory=list)
    existing_shifts: list[Shift] = field(default_factory=list)  # rows in this cycle
    weekly_shifts: list[Shift] = field(default_factory=list)  # all rows in the weeks the cycle touches
    targets: CoverageTargets = field(default_factory=CoverageTargets)
    shift_types: list[ShiftType] = field(default_factory=lambda: [ShiftType.DAY, ShiftType.NIGHT])
    weekly_limits: dict[int, int] = field(default_factory=dict)


@dataclass
class GenerationResult:
    """Output of the auto-generate pass."""
    shifts_to_insert: list[Shift]
    unfilled: list[UnfilledSlot] = field(default_factory=list)
    feedback: GenerationFeedback = field(default_factory=GenerationFeedback)
