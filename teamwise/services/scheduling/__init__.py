"""
Scheduling service package.

Usage:
    from teamwise.services.scheduling import generate_draft_schedule, format_generation_message
    from teamwise.services.scheduling.data_loader import load_schedule_context

    context = load_schedule_context(db, cycle_id=1)
    result = generate_draft_schedule(context)
    print(format_generation_message(result.feedback))

Database-bound helpers live in `data_loader` and `storage` and are imported
explicitly, so the core below stays free of session state.
"""

from .types import (
    AvailabilityOverride,
    CoverageTargets,
    EligibilityReason,
    EligibilityResolution,
    GenerationFeedback,
    GenerationResult,
    LeadMutationReason,
    PublishValidation,
    ScheduleContext,
    ScheduleCycle,
    Shift,
    ShiftType,
    SlotAssignment,
    Therapist,
    WorkPattern,
)
from .errors import CyclePublishedError, StorageError
from .work_patterns import normalize_work_pattern
from .eligibility import get_strategy, resolve_eligibility
from .coverage import fill_coverage_slot, pick_therapist_for_date
from .workload import build_workload_counts, week_bounds
from .validation import (
    summarize_coverage_violations,
    summarize_shift_slot_violations,
    summarize_weekly_violations,
    validate_cycle_for_publish,
)
from .lead import LeadMutationResult, set_designated_lead
from .generator import format_generation_message, generate_draft_schedule

__all__ = [
    # Types
    "AvailabilityOverride",
    "CoverageTargets",
    "EligibilityReason",
    "EligibilityResolution",
    "GenerationFeedback",
    "GenerationResult",
    "LeadMutationReason",
    "LeadMutationResult",
    "PublishValidation",
    "ScheduleContext",
    "ScheduleCycle",
    "Shift",
    "ShiftType",
    "SlotAssignment",
    "Therapist",
    "WorkPattern",
    # Errors
    "CyclePublishedError",
    "StorageError",
    # Main entry points
    "generate_draft_schedule",
    "format_generation_message",
    "validate_cycle_for_publish",
    "set_designated_lead",
    # Lower-level functions
    "normalize_work_pattern",
    "resolve_eligibility",
    "get_strategy",
    "pick_therapist_for_date",
    "fill_coverage_slot",
    "week_bounds",
    "build_workload_counts",
    "summarize_coverage_violations",
    "summarize_weekly_violations",
    "summarize_shift_slot_violations",
]
