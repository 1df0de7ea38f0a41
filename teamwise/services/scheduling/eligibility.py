"""
Eligibility resolution.
Decides whether a therapist may work a (cycle, date, shift) and explains why.

Resolution order, first match wins:
    1. inactive
    2. on FMLA
    3. cycle-scoped override (force off / force on)
    4. unparsable date (hard block)
    5. strategy: recurring work pattern (default) or preferred weekdays

The function is pure: no I/O, no hidden state, never raises.
"""

from typing import Iterable, Optional, Protocol

from .dates import DateLike, dow_index, parse_iso_date
from .types import (
    ALLOWING_REASONS,
    AvailabilityOverride,
    EligibilityReason,
    EligibilityResolution,
    EmploymentType,
    OverrideType,
    Therapist,
)
from .work_patterns import is_allowed_by_pattern, shift_type_matches


class EligibilityStrategy(Protocol):
    """Evaluates the recurring (non-override) availability of a therapist."""

    name: str

    def evaluate(self, therapist: Therapist, on_date) -> tuple[EligibilityReason, int]:
        ...


def _is_prn(therapist: Therapist) -> bool:
    return getattr(therapist.employment_type, "value", therapist.employment_type) == EmploymentType.PRN.value


class PatternEligibility:
    """Hard/soft day-of-week pattern engine with alternating weekends."""

    name = "pattern"

    def evaluate(self, therapist: Therapist, on_date) -> tuple[EligibilityReason, int]:
        pattern = therapist.pattern
        if pattern is None:
            if _is_prn(therapist):
                return EligibilityReason.PRN_NOT_OFFERED_FOR_DATE, 0
            return EligibilityReason.ALLOWED, 0

        decision = is_allowed_by_pattern(pattern, on_date)
        if not decision.allowed:
            return decision.reason, decision.penalty

        # PRN staff are only offered the weekdays their pattern lists
        if _is_prn(therapist) and dow_index(on_date) not in pattern.works_dow:
            return EligibilityReason.PRN_NOT_OFFERED_FOR_DATE, 0

        return decision.reason, decision.penalty


class PreferredDaysEligibility:
    """Preferred-weekday list: restricts PRN staff, leaves everyone else available."""

    name = "preferred_days"

    def evaluate(self, therapist: Therapist, on_date) -> tuple[EligibilityReason, int]:
        if _is_prn(therapist) and dow_index(on_date) not in therapist.preferred_weekdays:
            return EligibilityReason.PRN_NOT_OFFERED_FOR_DATE, 0
        return EligibilityReason.ALLOWED, 0


PATTERN_STRATEGY = PatternEligibility()
PREFERRED_DAYS_STRATEGY = PreferredDaysEligibility()

STRATEGIES: dict[str, EligibilityStrategy] = {
    PATTERN_STRATEGY.name: PATTERN_STRATEGY,
    PREFERRED_DAYS_STRATEGY.name: PREFERRED_DAYS_STRATEGY,
}


def get_strategy(name: Optional[str]) -> EligibilityStrategy:
    """Look up a strategy by name; unknown names use the pattern engine."""
    return STRATEGIES.get((name or "").strip().lower(), PATTERN_STRATEGY)


def build_resolution(
    reason: EligibilityReason,
    penalty: int = 0,
    override_note: Optional[str] = None,
) -> EligibilityResolution:
    return EligibilityResolution(
        allowed=reason in ALLOWING_REASONS,
        reason=reason,
        penalty=penalty,
        override_note=override_note,
    )


def find_matching_override(
    overrides: Iterable[AvailabilityOverride],
    therapist_id: int,
    cycle_id: int,
    on_date,
    shift_type,
) -> Optional[AvailabilityOverride]:
    """Same therapist, cycle and date; an exact shift match beats a 'both' override."""
    target = parse_iso_date(on_date)
    if target is None:
        return None

    same_scope = [
        o for o in overrides
        if o.therapist_id == therapist_id
        and o.cycle_id == cycle_id
        and parse_iso_date(o.date) == target
        and shift_type_matches(o.shift_type, shift_type)
    ]
    if not same_scope:
        return None

    shift_value = getattr(shift_type, "value", shift_type)
    for override in same_scope:
        if getattr(override.shift_type, "value", override.shift_type) == shift_value:
            return override
    return same_scope[0]


def resolve_eligibility(
    therapist: Therapist,
    cycle_id: int,
    on_date: DateLike,
    shift_type,
    overrides: Iterable[AvailabilityOverride] = (),
    strategy: Optional[EligibilityStrategy] = None,
) -> EligibilityResolution:
    """
    Resolve whether a therapist can be scheduled on a date/shift within a cycle.

    Returns:
        EligibilityResolution; `allowed` is True only for 'allowed',
        'override_force_on' and 'soft_outside_works_dow'. The penalty is
        advisory and only used for ranking.
    """
    if not therapist.is_active:
        return build_resolution(EligibilityReason.INACTIVE)

    if therapist.on_fmla:
        return build_resolution(EligibilityReason.ON_FMLA)

    override = find_matching_override(overrides, therapist.id, cycle_id, on_date, shift_type)
    if override is not None:
        override_type = getattr(override.override_type, "value", override.override_type)
        if override_type == OverrideType.FORCE_OFF.value:
            return build_resolution(EligibilityReason.OVERRIDE_FORCE_OFF, override_note=override.note)
        if override_type == OverrideType.FORCE_ON.value:
            return build_resolution(EligibilityReason.OVERRIDE_FORCE_ON, override_note=override.note)

    if parse_iso_date(on_date) is None:
        return build_resolution(EligibilityReason.BLOCKED_OFFS_DOW)

    reason, penalty = (strategy or PATTERN_STRATEGY).evaluate(therapist, on_date)
    return build_resolution(reason, penalty)


ELIGIBILITY_REASON_LABELS = {
    EligibilityReason.OVERRIDE_FORCE_OFF: "Force off override",
    EligibilityReason.BLOCKED_OFFS_DOW: "Never works this weekday",
    EligibilityReason.BLOCKED_EVERY_OTHER_WEEKEND: "Off weekend by alternating rotation",
    EligibilityReason.BLOCKED_OUTSIDE_WORKS_DOW_HARD: "Outside hard works-day rule",
    EligibilityReason.INACTIVE: "Inactive therapist",
    EligibilityReason.ON_FMLA: "Therapist on FMLA",
    EligibilityReason.PRN_NOT_OFFERED_FOR_DATE: "PRN not offered for this date",
}


def format_eligibility_reason(reason: EligibilityReason) -> Optional[str]:
    """Human-readable label for blocking reasons; None for allowing ones."""
    return ELIGIBILITY_REASON_LABELS.get(reason)
