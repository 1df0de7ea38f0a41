"""
Designated-lead mutation.
Maps storage outcomes of "make this therapist the lead of a slot" into a
small reason taxonomy. The store does the atomic write; this module only
validates input and interprets codes.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from .dates import DateLike, parse_iso_date
from .errors import INVALID_PARAMETER, RAISED_EXCEPTION, UNIQUE_VIOLATION, StorageError
from .types import LeadMutationReason, ShiftType

logger = logging.getLogger(__name__)


class LeadStore(Protocol):
    def set_designated_lead(self, cycle_id: int, on_date, shift_type: ShiftType, therapist_id: int) -> None:
        """Atomically demote the slot's current lead and promote (or insert) the therapist."""
        ...


@dataclass
class LeadMutationResult:
    ok: bool
    reason: Optional[LeadMutationReason] = None
    error: Optional[StorageError] = None


def classify_lead_error(error: StorageError) -> LeadMutationReason:
    if error.code == UNIQUE_VIOLATION:
        return LeadMutationReason.MULTIPLE_LEADS_PREVENTED
    if error.code == INVALID_PARAMETER:
        return LeadMutationReason.INVALID_INPUT
    if error.code == RAISED_EXCEPTION and "lead-eligible" in (error.message or "").lower():
        return LeadMutationReason.LEAD_NOT_ELIGIBLE
    return LeadMutationReason.FAILED


def set_designated_lead(
    store: LeadStore,
    cycle_id: int,
    on_date: DateLike,
    shift_type,
    therapist_id: int,
) -> LeadMutationResult:
    """
    Make a therapist the designated lead for one (cycle, date, shift).

    Returns:
        LeadMutationResult(ok=True) on success. Failures carry a reason:
        multiple_leads_prevented, lead_not_eligible, invalid_input or failed,
        plus the StorageError when one was raised.
    """
    parsed = parse_iso_date(on_date)
    try:
        parsed_shift = ShiftType(getattr(shift_type, "value", shift_type))
    except ValueError:
        parsed_shift = None
    if parsed is None or parsed_shift is None:
        return LeadMutationResult(ok=False, reason=LeadMutationReason.INVALID_INPUT)

    try:
        store.set_designated_lead(cycle_id, parsed, parsed_shift, therapist_id)
    except StorageError as error:
        reason = classify_lead_error(error)
        logger.warning(
            "Failed to set designated lead cycle=%s date=%s shift=%s therapist=%s: %s (%s)",
            cycle_id, parsed, parsed_shift.value, therapist_id, reason.value, error,
        )
        return LeadMutationResult(ok=False, reason=reason, error=error)

    return LeadMutationResult(ok=True)
