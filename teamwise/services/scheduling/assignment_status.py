"""
Coverage board status changes.

The board shows a simplified status per shift. A change is applied to the
board optimistically, persisted, and rolled back if the write fails.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import MutableMapping, Optional

from .mutations import ShiftStore, persist_coverage_shift_status
from .types import AssignmentStatus, ShiftStatus

logger = logging.getLogger(__name__)

STATUS_UPDATE_FAILED_MESSAGE = "Could not save status update. Changes were rolled back."


class CoverageUiStatus(str, Enum):
    ACTIVE = "active"
    ONCALL = "oncall"
    LEAVE_EARLY = "leave_early"
    CANCELLED = "cancelled"


def to_assignment_status(value: CoverageUiStatus) -> AssignmentStatus:
    if value == CoverageUiStatus.ONCALL:
        return AssignmentStatus.ON_CALL
    if value == CoverageUiStatus.LEAVE_EARLY:
        return AssignmentStatus.LEFT_EARLY
    if value == CoverageUiStatus.CANCELLED:
        return AssignmentStatus.CANCELLED
    return AssignmentStatus.SCHEDULED


def to_shift_status(value: CoverageUiStatus) -> ShiftStatus:
    # leaving early still counts as a worked day
    if value == CoverageUiStatus.ONCALL:
        return ShiftStatus.ON_CALL
    if value == CoverageUiStatus.CANCELLED:
        return ShiftStatus.CALLED_OFF
    return ShiftStatus.SCHEDULED


def from_assignment_status(assignment_status: Optional[AssignmentStatus]) -> CoverageUiStatus:
    """Board status for a stored row; rows without an assignment status show as active."""
    value = getattr(assignment_status, "value", assignment_status)
    if value == AssignmentStatus.ON_CALL.value:
        return CoverageUiStatus.ONCALL
    if value == AssignmentStatus.LEFT_EARLY.value:
        return CoverageUiStatus.LEAVE_EARLY
    if value == AssignmentStatus.CANCELLED.value:
        return CoverageUiStatus.CANCELLED
    return CoverageUiStatus.ACTIVE


@dataclass
class StatusUpdateResult:
    ok: bool
    error_message: Optional[str] = None


def update_coverage_assignment_status(
    store: ShiftStore,
    board: MutableMapping[int, CoverageUiStatus],
    shift_id: int,
    next_status: CoverageUiStatus,
    failure_message: str = STATUS_UPDATE_FAILED_MESSAGE,
) -> StatusUpdateResult:
    """
    Optimistically set board[shift_id] to next_status and persist it.

    On failure the previous status is restored for that shift only, and only
    if the board still holds the optimistic value, so later changes made to
    the board in the meantime are kept.
    """
    previous = board.get(shift_id)
    board[shift_id] = next_status

    error = persist_coverage_shift_status(
        store,
        shift_id,
        to_assignment_status(next_status),
        to_shift_status(next_status),
    )
    if error is None:
        return StatusUpdateResult(ok=True)

    if board.get(shift_id) == next_status:
        if previous is None:
            board.pop(shift_id, None)
        else:
            board[shift_id] = previous

    logger.error("Failed to persist coverage status change for shift %s: %r", shift_id, error)
    return StatusUpdateResult(ok=False, error_message=failure_message)
