"""
Single-row shift mutations used by the coverage board.
Each returns the StorageError on failure (already logged) or None.
"""

import logging
from typing import Optional, Protocol

from .errors import StorageError
from .types import AssignmentStatus, Shift, ShiftStatus

logger = logging.getLogger(__name__)


class ShiftStore(Protocol):
    def insert_shift(self, shift: Shift) -> Shift:
        ...

    def delete_shift(self, shift_id: int) -> None:
        ...

    def update_shift_status(
        self,
        shift_id: int,
        assignment_status: AssignmentStatus,
        status: ShiftStatus,
    ) -> None:
        ...


def assign_coverage_shift(store: ShiftStore, shift: Shift) -> Optional[StorageError]:
    try:
        store.insert_shift(shift)
    except StorageError as error:
        logger.error(
            "Failed to insert shift cycle=%s therapist=%s date=%s shift=%s: %s",
            shift.cycle_id, shift.therapist_id, shift.date, getattr(shift.shift_type, "value", shift.shift_type), error,
        )
        return error
    return None


def unassign_coverage_shift(store: ShiftStore, shift_id: int) -> Optional[StorageError]:
    try:
        store.delete_shift(shift_id)
    except StorageError as error:
        logger.error("Failed to delete shift %s: %s", shift_id, error)
        return error
    return None


def persist_coverage_shift_status(
    store: ShiftStore,
    shift_id: int,
    assignment_status: AssignmentStatus,
    status: ShiftStatus,
) -> Optional[StorageError]:
    """Write the assignment_status/status pair for one shift."""
    try:
        store.update_shift_status(shift_id, assignment_status, status)
    except StorageError as error:
        logger.error(
            "Failed to update shift %s to %s/%s: %s",
            shift_id, assignment_status.value, status.value, error,
        )
        return error
    return None
