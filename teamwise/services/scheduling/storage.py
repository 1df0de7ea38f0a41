"""
SQLAlchemy-backed stores for the lead and shift mutations.
Database errors leave this module as StorageError with a SQLSTATE-style code.
"""

import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from teamwise.db.models.shifts import Shifts
from teamwise.db.models.therapists import Therapists

from .errors import INVALID_PARAMETER, RAISED_EXCEPTION, UNIQUE_VIOLATION, StorageError
from .types import AssignmentStatus, Shift, ShiftRole, ShiftStatus, ShiftType

logger = logging.getLogger(__name__)

LEAD_NOT_ELIGIBLE_MESSAGE = "Selected therapist is not lead-eligible."


def storage_error_from_db(exc: DBAPIError) -> StorageError:
    """
    Translate a driver error into a StorageError.

    psycopg2 exposes the SQLSTATE as `pgcode` (psycopg 3 as `sqlstate`).
    SQLite has no SQLSTATE, so unique-constraint failures are mapped to 23505.
    """
    orig = getattr(exc, "orig", None)
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    message = str(orig) if orig is not None else str(exc)
    if code is None and isinstance(exc, IntegrityError) and "unique" in message.lower():
        code = UNIQUE_VIOLATION
    return StorageError(code, message.strip())


class SqlAlchemyLeadStore:
    def __init__(self, db: Session):
        self.db = db

    def set_designated_lead(self, cycle_id: int, on_date: date, shift_type: ShiftType, therapist_id: int) -> None:
        """
        Demote the slot's current lead and promote or insert the therapist,
        in one transaction. The partial unique index on lead rows rejects a
        concurrent writer that got there first.
        """
        try:
            self._write_lead(cycle_id, on_date, shift_type, therapist_id)
            self.db.commit()
        except StorageError:
            self.db.rollback()
            raise
        except DBAPIError as exc:
            self.db.rollback()
            raise storage_error_from_db(exc) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError(None, str(exc)) from exc

    def _write_lead(self, cycle_id: int, on_date: date, shift_type: ShiftType, therapist_id: int) -> None:
        therapist = self.db.get(Therapists, therapist_id)
        if therapist is None or not therapist.is_lead_eligible:
            raise StorageError(RAISED_EXCEPTION, LEAD_NOT_ELIGIBLE_MESSAGE)

        current_leads = self.db.execute(
            select(Shifts)
            .where(
                Shifts.cycle_id == cycle_id,
                Shifts.date == on_date,
                Shifts.shift_type == shift_type,
                Shifts.role == ShiftRole.LEAD,
            )
            .with_for_update()
        ).scalars().all()
        for row in current_leads:
            row.role = ShiftRole.STAFF
        self.db.flush()

        existing = self.db.execute(
            select(Shifts)
            .where(
                Shifts.cycle_id == cycle_id,
                Shifts.therapist_id == therapist_id,
                Shifts.date == on_date,
            )
            .with_for_update()
        ).scalar_one_or_none()

        if existing is None:
            self.db.add(Shifts(
                cycle_id=cycle_id,
                therapist_id=therapist_id,
                date=on_date,
                shift_type=shift_type,
                role=ShiftRole.LEAD,
                status=ShiftStatus.SCHEDULED,
            ))
        elif existing.shift_type != shift_type:
            raise StorageError(INVALID_PARAMETER, "Therapist is already scheduled for the other shift on this date.")
        else:
            existing.role = ShiftRole.LEAD
        self.db.flush()


class SqlAlchemyShiftStore:
    def __init__(self, db: Session):
        self.db = db

    def insert_shift(self, shift: Shift) -> Shift:
        row = Shifts(
            cycle_id=shift.cycle_id,
            therapist_id=shift.therapist_id,
            date=shift.date,
            shift_type=shift.shift_type,
            role=shift.role,
            status=shift.status,
            assignment_status=shift.assignment_status,
        )
        self.db.add(row)
        self._commit()
        shift.id = row.id
        return shift

    def insert_shifts(self, shifts: list[Shift]) -> int:
        """Insert a batch of generated shifts in one transaction."""
        rows = [
            Shifts(
                cycle_id=s.cycle_id,
                therapist_id=s.therapist_id,
                date=s.date,
                shift_type=s.shift_type,
                role=s.role,
                status=s.status,
                assignment_status=s.assignment_status,
            )
            for s in shifts
        ]
        self.db.add_all(rows)
        self._commit()
        for shift, row in zip(shifts, rows):
            shift.id = row.id
        return len(rows)

    def delete_shift(self, shift_id: int) -> None:
        row = self.db.get(Shifts, shift_id)
        if row is None:
            return
        self.db.delete(row)
        self._commit()

    def update_shift_status(
        self,
        shift_id: int,
        assignment_status: AssignmentStatus,
        status: ShiftStatus,
    ) -> None:
        row = self.db.get(Shifts, shift_id)
        if row is None:
            raise StorageError(None, f"Shift {shift_id} not found")
        row.assignment_status = assignment_status
        row.status = status
        self._commit()

    def _commit(self) -> None:
        try:
            self.db.commit()
        except DBAPIError as exc:
            self.db.rollback()
            raise storage_error_from_db(exc) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError(None, str(exc)) from exc
