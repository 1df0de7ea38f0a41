import datetime as dt
from typing import Optional

from sqlalchemy import Date, DateTime, Enum as SQLEnum, ForeignKey, Index, Integer, UniqueConstraint, func, text
from sqlalchemy.orm import Mapped, mapped_column

from teamwise.db.database import Base, enum_values
from teamwise.services.scheduling.types import AssignmentStatus, ShiftRole, ShiftStatus, ShiftType


class Shifts(Base):
    __tablename__ = "shifts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    cycle_id: Mapped[int] = mapped_column(Integer, ForeignKey("schedule_cycles.id", ondelete="CASCADE"), nullable=False)
    therapist_id: Mapped[int] = mapped_column(Integer, ForeignKey("therapists.id"), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    shift_type: Mapped[ShiftType] = mapped_column(SQLEnum(ShiftType, name="shift_type_enum", values_callable=enum_values), nullable=False)
    role: Mapped[ShiftRole] = mapped_column(SQLEnum(ShiftRole, name="shift_role_enum", values_callable=enum_values), nullable=False, default=ShiftRole.STAFF)
    status: Mapped[ShiftStatus] = mapped_column(SQLEnum(ShiftStatus, name="shift_status_enum", values_callable=enum_values), nullable=False, default=ShiftStatus.SCHEDULED)
    assignment_status: Mapped[Optional[AssignmentStatus]] = mapped_column(SQLEnum(AssignmentStatus, name="assignment_status_enum", values_callable=enum_values), nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("cycle_id", "therapist_id", "date", name="uix_shifts_therapist_per_day"),
        Index("ix_shifts_cycle_date", "cycle_id", "date"),
        # at most one designated lead per (cycle, date, shift type)
        Index(
            "uix_shifts_designated_lead_per_slot",
            "cycle_id",
            "date",
            "shift_type",
            unique=True,
            postgresql_where=text("role = 'lead'"),
            sqlite_where=text("role = 'lead'"),
        ),
    )
