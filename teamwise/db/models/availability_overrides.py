import datetime as dt
from typing import Optional

from sqlalchemy import Date, DateTime, Enum as SQLEnum, ForeignKey, Integer, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from teamwise.db.database import Base, enum_values
from teamwise.services.scheduling.types import OverrideShiftType, OverrideSource, OverrideType


class AvailabilityOverrides(Base):
    __tablename__ = "availability_overrides"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    cycle_id: Mapped[int] = mapped_column(Integer, ForeignKey("schedule_cycles.id", ondelete="CASCADE"), nullable=False, index=True)
    therapist_id: Mapped[int] = mapped_column(Integer, ForeignKey("therapists.id", ondelete="CASCADE"), nullable=False, index=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    shift_type: Mapped[OverrideShiftType] = mapped_column(SQLEnum(OverrideShiftType, name="override_shift_type_enum", values_callable=enum_values), nullable=False, default=OverrideShiftType.BOTH)
    override_type: Mapped[OverrideType] = mapped_column(SQLEnum(OverrideType, name="override_type_enum", values_callable=enum_values), nullable=False)
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    source: Mapped[OverrideSource] = mapped_column(SQLEnum(OverrideSource, name="override_source_enum", values_callable=enum_values), nullable=False, default=OverrideSource.MANAGER)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("cycle_id", "therapist_id", "date", "shift_type", name="uix_availability_overrides_scope"),
    )
