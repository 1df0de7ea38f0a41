from datetime import date, datetime
from typing import Optional

from sqlalchemy import JSON, Boolean, Date, DateTime, Enum as SQLEnum, Integer, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from teamwise.db.database import Base, enum_values
from teamwise.services.scheduling.types import EmploymentType, ShiftType


class Therapists(Base):
    __tablename__ = "therapists"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    shift_type: Mapped[ShiftType] = mapped_column(SQLEnum(ShiftType, name="shift_type_enum", values_callable=enum_values), nullable=False, default=ShiftType.DAY)
    employment_type: Mapped[EmploymentType] = mapped_column(SQLEnum(EmploymentType, name="employment_type_enum", values_callable=enum_values), nullable=False, default=EmploymentType.FULL_TIME)
    is_lead_eligible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    max_work_days_per_week: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # None = employment type default
    preferred_work_days: Mapped[list] = mapped_column(JSON().with_variant(JSONB, "postgresql"), nullable=False, default=list)  # 0=Sun..6=Sat
    on_fmla: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    fmla_return_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
