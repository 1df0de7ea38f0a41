from datetime import date, datetime
from typing import Optional

from sqlalchemy import JSON, Date, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from teamwise.db.database import Base


class WorkPatterns(Base):
    __tablename__ = "work_patterns"

    # free-form text columns; normalize_work_pattern sanitizes them on load
    therapist_id: Mapped[int] = mapped_column(Integer, ForeignKey("therapists.id", ondelete="CASCADE"), primary_key=True)
    works_dow: Mapped[list] = mapped_column(JSON().with_variant(JSONB, "postgresql"), nullable=False, default=list)
    offs_dow: Mapped[list] = mapped_column(JSON().with_variant(JSONB, "postgresql"), nullable=False, default=list)
    weekend_rotation: Mapped[str] = mapped_column(String(20), nullable=False, default="none")
    weekend_anchor_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    works_dow_mode: Mapped[str] = mapped_column(String(20), nullable=False, default="hard")
    shift_preference: Mapped[str] = mapped_column(String(20), nullable=False, default="either")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
