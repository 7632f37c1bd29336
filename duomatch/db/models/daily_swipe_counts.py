from __future__ import annotations

from datetime import date

from sqlalchemy import CheckConstraint, Date, ForeignKey, Integer, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from duomatch.db.models.base import Base


class DailySwipeCount(Base):
    __tablename__ = "daily_swipe_counts"
    __table_args__ = (
        CheckConstraint("swipe_count >= 0", name="ck_daily_swipe_counts_non_negative"),
    )

    user_id: Mapped[str] = mapped_column(Text, ForeignKey("profiles.id"), primary_key=True)
    day: Mapped[date] = mapped_column(Date, primary_key=True)
    swipe_count: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
