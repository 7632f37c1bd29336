from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Integer, SmallInteger, Text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from duomatch.db.models.base import Base


class DailyPrizeEntry(Base):
    __tablename__ = "daily_prize_entries"
    __table_args__ = (
        CheckConstraint("entries IN (1, 2)", name="ck_daily_prize_entries_entries"),
    )

    user_id: Mapped[str] = mapped_column(Text, ForeignKey("profiles.id"), primary_key=True)
    draw_date: Mapped[date] = mapped_column(Date, primary_key=True)
    entries: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class DailyPrizeWinner(Base):
    __tablename__ = "daily_prize_winners"
    __table_args__ = (
        CheckConstraint("prize_amount > 0", name="ck_daily_prize_winners_amount_positive"),
    )

    draw_date: Mapped[date] = mapped_column(Date, primary_key=True)
    user_id: Mapped[str] = mapped_column(Text, ForeignKey("profiles.id"), nullable=False)
    prize_amount: Mapped[int] = mapped_column(Integer, nullable=False)
    transaction_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("transactions.id"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
