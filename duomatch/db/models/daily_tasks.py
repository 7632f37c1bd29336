from __future__ import annotations

from datetime import date, datetime
from uuid import UUID, uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from duomatch.db.models.base import Base


class DailyTask(Base):
    __tablename__ = "daily_tasks"
    __table_args__ = (
        CheckConstraint("task_type IN ('swipes','messages','login')", name="ck_daily_tasks_type"),
        CheckConstraint("target_value > 0", name="ck_daily_tasks_target_positive"),
        CheckConstraint("reward_diamonds > 0", name="ck_daily_tasks_reward_positive"),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    task_type: Mapped[str] = mapped_column(String(16), nullable=False)
    target_value: Mapped[int] = mapped_column(Integer, nullable=False)
    reward_diamonds: Mapped[int] = mapped_column(Integer, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("true"))


class DailyTaskProgress(Base):
    __tablename__ = "user_daily_tasks"
    __table_args__ = (
        UniqueConstraint("user_id", "task_id", "day", name="uq_user_daily_tasks_user_task_day"),
        CheckConstraint("current_progress >= 0", name="ck_user_daily_tasks_progress_non_negative"),
        CheckConstraint("NOT is_collected OR is_completed", name="ck_user_daily_tasks_collect_after_complete"),
        Index("idx_user_daily_tasks_user_day", "user_id", "day"),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id: Mapped[str] = mapped_column(Text, ForeignKey("profiles.id"), nullable=False)
    task_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), ForeignKey("daily_tasks.id"), nullable=False)
    day: Mapped[date] = mapped_column(Date, nullable=False)
    current_progress: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("false"))
    is_collected: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("false"))
    collected_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
