from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Index, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from duomatch.db.models.base import Base


class Swipe(Base):
    __tablename__ = "swipes"
    __table_args__ = (
        UniqueConstraint("swiper_id", "swiped_id", name="uq_swipes_swiper_swiped"),
        CheckConstraint("swiper_id <> swiped_id", name="ck_swipes_not_self"),
        Index("idx_swipes_swiped_like", "swiped_id", "swiper_id", "is_like"),
        Index("idx_swipes_swiper_created", "swiper_id", "created_at"),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True, default=uuid4)
    swiper_id: Mapped[str] = mapped_column(Text, ForeignKey("profiles.id"), nullable=False)
    swiped_id: Mapped[str] = mapped_column(Text, ForeignKey("profiles.id"), nullable=False)
    is_like: Mapped[bool] = mapped_column(Boolean, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
