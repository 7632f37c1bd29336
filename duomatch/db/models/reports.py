from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String, Text, UniqueConstraint, text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from duomatch.db.models.base import Base


class Report(Base):
    __tablename__ = "reports"
    __table_args__ = (
        UniqueConstraint("reporter_id", "reported_id", "match_id", name="uq_reports_reporter_reported_match"),
        CheckConstraint("reporter_id <> reported_id", name="ck_reports_not_self"),
        CheckConstraint(
            "reason IN ('inappropriate_messages','fake_profile','harassment',"
            "'inappropriate_content','scam','other')",
            name="ck_reports_reason",
        ),
        CheckConstraint("status IN ('open','reviewed','dismissed')", name="ck_reports_status"),
        Index("idx_reports_status_created", "status", "created_at"),
        Index("idx_reports_reported", "reported_id"),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True, default=uuid4)
    reporter_id: Mapped[str] = mapped_column(Text, ForeignKey("profiles.id"), nullable=False)
    reported_id: Mapped[str] = mapped_column(Text, ForeignKey("profiles.id"), nullable=False)
    match_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), ForeignKey("matches.id"), nullable=False)
    reason: Mapped[str] = mapped_column(String(32), nullable=False)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, server_default=text("'open'"))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
