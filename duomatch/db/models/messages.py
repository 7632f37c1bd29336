from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from duomatch.db.models.base import Base


class Message(Base):
    __tablename__ = "messages"
    __table_args__ = (
        CheckConstraint(
            "message_type IN ('text','diamond')",
            name="ck_messages_type",
        ),
        CheckConstraint(
            "(message_type = 'diamond' AND diamond_count IS NOT NULL AND diamond_count > 0) "
            "OR (message_type = 'text' AND diamond_count IS NULL AND message_text IS NOT NULL)",
            name="ck_messages_payload",
        ),
        Index("idx_messages_sender_receiver_created", "sender_id", "receiver_id", "created_at"),
        Index("idx_messages_receiver_sender_created", "receiver_id", "sender_id", "created_at"),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True, default=uuid4)
    sender_id: Mapped[str] = mapped_column(Text, ForeignKey("profiles.id"), nullable=False)
    receiver_id: Mapped[str] = mapped_column(Text, ForeignKey("profiles.id"), nullable=False)
    message_type: Mapped[str] = mapped_column(String(16), nullable=False)
    message_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    diamond_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
