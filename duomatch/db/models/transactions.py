from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from duomatch.db.models.base import Base


class Transaction(Base):
    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transactions_amount_positive"),
        CheckConstraint(
            "transaction_type IN ('gift','task_reward','withdrawal','purchase','prize')",
            name="ck_transactions_type",
        ),
        CheckConstraint(
            "status IN ('pending','completed','failed')",
            name="ck_transactions_status",
        ),
        Index("idx_transactions_sender_created", "sender_id", "created_at"),
        Index("idx_transactions_receiver_created", "receiver_id", "created_at"),
        Index("idx_transactions_type_status", "transaction_type", "status"),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True, default=uuid4)
    sender_id: Mapped[str | None] = mapped_column(Text, ForeignKey("profiles.id"), nullable=True)
    receiver_id: Mapped[str | None] = mapped_column(Text, ForeignKey("profiles.id"), nullable=True)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    transaction_type: Mapped[str] = mapped_column(String(16), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    message_id: Mapped[UUID | None] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("messages.id"),
        nullable=True,
    )
    idempotency_key: Mapped[str | None] = mapped_column(String(96), unique=True, nullable=True)
    metadata_: Mapped[dict[str, object]] = mapped_column(
        "metadata",
        JSONB,
        nullable=False,
        server_default=text("'{}'::jsonb"),
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
