from __future__ import annotations

from datetime import datetime

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from duomatch.db.models.messages import Message


def _conversation_clause(user_a: str, user_b: str):
    return or_(
        and_(Message.sender_id == user_a, Message.receiver_id == user_b),
        and_(Message.sender_id == user_b, Message.receiver_id == user_a),
    )


class MessagesRepo:
    @staticmethod
    async def create(
        session: AsyncSession,
        *,
        sender_id: str,
        receiver_id: str,
        message_type: str,
        message_text: str | None,
        diamond_count: int | None,
        created_at: datetime,
    ) -> Message:
        message = Message(
            sender_id=sender_id,
            receiver_id=receiver_id,
            message_type=message_type,
            message_text=message_text,
            diamond_count=diamond_count,
            created_at=created_at,
        )
        session.add(message)
        await session.flush()
        return message

    @staticmethod
    async def list_conversation(
        session: AsyncSession,
        *,
        user_a: str,
        user_b: str,
        limit: int | None = None,
    ) -> list[Message]:
        stmt = (
            select(Message)
            .where(_conversation_clause(user_a, user_b))
            .order_by(Message.created_at.asc(), Message.id.asc())
        )
        if limit is not None:
            # Newest `limit` rows, still returned oldest first.
            newest = (
                select(Message.id)
                .where(_conversation_clause(user_a, user_b))
                .order_by(Message.created_at.desc(), Message.id.desc())
                .limit(limit)
                .correlate(None)
            )
            stmt = stmt.where(Message.id.in_(newest))
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def get_latest(session: AsyncSession, *, user_a: str, user_b: str) -> Message | None:
        stmt = (
            select(Message)
            .where(_conversation_clause(user_a, user_b))
            .order_by(Message.created_at.desc(), Message.id.desc())
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()
