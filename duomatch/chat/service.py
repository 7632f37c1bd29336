from __future__ import annotations

from datetime import datetime
from uuid import UUID

import structlog
from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from duomatch.chat.errors import EmptyMessageError
from duomatch.chat.read_state import is_unread, read_pointer, read_pointer_target, side_for
from duomatch.chat.session import RealtimeChannel
from duomatch.chat.types import ChatMessage, ConversationSummary, GiftSendResult, MessageType
from duomatch.db.models.matches import Match
from duomatch.db.repo.matches_repo import MatchesRepo
from duomatch.db.repo.messages_repo import MessagesRepo
from duomatch.economy.diamonds.constants import TASK_TYPE_MESSAGES
from duomatch.economy.diamonds.service import DiamondLedger
from duomatch.economy.diamonds.tasks import DailyTasksService
from duomatch.matching.errors import NotMatchedError

logger = structlog.get_logger(__name__)

SessionFactory = async_sessionmaker[AsyncSession]


async def _publish(channel: RealtimeChannel | None, message: ChatMessage) -> None:
    if channel is None:
        return
    try:
        await channel.publish(message)
    except RedisError as exc:
        # The row is already committed; readers still get it on the next fetch.
        logger.warning(
            "realtime_publish_failed",
            message_id=message.id,
            error_type=type(exc).__name__,
        )


class ChatService:
    @staticmethod
    async def _require_match(session: AsyncSession, *, viewer_id: str, other_id: str) -> Match:
        if viewer_id == other_id:
            raise NotMatchedError
        match = await MatchesRepo.get_by_pair(session, user_a=viewer_id, user_b=other_id)
        if match is None:
            raise NotMatchedError
        return match

    @staticmethod
    async def create_text_message(
        session: AsyncSession,
        *,
        sender_id: str,
        receiver_id: str,
        text: str,
        now_utc: datetime,
    ) -> ChatMessage:
        body = text.strip()
        if not body:
            raise EmptyMessageError

        await ChatService._require_match(session, viewer_id=sender_id, other_id=receiver_id)
        stored = await MessagesRepo.create(
            session,
            sender_id=sender_id,
            receiver_id=receiver_id,
            message_type=MessageType.TEXT.value,
            message_text=body,
            diamond_count=None,
            created_at=now_utc,
        )
        try:
            async with session.begin_nested():
                await DailyTasksService.record_progress(
                    session,
                    user_id=sender_id,
                    task_type=TASK_TYPE_MESSAGES,
                    now_utc=now_utc,
                )
        except SQLAlchemyError as exc:
            logger.warning("message_task_progress_failed", user_id=sender_id, error_type=type(exc).__name__)
        return ChatMessage.from_model(stored)

    @staticmethod
    async def send_text(
        *,
        session_factory: SessionFactory,
        channel: RealtimeChannel | None,
        sender_id: str,
        receiver_id: str,
        text: str,
        now_utc: datetime,
    ) -> ChatMessage:
        async with session_factory.begin() as session:
            message = await ChatService.create_text_message(
                session,
                sender_id=sender_id,
                receiver_id=receiver_id,
                text=text,
                now_utc=now_utc,
            )
        await _publish(channel, message)
        return message

    @staticmethod
    async def send_gift(
        *,
        session_factory: SessionFactory,
        channel: RealtimeChannel | None,
        sender_id: str,
        receiver_id: str,
        amount: int,
        now_utc: datetime,
    ) -> GiftSendResult:
        """Transfers diamonds, then posts the gift message.

        The transfer commits on its own; if the message cannot be stored the
        diamonds stay transferred and the result carries no message.
        """
        async with session_factory.begin() as session:
            await ChatService._require_match(session, viewer_id=sender_id, other_id=receiver_id)
            transfer = await DiamondLedger.transfer(
                session,
                sender_id=sender_id,
                receiver_id=receiver_id,
                amount=amount,
                now_utc=now_utc,
            )

        message: ChatMessage | None = None
        try:
            async with session_factory.begin() as session:
                stored = await MessagesRepo.create(
                    session,
                    sender_id=sender_id,
                    receiver_id=receiver_id,
                    message_type=MessageType.DIAMOND.value,
                    message_text=None,
                    diamond_count=amount,
                    created_at=now_utc,
                )
                await DiamondLedger.link_message(
                    session,
                    transaction_id=transfer.transaction_id,
                    message_id=stored.id,
                    now_utc=now_utc,
                )
                message = ChatMessage.from_model(stored)
        except SQLAlchemyError as exc:
            message = None
            logger.error(
                "gift_message_failed",
                transaction_id=str(transfer.transaction_id),
                sender_id=sender_id,
                receiver_id=receiver_id,
                error_type=type(exc).__name__,
            )

        if message is not None:
            await _publish(channel, message)
        return GiftSendResult(transfer=transfer, message=message)

    @staticmethod
    async def list_messages(
        session: AsyncSession,
        *,
        viewer_id: str,
        other_id: str,
        limit: int | None = None,
    ) -> list[ChatMessage]:
        await ChatService._require_match(session, viewer_id=viewer_id, other_id=other_id)
        rows = await MessagesRepo.list_conversation(session, user_a=viewer_id, user_b=other_id, limit=limit)
        return [ChatMessage.from_model(row) for row in rows]

    @staticmethod
    async def mark_read(session: AsyncSession, *, viewer_id: str, other_id: str) -> str | None:
        """Advances the viewer's read pointer to the newest message from the other user."""
        match = await ChatService._require_match(session, viewer_id=viewer_id, other_id=other_id)
        latest_row = await MessagesRepo.get_latest(session, user_a=viewer_id, user_b=other_id)
        latest = None if latest_row is None else ChatMessage.from_model(latest_row)

        target = read_pointer_target(latest, viewer_id=viewer_id)
        if target is None or target == read_pointer(match, viewer_id):
            return None

        await MatchesRepo.update_last_read(
            session,
            match_id=match.id,
            side=side_for(viewer_id, other_id),
            message_id=UUID(target),
        )
        return target

    @staticmethod
    async def conversation_summaries(session: AsyncSession, *, viewer_id: str) -> list[ConversationSummary]:
        matches = await MatchesRepo.list_for_user(session, user_id=viewer_id)

        summaries: list[ConversationSummary] = []
        for match in matches:
            other_id = match.user2_id if match.user1_id == viewer_id else match.user1_id
            latest_row = await MessagesRepo.get_latest(session, user_a=viewer_id, user_b=other_id)
            latest = None if latest_row is None else ChatMessage.from_model(latest_row)
            summaries.append(
                ConversationSummary(
                    match_id=match.id,
                    other_user_id=other_id,
                    matched_at=match.created_at,
                    last_message=latest,
                    has_unread=is_unread(latest, viewer_id=viewer_id, pointer=read_pointer(match, viewer_id)),
                )
            )

        with_messages = sorted(
            (item for item in summaries if item.last_message is not None),
            key=lambda item: item.last_message.created_at,
            reverse=True,
        )
        without_messages = sorted(
            (item for item in summaries if item.last_message is None),
            key=lambda item: item.matched_at,
            reverse=True,
        )
        return with_messages + without_messages
