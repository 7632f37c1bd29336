from __future__ import annotations

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from duomatch.api.deps import get_realtime_channel, get_viewer_id
from duomatch.chat.errors import EmptyMessageError
from duomatch.chat.service import ChatService
from duomatch.chat.session import RealtimeChannel
from duomatch.chat.types import ChatMessage
from duomatch.core.time import utc_now
from duomatch.db.session import SessionLocal
from duomatch.economy.diamonds.errors import (
    InsufficientBalanceError,
    InvalidAmountError,
    LedgerUserNotFoundError,
)
from duomatch.matching.errors import NotMatchedError

router = APIRouter(tags=["chat"])


class ChatMessageResponse(BaseModel):
    id: str
    sender_id: str
    receiver_id: str
    message_type: str
    message_text: str | None = None
    diamond_count: int | None = None
    created_at: datetime


class ChatMessagesResponse(BaseModel):
    items: list[ChatMessageResponse]


class ConversationResponse(BaseModel):
    match_id: UUID
    other_user_id: str
    matched_at: datetime
    last_message: ChatMessageResponse | None = None
    has_unread: bool


class ConversationsResponse(BaseModel):
    items: list[ConversationResponse]


class SendMessageRequest(BaseModel):
    text: str = Field(min_length=1, max_length=2000)


class SendGiftRequest(BaseModel):
    amount: int


class SendGiftResponse(BaseModel):
    transaction_id: UUID
    sender_balance: int = Field(ge=0)
    receiver_balance: int = Field(ge=0)
    message: ChatMessageResponse | None = None


class MarkReadResponse(BaseModel):
    last_read_message_id: str | None = None
    updated: bool


def _message_response(message: ChatMessage) -> ChatMessageResponse:
    return ChatMessageResponse(
        id=message.id,
        sender_id=message.sender_id,
        receiver_id=message.receiver_id,
        message_type=message.message_type.value,
        message_text=message.message_text,
        diamond_count=message.diamond_count,
        created_at=message.created_at,
    )


def _not_matched() -> HTTPException:
    return HTTPException(status_code=404, detail={"code": "E_MATCH_NOT_FOUND"})


@router.get("/chats", response_model=ConversationsResponse)
async def list_conversations(viewer_id: str = Depends(get_viewer_id)) -> ConversationsResponse:
    async with SessionLocal.begin() as session:
        summaries = await ChatService.conversation_summaries(session, viewer_id=viewer_id)

    return ConversationsResponse(
        items=[
            ConversationResponse(
                match_id=item.match_id,
                other_user_id=item.other_user_id,
                matched_at=item.matched_at,
                last_message=None if item.last_message is None else _message_response(item.last_message),
                has_unread=item.has_unread,
            )
            for item in summaries
        ]
    )


@router.get("/chats/{other_id}/messages", response_model=ChatMessagesResponse)
async def list_messages(
    other_id: str,
    viewer_id: str = Depends(get_viewer_id),
    limit: int | None = Query(default=None, ge=1, le=500),
) -> ChatMessagesResponse:
    try:
        async with SessionLocal.begin() as session:
            messages = await ChatService.list_messages(
                session,
                viewer_id=viewer_id,
                other_id=other_id,
                limit=limit,
            )
    except NotMatchedError as exc:
        raise _not_matched() from exc

    return ChatMessagesResponse(items=[_message_response(message) for message in messages])


@router.post("/chats/{other_id}/messages", response_model=ChatMessageResponse)
async def send_message(
    other_id: str,
    payload: SendMessageRequest,
    viewer_id: str = Depends(get_viewer_id),
    channel: RealtimeChannel = Depends(get_realtime_channel),
) -> ChatMessageResponse:
    try:
        message = await ChatService.send_text(
            session_factory=SessionLocal,
            channel=channel,
            sender_id=viewer_id,
            receiver_id=other_id,
            text=payload.text,
            now_utc=utc_now(),
        )
    except NotMatchedError as exc:
        raise _not_matched() from exc
    except EmptyMessageError as exc:
        raise HTTPException(status_code=422, detail={"code": "E_EMPTY_MESSAGE"}) from exc

    return _message_response(message)


@router.post("/chats/{other_id}/gifts", response_model=SendGiftResponse)
async def send_gift(
    other_id: str,
    payload: SendGiftRequest,
    viewer_id: str = Depends(get_viewer_id),
    channel: RealtimeChannel = Depends(get_realtime_channel),
) -> SendGiftResponse:
    try:
        result = await ChatService.send_gift(
            session_factory=SessionLocal,
            channel=channel,
            sender_id=viewer_id,
            receiver_id=other_id,
            amount=payload.amount,
            now_utc=utc_now(),
        )
    except NotMatchedError as exc:
        raise _not_matched() from exc
    except InvalidAmountError as exc:
        raise HTTPException(status_code=422, detail={"code": "E_INVALID_AMOUNT"}) from exc
    except InsufficientBalanceError as exc:
        raise HTTPException(status_code=409, detail={"code": "E_INSUFFICIENT_BALANCE"}) from exc
    except LedgerUserNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_PROFILE_NOT_FOUND"}) from exc

    return SendGiftResponse(
        transaction_id=result.transfer.transaction_id,
        sender_balance=result.transfer.sender_balance,
        receiver_balance=result.transfer.receiver_balance,
        message=None if result.message is None else _message_response(result.message),
    )


@router.post("/chats/{other_id}/read", response_model=MarkReadResponse)
async def mark_read(other_id: str, viewer_id: str = Depends(get_viewer_id)) -> MarkReadResponse:
    try:
        async with SessionLocal.begin() as session:
            message_id = await ChatService.mark_read(session, viewer_id=viewer_id, other_id=other_id)
    except NotMatchedError as exc:
        raise _not_matched() from exc

    return MarkReadResponse(last_read_message_id=message_id, updated=message_id is not None)
