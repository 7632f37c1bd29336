from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from duomatch.db.models.messages import Message
from duomatch.economy.diamonds.types import TransferResult

PROVISIONAL_ID_PREFIX = "temp-"


class MessageType(str, Enum):
    TEXT = "text"
    DIAMOND = "diamond"


@dataclass(frozen=True, slots=True)
class ChatMessage:
    id: str
    sender_id: str
    receiver_id: str
    message_type: MessageType
    message_text: str | None
    diamond_count: int | None
    created_at: datetime
    is_optimistic: bool = False

    @classmethod
    def from_model(cls, message: Message) -> ChatMessage:
        return cls(
            id=str(message.id),
            sender_id=message.sender_id,
            receiver_id=message.receiver_id,
            message_type=MessageType(message.message_type),
            message_text=message.message_text,
            diamond_count=message.diamond_count,
            created_at=message.created_at,
        )

    def to_payload(self) -> dict[str, object]:
        return {
            "id": self.id,
            "sender_id": self.sender_id,
            "receiver_id": self.receiver_id,
            "message_type": self.message_type.value,
            "message_text": self.message_text,
            "diamond_count": self.diamond_count,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> ChatMessage:
        diamond_count = payload.get("diamond_count")
        message_text = payload.get("message_text")
        return cls(
            id=str(payload["id"]),
            sender_id=str(payload["sender_id"]),
            receiver_id=str(payload["receiver_id"]),
            message_type=MessageType(str(payload["message_type"])),
            message_text=None if message_text is None else str(message_text),
            diamond_count=None if diamond_count is None else int(diamond_count),
            created_at=datetime.fromisoformat(str(payload["created_at"])),
        )

    def belongs_to(self, user_a: str, user_b: str) -> bool:
        return {self.sender_id, self.receiver_id} == {user_a, user_b}


@dataclass(frozen=True, slots=True)
class GiftSendResult:
    transfer: TransferResult
    message: ChatMessage | None


@dataclass(frozen=True, slots=True)
class ConversationSummary:
    match_id: UUID
    other_user_id: str
    matched_at: datetime
    last_message: ChatMessage | None
    has_unread: bool
