from duomatch.chat.reconcile import reconcile
from duomatch.chat.service import ChatService
from duomatch.chat.session import ChatSession

__all__ = ["ChatService", "ChatSession", "reconcile"]
