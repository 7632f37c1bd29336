class ChatError(Exception):
    pass


class EmptyMessageError(ChatError):
    pass


class MessageSendError(ChatError):
    pass


class ProvisionalMessageNotFoundError(ChatError):
    pass
