"""Request parsing for the chat endpoint."""

from pydantic import BaseModel, ValidationError

from paid_chat.domain.chat import ChatMessage

ALLOWED_ROLES = frozenset({"user", "assistant"})


class ChatRequestError(ValueError):
    """Raised when a chat payload is rejected; ``code`` is the API error."""

    def __init__(self, code: str) -> None:
        super().__init__(code)
        self.code = code


class _RawMessage(BaseModel):
    role: str
    content: str


def parse_chat_messages(body: object) -> list[ChatMessage]:
    """Validate a chat request body and return its messages in order.

    Structural problems are ``invalid_messages``; a role outside
    user/assistant, or a conversation not ending with the user, is
    ``invalid_message_role``.
    """
    if not isinstance(body, dict):
        raise ChatRequestError("invalid_messages")
    raw_messages = body.get("messages")
    if not isinstance(raw_messages, list) or not raw_messages:
        raise ChatRequestError("invalid_messages")
    try:
        parsed = [_RawMessage.model_validate(item) for item in raw_messages]
    except ValidationError as exc:
        raise ChatRequestError("invalid_messages") from exc
    if any(message.role not in ALLOWED_ROLES for message in parsed):
        raise ChatRequestError("invalid_message_role")
    if parsed[-1].role != "user":
        raise ChatRequestError("invalid_message_role")
    return [ChatMessage(role=message.role, content=message.content) for message in parsed]
