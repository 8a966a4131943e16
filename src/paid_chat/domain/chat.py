"""Models for chat turns and moderation outcomes."""

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel

ChatRole = Literal["user", "assistant"]


class ChatMessage(BaseModel):
    """Single message of the client-held conversation."""

    role: ChatRole
    content: str


class ModerationVerdict(StrEnum):
    """Decision of the content gate for a single input."""

    ALLOWED = "allowed"
    FLAGGED = "flagged"
