"""Content moderation gate for incoming chat messages."""

import logging
from dataclasses import dataclass
from typing import Protocol

from paid_chat.domain.chat import ModerationVerdict
from paid_chat.domain.errors import ModerationUnavailableError

logger = logging.getLogger(__name__)


class ModerationClient(Protocol):
    """Interface for a third-party moderation classifier."""

    async def is_flagged(self, text: str) -> bool:
        """Return true when the classifier flags the text.

        Raises ``ModerationUnavailableError`` when the call itself fails.
        """


@dataclass
class ContentGate:
    """Allow or deny a single user message.

    With ``fail_open`` set, an unavailable moderation service lets the
    message through instead of blocking the chat. The flag is explicit
    configuration; turn it off to fail closed.
    """

    client: ModerationClient
    fail_open: bool = True

    async def check(self, text: str) -> ModerationVerdict:
        """Return the moderation verdict for a message."""
        try:
            flagged = await self.client.is_flagged(text)
        except ModerationUnavailableError:
            if not self.fail_open:
                raise
            logger.warning("Moderation unavailable, allowing message (fail-open)")
            return ModerationVerdict.ALLOWED
        return ModerationVerdict.FLAGGED if flagged else ModerationVerdict.ALLOWED
