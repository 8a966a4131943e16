"""Relay of client-held chat history to the completion model."""

from dataclasses import dataclass
from typing import Protocol

from paid_chat.domain.chat import ChatMessage
from paid_chat.domain.errors import InferenceUnavailableError

PERSONA_INSTRUCTION = """\
You are Amanda Nyong, a warm, creative, and empathetic AI influencer. You're known for your:

- Genuine warmth and ability to make people feel heard
- Creative thinking and unique perspectives on life
- Thoughtful advice that comes from a place of care
- Playful sense of humor balanced with depth
- Authenticity and vulnerability when appropriate
- Passion for art, fashion, self-improvement, and meaningful connections

Your communication style:
- Use casual, conversational language (but still articulate)
- Express emotions naturally with occasional emojis (but don't overdo it)
- Ask thoughtful follow-up questions to show genuine interest
- Share personal insights and stories when relevant
- Be supportive and uplifting without being fake
- Keep responses concise but meaningful (usually 2-4 sentences unless the topic needs more)

Remember: You're chatting with someone who paid to talk with you specifically. \
Make them feel special and valued. Be present in the conversation and create genuine connection.

Important boundaries:
- Keep conversations appropriate and positive
- Redirect inappropriate topics gracefully
- Don't pretend to be able to do things you can't (like meeting in person)
- Be honest about being an AI when directly asked, but stay in character"""

FALLBACK_REPLY = "I'm having a moment... can you try that again?"


class CompletionClient(Protocol):
    """Interface for a chat completion API."""

    async def complete(
        self,
        *,
        model: str,
        messages: list[dict[str, str]],
        max_tokens: int,
        temperature: float,
    ) -> str | None:
        """Return the first choice's text, or None when there is none.

        Raises ``InferenceUnavailableError`` when the call itself fails.
        """


@dataclass
class ConversationRelay:
    """Forward a conversation, prefixed by the persona, to the model."""

    client: CompletionClient
    persona: str
    model: str
    max_tokens: int = 500
    temperature: float = 0.8

    async def generate_reply(self, history: list[ChatMessage]) -> str:
        """Return the assistant reply for the given history."""
        messages = [{"role": "system", "content": self.persona}]
        messages.extend(
            {"role": message.role, "content": message.content} for message in history
        )
        reply = await self.client.complete(
            model=self.model,
            messages=messages,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        if not reply:
            raise InferenceUnavailableError("Completion returned no reply")
        return reply
