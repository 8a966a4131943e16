"""OpenAI-compatible chat completions client (xAI Grok)."""

from dataclasses import dataclass

from openai import AsyncOpenAI, OpenAIError

from paid_chat.domain.errors import InferenceUnavailableError
from paid_chat.services.conversation import CompletionClient


@dataclass
class OpenAIChatClient(CompletionClient):
    """Completion client for any OpenAI-compatible chat endpoint."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str, base_url: str, timeout: float) -> "OpenAIChatClient":
        """Create a chat client pointed at ``base_url``."""
        return cls(
            client=AsyncOpenAI(
                api_key=api_key, base_url=base_url, timeout=timeout, max_retries=0
            )
        )

    async def complete(
        self,
        *,
        model: str,
        messages: list[dict[str, str]],
        max_tokens: int,
        temperature: float,
    ) -> str | None:
        """Call chat completions and return the first choice's content."""
        try:
            completion = await self.client.chat.completions.create(
                model=model,
                messages=messages,
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except OpenAIError as exc:
            raise InferenceUnavailableError("Completion request failed") from exc
        if not completion.choices:
            return None
        return completion.choices[0].message.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
