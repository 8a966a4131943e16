"""OpenAI moderation API client."""

from dataclasses import dataclass

from openai import AsyncOpenAI, OpenAIError

from paid_chat.domain.errors import ModerationUnavailableError
from paid_chat.services.moderation import ModerationClient


@dataclass
class OpenAIModerationClient(ModerationClient):
    """Moderation client backed by OpenAI's moderations endpoint."""

    client: AsyncOpenAI
    model: str

    @classmethod
    def create(
        cls, api_key: str, model: str, timeout: float
    ) -> "OpenAIModerationClient":
        """Create a moderation client with a bounded timeout."""
        return cls(
            client=AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0),
            model=model,
        )

    async def is_flagged(self, text: str) -> bool:
        """Classify a single text input."""
        try:
            response = await self.client.moderations.create(
                model=self.model, input=text
            )
        except OpenAIError as exc:
            raise ModerationUnavailableError("Moderation request failed") from exc
        if not response.results:
            raise ModerationUnavailableError("Moderation returned no results")
        return bool(response.results[0].flagged)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
