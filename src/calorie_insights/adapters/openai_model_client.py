"""OpenAI Responses API client for free-text model answers."""

from dataclasses import dataclass

from openai import (
    APIConnectionError,
    AsyncOpenAI,
    AuthenticationError,
    InternalServerError,
    RateLimitError,
)

from calorie_insights.errors import UpstreamUnavailable
from calorie_insights.services.estimation import ModelClient


@dataclass
class OpenAIModelClient(ModelClient):
    """Model client backed by the OpenAI Responses API."""

    client: AsyncOpenAI | None

    @classmethod
    def create(cls, api_key: str | None, timeout: float) -> "OpenAIModelClient":
        """Create a client; a missing key fails on first use, not at startup."""
        if not api_key:
            return cls(client=None)
        return cls(client=AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0))

    async def complete(
        self, *, model: str, prompt: str, image_data_url: str | None
    ) -> str:
        """Send the prompt, with an optional image, and return the output text."""
        if self.client is None:
            raise UpstreamUnavailable("OpenAI API key is not configured")

        content: list[dict[str, str]] = [{"type": "input_text", "text": prompt}]
        if image_data_url:
            content.append({"type": "input_image", "image_url": image_data_url})
        try:
            response = await self.client.responses.create(
                model=model,
                input=[{"role": "user", "content": content}],
            )
        except (
            APIConnectionError,
            AuthenticationError,
            RateLimitError,
            InternalServerError,
        ) as exc:
            raise UpstreamUnavailable(f"OpenAI request failed: {exc}") from exc

        output_text = response.output_text
        if not output_text:
            raise UpstreamUnavailable("OpenAI returned an empty response")
        return output_text

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        if self.client is not None:
            await self.client.close()
