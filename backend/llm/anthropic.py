"""Anthropic Claude LLM implementation."""

import logging

import httpx
from anthropic import APIError, AsyncAnthropic, RateLimitError

from config import get_settings

from .base import BaseLLMService, LLMError

logger = logging.getLogger(__name__)


class AnthropicService(BaseLLMService):
    """Claude LLM service via Anthropic API."""

    def __init__(self, model: str | None = None) -> None:
        settings = get_settings()
        self.model = model or settings.llm_model
        self.settings = settings

        self._client = AsyncAnthropic(
            api_key=settings.anthropic_api_key,
            timeout=httpx.Timeout(timeout=60.0, connect=10.0),
            max_retries=0,
        )

    async def generate(
        self,
        prompt: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Generate a response using Claude."""
        try:
            response = await self._client.messages.create(
                model=self.model,
                max_tokens=max_tokens or self.settings.llm_max_tokens,
                temperature=temperature
                if temperature is not None
                else self.settings.llm_temperature,
                messages=[{"role": "user", "content": prompt}],
            )

        except RateLimitError as e:
            logger.warning("Rate limit: %s", e)
            raise LLMError("Rate limit exceeded. Please try again.") from e
        except APIError as e:
            logger.error("API error: %s", e)
            raise LLMError(f"LLM error: {e}") from e

        text = "".join(
            block.text for block in response.content if block.type == "text"
        )
        if not text:
            logger.error("Empty completion (stop_reason=%s)", response.stop_reason)
            raise LLMError("Invalid response from LLM: no text content")

        return text
