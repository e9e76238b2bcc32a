"""Base LLM service interface.

Defines the contract that all completion backends must implement.
"""

from abc import ABC, abstractmethod


class LLMError(Exception):
    """Raised when LLM generation fails."""


class BaseLLMService(ABC):
    """Abstract base class for completion backends.

    A backend takes one text prompt and returns one text completion.
    Failures are signalled with LLMError, never with an empty answer.
    """

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Generate a single response.

        Args:
            prompt: Full prompt text.
            temperature: Sampling temperature (0-1).
            max_tokens: Maximum tokens to generate.

        Returns:
            Generated text.

        Raises:
            LLMError: If the backend call fails or returns no text.
        """
