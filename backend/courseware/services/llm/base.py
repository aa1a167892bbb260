"""
Abstract base class for all LLM providers.

Each provider implements the API-specific translation layer.
JSON extraction, validation, and model fallback are handled by the
orchestrator and the quiz engine.
"""

from abc import ABC, abstractmethod


class LLMProvider(ABC):
    """Abstract base class for all LLM providers."""

    provider_name: str = "base"

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        model: str,
        max_output_tokens: int = 8000,
        temperature: float = 0.4,
    ) -> str:
        """
        Send a single text prompt to the LLM and return the raw text response.

        Args:
            prompt: The full instruction prompt
            model: The API model identifier (e.g., "gpt-4o", "gemini-2.5-flash")
            max_output_tokens: Maximum tokens in the response
            temperature: Sampling temperature

        Returns:
            Raw text response from the LLM; may be empty; callers validate it
        """
        ...
