"""
OpenAI Chat Completions API Provider

Handles GPT-4o, GPT-4o-mini, and other Chat Completions API models:
- client.chat.completions.create()
- messages (not input)
- response.choices[0].message.content

Gemini models are reached through Google's OpenAI-compatible endpoint,
so they share this provider with a different base URL and key.
"""

from openai import AsyncOpenAI

from courseware.core.config import get_settings
from courseware.services.llm.base import LLMProvider


class OpenAIChatProvider(LLMProvider):
    """Provider for OpenAI Chat Completions API (GPT-4o, GPT-4o-mini, etc.)."""

    provider_name = "openai_chat"

    def __init__(self, api_key: str | None = None, base_url: str | None = None):
        settings = get_settings()
        self.client = AsyncOpenAI(
            api_key=api_key if api_key is not None else settings.openai_api_key,
            base_url=base_url,
            timeout=settings.llm_request_timeout,
            max_retries=0,
        )

    async def generate(
        self,
        prompt: str,
        model: str,
        max_output_tokens: int = 8000,
        temperature: float = 0.4,
    ) -> str:
        response = await self.client.chat.completions.create(
            model=model,
            messages=[
                {
                    "role": "user",
                    "content": prompt,
                },
            ],
            max_completion_tokens=max_output_tokens,
            temperature=temperature,
        )

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""


class GeminiChatProvider(OpenAIChatProvider):
    """Provider for Gemini models via the OpenAI-compatible Gemini API."""

    provider_name = "gemini"

    def __init__(self):
        settings = get_settings()
        super().__init__(
            api_key=settings.gemini_api_key,
            base_url=settings.gemini_base_url,
        )
