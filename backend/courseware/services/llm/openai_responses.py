"""
OpenAI Responses API Provider

Handles GPT-5.x models using the newer Responses API format:
- client.responses.create()
- input (not messages)
- response.output_text
"""

from openai import AsyncOpenAI

from courseware.core.config import get_settings
from courseware.services.llm.base import LLMProvider


class OpenAIResponsesProvider(LLMProvider):
    """Provider for OpenAI Responses API (GPT-5.x models)."""

    provider_name = "openai_responses"

    def __init__(self):
        settings = get_settings()
        self.client = AsyncOpenAI(
            api_key=settings.openai_api_key,
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
        # GPT-5.x reasoning models reject the temperature parameter
        response = await self.client.responses.create(
            model=model,
            input=prompt,
            max_output_tokens=max_output_tokens,
        )

        return response.output_text or ""
