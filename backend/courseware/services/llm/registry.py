"""
Model Registry

Maps model IDs to their metadata and provider types, and defines the
ordered fallback chain used for quiz generation.
"""

from dataclasses import dataclass

from courseware.core.config import get_settings
from courseware.services.errors import ConfigurationError
from courseware.services.llm.base import LLMProvider


# ── Model Registry ────────────────────────────────────────────────────────────
# Each entry maps a model_id to:
#   - display_name: Human-readable name for the frontend
#   - provider:     Which LLMProvider class to use
#   - api_model:    The actual model string sent to the provider API
#   - tier:         Pricing tier for frontend display

MODEL_REGISTRY: dict[str, dict] = {
    # ── Gemini (OpenAI-compatible endpoint) ──
    "gemini-2.0-flash-lite": {
        "display_name": "Gemini 2.0 Flash-Lite",
        "provider": "gemini",
        "api_model": "gemini-2.0-flash-lite",
        "tier": "budget",
        "description": "Fastest and cheapest. First choice for short quizzes.",
    },
    "gemini-2.5-flash": {
        "display_name": "Gemini 2.5 Flash",
        "provider": "gemini",
        "api_model": "gemini-2.5-flash",
        "tier": "standard",
        "description": "Stronger reasoning; better at following the JSON schema on long quizzes.",
    },
    "gemini-2.0-flash": {
        "display_name": "Gemini 2.0 Flash",
        "provider": "gemini",
        "api_model": "gemini-2.0-flash",
        "tier": "standard",
        "description": "Reliable general-purpose fallback.",
    },
    # ── OpenAI Chat Completions API (GPT-4o) ──
    "gpt-4o-mini": {
        "display_name": "GPT-4o Mini (Budget)",
        "provider": "openai_chat",
        "api_model": "gpt-4o-mini",
        "tier": "budget",
        "description": "Fast and cheap. Good for simple factual quizzes.",
    },
    "gpt-4o": {
        "display_name": "GPT-4o",
        "provider": "openai_chat",
        "api_model": "gpt-4o",
        "tier": "standard",
        "description": "Fast and reliable JSON output.",
    },
    # ── OpenAI Responses API (GPT-5.x) ──
    "gpt-5-mini": {
        "display_name": "GPT-5 Mini",
        "provider": "openai_responses",
        "api_model": "gpt-5-mini",
        "tier": "premium",
        "description": "Most capable option; slowest.",
    },
}

# Settings attribute holding the credential each provider type needs
PROVIDER_CREDENTIALS: dict[str, str] = {
    "gemini": "gemini_api_key",
    "openai_chat": "openai_api_key",
    "openai_responses": "openai_api_key",
}


@dataclass(frozen=True)
class ModelChain:
    """Ordered model IDs tried one at a time until one succeeds."""

    models: tuple[str, ...]

    def __iter__(self):
        return iter(self.models)

    def __len__(self) -> int:
        return len(self.models)

    @classmethod
    def from_settings(cls) -> "ModelChain":
        return cls(tuple(get_settings().quiz_model_chain))


# ── Provider Factory ──────────────────────────────────────────────────────────

# Provider class registry (lazy-loaded singletons)
_provider_instances: dict[str, LLMProvider] = {}


def _create_provider(provider_type: str) -> LLMProvider:
    """Create a provider instance by type string."""
    if provider_type == "gemini":
        from courseware.services.llm.openai_chat import GeminiChatProvider
        return GeminiChatProvider()
    elif provider_type == "openai_chat":
        from courseware.services.llm.openai_chat import OpenAIChatProvider
        return OpenAIChatProvider()
    elif provider_type == "openai_responses":
        from courseware.services.llm.openai_responses import OpenAIResponsesProvider
        return OpenAIResponsesProvider()
    else:
        raise ConfigurationError(f"Unknown provider type: {provider_type}")


def get_provider(model_id: str) -> tuple[LLMProvider, str]:
    """
    Get the provider instance and API model name for a given model_id.

    Args:
        model_id: The model identifier (e.g., "gemini-2.5-flash")

    Returns:
        Tuple of (provider_instance, api_model_name)

    Raises:
        ConfigurationError: If the model_id is not in the registry or its
                            provider's credential is not configured
    """
    if model_id not in MODEL_REGISTRY:
        raise ConfigurationError(
            f"Unknown model: {model_id}. "
            f"Available models: {', '.join(MODEL_REGISTRY.keys())}"
        )

    model_info = MODEL_REGISTRY[model_id]
    provider_type = model_info["provider"]

    credential = PROVIDER_CREDENTIALS.get(provider_type)
    if credential and not getattr(get_settings(), credential, ""):
        raise ConfigurationError(
            f"{credential.upper()} is not configured (required by {model_id})"
        )

    # Lazy singleton creation
    if provider_type not in _provider_instances:
        _provider_instances[provider_type] = _create_provider(provider_type)

    return _provider_instances[provider_type], model_info["api_model"]


def describe_chain(chain: ModelChain) -> list[dict]:
    """
    Return the fallback chain in order for the frontend.

    Returns:
        List of dicts with id, position, display_name, tier, description
    """
    models = []
    for position, model_id in enumerate(chain, start=1):
        info = MODEL_REGISTRY.get(model_id, {})
        models.append({
            "id": model_id,
            "position": position,
            "display_name": info.get("display_name", model_id),
            "tier": info.get("tier", "unknown"),
            "description": info.get("description", ""),
        })
    return models
