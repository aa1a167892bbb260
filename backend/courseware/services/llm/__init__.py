"""
LLM Provider Abstraction Layer

Provides a unified interface for multiple LLM providers (OpenAI, Gemini)
with a model registry, an ordered fallback chain, and shared orchestration
logic.
"""

from courseware.services.llm.orchestrator import (
    LLMOrchestrator,
    get_orchestrator,
    extract_json,
    Trying,
    Succeeded,
    Exhausted,
)
from courseware.services.llm.registry import MODEL_REGISTRY, ModelChain, get_provider, describe_chain

__all__ = [
    "LLMOrchestrator",
    "get_orchestrator",
    "extract_json",
    "Trying",
    "Succeeded",
    "Exhausted",
    "MODEL_REGISTRY",
    "ModelChain",
    "get_provider",
    "describe_chain",
]
