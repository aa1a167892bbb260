"""
Embedding Provider

Turns query text into a vector using the same OpenAI embedding model the
ingestion pipeline used for the stored chunks. Any provider failure or
malformed vector is reported as EmbeddingError; retrieval has no fallback.
"""

import logging
from typing import Protocol

from langchain_openai import OpenAIEmbeddings

from courseware.core.config import get_settings
from courseware.services.errors import ConfigurationError, EmbeddingError
from courseware.services.rag.similarity import coerce_vector, magnitude

logger = logging.getLogger(__name__)


class EmbeddingProvider(Protocol):
    async def embed(self, text: str) -> list[float]:
        ...


def validate_query_embedding(raw, expected_dimensions: int | None = None) -> list[float]:
    """Check a provider vector and return it as a list of floats."""
    try:
        vector = coerce_vector(raw)
    except ValueError as e:
        raise EmbeddingError(f"Malformed query embedding: {e}") from e

    if expected_dimensions and vector.size != expected_dimensions:
        raise EmbeddingError(
            f"Query embedding has {vector.size} dimensions, expected {expected_dimensions}"
        )
    if magnitude(vector) == 0.0:
        raise EmbeddingError("Query embedding has zero magnitude")
    return vector.tolist()


class OpenAIEmbeddingProvider:
    """EmbeddingProvider backed by langchain's OpenAIEmbeddings."""

    def __init__(
        self,
        api_key: str,
        model: str = "text-embedding-3-small",
        dimensions: int | None = None,
    ):
        if not api_key:
            raise ConfigurationError("OPENAI_API_KEY is not set; embeddings unavailable")
        self.model = model
        self.dimensions = dimensions
        self._embeddings = OpenAIEmbeddings(model=model, openai_api_key=api_key)

    async def embed(self, text: str) -> list[float]:
        try:
            raw = await self._embeddings.aembed_query(text)
        except Exception as e:
            logger.error("[RAG] Embedding request failed (model=%s): %s", self.model, e)
            raise EmbeddingError(f"Embedding provider unreachable: {e}") from e

        return validate_query_embedding(raw, self.dimensions)


# ── Singleton ─────────────────────────────────────────────────────────────────

_provider: OpenAIEmbeddingProvider | None = None


def get_embedding_provider() -> OpenAIEmbeddingProvider:
    """Get or create the embedding provider singleton."""
    global _provider
    if _provider is None:
        settings = get_settings()
        _provider = OpenAIEmbeddingProvider(
            api_key=settings.openai_api_key,
            model=settings.embedding_model,
            dimensions=settings.embedding_dimensions,
        )
    return _provider
