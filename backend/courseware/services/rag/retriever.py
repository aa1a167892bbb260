"""
Semantic Search Service

Ranks pre-embedded material chunks against a query.

How retrieval works:
1. The query text is converted into a vector by the embedding provider.
2. Processed materials are loaded from the repository, optionally filtered
   by exact subject / topic.
3. Every chunk with a usable embedding is scored by cosine similarity.
   Zero-magnitude and wrong-dimension chunks are skipped, not scored.
4. Scores below min_similarity are dropped, the rest are sorted by score
   (stable, so ties keep repository order) and the top-K are returned.
"""

import logging
from dataclasses import dataclass, asdict

import numpy as np

from courseware.services.rag.embeddings import (
    EmbeddingProvider,
    get_embedding_provider,
    validate_query_embedding,
)
from courseware.services.rag.similarity import coerce_vector, magnitude, clamp_similarity
from courseware.services.repository import MaterialRepository

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 5
DEFAULT_MIN_SIMILARITY = 0.3


@dataclass
class RetrievedChunk:
    """A single retrieved chunk with provenance and its similarity to the query."""
    material_id: str
    material_title: str
    subject: str
    topic: str
    chunk_index: int
    content: str
    similarity: float  # -1..1, higher = more relevant

    def to_dict(self) -> dict:
        return asdict(self)


class SemanticSearchService:
    """Cosine-similarity search over the chunks of processed materials."""

    def __init__(self, repository: MaterialRepository, embedder: EmbeddingProvider | None = None):
        self.repository = repository
        self._embedder = embedder

    @property
    def embedder(self) -> EmbeddingProvider:
        # Resolved on first search; subject/topic discovery never embeds
        if self._embedder is None:
            self._embedder = get_embedding_provider()
        return self._embedder

    async def search(
        self,
        query_text: str,
        subject: str | None = None,
        topic: str | None = None,
        top_k: int = DEFAULT_TOP_K,
        min_similarity: float = DEFAULT_MIN_SIMILARITY,
    ) -> list[RetrievedChunk]:
        """
        Search for the chunks most relevant to a query.

        Args:
            query_text: Natural language query (e.g. "projectile motion")
            subject: Optional exact subject filter
            topic: Optional exact topic filter
            top_k: Maximum number of chunks to return
            min_similarity: Chunks scoring below this are discarded

        Returns:
            Chunks ordered by similarity, most similar first

        Raises:
            ConfigurationError: If no embedding provider is configured
            EmbeddingError: If the query cannot be embedded
        """
        raw = await self.embedder.embed(query_text)
        query_vector = np.asarray(validate_query_embedding(raw), dtype=np.float64)
        query_norm = magnitude(query_vector)

        materials = await self.repository.find_materials(subject=subject, topic=topic)

        results: list[RetrievedChunk] = []
        skipped = 0
        for material in materials:
            for chunk in material.chunks:
                if not chunk.embedding:
                    continue
                try:
                    chunk_vector = coerce_vector(chunk.embedding)
                except ValueError:
                    skipped += 1
                    continue
                if chunk_vector.shape != query_vector.shape:
                    skipped += 1
                    continue
                chunk_norm = magnitude(chunk_vector)
                if chunk_norm == 0.0:
                    # Undefined similarity: excluded rather than scored as 0
                    continue

                similarity = clamp_similarity(
                    float(np.dot(query_vector, chunk_vector)) / (query_norm * chunk_norm)
                )
                if similarity < min_similarity:
                    continue

                results.append(
                    RetrievedChunk(
                        material_id=material.id,
                        material_title=material.title,
                        subject=material.subject,
                        topic=material.topic,
                        chunk_index=chunk.chunk_index,
                        content=chunk.content,
                        similarity=similarity,
                    )
                )

        if skipped:
            logger.warning(
                "[RAG] Skipped %d chunk(s) with malformed embeddings or dimension != %d",
                skipped, query_vector.size,
            )

        # sorted() is stable: equal scores keep material/chunk encounter order
        results = sorted(results, key=lambda r: r.similarity, reverse=True)
        ranked = results[:max(top_k, 0)]
        logger.info(
            "[RAG] %d/%d chunks above %.2f for query %r (subject=%s, topic=%s)",
            len(ranked), len(results), min_similarity, query_text[:80], subject, topic,
        )
        return ranked

    async def get_subjects(self) -> list[str]:
        """Distinct subjects across processed materials, sorted."""
        subjects = await self.repository.distinct_values("subject")
        return sorted(set(subjects))

    async def get_topics(self, subject: str) -> list[str]:
        """Distinct topics within a subject across processed materials, sorted."""
        topics = await self.repository.distinct_values("topic", subject=subject)
        return sorted(set(topics))
