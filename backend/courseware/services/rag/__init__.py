"""
Semantic retrieval over course material

Provides course-material context to callers by:
1. Embedding the query with the same model used at ingestion time
2. Ranking stored chunks of processed materials by cosine similarity
3. Rendering the ranked chunks as a provenance-tagged context block
"""

from courseware.services.rag.context import format_context
from courseware.services.rag.embeddings import get_embedding_provider
from courseware.services.rag.retriever import RetrievedChunk, SemanticSearchService

__all__ = [
    "format_context",
    "get_embedding_provider",
    "RetrievedChunk",
    "SemanticSearchService",
]
