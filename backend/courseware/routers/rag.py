"""
RAG Router

Semantic search over processed course material, plus the discovery
endpoints used to populate subject / topic filters.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from courseware.core.config import get_settings
from courseware.routers.dependencies import get_search_service
from courseware.services.errors import ConfigurationError, EmbeddingError
from courseware.services.rag.context import format_context
from courseware.services.rag.retriever import RetrievedChunk, SemanticSearchService

router = APIRouter()
logger = logging.getLogger(__name__)
settings = get_settings()


# Schemas
class SearchRequest(BaseModel):
    query: str = Field(min_length=1)
    subject: str | None = None
    topic: str | None = None
    top_k: int = Field(default=settings.retrieval_top_k, ge=1, le=50)
    min_similarity: float = Field(default=settings.retrieval_min_similarity, ge=-1.0, le=1.0)


class RetrievedChunkResponse(BaseModel):
    material_id: str
    material_title: str
    subject: str
    topic: str
    chunk_index: int
    content: str
    similarity: float


class SearchResponse(BaseModel):
    query: str
    results: list[RetrievedChunkResponse]
    count: int


class ContextResponse(SearchResponse):
    context: str


class SubjectsResponse(BaseModel):
    subjects: list[str]


class TopicsResponse(BaseModel):
    subject: str
    topics: list[str]


async def _run_search(
    data: SearchRequest, service: SemanticSearchService
) -> list[RetrievedChunk]:
    try:
        return await service.search(
            data.query,
            subject=data.subject,
            topic=data.topic,
            top_k=data.top_k,
            min_similarity=data.min_similarity,
        )
    except ConfigurationError as e:
        logger.error("[RAG] %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Embedding service not configured",
        )
    except EmbeddingError as e:
        logger.error("[RAG] Search failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Embedding service unavailable",
        )


# Endpoints
@router.post("/search", response_model=SearchResponse)
async def search_materials(
    data: SearchRequest,
    service: SemanticSearchService = Depends(get_search_service),
):
    """Rank material chunks by semantic similarity to the query."""
    chunks = await _run_search(data, service)
    return SearchResponse(
        query=data.query,
        results=[RetrievedChunkResponse(**c.to_dict()) for c in chunks],
        count=len(chunks),
    )


@router.post("/context", response_model=ContextResponse)
async def search_context(
    data: SearchRequest,
    service: SemanticSearchService = Depends(get_search_service),
):
    """Same ranking as /search, also rendered as a prompt-ready context block."""
    chunks = await _run_search(data, service)
    return ContextResponse(
        query=data.query,
        results=[RetrievedChunkResponse(**c.to_dict()) for c in chunks],
        count=len(chunks),
        context=format_context(chunks),
    )


@router.get("/subjects", response_model=SubjectsResponse)
async def list_subjects(service: SemanticSearchService = Depends(get_search_service)):
    """List subjects that have processed material."""
    return SubjectsResponse(subjects=await service.get_subjects())


@router.get("/topics", response_model=TopicsResponse)
async def list_topics(
    subject: str,
    service: SemanticSearchService = Depends(get_search_service),
):
    """List topics within a subject that have processed material."""
    return TopicsResponse(subject=subject, topics=await service.get_topics(subject))
