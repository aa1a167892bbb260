"""Shared FastAPI dependencies for the routers."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from courseware.core.database import get_db
from courseware.services.quiz.engine import QuizGenerator, get_quiz_generator
from courseware.services.rag.retriever import SemanticSearchService
from courseware.services.repository import MaterialRepository, SqlMaterialRepository


async def get_repository(db: AsyncSession = Depends(get_db)) -> MaterialRepository:
    return SqlMaterialRepository(db)


async def get_search_service(
    repository: MaterialRepository = Depends(get_repository),
) -> SemanticSearchService:
    return SemanticSearchService(repository)


async def get_quiz_service(
    repository: MaterialRepository = Depends(get_repository),
) -> QuizGenerator:
    return get_quiz_generator(repository)
