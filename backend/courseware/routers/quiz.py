"""
Quiz Router

Generates a multiple-choice quiz for a course topic. Only a generic
failure is ever returned; provider diagnostics stay in the server logs.
"""

import logging

from fastapi import APIRouter, Body, Depends, HTTPException, status

from courseware.routers.dependencies import get_quiz_service
from courseware.services.errors import ConfigurationError, NotFoundError, QuizGenerationError
from courseware.services.quiz.engine import QuizGenerator
from courseware.services.quiz.models import QuizRequest, QuizResult

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/topic/{topic_id}", response_model=QuizResult)
async def generate_topic_quiz(
    topic_id: str,
    data: QuizRequest | None = Body(default=None),
    generator: QuizGenerator = Depends(get_quiz_service),
):
    """Generate a quiz for a topic using the configured model chain."""
    data = data or QuizRequest()

    try:
        return await generator.generate(
            topic_id,
            question_count=data.question_count,
            difficulty=data.difficulty,
        )
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Topic not found",
        )
    except ConfigurationError as e:
        logger.error("[Quiz] Configuration error: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Quiz generation is not configured",
        )
    except QuizGenerationError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error generating quiz",
        )
