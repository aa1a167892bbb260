"""Quiz generation: prompt, model fallback, and output normalization."""

from courseware.services.quiz.engine import QuizGenerator, get_quiz_generator
from courseware.services.quiz.models import QuizQuestion, QuizRequest, QuizResult
from courseware.services.quiz.normalize import normalize_questions

__all__ = [
    "QuizGenerator",
    "get_quiz_generator",
    "QuizQuestion",
    "QuizRequest",
    "QuizResult",
    "normalize_questions",
]
