"""
Pydantic models for quiz generation.

QuizQuestion is the only shape a generated question can take once it has
passed normalization; raw model output never reaches callers.
"""

from pydantic import BaseModel, Field, field_validator

DEFAULT_QUESTION_COUNT = 10
MIN_QUESTION_COUNT = 1
MAX_QUESTION_COUNT = 20
DEFAULT_DIFFICULTY = "moderate"
OPTION_COUNT = 4


def clamp_question_count(value) -> int:
    """Parse a requested count, falling back to the default, then clamp to 1..20."""
    try:
        count = int(float(value)) if isinstance(value, (str, float)) else int(value)
    except (TypeError, ValueError, OverflowError):
        count = 0
    if isinstance(value, bool) or count == 0:
        count = DEFAULT_QUESTION_COUNT
    return max(MIN_QUESTION_COUNT, min(MAX_QUESTION_COUNT, count))


class QuizQuestion(BaseModel):
    id: str
    question: str = Field(min_length=1)
    options: list[str] = Field(min_length=OPTION_COUNT, max_length=OPTION_COUNT)
    answer_index: int = Field(ge=0, lt=OPTION_COUNT)
    explanation: str = ""


class QuizRequest(BaseModel):
    question_count: int = DEFAULT_QUESTION_COUNT
    difficulty: str = DEFAULT_DIFFICULTY

    @field_validator("question_count", mode="before")
    @classmethod
    def _clamp_count(cls, value):
        return clamp_question_count(value)

    @field_validator("difficulty", mode="before")
    @classmethod
    def _default_difficulty(cls, value):
        if value is None or not str(value).strip():
            return DEFAULT_DIFFICULTY
        return str(value).strip()


class QuizResult(BaseModel):
    topic_id: str
    questions: list[QuizQuestion]
    model_used: str
