"""
Normalization of raw model output into QuizQuestion records.

Model output is untrusted. Each raw item either becomes a fully valid
QuizQuestion or is dropped; nothing partially typed survives.

Expected raw item shape (from the prompt schema):
    {"question": "...", "options": ["A", "B", "C", "D"],
     "answerIndex": 0, "answer": "A", "explanation": "..."}
"""

import logging
from typing import Any

from courseware.services.quiz.models import OPTION_COUNT, QuizQuestion

logger = logging.getLogger(__name__)


def clean_options(raw_options: Any) -> list[str] | None:
    """
    Stringify, trim and keep the first four non-empty options.

    Returns None when fewer than four remain, or when the source had more
    than four and the first four repeat each other case-insensitively
    (the cut would make the choice ambiguous).
    """
    if not isinstance(raw_options, list):
        return None

    usable = []
    for opt in raw_options:
        if opt is None or isinstance(opt, (dict, list)):
            continue
        text = str(opt).strip()
        if text:
            usable.append(text)

    if len(usable) < OPTION_COUNT:
        return None

    options = usable[:OPTION_COUNT]
    if len(usable) > OPTION_COUNT and len({o.lower() for o in options}) < OPTION_COUNT:
        return None
    return options


def resolve_answer_index(item: dict, options: list[str]) -> int | None:
    """Prefer an in-range integer answerIndex, else match the answer text."""
    raw_index = item.get("answerIndex")
    if isinstance(raw_index, float) and raw_index.is_integer():
        raw_index = int(raw_index)
    if isinstance(raw_index, int) and not isinstance(raw_index, bool):
        if 0 <= raw_index < OPTION_COUNT:
            return raw_index

    answer = item.get("answer")
    if answer is None or isinstance(answer, (dict, list, bool)):
        return None
    answer_text = str(answer).strip().lower()
    if not answer_text:
        return None
    for i, opt in enumerate(options):
        if opt.lower() == answer_text:
            return i
    return None


def normalize_item(item: Any, question_id: str) -> QuizQuestion | None:
    """Build one QuizQuestion from a raw item, or return None to drop it."""
    if not isinstance(item, dict):
        return None

    question = item.get("question")
    if not isinstance(question, str) or not question.strip():
        return None

    options = clean_options(item.get("options"))
    if options is None:
        return None

    answer_index = resolve_answer_index(item, options)
    if answer_index is None:
        return None

    explanation = item.get("explanation")
    return QuizQuestion(
        id=question_id,
        question=question.strip(),
        options=options,
        answer_index=answer_index,
        explanation=explanation.strip() if isinstance(explanation, str) else "",
    )


def normalize_questions(raw_questions: Any, topic_id: str, question_count: int) -> list[QuizQuestion]:
    """
    Normalize a raw question array.

    Survivors are numbered 1..k in generation order with ids
    "{topic_id}_{n}", then the first question_count are kept.
    """
    if not isinstance(raw_questions, list):
        return []

    normalized: list[QuizQuestion] = []
    for item in raw_questions:
        question = normalize_item(item, f"{topic_id}_{len(normalized) + 1}")
        if question is not None:
            normalized.append(question)

    dropped = len(raw_questions) - len(normalized)
    if dropped:
        logger.debug("[Quiz] Dropped %d of %d raw question(s)", dropped, len(raw_questions))
    return normalized[:question_count]
