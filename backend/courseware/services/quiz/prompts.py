"""
Quiz prompt compiler.

Turns topic metadata and a bounded material excerpt into the instruction
prompt sent to every model in the fallback chain.
"""

import re

from courseware.services.repository import TopicRecord

QUESTION_SCHEMA = (
    '{"questions":[{"question":"...","options":["A","B","C","D"],'
    '"answerIndex":0,"explanation":"..."}]}'
)

DEFAULT_EXCERPT_CHARS = 4000


def material_excerpt(content: str | None, max_chars: int = DEFAULT_EXCERPT_CHARS) -> str:
    """Collapse whitespace, trim, and cut to max_chars."""
    if not content:
        return ""
    return re.sub(r"\s+", " ", content).strip()[:max_chars]


def compile_quiz_prompt(
    topic: TopicRecord,
    question_count: int,
    difficulty: str,
    max_excerpt_chars: int = DEFAULT_EXCERPT_CHARS,
) -> str:
    """Build the quiz instruction prompt for a topic."""
    course = topic.course
    course_title = course.title if course and course.title else "Course"
    course_subject = course.subject if course and course.subject else "Subject"
    excerpt = material_excerpt(
        topic.material.content if topic.material else "", max_excerpt_chars
    )

    lines = [
        "You are an expert educator creating a quiz for students.",
        f"Generate {question_count} multiple-choice questions at {difficulty} difficulty.",
        "Each question must have 4 options and one correct answer.",
        "Return strict JSON only with this structure:",
        QUESTION_SCHEMA,
        "Do not include markdown or code fences.",
        f"Course: {course_title} ({course_subject})",
        f"Topic: {topic.title}",
        f"Topic Description: {topic.description}" if topic.description else "",
        f"Material Context: {excerpt}" if excerpt else "",
    ]
    return "\n".join(line for line in lines if line)
