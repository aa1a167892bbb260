# =============================================================================
# CONFTEST - Shared fixtures
# =============================================================================
# In-memory fakes for the repository, embedding provider and LLM providers,
# so no test touches a database or a network.
# =============================================================================

import os
from unittest.mock import patch

import pytest

from courseware.services.llm.base import LLMProvider
from courseware.services.repository import (
    ChunkRecord,
    CourseRecord,
    MaterialRecord,
    TopicMaterialRecord,
    TopicRecord,
)


# =============================================================================
# ENVIRONMENT
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_env():
    """Provide credentials and a quiet log level; rebuild cached settings."""
    from courseware.core.config import get_settings
    from courseware.services.llm import registry
    from courseware.services.rag import embeddings

    env_vars = {
        "OPENAI_API_KEY": "test-openai-key",
        "GEMINI_API_KEY": "test-gemini-key",
        "LOG_LEVEL": "ERROR",
    }
    with patch.dict(os.environ, env_vars):
        get_settings.cache_clear()
        registry._provider_instances.clear()
        embeddings._provider = None
        yield
    get_settings.cache_clear()
    registry._provider_instances.clear()
    embeddings._provider = None


# =============================================================================
# FAKES
# =============================================================================


class FakeRepository:
    """MaterialRepository over in-memory records."""

    def __init__(self, materials=None, topics=None):
        self.materials: list[MaterialRecord] = list(materials or [])
        self.topics: dict[str, TopicRecord] = dict(topics or {})
        self.material_filters: list[tuple] = []

    async def find_materials(self, subject=None, topic=None):
        self.material_filters.append((subject, topic))
        return [
            m for m in self.materials
            if (not subject or m.subject == subject) and (not topic or m.topic == topic)
        ]

    async def find_topic(self, topic_id):
        return self.topics.get(topic_id)

    async def distinct_values(self, field_name, subject=None):
        values = [
            getattr(m, field_name) for m in self.materials
            if not subject or m.subject == subject
        ]
        # Deliberately unsorted with duplicates; the service must clean up
        return list(reversed(values))


class FakeEmbedder:
    """EmbeddingProvider returning a fixed vector or raising a fixed error."""

    def __init__(self, vector=None, error: Exception | None = None):
        self.vector = vector if vector is not None else [1.0, 0.0]
        self.error = error
        self.calls: list[str] = []

    async def embed(self, text):
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return self.vector


class ScriptedProvider(LLMProvider):
    """LLMProvider that replays scripted responses per API model name."""

    provider_name = "scripted"

    def __init__(self, script: dict):
        self.script = script
        self.calls: list[str] = []
        self.prompts: list[str] = []

    async def generate(self, prompt, model, max_output_tokens=8000, temperature=0.4):
        self.calls.append(model)
        self.prompts.append(prompt)
        outcome = self.script[model]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def make_resolver(provider: LLMProvider):
    """Provider resolver that routes every model ID to one provider."""
    def resolve(model_id):
        return provider, model_id
    return resolve


# =============================================================================
# RECORD BUILDERS
# =============================================================================


def make_material(material_id, chunks, subject="Physics", topic="Kinematics", title=None):
    return MaterialRecord(
        id=material_id,
        title=title or f"Material {material_id}",
        subject=subject,
        topic=topic,
        chunks=[
            ChunkRecord(chunk_index=i, content=f"{material_id} chunk {i}", embedding=emb)
            for i, emb in enumerate(chunks)
        ],
    )


def make_raw_question(n, answer_index=0, **overrides):
    item = {
        "question": f"Question {n}?",
        "options": [f"Q{n} option A", f"Q{n} option B", f"Q{n} option C", f"Q{n} option D"],
        "answerIndex": answer_index,
        "explanation": f"Because {n}.",
    }
    item.update(overrides)
    return item


def quiz_json(count, **overrides) -> str:
    import json
    return json.dumps({"questions": [make_raw_question(n, **overrides) for n in range(1, count + 1)]})


@pytest.fixture
def sample_topic():
    return TopicRecord(
        id="topic-1",
        title="Projectile Motion",
        description="Motion of objects launched into the air",
        course=CourseRecord(id="course-1", title="Mechanics 101", subject="Physics"),
        material=TopicMaterialRecord(
            id="mat-1",
            title="Projectiles",
            content="A projectile   moves\n\nalong a parabolic path.",
        ),
    )


@pytest.fixture
def quiz_repository(sample_topic):
    return FakeRepository(topics={sample_topic.id: sample_topic})
