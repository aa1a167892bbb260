"""
Material Repository

Read-only access to course material for the retrieval and quiz engines.
Engines depend on the MaterialRepository protocol and receive plain,
immutable records; only SqlMaterialRepository knows about the ORM.
"""

import uuid
from dataclasses import dataclass, field
from typing import Protocol

from sqlalchemy import select, distinct
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from courseware.models import Material, Topic


@dataclass(frozen=True)
class ChunkRecord:
    chunk_index: int
    content: str
    embedding: list[float] | None = None


@dataclass(frozen=True)
class MaterialRecord:
    id: str
    title: str
    subject: str
    topic: str
    chunks: list[ChunkRecord] = field(default_factory=list)


@dataclass(frozen=True)
class CourseRecord:
    id: str
    title: str
    subject: str


@dataclass(frozen=True)
class TopicMaterialRecord:
    id: str
    title: str
    content: str = ""


@dataclass(frozen=True)
class TopicRecord:
    id: str
    title: str
    description: str | None = None
    course: CourseRecord | None = None
    material: TopicMaterialRecord | None = None


# Fields that distinct_values() may be asked about
DISTINCT_FIELDS = ("subject", "topic")


class MaterialRepository(Protocol):
    async def find_materials(
        self, subject: str | None = None, topic: str | None = None
    ) -> list[MaterialRecord]:
        """Processed materials matching the filter, in repository order."""
        ...

    async def find_topic(self, topic_id: str) -> TopicRecord | None:
        """The topic with its course and material, or None if absent."""
        ...

    async def distinct_values(
        self, field_name: str, subject: str | None = None
    ) -> list[str]:
        """Sorted unique values of a material field across processed materials."""
        ...


# ── ORM → record conversion ─────────────────────────────────────────────────

def material_to_record(material: Material) -> MaterialRecord:
    return MaterialRecord(
        id=str(material.id),
        title=material.title,
        subject=material.subject,
        topic=material.topic,
        chunks=[
            ChunkRecord(
                chunk_index=chunk.chunk_index,
                content=chunk.content,
                embedding=chunk.embedding,
            )
            for chunk in material.chunks
        ],
    )


def topic_to_record(topic: Topic) -> TopicRecord:
    course = topic.course
    material = topic.material
    return TopicRecord(
        id=str(topic.id),
        title=topic.title,
        description=topic.description,
        course=CourseRecord(
            id=str(course.id), title=course.title, subject=course.subject
        ) if course is not None else None,
        material=TopicMaterialRecord(
            id=str(material.id), title=material.title, content=material.content or ""
        ) if material is not None else None,
    )


class SqlMaterialRepository:
    """MaterialRepository backed by an SQLAlchemy async session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_materials(
        self, subject: str | None = None, topic: str | None = None
    ) -> list[MaterialRecord]:
        query = (
            select(Material)
            .where(Material.is_processed.is_(True))
            .options(selectinload(Material.chunks))
            .order_by(Material.created_at, Material.id)
        )
        if subject:
            query = query.where(Material.subject == subject)
        if topic:
            query = query.where(Material.topic == topic)

        result = await self.db.execute(query)
        return [material_to_record(m) for m in result.scalars().all()]

    async def find_topic(self, topic_id: str) -> TopicRecord | None:
        try:
            key = uuid.UUID(str(topic_id))
        except ValueError:
            return None

        result = await self.db.execute(
            select(Topic)
            .where(Topic.id == key)
            .options(selectinload(Topic.course), selectinload(Topic.material))
        )
        topic = result.scalar_one_or_none()
        return topic_to_record(topic) if topic is not None else None

    async def distinct_values(
        self, field_name: str, subject: str | None = None
    ) -> list[str]:
        if field_name not in DISTINCT_FIELDS:
            raise ValueError(
                f"Unsupported field: {field_name}. "
                f"Available fields: {', '.join(DISTINCT_FIELDS)}"
            )

        column = getattr(Material, field_name)
        query = select(distinct(column)).where(Material.is_processed.is_(True))
        if subject:
            query = query.where(Material.subject == subject)

        result = await self.db.execute(query.order_by(column))
        return [value for value in result.scalars().all() if value]
