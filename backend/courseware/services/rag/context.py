"""Render retrieved chunks as a context block for LLM prompts."""

from collections.abc import Sequence

from courseware.services.rag.retriever import RetrievedChunk

NO_CONTEXT_MESSAGE = "No relevant course materials found."
CONTEXT_HEADER = "Relevant Course Material Context:"


def format_context(chunks: Sequence[RetrievedChunk]) -> str:
    """Number each chunk and tag it with its material title and subject/topic."""
    if not chunks:
        return NO_CONTEXT_MESSAGE

    sections = [CONTEXT_HEADER]
    for i, chunk in enumerate(chunks, start=1):
        sections.append(
            f"[Source {i}: {chunk.material_title} - {chunk.subject}/{chunk.topic}]\n"
            f"{chunk.content}"
        )
    return "\n\n".join(sections) + "\n\n"
