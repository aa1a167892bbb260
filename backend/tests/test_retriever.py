# =============================================================================
# TESTS - Semantic Search Service
# =============================================================================

import math
from unittest.mock import patch

import pytest

from conftest import FakeEmbedder, FakeRepository, make_material
from courseware.services.errors import EmbeddingError
from courseware.services.rag.retriever import SemanticSearchService


def unit_at(similarity):
    """2-D unit vector whose cosine with [1, 0] equals similarity."""
    return [similarity, math.sqrt(1.0 - similarity ** 2)]


class TestSearchRanking:
    """Ranking, thresholding and truncation."""

    @pytest.mark.asyncio
    async def test_projectile_motion_scenario(self):
        """Scores [0.9, 0.5, 0.2], top_k=2, min 0.3 -> 0.9 then 0.5."""
        repo = FakeRepository([
            make_material("m1", [unit_at(0.5), unit_at(0.2)]),
            make_material("m2", [unit_at(0.9)]),
        ])
        service = SemanticSearchService(repo, FakeEmbedder([1.0, 0.0]))

        results = await service.search(
            "projectile motion", subject="Physics", top_k=2, min_similarity=0.3
        )

        assert [r.similarity for r in results] == [pytest.approx(0.9), pytest.approx(0.5)]
        assert [(r.material_id, r.chunk_index) for r in results] == [("m2", 0), ("m1", 0)]
        assert repo.material_filters == [("Physics", None)]

    @pytest.mark.asyncio
    async def test_never_more_than_top_k(self):
        repo = FakeRepository([make_material("m1", [unit_at(0.9)] * 10)])
        service = SemanticSearchService(repo, FakeEmbedder())

        results = await service.search("q", top_k=3, min_similarity=0.0)

        assert len(results) == 3

    @pytest.mark.asyncio
    async def test_every_result_meets_threshold(self):
        scores = [0.95, 0.8, 0.61, 0.65, 0.59, 0.1]
        repo = FakeRepository([make_material("m1", [unit_at(s) for s in scores] + [[-1.0, 0.0]])])
        service = SemanticSearchService(repo, FakeEmbedder())

        results = await service.search("q", top_k=10, min_similarity=0.6)

        assert len(results) == 4
        assert all(r.similarity >= 0.6 for r in results)

    @pytest.mark.asyncio
    async def test_sorted_descending(self):
        scores = [0.4, 0.99, 0.7, 0.55, 0.85]
        repo = FakeRepository([make_material("m1", [unit_at(s) for s in scores])])
        service = SemanticSearchService(repo, FakeEmbedder())

        results = await service.search("q", top_k=10, min_similarity=0.0)

        similarities = [r.similarity for r in results]
        assert similarities == sorted(similarities, reverse=True)

    @pytest.mark.asyncio
    async def test_ties_keep_encounter_order(self):
        same = [0.6, 0.8]
        repo = FakeRepository([
            make_material("m1", [same, [0.8, -0.6], same]),
            make_material("m2", [same]),
        ])
        service = SemanticSearchService(repo, FakeEmbedder([0.6, 0.8]))

        results = await service.search("q", top_k=10, min_similarity=0.5)

        assert [(r.material_id, r.chunk_index) for r in results] == [
            ("m1", 0), ("m1", 2), ("m2", 0),
        ]

    @pytest.mark.asyncio
    async def test_result_carries_provenance(self):
        repo = FakeRepository([
            make_material("m1", [[1.0, 0.0]], subject="Physics", topic="Optics", title="Lenses"),
        ])
        service = SemanticSearchService(repo, FakeEmbedder())

        [result] = await service.search("q")

        assert result.to_dict() == {
            "material_id": "m1",
            "material_title": "Lenses",
            "subject": "Physics",
            "topic": "Optics",
            "chunk_index": 0,
            "content": "m1 chunk 0",
            "similarity": pytest.approx(1.0),
        }

    @pytest.mark.asyncio
    async def test_non_positive_top_k_returns_nothing(self):
        repo = FakeRepository([make_material("m1", [[1.0, 0.0]])])
        service = SemanticSearchService(repo, FakeEmbedder())

        assert await service.search("q", top_k=0) == []


class TestSearchExclusions:
    """Chunks that must never be scored."""

    @pytest.mark.parametrize("min_similarity", [-1.0, -0.5, 0.0, 0.3])
    @pytest.mark.asyncio
    async def test_zero_magnitude_chunks_never_returned(self, min_similarity):
        repo = FakeRepository([make_material("m1", [[0.0, 0.0], [1.0, 0.0], [0.0, 0.0]])])
        service = SemanticSearchService(repo, FakeEmbedder())

        results = await service.search("q", top_k=10, min_similarity=min_similarity)

        assert [r.chunk_index for r in results] == [1]

    @pytest.mark.asyncio
    async def test_chunks_without_embedding_are_skipped(self):
        repo = FakeRepository([make_material("m1", [None, [], [1.0, 0.0]])])
        service = SemanticSearchService(repo, FakeEmbedder())

        results = await service.search("q", min_similarity=-1.0)

        assert [r.chunk_index for r in results] == [2]

    @pytest.mark.asyncio
    async def test_dimension_mismatch_is_skipped(self):
        repo = FakeRepository([make_material("m1", [[1.0, 0.0, 0.0], [1.0, 0.0]])])
        service = SemanticSearchService(repo, FakeEmbedder())

        results = await service.search("q", min_similarity=-1.0)

        assert [r.chunk_index for r in results] == [1]

    @pytest.mark.asyncio
    async def test_malformed_chunk_embedding_is_skipped(self):
        repo = FakeRepository([make_material("m1", [["a", "b"], [1.0, 0.0]])])
        service = SemanticSearchService(repo, FakeEmbedder())

        results = await service.search("q", min_similarity=-1.0)

        assert [r.chunk_index for r in results] == [1]

    @pytest.mark.asyncio
    async def test_empty_candidate_set_is_not_an_error(self):
        service = SemanticSearchService(FakeRepository([]), FakeEmbedder())

        assert await service.search("q", subject="History") == []


class TestSearchEmbeddingFailures:
    """Embedding failures surface directly."""

    @pytest.mark.asyncio
    async def test_provider_error_propagates(self):
        embedder = FakeEmbedder(error=EmbeddingError("unreachable"))
        service = SemanticSearchService(FakeRepository([]), embedder)

        with pytest.raises(EmbeddingError):
            await service.search("q")

    @pytest.mark.asyncio
    async def test_malformed_query_vector(self):
        service = SemanticSearchService(FakeRepository([]), FakeEmbedder(vector=["x"]))

        with pytest.raises(EmbeddingError):
            await service.search("q")

    @pytest.mark.asyncio
    async def test_zero_query_vector(self):
        service = SemanticSearchService(FakeRepository([]), FakeEmbedder(vector=[0.0, 0.0]))

        with pytest.raises(EmbeddingError):
            await service.search("q")


class TestDiscovery:
    """Subject and topic listings."""

    @pytest.mark.asyncio
    async def test_subjects_sorted_and_unique(self):
        repo = FakeRepository([
            make_material("m1", [], subject="Physics"),
            make_material("m2", [], subject="Chemistry"),
            make_material("m3", [], subject="Physics"),
        ])
        service = SemanticSearchService(repo, FakeEmbedder())

        assert await service.get_subjects() == ["Chemistry", "Physics"]

    @pytest.mark.asyncio
    async def test_topics_for_subject(self):
        repo = FakeRepository([
            make_material("m1", [], subject="Physics", topic="Optics"),
            make_material("m2", [], subject="Physics", topic="Kinematics"),
            make_material("m3", [], subject="Chemistry", topic="Acids"),
            make_material("m4", [], subject="Physics", topic="Optics"),
        ])
        service = SemanticSearchService(repo, FakeEmbedder())

        assert await service.get_topics("Physics") == ["Kinematics", "Optics"]

    @pytest.mark.asyncio
    async def test_discovery_never_builds_an_embedder(self):
        repo = FakeRepository([make_material("m1", [], subject="Physics", topic="Optics")])
        service = SemanticSearchService(repo)

        with patch("courseware.services.rag.retriever.get_embedding_provider") as factory:
            assert await service.get_subjects() == ["Physics"]
            assert await service.get_topics("Physics") == ["Optics"]

        factory.assert_not_called()

    @pytest.mark.asyncio
    async def test_search_builds_embedder_on_first_use(self):
        repo = FakeRepository([make_material("m1", [[1.0, 0.0]])])
        embedder = FakeEmbedder()
        service = SemanticSearchService(repo)

        with patch(
            "courseware.services.rag.retriever.get_embedding_provider", return_value=embedder
        ) as factory:
            await service.search("q")
            await service.search("q again")

        factory.assert_called_once_with()
        assert embedder.calls == ["q", "q again"]
