"""
Unit tests for relevance retrieval.
"""
import pytest
from unittest.mock import AsyncMock, Mock

from review_engine.aggregation.retriever import RelevanceRetriever, partition_matches
from review_engine.exceptions import EmbeddingFailedError
from review_engine.models import VectorMatch
from review_engine.storage.vector_store import EmployeeVectorStore


def match(vector_id, score, content_type):
    return VectorMatch(
        id=vector_id,
        score=score,
        metadata={
            "content_type": content_type,
            "source_id": f"src-{vector_id}",
            "preview": f"Preview {vector_id}",
        }
    )


@pytest.fixture
def mock_embeddings():
    embeddings = Mock()
    embeddings.generate_embedding = AsyncMock(return_value=[0.1, 0.2, 0.3, 0.4])
    return embeddings


@pytest.fixture
def mock_store():
    store = Mock()
    store.get_employee_namespace = EmployeeVectorStore.get_employee_namespace
    store.query = AsyncMock(return_value=[
        match("1", 0.92, "okr"),
        match("2", 0.81, "feedback"),
        match("3", 0.75, "project"),
        match("4", 0.60, "okr"),
    ])
    return store


def test_partition_drops_unknown_types_but_keeps_scores():
    context = partition_matches([match("1", 0.9, "okr"), match("2", 0.5, "achievement")])

    assert [snippet.source_id for snippet in context.okrs] == ["src-1"]
    assert context.feedback == []
    assert context.relevance_scores == [0.9, 0.5]


@pytest.mark.asyncio
async def test_retrieve_partitions_results(mock_embeddings, mock_store):
    retriever = RelevanceRetriever(mock_embeddings, mock_store)

    outcome = await retriever.retrieve("emp-1", "leadership", limit=4)

    assert outcome.ok
    assert [s.source_id for s in outcome.context.okrs] == ["src-1", "src-4"]
    assert [s.source_id for s in outcome.context.feedback] == ["src-2"]
    assert outcome.context.okrs[0].similarity_score == 0.92
    assert outcome.context.okrs[0].preview_text == "Preview 1"
    assert outcome.context.relevance_scores == [0.92, 0.81, 0.75, 0.60]

    args, kwargs = mock_store.query.call_args
    assert args[0] == "employee_emp-1"
    assert kwargs["top_k"] == 4


@pytest.mark.asyncio
async def test_retrieve_defaults_to_twenty_results(mock_embeddings, mock_store):
    retriever = RelevanceRetriever(mock_embeddings, mock_store)

    await retriever.retrieve("emp-1", "leadership")

    assert mock_store.query.call_args.kwargs["top_k"] == 20


@pytest.mark.asyncio
async def test_embedding_failure_degrades_to_empty_context(mock_embeddings, mock_store):
    mock_embeddings.generate_embedding.side_effect = EmbeddingFailedError("quota exceeded")
    retriever = RelevanceRetriever(mock_embeddings, mock_store)

    outcome = await retriever.retrieve("emp-1", "leadership")

    assert not outcome.ok
    assert outcome.degraded.stage == "embedding"
    assert "quota exceeded" in outcome.degraded.reason
    mock_store.query.assert_not_called()


@pytest.mark.asyncio
async def test_store_failure_returns_empty_buckets(mock_embeddings, mock_store):
    mock_store.query.side_effect = ConnectionError("qdrant unreachable")
    retriever = RelevanceRetriever(mock_embeddings, mock_store)

    context = await retriever.query_relevant_context("emp-1", "leadership")

    assert context.okrs == []
    assert context.feedback == []
    assert context.relevance_scores == []


@pytest.mark.asyncio
async def test_search_restricts_content_types(mock_embeddings, mock_store):
    retriever = RelevanceRetriever(mock_embeddings, mock_store)

    await retriever.search("emp-1", "performance review", 5, ["feedback", "goal"])

    assert mock_store.query.call_args.kwargs["metadata_filter"] == {"content_type": ["feedback", "goal"]}


@pytest.mark.asyncio
async def test_explicit_zero_limit_is_respected(mock_embeddings, mock_store):
    retriever = RelevanceRetriever(mock_embeddings, mock_store)

    await retriever.retrieve("emp-1", "leadership", limit=0)

    assert mock_store.query.call_args.kwargs["top_k"] == 0
