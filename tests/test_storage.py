"""
Unit tests for the vector store.

These tests run against an in-process Qdrant instance and verify that vectors
are stored, filtered and deleted strictly within their namespace.
"""
import pytest
from qdrant_client import AsyncQdrantClient

from review_engine.models import StoredVector, VectorMetadata
from review_engine.storage.vector_store import EmployeeVectorStore


@pytest.fixture
def store():
    """Create a vector store backed by in-memory Qdrant."""
    return EmployeeVectorStore(
        collection_name="test_context",
        vector_size=4,
        client=AsyncQdrantClient(location=":memory:")
    )


def make_vector(vector_id, values, employee_id="emp-1", content_type="okr", source_id=None):
    return StoredVector(
        id=vector_id,
        values=values,
        metadata=VectorMetadata(
            employee_id=employee_id,
            organization_id="org-1",
            content_type=content_type,
            source_id=source_id or vector_id,
            created_at="2024-03-01T00:00:00+00:00",
            preview=f"Preview of {vector_id}"
        )
    )


def test_namespace_helpers():
    assert EmployeeVectorStore.get_employee_namespace("42") == "employee_42"
    assert EmployeeVectorStore.get_organization_namespace("7") == "org_7"


@pytest.mark.asyncio
async def test_upsert_and_query(store):
    namespace = store.get_employee_namespace("emp-1")
    written = await store.upsert(namespace, [
        make_vector("a", [1, 0, 0, 0]),
        make_vector("b", [0, 1, 0, 0]),
    ])

    matches = await store.query(namespace, [1, 0, 0, 0], top_k=2)

    assert written == 2
    assert [match.id for match in matches] == ["a", "b"]
    assert matches[0].score == pytest.approx(1.0)
    assert matches[0].metadata["preview"] == "Preview of a"


@pytest.mark.asyncio
async def test_namespace_isolation(store):
    """A vector written for employee A is never returned for employee B."""
    namespace_a = store.get_employee_namespace("emp-a")
    namespace_b = store.get_employee_namespace("emp-b")
    await store.upsert(namespace_a, [make_vector("secret", [0.5, 0.5, 0, 0], employee_id="emp-a")])
    await store.upsert(namespace_b, [make_vector("other", [0, 0, 1, 0], employee_id="emp-b")])

    for query in ([0.5, 0.5, 0, 0], [1, 0, 0, 0], [0, 0, 1, 0]):
        matches = await store.query(namespace_b, query, top_k=10)
        assert [match.id for match in matches] == ["other"]


@pytest.mark.asyncio
async def test_same_id_in_two_namespaces_does_not_collide(store):
    await store.upsert("employee_1", [make_vector("shared", [1, 0, 0, 0])])
    await store.upsert("employee_2", [make_vector("shared", [0, 1, 0, 0])])

    first = await store.get_vector("employee_1", "shared")
    second = await store.get_vector("employee_2", "shared")

    assert first.values == pytest.approx([1, 0, 0, 0])
    assert second.values == pytest.approx([0, 1, 0, 0])


@pytest.mark.asyncio
async def test_query_filters_by_content_type(store):
    namespace = "employee_1"
    await store.upsert(namespace, [
        make_vector("okr", [1, 0, 0, 0], content_type="okr"),
        make_vector("fb", [0.9, 0.1, 0, 0], content_type="feedback"),
        make_vector("rev", [0.8, 0.2, 0, 0], content_type="review"),
    ])

    only_feedback = await store.query(namespace, [1, 0, 0, 0], metadata_filter={"content_type": "feedback"})
    any_of = await store.query(namespace, [1, 0, 0, 0], metadata_filter={"content_type": ["okr", "review"]})

    assert [match.id for match in only_feedback] == ["fb"]
    assert sorted(match.id for match in any_of) == ["okr", "rev"]


@pytest.mark.asyncio
async def test_delete_namespace_only_touches_that_namespace(store):
    await store.upsert("employee_1", [make_vector("a", [1, 0, 0, 0]), make_vector("b", [0, 1, 0, 0])])
    await store.upsert("employee_2", [make_vector("c", [0, 0, 1, 0])])

    await store.delete_namespace("employee_1")

    assert await store.count("employee_1") == 0
    assert await store.count("employee_2") == 1


@pytest.mark.asyncio
async def test_delete_vectors_by_id(store):
    await store.upsert("employee_1", [make_vector("a", [1, 0, 0, 0]), make_vector("b", [0, 1, 0, 0])])

    await store.delete_vectors("employee_1", ["a"])

    assert await store.get_vector("employee_1", "a") is None
    assert (await store.get_vector("employee_1", "b")).metadata.source_id == "b"


@pytest.mark.asyncio
async def test_upsert_overwrites_same_id(store):
    await store.upsert("employee_1", [make_vector("a", [1, 0, 0, 0])])
    await store.upsert("employee_1", [make_vector("a", [0, 1, 0, 0])])

    assert await store.count("employee_1") == 1


@pytest.mark.asyncio
async def test_query_on_empty_store(store):
    assert await store.query("employee_1", [1, 0, 0, 0]) == []
    assert await store.upsert("employee_1", []) == 0
