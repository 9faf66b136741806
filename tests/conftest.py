"""
Shared fixtures: in-memory data collaborators, sample signals and model fakes.
"""
from unittest.mock import AsyncMock, Mock

import pytest

from review_engine.aggregation.context import ContextAggregator
from review_engine.models import (
    EmployeeProfile,
    RelevantContext,
    RetrievalOutcome,
    RetrievedSnippet
)
from factories import (
    InMemoryEmployees,
    InMemoryFeedback,
    InMemoryGenerationLog,
    InMemoryObjectives,
    make_feedback,
    make_objective,
    review_json
)


@pytest.fixture
def employee():
    return EmployeeProfile(
        id="emp-1",
        organization_id="org-1",
        first_name="Ada",
        last_name="Lovelace",
        job_title="Staff Engineer",
        department="Platform"
    )


@pytest.fixture
def colleague():
    return EmployeeProfile(
        id="emp-2",
        organization_id="org-1",
        first_name="Grace",
        last_name="Hopper",
        job_title="Engineering Manager"
    )


@pytest.fixture
def newcomer():
    """Employee with no objectives and no feedback."""
    return EmployeeProfile(
        id="emp-3",
        organization_id="org-1",
        first_name="Alan",
        last_name="Turing"
    )


@pytest.fixture
def objectives():
    return [make_objective(i) for i in range(1, 4)]


@pytest.fixture
def feedback():
    return [make_feedback(i) for i in range(1, 6)]


@pytest.fixture
def employees(employee, colleague, newcomer):
    return InMemoryEmployees([employee, colleague, newcomer])


@pytest.fixture
def objective_repo(objectives):
    return InMemoryObjectives({"emp-1": objectives, "emp-2": [make_objective(9)]})


@pytest.fixture
def feedback_repo(feedback):
    return InMemoryFeedback({"emp-1": feedback, "emp-2": [make_feedback(9)]})


@pytest.fixture
def generation_log():
    return InMemoryGenerationLog()


@pytest.fixture
def aggregator(employees, objective_repo, feedback_repo):
    return ContextAggregator(employees, objective_repo, feedback_repo)


@pytest.fixture
def relevant_context():
    return RelevantContext(
        okrs=[RetrievedSnippet(
            source_id="okr-1", content_type="okr",
            preview_text="Objective 1", similarity_score=0.9
        )],
        feedback=[RetrievedSnippet(
            source_id="fb-1", content_type="feedback",
            preview_text="Great teamwork", similarity_score=0.7
        )],
        relevance_scores=[0.9, 0.7]
    )


@pytest.fixture
def mock_retriever(relevant_context):
    """Retriever fake that always returns the same relevant context."""
    retriever = Mock()
    retriever.retrieve = AsyncMock(return_value=RetrievalOutcome(context=relevant_context))
    retriever.search = AsyncMock(return_value=[])
    return retriever


@pytest.fixture
def mock_llm_client():
    """LLM client fake returning a complete JSON review."""
    client = Mock()
    client.model = "gpt-4"
    client.is_available = True
    client.generate_completion = AsyncMock(return_value=review_json())
    client.generate_response = AsyncMock(return_value="Generated text")
    return client
