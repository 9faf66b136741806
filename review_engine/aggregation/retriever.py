"""
Relevance retrieval over an employee's vector namespace.
"""
import logging
from typing import List, Optional

from config.settings import Settings as settings
from review_engine.llm.embeddings import EmbeddingClient
from review_engine.models import (
    ContentType,
    RelevantContext,
    RetrievalDegraded,
    RetrievalOutcome,
    RetrievedSnippet,
    VectorMatch
)
from review_engine.storage.vector_store import EmployeeVectorStore

logger = logging.getLogger(__name__)


def to_snippet(match: VectorMatch) -> RetrievedSnippet:
    metadata = match.metadata or {}
    return RetrievedSnippet(
        source_id=metadata.get("source_id", match.id),
        content_type=metadata.get("content_type", ""),
        preview_text=metadata.get("preview", ""),
        similarity_score=match.score,
        metadata=metadata
    )


def partition_matches(matches: List[VectorMatch]) -> RelevantContext:
    """
    Split matches into OKR and feedback buckets.

    Every match contributes its score; content types other than okr and
    feedback are dropped from the buckets.
    """
    context = RelevantContext()
    for match in matches:
        context.relevance_scores.append(match.score)
        snippet = to_snippet(match)
        if snippet.content_type == ContentType.OKR.value:
            context.okrs.append(snippet)
        elif snippet.content_type == ContentType.FEEDBACK.value:
            context.feedback.append(snippet)
    return context


class RelevanceRetriever:
    """Embeds a query and searches the employee's namespace for related content."""

    def __init__(self, embeddings: EmbeddingClient, vector_store: EmployeeVectorStore):
        self.embeddings = embeddings
        self.vector_store = vector_store

    async def _query(
        self,
        employee_id: str,
        vector: List[float],
        limit: int,
        content_types: Optional[List[str]] = None
    ) -> List[VectorMatch]:
        metadata_filter = {"content_type": list(content_types)} if content_types else None
        return await self.vector_store.query(
            self.vector_store.get_employee_namespace(employee_id),
            vector,
            top_k=limit,
            metadata_filter=metadata_filter
        )

    async def search(
        self,
        employee_id: str,
        query_text: str,
        limit: int,
        content_types: Optional[List[str]] = None
    ) -> List[VectorMatch]:
        """Raw nearest-neighbour search; errors propagate."""
        vector = await self.embeddings.generate_embedding(query_text)
        return await self._query(employee_id, vector, limit, content_types)

    async def retrieve(
        self,
        employee_id: str,
        query_text: str,
        limit: Optional[int] = None,
        content_types: Optional[List[str]] = None
    ) -> RetrievalOutcome:
        """
        Fetch the most relevant stored snippets for a query.

        Embedding and vector store failures do not raise. They produce an
        empty context with the failure recorded in `degraded`.

        Args:
            employee_id: Employee whose namespace is searched
            query_text: Natural-language query
            limit: Number of nearest vectors to fetch
            content_types: Optional content_type restriction

        Returns:
            RetrievalOutcome with partitioned snippets and scores
        """
        if limit is None:
            limit = settings.RETRIEVAL_LIMIT
        logger.info(f"Querying relevant context for employee: {employee_id}")

        try:
            vector = await self.embeddings.generate_embedding(query_text)
        except Exception as e:
            logger.warning(f"Relevance retrieval degraded at embedding for {employee_id}: {e}")
            return RetrievalOutcome(degraded=RetrievalDegraded(stage="embedding", reason=str(e)))

        try:
            matches = await self._query(employee_id, vector, limit, content_types)
        except Exception as e:
            logger.warning(f"Relevance retrieval degraded at vector store for {employee_id}: {e}")
            return RetrievalOutcome(degraded=RetrievalDegraded(stage="vector_store", reason=str(e)))

        context = partition_matches(matches)
        logger.info(
            f"Found {len(context.okrs)} relevant OKRs and "
            f"{len(context.feedback)} relevant feedback items"
        )
        return RetrievalOutcome(context=context)

    async def query_relevant_context(
        self,
        employee_id: str,
        query_text: str,
        limit: Optional[int] = None
    ) -> RelevantContext:
        """Context-only view of retrieve(); empty on failure."""
        outcome = await self.retrieve(employee_id, query_text, limit)
        return outcome.context
