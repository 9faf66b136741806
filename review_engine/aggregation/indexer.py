"""
Embedding indexer: writes an employee's performance signals into the
vector store so the relevance retriever can find them later.
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional

from config.settings import Settings as settings
from review_engine.aggregation.context import ContextAggregator
from review_engine.llm.embeddings import EmbeddingClient
from review_engine.models import (
    ContentType,
    EmployeeContext,
    FeedbackSignal,
    ObjectiveSignal,
    StoredVector,
    VectorMetadata
)
from review_engine.storage.vector_store import EmployeeVectorStore
from review_engine.utils.helpers import (
    chunk_words,
    content_hash,
    format_date,
    truncate_text,
    utc_now
)

logger = logging.getLogger(__name__)


def format_objective_for_embedding(objective: ObjectiveSignal) -> str:
    lines = [
        f"Objective: {objective.title}",
        f"Description: {objective.description or 'No description'}",
        f"Level: {objective.level}",
        f"Progress: {objective.progress:g}%",
        f"Status: {objective.status}",
    ]
    lines.extend(
        f"Key Result: {kr.title} (Progress: {kr.progress:g}%)"
        for kr in objective.key_results
    )
    return "\n".join(lines)


def format_feedback_for_embedding(feedback: FeedbackSignal) -> str:
    return "\n".join([
        f"Feedback: {feedback.content}",
        f"Given by: {feedback.given_by_name}",
        f"Tags: {', '.join(feedback.tags) if feedback.tags else 'None'}",
        f"Visibility: {feedback.visibility}",
        f"Date: {format_date(feedback.created_at)}",
    ])


def build_vector_id(employee_id: str, content_type: str, source_id: str, suffix: str) -> str:
    return f"emp_{employee_id}_{content_type}_{source_id}_{suffix}"


class EmbeddingIndexer:
    """
    Embeds objectives, feedback and free text into employee namespaces.

    Vector ids end in a digest of the embedded text, so re-indexing unchanged
    content overwrites the existing vector instead of duplicating it.
    """

    def __init__(
        self,
        embeddings: EmbeddingClient,
        vector_store: EmployeeVectorStore,
        aggregator: Optional[ContextAggregator] = None
    ):
        self.embeddings = embeddings
        self.vector_store = vector_store
        self.aggregator = aggregator

    async def index_employee_context(self, context: EmployeeContext) -> int:
        """
        Create and store embeddings for everything in an employee context.

        Args:
            context: Aggregated employee context

        Returns:
            Number of vectors written
        """
        employee = context.employee
        namespace = self.vector_store.get_employee_namespace(employee.id)
        preview_length = settings.PREVIEW_LENGTH

        texts: List[str] = []
        metadata: List[VectorMetadata] = []

        for objective in context.okrs:
            texts.append(format_objective_for_embedding(objective))
            metadata.append(VectorMetadata(
                employee_id=employee.id,
                organization_id=employee.organization_id,
                content_type=ContentType.OKR.value,
                source_id=objective.id,
                created_at=(objective.created_at or utc_now()).isoformat(),
                preview=truncate_text(objective.title, preview_length),
                progress=objective.progress,
                level=objective.level,
                status=objective.status
            ))

        for item in context.feedback:
            texts.append(format_feedback_for_embedding(item))
            metadata.append(VectorMetadata(
                employee_id=employee.id,
                organization_id=employee.organization_id,
                content_type=ContentType.FEEDBACK.value,
                source_id=item.id,
                created_at=item.created_at.isoformat(),
                tags=list(item.tags),
                preview=truncate_text(item.content, preview_length),
                given_by=item.given_by_id,
                visibility=item.visibility
            ))

        if not texts:
            logger.info(f"No content to index for employee {employee.id}")
            return 0

        logger.info(f"Creating {len(texts)} embeddings for employee {employee.id}")
        vectors = await self.embeddings.generate_batch_embeddings(texts)

        records = [
            StoredVector(
                id=build_vector_id(
                    employee.id, meta.content_type, meta.source_id, content_hash(text)
                ),
                values=vector,
                metadata=meta
            )
            for text, vector, meta in zip(texts, vectors, metadata)
        ]
        return await self.vector_store.upsert(namespace, records)

    async def reindex_employee(self, employee_id: str, organization_id: str) -> int:
        """Gather fresh context for an employee and index it."""
        if self.aggregator is None:
            raise ValueError("reindex_employee requires a ContextAggregator")

        logger.info(f"Updating embeddings for employee: {employee_id}")
        context = await self.aggregator.gather_context(employee_id, organization_id)
        return await self.index_employee_context(context)

    async def store_content(self, content: str, metadata: Dict[str, Any]) -> str:
        """
        Embed and store one piece of free text, e.g. a generated review.

        Args:
            content: Text to embed
            metadata: Must carry employee_id, organization_id, content_type and source_id

        Returns:
            The stored vector id
        """
        employee_id = metadata["employee_id"]
        vector = await self.embeddings.generate_embedding(content)

        vector_id = build_vector_id(
            employee_id,
            metadata["content_type"],
            metadata["source_id"],
            str(int(utc_now().timestamp() * 1000))
        )
        record = StoredVector(
            id=vector_id,
            values=vector,
            metadata=VectorMetadata(**{
                "created_at": utc_now().isoformat(),
                "preview": truncate_text(content, settings.PREVIEW_LENGTH),
                **metadata
            })
        )
        await self.vector_store.upsert(
            self.vector_store.get_employee_namespace(employee_id),
            [record]
        )
        return vector_id

    async def store_chunked_content(
        self,
        content: str,
        metadata: Dict[str, Any],
        chunk_size: Optional[int] = None
    ) -> List[str]:
        """Split long text into word chunks and store each chunk concurrently."""
        if chunk_size is None:
            chunk_size = settings.EMBEDDING_CHUNK_SIZE
        chunks = chunk_words(content, chunk_size)
        return list(await asyncio.gather(*[
            self.store_content(chunk, {
                **metadata,
                "source_id": f"{metadata['source_id']}_chunk_{i}",
                "chunk_index": i,
                "total_chunks": len(chunks)
            })
            for i, chunk in enumerate(chunks)
        ]))

    async def purge_employee(self, employee_id: str):
        """Delete every vector stored for an employee."""
        await self.vector_store.delete_namespace(
            self.vector_store.get_employee_namespace(employee_id)
        )
