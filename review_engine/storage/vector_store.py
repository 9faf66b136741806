"""
Qdrant vector store for employee performance context.

Every vector lives in exactly one namespace ("employee_{id}" or "org_{id}").
The namespace is a required argument of each operation and is always part of
the query filter, so a query can only ever see its own namespace.
"""
import asyncio
import logging
import uuid
from typing import Any, Dict, List, Optional

from qdrant_client import AsyncQdrantClient, models

from config.settings import Settings as settings
from review_engine.models import StoredVector, VectorMatch, VectorMetadata

logger = logging.getLogger(__name__)

NAMESPACE_KEY = "namespace"


class EmployeeVectorStore:
    """
    Manages namespaced vector storage using Qdrant.

    Features:
    - Single cosine-distance collection partitioned by a tenant payload key
    - Metadata filters ANDed with the namespace condition
    - Lazy, idempotent collection and index creation
    """

    def __init__(
        self,
        collection_name: Optional[str] = None,
        qdrant_url: Optional[str] = None,
        qdrant_api_key: Optional[str] = None,
        vector_size: Optional[int] = None,
        client: Optional[AsyncQdrantClient] = None
    ):
        """
        Initialize the vector store.

        Args:
            collection_name: Name of the Qdrant collection (defaults to settings)
            qdrant_url: Qdrant server URL (defaults to settings)
            qdrant_api_key: API key for Qdrant Cloud (optional)
            vector_size: Embedding dimensionality (defaults to settings)
            client: Already-constructed async client, used as-is
        """
        self.collection_name = collection_name or settings.QDRANT_COLLECTION
        self.vector_size = settings.EMBEDDING_DIMENSIONS if vector_size is None else vector_size

        if client is not None:
            self.client = client
        else:
            qdrant_url = qdrant_url or settings.QDRANT_URL
            qdrant_api_key = qdrant_api_key or settings.QDRANT_API_KEY
            self.client = AsyncQdrantClient(
                url=qdrant_url,
                api_key=qdrant_api_key if qdrant_api_key else None,
                timeout=30
            )

        self._ready = False
        self._setup_lock = asyncio.Lock()

    @staticmethod
    def get_employee_namespace(employee_id: str) -> str:
        return f"employee_{employee_id}"

    @staticmethod
    def get_organization_namespace(organization_id: str) -> str:
        return f"org_{organization_id}"

    @staticmethod
    def _point_id(namespace: str, vector_id: str) -> str:
        """Qdrant ids must be UUIDs or integers; derive one per namespace."""
        return str(uuid.uuid5(uuid.NAMESPACE_URL, f"{namespace}/{vector_id}"))

    async def _ensure_collection(self):
        """
        Create the collection and payload indexes on first use.

        Indexes let Qdrant narrow candidates by namespace and content type
        before computing vector similarity.
        """
        if self._ready:
            return

        async with self._setup_lock:
            if self._ready:
                return

            if not await self.client.collection_exists(self.collection_name):
                await self.client.create_collection(
                    collection_name=self.collection_name,
                    vectors_config=models.VectorParams(
                        size=self.vector_size,
                        distance=models.Distance.COSINE
                    )
                )
                logger.info(f"Created collection: {self.collection_name}")

            indexes = [
                (NAMESPACE_KEY, models.KeywordIndexParams(
                    type=models.KeywordIndexType.KEYWORD,
                    is_tenant=True
                )),
                ("metadata.content_type", models.PayloadSchemaType.KEYWORD),
                ("metadata.source_id", models.PayloadSchemaType.KEYWORD),
            ]
            for field_name, field_schema in indexes:
                try:
                    await self.client.create_payload_index(
                        collection_name=self.collection_name,
                        field_name=field_name,
                        field_schema=field_schema
                    )
                except Exception as e:
                    logger.debug(f"Payload index {field_name} not created: {e}")

            self._ready = True

    @staticmethod
    def _build_filter(namespace: str, metadata_filter: Optional[Dict[str, Any]] = None) -> models.Filter:
        """Namespace condition ANDed with {metadata_key: value} conditions."""
        conditions = [
            models.FieldCondition(
                key=NAMESPACE_KEY,
                match=models.MatchValue(value=namespace)
            )
        ]

        for key, value in (metadata_filter or {}).items():
            if isinstance(value, (list, tuple, set)):
                match = models.MatchAny(any=list(value))
            else:
                match = models.MatchValue(value=value)
            conditions.append(models.FieldCondition(key=f"metadata.{key}", match=match))

        return models.Filter(must=conditions)

    async def upsert(self, namespace: str, records: List[StoredVector]) -> int:
        """
        Store vectors in a namespace, overwriting any with the same id.

        Returns:
            Number of vectors written
        """
        if not records:
            return 0
        await self._ensure_collection()

        points = [
            models.PointStruct(
                id=self._point_id(namespace, record.id),
                vector=record.values,
                payload={
                    NAMESPACE_KEY: namespace,
                    "vector_id": record.id,
                    "metadata": record.metadata.model_dump(),
                }
            )
            for record in records
        ]
        await self.client.upsert(collection_name=self.collection_name, points=points)
        logger.info(f"Upserted {len(points)} vectors to namespace {namespace}")
        return len(points)

    async def query(
        self,
        namespace: str,
        vector: List[float],
        top_k: int = 10,
        metadata_filter: Optional[Dict[str, Any]] = None
    ) -> List[VectorMatch]:
        """
        Find the nearest vectors within one namespace.

        Args:
            namespace: Namespace to search
            vector: Query embedding
            top_k: Maximum number of matches
            metadata_filter: Optional {metadata_key: value} conditions; list values match any

        Returns:
            Matches ordered by descending similarity, scores as reported by Qdrant
        """
        await self._ensure_collection()

        response = await self.client.query_points(
            collection_name=self.collection_name,
            query=vector,
            limit=top_k,
            query_filter=self._build_filter(namespace, metadata_filter),
            with_payload=True
        )

        return [
            VectorMatch(
                id=point.payload.get("vector_id", str(point.id)),
                score=point.score,
                metadata=point.payload.get("metadata", {})
            )
            for point in response.points
        ]

    async def delete_vectors(self, namespace: str, ids: List[str]):
        if not ids:
            return
        await self._ensure_collection()
        await self.client.delete(
            collection_name=self.collection_name,
            points_selector=models.PointIdsList(
                points=[self._point_id(namespace, vector_id) for vector_id in ids]
            )
        )
        logger.info(f"Deleted {len(ids)} vectors from namespace {namespace}")

    async def delete_namespace(self, namespace: str):
        """Remove every vector in a namespace."""
        await self._ensure_collection()
        await self.client.delete(
            collection_name=self.collection_name,
            points_selector=models.FilterSelector(filter=self._build_filter(namespace))
        )
        logger.info(f"Deleted namespace {namespace}")

    async def count(self, namespace: str) -> int:
        await self._ensure_collection()
        result = await self.client.count(
            collection_name=self.collection_name,
            count_filter=self._build_filter(namespace),
            exact=True
        )
        return result.count

    async def get_vector(self, namespace: str, vector_id: str) -> Optional[StoredVector]:
        """Fetch a stored vector with its metadata, or None if absent."""
        await self._ensure_collection()
        points = await self.client.retrieve(
            collection_name=self.collection_name,
            ids=[self._point_id(namespace, vector_id)],
            with_payload=True,
            with_vectors=True
        )
        if not points:
            return None

        point = points[0]
        return StoredVector(
            id=point.payload.get("vector_id", vector_id),
            values=list(point.vector),
            metadata=VectorMetadata(**point.payload.get("metadata", {}))
        )
