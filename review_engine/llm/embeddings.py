"""
Embedding client backed by OpenAI or a local Ollama server.
"""
import logging
from typing import List, Optional

from langchain_core.embeddings import Embeddings
from langchain_ollama import OllamaEmbeddings
from langchain_openai import OpenAIEmbeddings
from pydantic import SecretStr

from config.settings import Settings as settings
from review_engine.exceptions import EmbeddingFailedError, ServiceUnavailableError

logger = logging.getLogger(__name__)


class EmbeddingClient:
    """Turns text into fixed-length vectors, batching where possible."""

    def __init__(
        self,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        use_openai: Optional[bool] = None,
        embeddings: Optional[Embeddings] = None
    ):
        self.use_openai = settings.USE_OPENAI if use_openai is None else use_openai
        api_key = api_key if api_key is not None else settings.OPENAI_API_KEY

        if self.use_openai:
            self.model = model or settings.EMBEDDING_MODEL
        else:
            self.model = model or settings.OLLAMA_EMBEDDING_MODEL

        if embeddings is not None:
            self.embeddings = embeddings
        elif self.use_openai and not api_key:
            self.embeddings = None
            logger.warning("OPENAI_API_KEY not set; embeddings are disabled")
        elif self.use_openai:
            self.embeddings = OpenAIEmbeddings(
                model=self.model,
                api_key=SecretStr(api_key),
                max_retries=settings.LLM_MAX_RETRIES
            )
        else:
            self.embeddings = OllamaEmbeddings(
                model=self.model,
                base_url=settings.OLLAMA_BASE_URL
            )

    @property
    def is_available(self) -> bool:
        return self.embeddings is not None

    async def generate_embedding(self, text: str) -> List[float]:
        """
        Embed a single text.

        Raises:
            ServiceUnavailableError: If no embedding model is configured
            EmbeddingFailedError: If the provider errors or returns no vector
        """
        if not self.is_available:
            raise ServiceUnavailableError()

        try:
            vector = await self.embeddings.aembed_query(text)
        except Exception as e:
            logger.error(f"Error generating embedding: {e}")
            raise EmbeddingFailedError(f"Failed to generate embedding: {e}") from e

        if not vector:
            raise EmbeddingFailedError("No embedding returned")
        return list(vector)

    async def generate_batch_embeddings(self, texts: List[str]) -> List[List[float]]:
        """Embed several texts in one provider call, preserving order."""
        if not self.is_available:
            raise ServiceUnavailableError()
        if not texts:
            return []

        try:
            vectors = await self.embeddings.aembed_documents(texts)
        except Exception as e:
            logger.error(f"Error generating batch embeddings: {e}")
            raise EmbeddingFailedError(f"Failed to generate batch embeddings: {e}") from e

        if not vectors or len(vectors) != len(texts):
            raise EmbeddingFailedError(
                "No embeddings returned",
                details={"requested": len(texts), "received": len(vectors or [])}
            )
        return [list(vector) for vector in vectors]
