# ============= review_engine/llm/__init__.py =============
'''Chat and embedding model clients.'''
from .llm_client import LLMClient, create_llm_client
from .embeddings import EmbeddingClient

__all__ = ['LLMClient', 'create_llm_client', 'EmbeddingClient']
