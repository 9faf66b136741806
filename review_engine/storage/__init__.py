# ============= review_engine/storage/__init__.py =============
'''Storage package for Qdrant vector database integration.'''

from .vector_store import EmployeeVectorStore
from .repositories import (
    EmployeeRepository,
    ObjectiveRepository,
    FeedbackRepository,
    GenerationLog
)

__all__ = [
    'EmployeeVectorStore',
    'EmployeeRepository',
    'ObjectiveRepository',
    'FeedbackRepository',
    'GenerationLog'
]
