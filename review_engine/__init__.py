# ============= review_engine/__init__.py =============
'''AI-assisted performance review generation engine.'''

from .agents import ReviewOrchestrator
from .exceptions import (
    ReviewEngineError,
    NotFoundError,
    InsufficientDataError,
    GenerationFailedError,
    ServiceUnavailableError,
    EmbeddingFailedError
)
from .models import (
    GeneratedReview,
    ReviewGenerationOptions,
    ReviewType,
    ReviewTone,
    Timeframe
)

__all__ = [
    'ReviewOrchestrator',
    'ReviewEngineError',
    'NotFoundError',
    'InsufficientDataError',
    'GenerationFailedError',
    'ServiceUnavailableError',
    'EmbeddingFailedError',
    'GeneratedReview',
    'ReviewGenerationOptions',
    'ReviewType',
    'ReviewTone',
    'Timeframe'
]
