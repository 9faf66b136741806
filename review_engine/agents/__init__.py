# ============= review_engine/agents/__init__.py =============
'''Review orchestration package using LangGraph for the generation pipeline.'''

from .review_agent import ReviewOrchestrator
from .state import ReviewState, ReviewStage

__all__ = [
    'ReviewOrchestrator',
    'ReviewState',
    'ReviewStage'
]
