# ============= review_engine/aggregation/__init__.py =============
'''Aggregation package: context gathering, retrieval, scoring, prompting and parsing.'''

from .context import ContextAggregator
from .indexer import EmbeddingIndexer
from .retriever import RelevanceRetriever
from .quality import (
    assess_data_quality,
    calculate_confidence,
    calculate_source_confidence,
    QualityWeightedConfidence,
    QuantityWeightedConfidence
)
from .prompt_builder import (
    build_system_prompt,
    build_user_prompt,
    build_context_query
)
from .parser import parse_ai_response

__all__ = [
    'ContextAggregator',
    'EmbeddingIndexer',
    'RelevanceRetriever',
    'assess_data_quality',
    'calculate_confidence',
    'calculate_source_confidence',
    'QualityWeightedConfidence',
    'QuantityWeightedConfidence',
    'build_system_prompt',
    'build_user_prompt',
    'build_context_query',
    'parse_ai_response'
]
