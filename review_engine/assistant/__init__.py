# ============= review_engine/assistant/__init__.py =============
'''Assistant package: quick reviews, summaries, suggestions and sentiment analysis.'''

from .review_assistant import ReviewAssistant
from .sentiment import SentimentAnalyzer

__all__ = ['ReviewAssistant', 'SentimentAnalyzer']
