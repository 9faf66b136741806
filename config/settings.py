"""
Configuration settings for the AI review engine
"""
import os
from typing import Dict, List
from dotenv import load_dotenv

# Load .env only for local development
load_dotenv()


def get_secret(key: str, default: str = "") -> str:
    """
    Get a secret or setting from the environment.

    Values in a local .env file are already exported by load_dotenv().
    """
    return os.getenv(key, default)


class Settings:
    """Application settings loaded from environment variables"""

    # Qdrant Configuration
    QDRANT_URL: str = get_secret("QDRANT_URL", "http://localhost:6333")
    QDRANT_API_KEY: str = get_secret("QDRANT_API_KEY", "")
    QDRANT_COLLECTION: str = get_secret("QDRANT_COLLECTION", "employee_context")
    EMBEDDING_DIMENSIONS: int = int(get_secret("EMBEDDING_DIMENSIONS", "1536"))

    # LLM Configuration - OpenAI in production, Ollama for local runs
    USE_OPENAI: bool = get_secret("USE_OPENAI", "true").lower() == "true"

    # OpenAI Configuration (chat completions and embeddings)
    OPENAI_API_KEY: str = get_secret("OPENAI_API_KEY", "")
    OPENAI_MODEL: str = get_secret("OPENAI_MODEL", "gpt-4")
    EMBEDDING_MODEL: str = get_secret("EMBEDDING_MODEL", "text-embedding-ada-002")

    # Ollama Configuration (local only)
    OLLAMA_BASE_URL: str = get_secret("OLLAMA_BASE_URL", "http://localhost:11434")
    OLLAMA_MODEL: str = get_secret("OLLAMA_MODEL", "llama3.1:8b")
    OLLAMA_EMBEDDING_MODEL: str = get_secret("OLLAMA_EMBEDDING_MODEL", "nomic-embed-text")
    OLLAMA_NUM_CTX: int = 4096
    OLLAMA_KEEP_ALIVE: str = "10m"

    LLM_MAX_RETRIES: int = int(get_secret("LLM_MAX_RETRIES", "3"))
    LLM_TIMEOUT: float = float(get_secret("LLM_TIMEOUT", "60"))

    # Generation defaults
    DEFAULT_TEMPERATURE: float = 0.7
    DEFAULT_MAX_TOKENS: int = 2000
    REVIEW_MAX_TOKENS: int = 2500
    DEFAULT_TOP_P: float = 1.0

    # Context gathering and retrieval
    DEFAULT_TIMEFRAME_DAYS: int = 365
    RETRIEVAL_LIMIT: int = 20
    PROMPT_SNIPPET_LIMIT: int = 5
    SIMILAR_CONTENT_LIMIT: int = 5
    PREVIEW_LENGTH: int = 100
    EMBEDDING_CHUNK_SIZE: int = 500

    # Scoring constants. These are tunable, not validated thresholds.
    INSUFFICIENT_DATA_THRESHOLD: float = 30

    OKR_MANY_COUNT: int = 3
    OKR_MANY_POINTS: float = 40
    OKR_SOME_POINTS: float = 20
    OKR_PROGRESS_POINTS: float = 30
    OKR_DESCRIPTION_POINTS: float = 30

    FEEDBACK_MANY_COUNT: int = 5
    FEEDBACK_SOME_COUNT: int = 2
    FEEDBACK_MANY_POINTS: float = 40
    FEEDBACK_SOME_POINTS: float = 20
    FEEDBACK_LONG_LENGTH: int = 100
    FEEDBACK_MEDIUM_LENGTH: int = 50
    FEEDBACK_LONG_POINTS: float = 30
    FEEDBACK_MEDIUM_POINTS: float = 15
    FEEDBACK_TAGGED_POINTS: float = 30

    CONFIDENCE_QUALITY_WEIGHT: float = 0.4
    CONFIDENCE_RELEVANCE_WEIGHT: float = 0.3
    CONFIDENCE_COMPLETENESS_WEIGHT: float = 0.2
    CONFIDENCE_TIME_COVERAGE_WEIGHT: float = 0.1
    CONFIDENCE_TIME_COVERAGE: float = 0.8
    COMPLETENESS_OKR_FACTOR: float = 0.3
    COMPLETENESS_FEEDBACK_FACTOR: float = 0.1

    SOURCE_CONFIDENCE_WEIGHT: float = 0.7
    SOURCE_QUANTITY_WEIGHT: float = 0.3
    QUANTITY_STEPS: List[tuple] = [(10, 1.0), (5, 0.8), (3, 0.6)]
    QUANTITY_FLOOR: float = 0.4
    EMPTY_CONTEXT_CONFIDENCE: float = 0.1

    FEEDBACK_SOURCE_CONFIDENCE: float = 0.9
    GOAL_SOURCE_CONFIDENCE: float = 0.85
    SIMILAR_SOURCE_DISCOUNT: float = 0.7

    # Assistant features
    SIMILAR_CONTENT_QUERY: str = "performance review"
    SIMILAR_CONTENT_TYPES: List[str] = ["feedback", "goal", "review"]
    SELF_ASSESSMENT_CONFIDENCE: float = 0.9
    SELF_ASSESSMENT_SOURCE_LENGTH: int = 500
    SUGGESTION_CONFIDENCE: float = 0.8
    SENTIMENT_TREND_THRESHOLD: float = 10
    SENTIMENT_DEFAULT_SCORE: float = 50

    # Named timeframes accepted by the assistant review path
    TIMEFRAME_DAYS: Dict[str, int] = {
        "3months": 90,
        "6months": 180,
        "12months": 365
    }

    # Logging
    LOG_LEVEL: str = get_secret("LOG_LEVEL", "INFO")

    @classmethod
    def get_timeframe_days(cls, label: str) -> int:
        """Resolve a named timeframe, falling back to the default window"""
        return cls.TIMEFRAME_DAYS.get(label, cls.DEFAULT_TIMEFRAME_DAYS)


settings = Settings()
