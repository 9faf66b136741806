"""
Error taxonomy for the review engine.

Only NotFoundError, InsufficientDataError and GenerationFailedError (with its
ServiceUnavailableError subclass) are meant to reach callers. Retrieval and
parse failures are recovered inside the pipeline.
"""
from typing import Any, Dict, Optional


class ReviewEngineError(Exception):
    def __init__(
        self,
        message: str,
        error_code: str = "REVIEW_ENGINE_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(ReviewEngineError):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, error_code="NOT_FOUND", details=details)


class InsufficientDataError(ReviewEngineError):
    def __init__(self, overall_score: float, threshold: float):
        super().__init__(
            message="Insufficient data quality for AI review generation",
            error_code="INSUFFICIENT_DATA",
            details={"overall_score": overall_score, "threshold": threshold}
        )


class GenerationFailedError(ReviewEngineError):
    def __init__(
        self,
        message: str,
        error_code: str = "GENERATION_FAILED",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message=message, error_code=error_code, details=details)


class ServiceUnavailableError(GenerationFailedError):
    """Raised by model clients that were constructed without credentials."""

    def __init__(self, message: str = "AI service not configured. Set OPENAI_API_KEY."):
        super().__init__(message=message, error_code="AI_SERVICE_UNAVAILABLE")


class EmbeddingFailedError(ReviewEngineError):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, error_code="EMBEDDING_FAILED", details=details)
