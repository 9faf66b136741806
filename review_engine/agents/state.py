"""
State definitions for the review generation graph.

Each invocation gets its own state dict; nodes return only the keys they
change, and LangGraph overwrites those keys (no reducers are needed).
"""
from enum import Enum
from typing import List, Optional
from typing_extensions import TypedDict

from review_engine.models import (
    DataQuality,
    EmployeeContext,
    EmployeeProfile,
    GeneratedReview,
    ParsedReview,
    RetrievalOutcome,
    ReviewGenerationOptions,
    Timeframe
)


class ReviewStage(str, Enum):
    VALIDATING = "validating"
    GATHERING_CONTEXT = "gathering_context"
    ASSESSING_QUALITY = "assessing_quality"
    RETRIEVING = "retrieving"
    PROMPTING = "prompting"
    GENERATING = "generating"
    PARSING = "parsing"
    SCORING = "scoring"
    DONE = "done"


class ReviewState(TypedDict, total=False):
    """State for one review generation request."""
    # Request
    employee_id: str
    organization_id: str
    options: ReviewGenerationOptions
    timeframe: Optional[Timeframe]

    # Last stage entered
    stage: ReviewStage

    employee: EmployeeProfile
    context: EmployeeContext
    data_quality: DataQuality
    retrieval: RetrievalOutcome

    # Chat messages as {role, content} dicts
    messages: List[dict]
    raw_response: str
    parsed: ParsedReview

    review: GeneratedReview
