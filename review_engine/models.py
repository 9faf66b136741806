"""
Data model for the review generation pipeline.

Signals are immutable snapshots taken at aggregation time. Review output
models serialise with camelCase keys, which is the JSON contract shared with
the model prompt and with downstream callers.
"""
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from config.settings import Settings as settings
from review_engine.utils.helpers import ensure_utc, utc_now


class ReviewType(str, Enum):
    SELF = "self"
    MANAGER = "manager"
    PEER = "peer"
    THREE_SIXTY = "360"
    UPWARD = "upward"


class ReviewTone(str, Enum):
    PROFESSIONAL = "professional"
    SUPPORTIVE = "supportive"
    CONSTRUCTIVE = "constructive"


class ContentType(str, Enum):
    OKR = "okr"
    FEEDBACK = "feedback"
    GOAL = "goal"
    ACHIEVEMENT = "achievement"
    PROJECT = "project"
    REVIEW = "review"


class ParseSource(str, Enum):
    """Which tier of the response parser produced a review."""
    STRUCTURED = "structured"
    EXTRACTED = "extracted"
    PLACEHOLDER = "placeholder"


class Timeframe(BaseModel):
    """Half-open window [start_date, end_date)."""
    model_config = ConfigDict(frozen=True)

    start_date: datetime
    end_date: datetime

    @classmethod
    def last_days(cls, days: int, now: Optional[datetime] = None) -> "Timeframe":
        end = ensure_utc(now) if now else utc_now()
        return cls(start_date=end - timedelta(days=days), end_date=end)

    def contains(self, moment: datetime) -> bool:
        moment = ensure_utc(moment)
        return ensure_utc(self.start_date) <= moment < ensure_utc(self.end_date)


class EmployeeProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    organization_id: str
    first_name: str
    last_name: str
    job_title: Optional[str] = None
    department: Optional[str] = None
    manager_id: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class KeyResultSignal(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    progress: float = Field(default=0, ge=0, le=100)


class ObjectiveSignal(BaseModel):
    """Read-only projection of an objective with its key results."""
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: Optional[str] = None
    level: str = "individual"
    progress: float = Field(default=0, ge=0, le=100)
    status: str = "active"
    due_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    key_results: List[KeyResultSignal] = Field(default_factory=list)


class FeedbackSignal(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    content: str
    tags: List[str] = Field(default_factory=list)
    visibility: str = "private"
    given_by_name: str = ""
    given_by_id: Optional[str] = None
    created_at: datetime


class EmployeeContext(BaseModel):
    """Everything gathered for one employee, built per request."""
    employee: EmployeeProfile
    okrs: List[ObjectiveSignal] = Field(default_factory=list)
    key_results: List[KeyResultSignal] = Field(default_factory=list)
    feedback: List[FeedbackSignal] = Field(default_factory=list)
    timeframe: Timeframe


class RetrievedSnippet(BaseModel):
    source_id: str
    content_type: str
    preview_text: str = ""
    similarity_score: float
    metadata: Dict[str, Any] = Field(default_factory=dict)


class RelevantContext(BaseModel):
    okrs: List[RetrievedSnippet] = Field(default_factory=list)
    feedback: List[RetrievedSnippet] = Field(default_factory=list)
    relevance_scores: List[float] = Field(default_factory=list)


class RetrievalDegraded(BaseModel):
    """Why relevance retrieval produced no context."""
    stage: str
    reason: str


class RetrievalOutcome(BaseModel):
    context: RelevantContext = Field(default_factory=RelevantContext)
    degraded: Optional[RetrievalDegraded] = None

    @property
    def ok(self) -> bool:
        return self.degraded is None


class DataQuality(BaseModel):
    okr_score: float = Field(ge=0, le=100)
    feedback_score: float = Field(ge=0, le=100)
    overall_score: float = Field(ge=0, le=100)


class VectorMetadata(BaseModel):
    """Payload stored next to every vector; extra keys are kept verbatim."""
    model_config = ConfigDict(extra="allow")

    employee_id: str
    organization_id: str
    content_type: str
    source_id: str
    created_at: str
    tags: List[str] = Field(default_factory=list)
    preview: str = ""


class StoredVector(BaseModel):
    id: str
    values: List[float]
    metadata: VectorMetadata


class VectorMatch(BaseModel):
    id: str
    score: float
    metadata: Dict[str, Any] = Field(default_factory=dict)


class StructuredReview(BaseModel):
    """The fixed six-field review schema."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    strengths: str = ""
    areas_for_improvement: str = ""
    achievements: str = ""
    goals_for_next_period: str = ""
    development_plan: str = ""
    manager_comments: str = ""


class ParsedReview(BaseModel):
    review: StructuredReview
    source: ParseSource


class ReviewSources(BaseModel):
    okrs: List[str] = Field(default_factory=list)
    feedback: List[str] = Field(default_factory=list)
    projects: List[str] = Field(default_factory=list)
    goals: List[str] = Field(default_factory=list)


class GeneratedReview(StructuredReview):
    confidence_score: float = Field(ge=0, le=1)
    sources: ReviewSources = Field(default_factory=ReviewSources)
    data_quality: DataQuality
    review_type: ReviewType
    parse_source: ParseSource = ParseSource.STRUCTURED


class ReviewGenerationOptions(BaseModel):
    review_type: ReviewType
    tone: ReviewTone = ReviewTone.PROFESSIONAL
    focus_areas: Optional[List[str]] = None
    include_goals: bool = True
    include_development_plan: bool = True
    reviewer_id: Optional[str] = None


class GenerationOptions(BaseModel):
    """Per-call sampling parameters for the chat model."""
    temperature: float = settings.DEFAULT_TEMPERATURE
    max_tokens: int = settings.DEFAULT_MAX_TOKENS
    top_p: float = settings.DEFAULT_TOP_P
    frequency_penalty: float = 0
    presence_penalty: float = 0
    model: Optional[str] = None


# Assistant (simple review path) records

class ReviewRequest(BaseModel):
    employee_id: str
    organization_id: str
    review_type: str = Field(pattern="^(self|peer|manager)$")
    reviewee_id: Optional[str] = None
    timeframe: str = "12months"


class ReviewSource(BaseModel):
    type: str
    id: str
    content: str
    timestamp: str = ""
    confidence: float = Field(ge=0, le=1)


class ReviewContent(BaseModel):
    content: str
    confidence: float = Field(ge=0, le=1)
    sources: List[ReviewSource] = Field(default_factory=list)


class GenerationRecord(BaseModel):
    id: str
    employee_id: str
    generation_type: str
    prompt: str
    content: str
    sources: List[ReviewSource] = Field(default_factory=list)
    confidence: float
    model_version: str
    created_at: datetime = Field(default_factory=utc_now)


class ContentValidation(BaseModel):
    is_valid: bool
    issues: List[str] = Field(default_factory=list)


class SentimentAnalysis(BaseModel):
    tone: str = "neutral"
    quality: float = 50
    specificity: float = 50
    actionability: float = 50
    bias_indicators: List[str] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)
    summary: str = ""


class FeedbackImprovement(BaseModel):
    original: str
    improved: str
    changes: List[str] = Field(default_factory=list)


class SentimentTrend(BaseModel):
    trend: str = "stable"
    average_quality: float = 50
    period_comparisons: List[Dict[str, Any]] = Field(default_factory=list)
