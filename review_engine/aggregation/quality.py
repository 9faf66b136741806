"""
Data-quality and confidence scoring.

All functions here are pure: the same inputs always give the same score.
Weights and thresholds come from Settings so they can be tuned in one place.
"""
from typing import List, Protocol

from config.settings import Settings as settings
from review_engine.models import (
    DataQuality,
    EmployeeContext,
    FeedbackSignal,
    ObjectiveSignal,
    RelevantContext,
    RetrievedSnippet,
    ReviewSource
)
from review_engine.utils.helpers import clamp, mean


def score_objectives(okrs: List[ObjectiveSignal]) -> float:
    """OKR sub-score in [0, 100]: quantity, progress and description coverage."""
    score = 0.0
    if len(okrs) >= settings.OKR_MANY_COUNT:
        score += settings.OKR_MANY_POINTS
    elif len(okrs) >= 1:
        score += settings.OKR_SOME_POINTS

    if mean(okr.progress for okr in okrs) > 0:
        score += settings.OKR_PROGRESS_POINTS

    described = sum(1 for okr in okrs if okr.description)
    score += (described / max(len(okrs), 1)) * settings.OKR_DESCRIPTION_POINTS

    return clamp(score, 0, 100)


def score_feedback(feedback: List[FeedbackSignal]) -> float:
    """Feedback sub-score in [0, 100]: quantity, length and tag coverage."""
    score = 0.0
    if len(feedback) >= settings.FEEDBACK_MANY_COUNT:
        score += settings.FEEDBACK_MANY_POINTS
    elif len(feedback) >= settings.FEEDBACK_SOME_COUNT:
        score += settings.FEEDBACK_SOME_POINTS

    average_length = mean(len(item.content) for item in feedback)
    if average_length > settings.FEEDBACK_LONG_LENGTH:
        score += settings.FEEDBACK_LONG_POINTS
    elif average_length > settings.FEEDBACK_MEDIUM_LENGTH:
        score += settings.FEEDBACK_MEDIUM_POINTS

    tagged = sum(1 for item in feedback if item.tags)
    score += (tagged / max(len(feedback), 1)) * settings.FEEDBACK_TAGGED_POINTS

    return clamp(score, 0, 100)


def assess_data_quality(context: EmployeeContext) -> DataQuality:
    """
    Score how much usable signal an employee context carries.

    Args:
        context: Aggregated employee context

    Returns:
        DataQuality where overall_score is the mean of the two sub-scores
    """
    okr_score = score_objectives(context.okrs)
    feedback_score = score_feedback(context.feedback)
    return DataQuality(
        okr_score=okr_score,
        feedback_score=feedback_score,
        overall_score=(okr_score + feedback_score) / 2
    )


def calculate_confidence(
    data_quality: DataQuality,
    relevance_scores: List[float],
    context: EmployeeContext
) -> float:
    """
    Weighted blend of data quality, retrieval relevance, completeness and a
    fixed time-coverage term, clamped to [0, 1].
    """
    quality = data_quality.overall_score / 100
    relevance = mean(relevance_scores)
    completeness = min(
        (len(context.okrs) * settings.COMPLETENESS_OKR_FACTOR
         + len(context.feedback) * settings.COMPLETENESS_FEEDBACK_FACTOR) / 2,
        1
    )

    confidence = (
        quality * settings.CONFIDENCE_QUALITY_WEIGHT
        + relevance * settings.CONFIDENCE_RELEVANCE_WEIGHT
        + completeness * settings.CONFIDENCE_COMPLETENESS_WEIGHT
        + settings.CONFIDENCE_TIME_COVERAGE * settings.CONFIDENCE_TIME_COVERAGE_WEIGHT
    )
    return clamp(confidence, 0, 1)


def quantity_factor(count: int) -> float:
    for minimum, factor in settings.QUANTITY_STEPS:
        if count >= minimum:
            return factor
    return settings.QUANTITY_FLOOR


def calculate_source_confidence(sources: List[ReviewSource]) -> float:
    """
    Average source confidence blended with a step function of source count.

    Returns:
        Confidence in [0, 1]; a fixed low value when there are no sources
    """
    if not sources:
        return settings.EMPTY_CONTEXT_CONFIDENCE

    average = mean(source.confidence for source in sources)
    confidence = (
        average * settings.SOURCE_CONFIDENCE_WEIGHT
        + quantity_factor(len(sources)) * settings.SOURCE_QUANTITY_WEIGHT
    )
    return clamp(confidence, 0, 1)


def collect_sources(
    context: EmployeeContext,
    similar: List[RetrievedSnippet]
) -> List[ReviewSource]:
    """
    Turn context into weighted sources: feedback and goals at fixed
    confidence, similar snippets discounted by their similarity.
    """
    sources = [
        ReviewSource(
            type="feedback",
            id=item.id,
            content=item.content,
            timestamp=item.created_at.isoformat(),
            confidence=settings.FEEDBACK_SOURCE_CONFIDENCE
        )
        for item in context.feedback
    ]
    sources.extend(
        ReviewSource(
            type="goal",
            id=okr.id,
            content=f"{okr.title}: {okr.description or ''} (Progress: {okr.progress:g}%)",
            timestamp=okr.created_at.isoformat() if okr.created_at else "",
            confidence=settings.GOAL_SOURCE_CONFIDENCE
        )
        for okr in context.okrs
    )
    sources.extend(
        ReviewSource(
            type=snippet.content_type,
            id=snippet.source_id,
            content=snippet.preview_text,
            timestamp=str(snippet.metadata.get("created_at", "")),
            confidence=clamp(snippet.similarity_score * settings.SIMILAR_SOURCE_DISCOUNT, 0, 1)
        )
        for snippet in similar
    )
    return sources


class ConfidenceStrategy(Protocol):
    name: str

    def calculate(
        self,
        data_quality: DataQuality,
        relevant: RelevantContext,
        context: EmployeeContext
    ) -> float:
        ...


class QualityWeightedConfidence:
    """Data quality, relevance, completeness and time coverage."""
    name = "quality_weighted"

    def calculate(self, data_quality, relevant, context) -> float:
        return calculate_confidence(data_quality, relevant.relevance_scores, context)


class QuantityWeightedConfidence:
    """Average per-source confidence and number of sources."""
    name = "quantity_weighted"

    def calculate(self, data_quality, relevant, context) -> float:
        similar = relevant.okrs + relevant.feedback
        return calculate_source_confidence(collect_sources(context, similar))
