"""
Sentiment and quality analysis of written feedback.

Every call degrades to a neutral default instead of raising, so feedback
screens keep working when the model is unavailable.
"""
import asyncio
import logging
from datetime import datetime
from typing import Any, Dict, List, Union

from config.settings import Settings as settings
from review_engine.llm.llm_client import LLMClient
from review_engine.models import FeedbackImprovement, SentimentAnalysis, SentimentTrend
from review_engine.utils.helpers import clamp, ensure_utc, extract_json, format_period

from .prompts import (
    BIAS_DETECTION_TEMPLATE,
    FEEDBACK_ANALYSIS_TEMPLATE,
    FEEDBACK_IMPROVEMENT_TEMPLATE
)

logger = logging.getLogger(__name__)

VALID_TONES = ("positive", "neutral", "constructive", "negative")


def validate_tone(tone: Any) -> str:
    return tone if tone in VALID_TONES else "neutral"


def normalize_score(score: Any) -> float:
    """Clamp numeric scores to [0, 100]; anything else becomes the default."""
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        return settings.SENTIMENT_DEFAULT_SCORE
    return clamp(float(score), 0, 100)


def default_analysis() -> SentimentAnalysis:
    return SentimentAnalysis(summary="Unable to analyze feedback.")


def _string_list(value: Any) -> List[str]:
    return [str(item) for item in value] if isinstance(value, list) else []


def _parse_date(value: Union[str, datetime]) -> datetime:
    if isinstance(value, datetime):
        return ensure_utc(value)
    return ensure_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))


class SentimentAnalyzer:
    """Scores feedback tone and quality with the chat model."""

    def __init__(self, llm_client: LLMClient):
        self.llm_client = llm_client

    async def _ask(self, prompt: str) -> Any:
        """Model response decoded as JSON, or None."""
        response = await self.llm_client.generate_response(prompt)
        return extract_json(response)

    async def analyze_feedback(self, content: str) -> SentimentAnalysis:
        """
        Analyze tone, quality, specificity and actionability of feedback.

        Args:
            content: Feedback text

        Returns:
            SentimentAnalysis; the neutral default if anything fails
        """
        logger.info("Analyzing feedback sentiment")
        try:
            result = await self._ask(FEEDBACK_ANALYSIS_TEMPLATE.format(content=content))
        except Exception as e:
            logger.error(f"Error analyzing feedback sentiment: {e}")
            return default_analysis()

        if not isinstance(result, dict):
            logger.error("Error parsing sentiment analysis result")
            return default_analysis()

        return SentimentAnalysis(
            tone=validate_tone(result.get("tone")),
            quality=normalize_score(result.get("quality")),
            specificity=normalize_score(result.get("specificity")),
            actionability=normalize_score(result.get("actionability")),
            bias_indicators=_string_list(result.get("biasIndicators")),
            keywords=_string_list(result.get("keywords")),
            summary=str(result.get("summary") or "")
        )

    async def detect_bias(self, content: str) -> List[str]:
        logger.info("Detecting bias in feedback")
        try:
            result = await self._ask(BIAS_DETECTION_TEMPLATE.format(content=content))
        except Exception as e:
            logger.error(f"Error detecting bias: {e}")
            return []
        return _string_list(result)

    async def suggest_improvements(self, content: str) -> FeedbackImprovement:
        """Rewrite feedback to be more specific, actionable and balanced."""
        logger.info("Suggesting feedback improvements")
        fallback = FeedbackImprovement(
            original=content,
            improved=content,
            changes=["Error generating improvements"]
        )

        try:
            result = await self._ask(FEEDBACK_IMPROVEMENT_TEMPLATE.format(content=content))
        except Exception as e:
            logger.error(f"Error suggesting improvements: {e}")
            return fallback

        if not isinstance(result, dict):
            logger.error("Error parsing improvement suggestions")
            return fallback

        return FeedbackImprovement(
            original=content,
            improved=str(result.get("improved") or content),
            changes=_string_list(result.get("changes"))
        )

    async def analyze_sentiment_trend(self, items: List[Dict[str, Any]]) -> SentimentTrend:
        """
        Track feedback quality over monthly periods.

        Args:
            items: Dicts with "content" and "date" (ISO string or datetime)

        Returns:
            SentimentTrend; improving or declining when the last period differs
            from the first by more than the trend threshold
        """
        logger.info("Analyzing sentiment trends")
        if not items:
            return SentimentTrend()

        try:
            dated = sorted(
                ((_parse_date(item["date"]), item["content"]) for item in items),
                key=lambda pair: pair[0]
            )
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Error analyzing sentiment trends: {e}")
            return SentimentTrend()

        analyses = await asyncio.gather(
            *[self.analyze_feedback(content) for _, content in dated]
        )
        average_quality = sum(a.quality for a in analyses) / len(analyses)

        periods: Dict[str, List[float]] = {}
        for (date, _), analysis in zip(dated, analyses):
            periods.setdefault(format_period(date), []).append(analysis.quality)

        comparisons = [
            {"period": period, "quality": sum(scores) / len(scores)}
            for period, scores in periods.items()
        ]

        trend = "stable"
        if len(comparisons) >= 2:
            first = comparisons[0]["quality"]
            last = comparisons[-1]["quality"]
            if last - first > settings.SENTIMENT_TREND_THRESHOLD:
                trend = "improving"
            elif first - last > settings.SENTIMENT_TREND_THRESHOLD:
                trend = "declining"

        return SentimentTrend(
            trend=trend,
            average_quality=average_quality,
            period_comparisons=comparisons
        )
