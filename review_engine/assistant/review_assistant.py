"""
Assistant features built on the simple review path.

These calls produce free-text content rather than the six-field schema, and
score confidence from the number and weight of the sources they used.
"""
import asyncio
import json
import logging
import uuid
from typing import Any, Dict, List, Optional

from config.settings import Settings as settings
from review_engine.aggregation.context import ContextAggregator
from review_engine.aggregation.indexer import EmbeddingIndexer
from review_engine.aggregation.quality import calculate_source_confidence, collect_sources
from review_engine.aggregation.retriever import RelevanceRetriever, to_snippet
from review_engine.exceptions import NotFoundError
from review_engine.llm.llm_client import LLMClient
from review_engine.models import (
    ContentValidation,
    GenerationRecord,
    RetrievedSnippet,
    ReviewContent,
    ReviewRequest,
    ReviewSource,
    Timeframe
)
from review_engine.storage.repositories import GenerationLog
from review_engine.utils.helpers import extract_json, utc_now

from .prompts import (
    CONTENT_VALIDATION_TEMPLATE,
    FEEDBACK_SUGGESTION_TEMPLATE,
    REVIEW_TEMPLATE,
    REVIEW_TYPE_PROMPTS,
    SELF_ASSESSMENT_SUMMARY_TEMPLATE
)

logger = logging.getLogger(__name__)

VALIDATION_RETRY_MESSAGE = "Error validating content. Please try again."


def _sources_json(sources: List[ReviewSource]) -> str:
    return json.dumps([source.model_dump() for source in sources])


class ReviewAssistant:
    """
    Drafts reviews, summaries and feedback suggestions.

    Every generation is recorded in the generation log. Generated text is also
    stored in the vector store on a best-effort basis when an indexer is given.
    """

    def __init__(
        self,
        aggregator: ContextAggregator,
        llm_client: LLMClient,
        generation_log: GenerationLog,
        retriever: Optional[RelevanceRetriever] = None,
        indexer: Optional[EmbeddingIndexer] = None
    ):
        self.aggregator = aggregator
        self.llm_client = llm_client
        self.generation_log = generation_log
        self.retriever = retriever
        self.indexer = indexer

    async def _similar_snippets(self, employee_id: str) -> List[RetrievedSnippet]:
        """Similar stored content; an empty list when retrieval fails."""
        if self.retriever is None:
            return []
        try:
            matches = await self.retriever.search(
                employee_id,
                settings.SIMILAR_CONTENT_QUERY,
                settings.SIMILAR_CONTENT_LIMIT,
                settings.SIMILAR_CONTENT_TYPES
            )
        except Exception as e:
            logger.warning(f"Could not retrieve similar content: {e}")
            return []
        return [to_snippet(match) for match in matches]

    async def _record(
        self,
        employee_id: str,
        generation_type: str,
        prompt: str,
        content: str,
        sources: List[ReviewSource],
        confidence: float
    ) -> GenerationRecord:
        record = GenerationRecord(
            id=str(uuid.uuid4()),
            employee_id=employee_id,
            generation_type=generation_type,
            prompt=prompt,
            content=content,
            sources=sources,
            confidence=confidence,
            model_version=self.llm_client.model
        )
        await self.generation_log.save(record)
        return record

    async def _store(self, content: str, metadata: Dict[str, Any]):
        """Store generated text for later retrieval; failures are only logged."""
        if self.indexer is None:
            return
        try:
            await self.indexer.store_content(content, metadata)
        except Exception as e:
            logger.warning(f"Could not store generated content for {metadata.get('employee_id')}: {e}")

    async def generate_review(self, request: ReviewRequest) -> ReviewContent:
        """
        Draft a free-text review for an employee.

        Args:
            request: Employee, review type, optional reviewee and named timeframe

        Returns:
            ReviewContent with the text, its confidence and the sources used

        Raises:
            NotFoundError: Employee or reviewee does not resolve
            GenerationFailedError: The model call failed
        """
        logger.info(f"Generating review for employee: {request.employee_id}")

        employee = await self.aggregator.resolve_employee(
            request.employee_id, request.organization_id
        )
        if request.review_type == "peer" and request.reviewee_id:
            reviewee = await self.aggregator.employees.find_one(
                request.reviewee_id, request.organization_id
            )
            if reviewee is None:
                raise NotFoundError(
                    f"Reviewee with ID {request.reviewee_id} not found",
                    details={"reviewee_id": request.reviewee_id}
                )
            target = reviewee
        elif request.review_type == "self" or not request.reviewee_id:
            target = employee
        else:
            target = await self.aggregator.resolve_employee(
                request.reviewee_id, request.organization_id
            )

        timeframe = Timeframe.last_days(settings.get_timeframe_days(request.timeframe))
        context = await self.aggregator.build_context(target, timeframe)

        similar = await self._similar_snippets(target.id)
        sources = collect_sources(context, similar)
        confidence = calculate_source_confidence(sources)

        prompt = REVIEW_TEMPLATE.format(base_prompt=REVIEW_TYPE_PROMPTS[request.review_type])
        try:
            content = await self.llm_client.generate_response(prompt, _sources_json(sources))
        except Exception as e:
            logger.error(f"Error generating review: {e}")
            raise

        record = await self._record(
            request.employee_id,
            f"review_{request.review_type}",
            prompt,
            content,
            sources,
            confidence
        )
        await self._store(content, {
            "employee_id": request.employee_id,
            "organization_id": request.organization_id,
            "content_type": "review",
            "source_id": record.id,
            "tags": [f"review_{request.review_type}", f"timeframe_{request.timeframe}"],
            "visibility": "private",
        })

        logger.info(f"Generated review with {len(sources)} sources (confidence {confidence:.2f})")
        return ReviewContent(content=content, confidence=confidence, sources=sources)

    async def summarize_self_assessment(
        self,
        employee_id: str,
        organization_id: str,
        content: str
    ) -> ReviewContent:
        """Summarize a self-assessment in the employee's own voice."""
        logger.info(f"Summarizing self-assessment for employee: {employee_id}")
        await self.aggregator.resolve_employee(employee_id, organization_id)

        prompt = SELF_ASSESSMENT_SUMMARY_TEMPLATE.format(content=content)
        summary = await self.llm_client.generate_response(prompt)

        limit = settings.SELF_ASSESSMENT_SOURCE_LENGTH
        now = utc_now()
        sources = [ReviewSource(
            type="feedback",
            id=f"self_{int(now.timestamp() * 1000)}",
            content=content[:limit] + ("..." if len(content) > limit else ""),
            timestamp=now.isoformat(),
            confidence=1.0
        )]
        confidence = settings.SELF_ASSESSMENT_CONFIDENCE

        record = await self._record(
            employee_id, "self_assessment_summary", prompt, summary, sources, confidence
        )
        await self._store(summary, {
            "employee_id": employee_id,
            "organization_id": organization_id,
            "content_type": "review",
            "source_id": record.id,
            "tags": ["self_assessment", "summary"],
            "visibility": "private",
        })

        return ReviewContent(content=summary, confidence=confidence, sources=sources)

    async def suggest_feedback(
        self,
        employee_id: str,
        reviewee_id: str,
        organization_id: str,
        context: Optional[str] = None
    ) -> str:
        """Suggest feedback one employee could give another about recent work."""
        logger.info(f"Suggesting feedback from {employee_id} to {reviewee_id}")

        employee, reviewee = await asyncio.gather(
            self.aggregator.employees.find_one(employee_id, organization_id),
            self.aggregator.employees.find_one(reviewee_id, organization_id)
        )
        if employee is None or reviewee is None:
            raise NotFoundError(
                "Employee or reviewee not found",
                details={"employee_id": employee_id, "reviewee_id": reviewee_id}
            )

        objectives = await self.aggregator.objectives.find_by_owner(reviewee_id)
        recent_work = [
            ReviewSource(
                type="goal",
                id=okr.id,
                content=f"{okr.title}: {okr.description or ''} (Progress: {okr.progress:g}%)",
                timestamp=okr.created_at.isoformat() if okr.created_at else "",
                confidence=settings.GOAL_SOURCE_CONFIDENCE
            )
            for okr in objectives
        ]

        prompt = FEEDBACK_SUGGESTION_TEMPLATE.format(
            name=reviewee.full_name,
            recent_work=_sources_json(recent_work),
            context=context or "None provided"
        )
        suggestion = await self.llm_client.generate_response(prompt)

        record = await self._record(
            employee_id,
            "feedback_suggestion",
            prompt,
            suggestion,
            recent_work,
            settings.SUGGESTION_CONFIDENCE
        )
        await self._store(suggestion, {
            "employee_id": employee_id,
            "organization_id": organization_id,
            "content_type": "feedback",
            "source_id": record.id,
            "tags": ["suggestion", f"for_{reviewee_id}"],
            "visibility": "private",
        })

        return suggestion

    async def validate_content(self, content: str, sources: List[ReviewSource]) -> ContentValidation:
        """
        Ask the model whether content is supported by its sources.

        Never raises: a failed call or an unreadable answer is reported as invalid.
        """
        logger.info("Validating AI-generated content")
        prompt = CONTENT_VALIDATION_TEMPLATE.format(
            content=content, sources=_sources_json(sources)
        )

        try:
            response = await self.llm_client.generate_response(prompt)
        except Exception as e:
            logger.error(f"Error validating content: {e}")
            return ContentValidation(is_valid=False, issues=[VALIDATION_RETRY_MESSAGE])

        result = extract_json(response)
        if not isinstance(result, dict) or not isinstance(result.get("isValid"), bool):
            logger.error("Error parsing validation response")
            return ContentValidation(is_valid=False, issues=[VALIDATION_RETRY_MESSAGE])

        issues = result.get("issues") or []
        if not isinstance(issues, list):
            issues = [str(issues)]
        return ContentValidation(
            is_valid=result["isValid"],
            issues=[str(issue) for issue in issues]
        )
