"""
Review orchestrator built as a linear LangGraph state machine.

START → validate → gather_context → assess_quality → retrieve → build_prompt
      → generate → parse → score → done → END

Only validate (NotFoundError), assess_quality (InsufficientDataError) and
generate (GenerationFailedError) can end a run early. Retrieval and parse
problems are recorded in the state and the run continues.
"""
import logging
from typing import Dict, Optional

from langgraph.graph import StateGraph, START, END

from config.settings import Settings as settings
from review_engine.aggregation.context import ContextAggregator
from review_engine.aggregation.parser import parse_ai_response
from review_engine.aggregation.prompt_builder import (
    build_context_query,
    build_system_prompt,
    build_user_prompt
)
from review_engine.aggregation.quality import (
    ConfidenceStrategy,
    QualityWeightedConfidence,
    assess_data_quality
)
from review_engine.aggregation.retriever import RelevanceRetriever
from review_engine.exceptions import InsufficientDataError, NotFoundError
from review_engine.llm.llm_client import LLMClient
from review_engine.models import (
    GeneratedReview,
    GenerationOptions,
    ReviewGenerationOptions,
    ReviewSources,
    Timeframe
)

from .state import ReviewStage, ReviewState

logger = logging.getLogger(__name__)


class ReviewOrchestrator:
    """
    Sequences aggregation, retrieval, scoring, prompting, generation and
    parsing into one generate_performance_review call.

    Collaborators are injected already constructed. The compiled graph has no
    checkpointer and the orchestrator keeps no per-request attributes, so
    concurrent calls never share state.
    """

    def __init__(
        self,
        aggregator: ContextAggregator,
        retriever: RelevanceRetriever,
        llm_client: LLMClient,
        confidence_strategy: Optional[ConfidenceStrategy] = None
    ):
        self.aggregator = aggregator
        self.retriever = retriever
        self.llm_client = llm_client
        self.confidence_strategy = confidence_strategy or QualityWeightedConfidence()
        self.graph = self._build_graph()

    def _build_graph(self):
        builder = StateGraph(ReviewState)

        builder.add_node("validate", self._validate_node)
        builder.add_node("gather_context", self._gather_context_node)
        builder.add_node("assess_quality", self._assess_quality_node)
        builder.add_node("retrieve", self._retrieve_node)
        builder.add_node("build_prompt", self._build_prompt_node)
        builder.add_node("generate", self._generate_node)
        builder.add_node("parse", self._parse_node)
        builder.add_node("score", self._score_node)
        builder.add_node("done", self._done_node)

        builder.add_edge(START, "validate")
        builder.add_edge("validate", "gather_context")
        builder.add_edge("gather_context", "assess_quality")
        builder.add_edge("assess_quality", "retrieve")
        builder.add_edge("retrieve", "build_prompt")
        builder.add_edge("build_prompt", "generate")
        builder.add_edge("generate", "parse")
        builder.add_edge("parse", "score")
        builder.add_edge("score", "done")
        builder.add_edge("done", END)

        return builder.compile()

    async def _validate_node(self, state: ReviewState) -> Dict:
        """Resolve the employee and, when given, the reviewer."""
        employee = await self.aggregator.resolve_employee(
            state["employee_id"], state["organization_id"]
        )

        reviewer_id = state["options"].reviewer_id
        if reviewer_id and reviewer_id != employee.id:
            reviewer = await self.aggregator.employees.find_one(
                reviewer_id, state["organization_id"]
            )
            if reviewer is None:
                raise NotFoundError("Reviewer not found", details={"reviewer_id": reviewer_id})

        return {"stage": ReviewStage.VALIDATING, "employee": employee}

    async def _gather_context_node(self, state: ReviewState) -> Dict:
        context = await self.aggregator.build_context(state["employee"], state.get("timeframe"))
        return {"stage": ReviewStage.GATHERING_CONTEXT, "context": context}

    async def _assess_quality_node(self, state: ReviewState) -> Dict:
        data_quality = assess_data_quality(state["context"])
        logger.info(f"Data quality for employee {state['employee_id']}: {data_quality.overall_score:.1f}")

        if data_quality.overall_score < settings.INSUFFICIENT_DATA_THRESHOLD:
            raise InsufficientDataError(
                data_quality.overall_score, settings.INSUFFICIENT_DATA_THRESHOLD
            )
        return {"stage": ReviewStage.ASSESSING_QUALITY, "data_quality": data_quality}

    async def _retrieve_node(self, state: ReviewState) -> Dict:
        options = state["options"]
        query = build_context_query(options.review_type, options.focus_areas)
        outcome = await self.retriever.retrieve(
            state["employee_id"], query, limit=settings.RETRIEVAL_LIMIT
        )

        if not outcome.ok:
            logger.warning(
                f"Continuing without relevant context ({outcome.degraded.stage}): "
                f"{outcome.degraded.reason}"
            )
        return {"stage": ReviewStage.RETRIEVING, "retrieval": outcome}

    async def _build_prompt_node(self, state: ReviewState) -> Dict:
        options = state["options"]
        context = state["context"]

        messages = [
            {"role": "system", "content": build_system_prompt(options.review_type, options.tone)},
            {"role": "user", "content": build_user_prompt(
                context.employee,
                context.okrs,
                context.feedback,
                state["retrieval"].context,
                options,
                state.get("timeframe")
            )},
        ]
        return {"stage": ReviewStage.PROMPTING, "messages": messages}

    async def _generate_node(self, state: ReviewState) -> Dict:
        raw = await self.llm_client.generate_completion(
            state["messages"],
            GenerationOptions(
                temperature=settings.DEFAULT_TEMPERATURE,
                max_tokens=settings.REVIEW_MAX_TOKENS
            )
        )
        return {"stage": ReviewStage.GENERATING, "raw_response": raw}

    async def _parse_node(self, state: ReviewState) -> Dict:
        parsed = parse_ai_response(state["raw_response"])
        return {"stage": ReviewStage.PARSING, "parsed": parsed}

    async def _score_node(self, state: ReviewState) -> Dict:
        context = state["context"]
        relevant = state["retrieval"].context
        data_quality = state["data_quality"]
        parsed = state["parsed"]

        confidence = self.confidence_strategy.calculate(data_quality, relevant, context)

        review = GeneratedReview(
            **parsed.review.model_dump(),
            confidence_score=confidence,
            sources=ReviewSources(
                okrs=[snippet.source_id for snippet in relevant.okrs],
                feedback=[snippet.source_id for snippet in relevant.feedback],
                projects=[],
                goals=[okr.id for okr in context.okrs if okr.level == "individual"]
            ),
            data_quality=data_quality,
            review_type=state["options"].review_type,
            parse_source=parsed.source
        )

        logger.info(
            f"Generated {review.review_type.value} review for employee {state['employee_id']} "
            f"(confidence {confidence:.2f}, parsed {parsed.source.value})"
        )
        return {"stage": ReviewStage.SCORING, "review": review}

    async def _done_node(self, state: ReviewState) -> Dict:
        return {"stage": ReviewStage.DONE}

    async def generate_performance_review(
        self,
        employee_id: str,
        organization_id: str,
        options: ReviewGenerationOptions,
        timeframe: Optional[Timeframe] = None
    ) -> GeneratedReview:
        """
        Generate a structured performance review for an employee.

        Args:
            employee_id: Employee being reviewed
            organization_id: Organization the employee belongs to
            options: Review type, tone and content switches
            timeframe: Review window (defaults to the last 365 days)

        Returns:
            Fully populated GeneratedReview

        Raises:
            NotFoundError: Employee or reviewer does not resolve
            InsufficientDataError: Data quality below the threshold
            GenerationFailedError: The model call failed or returned nothing
        """
        logger.info(
            f"Generating {options.review_type.value} review for employee: {employee_id}"
        )
        final_state = await self.graph.ainvoke({
            "employee_id": employee_id,
            "organization_id": organization_id,
            "options": options,
            "timeframe": timeframe,
        })
        return final_state["review"]
