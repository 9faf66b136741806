"""
Renders review prompts from aggregated employee data.

Construction is deterministic: identical inputs always produce byte-identical
prompt text.
"""
from typing import List, Optional

from config.settings import Settings as settings
from review_engine.aggregation.prompts import (
    DEFAULT_CONTEXT_QUERY_TERMS,
    GENERAL_REVIEW_PERIOD,
    NO_FEEDBACK_DATA,
    NO_OKR_DATA,
    REVIEW_TYPE_GUIDELINES,
    SYSTEM_PROMPT_TEMPLATE,
    USER_PROMPT_TEMPLATE
)
from review_engine.models import (
    EmployeeProfile,
    FeedbackSignal,
    ObjectiveSignal,
    RelevantContext,
    ReviewGenerationOptions,
    RetrievedSnippet,
    Timeframe
)
from review_engine.utils.helpers import format_date


def _value(enum_or_str) -> str:
    return getattr(enum_or_str, "value", enum_or_str)


def build_system_prompt(review_type, tone="professional") -> str:
    """
    Build the system prompt for a review type.

    Args:
        review_type: One of self, manager, peer, 360, upward
        tone: Tone the review should keep

    Returns:
        Shared instructions, the type-specific guidelines and the JSON schema
    """
    review_type = _value(review_type)
    return SYSTEM_PROMPT_TEMPLATE.format(
        tone=_value(tone),
        review_type=review_type.upper(),
        guidelines=REVIEW_TYPE_GUIDELINES.get(review_type, "")
    )


def summarize_okrs(okrs: List[ObjectiveSignal]) -> str:
    if not okrs:
        return NO_OKR_DATA

    total = len(okrs)
    completed = sum(1 for okr in okrs if okr.progress >= 100)
    average_progress = sum(okr.progress for okr in okrs) / total
    completion_rate = completed / total * 100

    lines = [
        f"Total OKRs: {total}",
        f"Completed OKRs: {completed}",
        f"Average Progress: {average_progress:.1f}%",
        f"Completion Rate: {completion_rate:.1f}%",
        "",
        "Individual OKRs:",
    ]
    for index, okr in enumerate(okrs, start=1):
        lines.append(f"{index}. {okr.title}")
        lines.append(f"   Progress: {okr.progress:g}%")
        lines.append(f"   Status: {okr.status}")
        lines.append(f"   Level: {okr.level}")
        if okr.description:
            lines.append(f"   Description: {okr.description}")
        for kr in okr.key_results:
            lines.append(f"   Key Result: {kr.title} ({kr.progress:g}%)")

    return "\n".join(lines)


def summarize_feedback(feedback: List[FeedbackSignal]) -> str:
    if not feedback:
        return NO_FEEDBACK_DATA

    lines = [f"Total Feedback Items: {len(feedback)}", "", "Feedback Details:"]
    for index, item in enumerate(feedback, start=1):
        lines.append(f"{index}. From: {item.given_by_name or 'Anonymous'}")
        lines.append(f"   Content: {item.content}")
        lines.append(f"   Tags: {', '.join(item.tags) if item.tags else 'None'}")
        lines.append(f"   Date: {format_date(item.created_at)}")

    return "\n".join(lines)


def _snippet_lines(snippets: List[RetrievedSnippet], limit: int) -> List[str]:
    return [
        f"{index}. {snippet.preview_text} (Relevance: {snippet.similarity_score * 100:.1f}%)"
        for index, snippet in enumerate(snippets[:limit], start=1)
    ]


def summarize_relevant_context(relevant: RelevantContext, limit: Optional[int] = None) -> str:
    """Top snippets of each kind with similarity shown as a percentage."""
    if limit is None:
        limit = settings.PROMPT_SNIPPET_LIMIT
    lines = ["Most Relevant Context (based on semantic similarity):"]

    if relevant.okrs:
        lines.extend(["", "Relevant OKRs:"])
        lines.extend(_snippet_lines(relevant.okrs, limit))

    if relevant.feedback:
        lines.extend(["", "Relevant Feedback:"])
        lines.extend(_snippet_lines(relevant.feedback, limit))

    return "\n".join(lines)


def build_user_prompt(
    employee: EmployeeProfile,
    okrs: List[ObjectiveSignal],
    feedback: List[FeedbackSignal],
    relevant: RelevantContext,
    options: ReviewGenerationOptions,
    timeframe: Optional[Timeframe] = None
) -> str:
    """
    Build the data-filled user prompt.

    Args:
        employee: Employee being reviewed
        okrs: Objectives in the review window
        feedback: Feedback in the review window
        relevant: Retrieved snippets
        options: Generation options
        timeframe: Review window, shown as the review period when given

    Returns:
        Prompt text
    """
    if timeframe is not None:
        review_period = f"{format_date(timeframe.start_date)} - {format_date(timeframe.end_date)}"
    else:
        review_period = GENERAL_REVIEW_PERIOD

    requirements = []
    if options.focus_areas:
        requirements.append(f"Focus Areas: {', '.join(options.focus_areas)}")
    if options.include_goals:
        requirements.append("Include specific goals for next period")
    if options.include_development_plan:
        requirements.append("Include detailed development plan")

    return USER_PROMPT_TEMPLATE.format(
        name=employee.full_name,
        role=employee.job_title or "Not specified",
        department=employee.department or "Not specified",
        review_period=review_period,
        okr_summary=summarize_okrs(okrs),
        feedback_summary=summarize_feedback(feedback),
        context_summary=summarize_relevant_context(relevant),
        requirements="\n".join(requirements) or "None"
    )


def build_context_query(review_type, focus_areas: Optional[List[str]] = None) -> str:
    """Semantic search query used to retrieve related history."""
    terms = " ".join(focus_areas) if focus_areas else DEFAULT_CONTEXT_QUERY_TERMS
    return f"Performance review {_value(review_type)} {terms}"
