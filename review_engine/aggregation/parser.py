"""
Parsing of model output into the six-field review schema.

Parsing never fails. JSON is tried first, then section extraction keyed on
header words, and any section still missing gets placeholder text. The
ParseSource tag records which tier produced the result.
"""
import logging
import re
from typing import Any, Dict

from review_engine.models import ParsedReview, ParseSource, StructuredReview
from review_engine.utils.helpers import extract_json

logger = logging.getLogger(__name__)

# Each section runs until the next known header or the end of the text
SECTION_PATTERNS = {
    "strengths": re.compile(
        r"strengths[:\s]*(.*?)(?=areas|achievements|goals|development|manager|\Z)",
        re.IGNORECASE | re.DOTALL
    ),
    "areas_for_improvement": re.compile(
        r"areas[:\s]*(.*?)(?=achievements|goals|development|manager|\Z)",
        re.IGNORECASE | re.DOTALL
    ),
    "achievements": re.compile(
        r"achievements[:\s]*(.*?)(?=goals|development|manager|\Z)",
        re.IGNORECASE | re.DOTALL
    ),
    "goals_for_next_period": re.compile(
        r"goals[:\s]*(.*?)(?=development|manager|\Z)",
        re.IGNORECASE | re.DOTALL
    ),
    "development_plan": re.compile(
        r"development[:\s]*(.*?)(?=manager|\Z)",
        re.IGNORECASE | re.DOTALL
    ),
    "manager_comments": re.compile(
        r"manager[:\s]*(.*?)\Z",
        re.IGNORECASE | re.DOTALL
    ),
}

SECTION_LABELS = {
    "strengths": "strengths",
    "areas_for_improvement": "areas for improvement",
    "achievements": "achievements",
    "goals_for_next_period": "goals",
    "development_plan": "development plan",
    "manager_comments": "manager comments",
}


def placeholder_for(field_name: str) -> str:
    return f"Unable to generate {SECTION_LABELS[field_name]} section."


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return "\n".join(_as_text(item) for item in value)
    return str(value)


SCHEMA_KEYS = frozenset(
    key
    for name, field in StructuredReview.model_fields.items()
    for key in (name, field.alias)
)


def is_review_mapping(data: Any) -> bool:
    """A decoded object counts as a review only if it carries a review field."""
    return isinstance(data, dict) and not SCHEMA_KEYS.isdisjoint(data)


def _from_mapping(data: Dict[str, Any]) -> StructuredReview:
    """Missing fields become empty strings; camelCase or snake_case keys both work."""
    fields = {}
    for name, field in StructuredReview.model_fields.items():
        value = data.get(field.alias, data.get(name))
        fields[name] = _as_text(value)
    return StructuredReview(**fields)


def extract_section(text: str, field_name: str) -> str:
    match = SECTION_PATTERNS[field_name].search(text)
    return match.group(1).strip() if match else ""


def parse_ai_response(raw: str) -> ParsedReview:
    """
    Normalise a model response into a StructuredReview.

    Args:
        raw: Raw model output

    Returns:
        ParsedReview tagged STRUCTURED, EXTRACTED or PLACEHOLDER
    """
    data = extract_json(raw or "")
    if is_review_mapping(data):
        return ParsedReview(review=_from_mapping(data), source=ParseSource.STRUCTURED)

    logger.warning("Failed to parse JSON response, using text parsing fallback")

    fields = {}
    extracted_any = False
    for field_name in SECTION_PATTERNS:
        section = extract_section(raw or "", field_name)
        if section:
            extracted_any = True
            fields[field_name] = section
        else:
            fields[field_name] = placeholder_for(field_name)

    source = ParseSource.EXTRACTED if extracted_any else ParseSource.PLACEHOLDER
    return ParsedReview(review=StructuredReview(**fields), source=source)
