"""
Unit tests for model response parsing.
"""
import json

from review_engine.aggregation.parser import parse_ai_response, placeholder_for
from review_engine.models import ParseSource, StructuredReview
from factories import review_json

FIELDS = list(StructuredReview.model_fields)


def test_round_trip_of_valid_review():
    review = StructuredReview(
        strengths="Clear communicator",
        areas_for_improvement="Delegation",
        achievements="Shipped the billing service",
        goals_for_next_period="Lead the migration",
        development_plan="Mentoring program",
        manager_comments="Strong year"
    )

    parsed = parse_ai_response(review.model_dump_json(by_alias=True))

    assert parsed.review == review
    assert parsed.source == ParseSource.STRUCTURED


def test_missing_fields_become_empty_strings():
    parsed = parse_ai_response('{"strengths":"X"}')

    assert parsed.source == ParseSource.STRUCTURED
    assert parsed.review.strengths == "X"
    for field in FIELDS[1:]:
        assert getattr(parsed.review, field) == ""


def test_json_wrapped_in_markdown_fence():
    raw = f"Here is the review:\n```json\n{review_json()}\n```"

    parsed = parse_ai_response(raw)

    assert parsed.source == ParseSource.STRUCTURED
    assert parsed.review.achievements == "Shipped the billing service"


def test_list_values_are_joined_into_text():
    parsed = parse_ai_response(json.dumps({"strengths": ["Focus", "Ownership"]}))

    assert parsed.review.strengths == "Focus\nOwnership"


def test_snake_case_keys_are_accepted():
    parsed = parse_ai_response(json.dumps({"development_plan": "Conference talk"}))

    assert parsed.review.development_plan == "Conference talk"


def test_plain_text_without_sections_uses_placeholders():
    parsed = parse_ai_response("not json")

    assert parsed.source == ParseSource.PLACEHOLDER
    for field in FIELDS:
        assert getattr(parsed.review, field) == placeholder_for(field)


def test_empty_response_uses_placeholders():
    parsed = parse_ai_response("")

    assert parsed.source == ParseSource.PLACEHOLDER
    assert parsed.review.strengths == "Unable to generate strengths section."


def test_sections_extracted_from_headed_text():
    raw = (
        "Strengths: Great communicator.\n"
        "Areas for improvement: Delegation.\n"
        "Achievements: Shipped v2.\n"
        "Goals: Lead the platform team.\n"
        "Development plan: Attend leadership course.\n"
        "Manager comments: Keep it up."
    )

    parsed = parse_ai_response(raw)

    assert parsed.source == ParseSource.EXTRACTED
    assert parsed.review.strengths == "Great communicator."
    assert "Delegation." in parsed.review.areas_for_improvement
    assert parsed.review.achievements == "Shipped v2."
    assert parsed.review.goals_for_next_period == "Lead the platform team."
    assert "Attend leadership course." in parsed.review.development_plan
    assert "Keep it up." in parsed.review.manager_comments


def test_partial_sections_fill_the_rest_with_placeholders():
    parsed = parse_ai_response("STRENGTHS: Reliable delivery under pressure.")

    assert parsed.source == ParseSource.EXTRACTED
    assert parsed.review.strengths == "Reliable delivery under pressure."
    assert parsed.review.achievements == placeholder_for("achievements")
    assert parsed.review.manager_comments == placeholder_for("manager_comments")


def test_json_array_falls_back_to_text_extraction():
    parsed = parse_ai_response('["strengths", "areas"]')

    assert parsed.source in (ParseSource.EXTRACTED, ParseSource.PLACEHOLDER)
    for field in FIELDS:
        assert getattr(parsed.review, field)


def test_inline_json_fragment_in_prose_is_not_a_review():
    raw = (
        'Strengths: Tuned the retry config to {"retries": 3} and cut errors.\n'
        "Areas for improvement: Delegation.\n"
        "Achievements: Shipped billing.\n"
    )

    parsed = parse_ai_response(raw)

    assert parsed.source == ParseSource.EXTRACTED
    assert parsed.review.strengths == 'Tuned the retry config to {"retries": 3} and cut errors.'
    assert parsed.review.achievements == "Shipped billing."
    assert parsed.review.manager_comments == placeholder_for("manager_comments")


def test_object_without_review_fields_uses_placeholders():
    parsed = parse_ai_response('{"retries": 3}')

    assert parsed.source == ParseSource.PLACEHOLDER
    assert parsed.review.strengths == placeholder_for("strengths")
