"""Recommendation client: prompts, response extraction and parsing."""

from anirec.services.recommendation.extractors import (
    RESPONSE_EXTRACTORS,
    ResponseExtractor,
    extract_response_text,
)
from anirec.services.recommendation.parser import (
    ParsedTitles,
    fallback_titles,
    parse_recommendation_text,
    split_titles,
)
from anirec.services.recommendation.prompts import (
    build_quiz_prompt,
    build_request_body,
    build_seed_prompt,
    seed_display_title,
    seed_titles,
)
from anirec.services.recommendation.recommendation_client import (
    RecommendationClient,
    recommendation_retry_policy,
)

__all__ = [
    "RESPONSE_EXTRACTORS",
    "ParsedTitles",
    "RecommendationClient",
    "ResponseExtractor",
    "build_quiz_prompt",
    "build_request_body",
    "build_seed_prompt",
    "extract_response_text",
    "fallback_titles",
    "parse_recommendation_text",
    "recommendation_retry_policy",
    "seed_display_title",
    "seed_titles",
    "split_titles",
]
