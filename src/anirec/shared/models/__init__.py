"""Data models for AniList media and recommendation results."""

from .media import (
    Character,
    CoverImage,
    ExternalLink,
    FuzzyDate,
    MediaDetails,
    MediaSummary,
    MediaTitle,
    RelatedMedia,
    Studio,
    Trailer,
)
from .recommendation import (
    Confidence,
    QuizAnswers,
    RecommendationKind,
    RecommendationReport,
    RecommendationResult,
    RecommendationSource,
    ResolvedRecommendation,
    ResultFilter,
    SortKey,
)

__all__ = [
    "Character",
    "Confidence",
    "CoverImage",
    "ExternalLink",
    "FuzzyDate",
    "MediaDetails",
    "MediaSummary",
    "MediaTitle",
    "QuizAnswers",
    "RecommendationKind",
    "RecommendationReport",
    "RecommendationResult",
    "RecommendationSource",
    "RelatedMedia",
    "ResolvedRecommendation",
    "ResultFilter",
    "SortKey",
    "Studio",
    "Trailer",
]
