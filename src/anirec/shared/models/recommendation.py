"""Recommendation models shared by the clients, the pipeline and the CLI."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from anirec.shared.constants import ParserRules, QuizDefaults
from anirec.shared.models.media import MediaSummary


class RecommendationSource(str, Enum):
    """Where a title list came from."""

    AI = "ai"
    FALLBACK = "fallback"


class RecommendationKind(str, Enum):
    """Which entry point produced the prompt."""

    QUIZ = "quiz"
    SEEDS = "seeds"


class Confidence(str, Enum):
    """How well a resolved media matches the title it was searched for."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return {"high": 3, "medium": 2, "low": 1}[self.value]


class SortKey(str, Enum):
    SCORE = "score"
    YEAR = "year"
    POPULARITY = "popularity"
    CONFIDENCE = "confidence"
    MODEL = "model"


class ResultFilter(str, Enum):
    ALL = "all"
    HIGH_SCORE = "high-score"
    RECENT = "recent"
    CLASSIC = "classic"
    MOVIE = "movie"
    TV = "tv"


class QuizAnswers(BaseModel):
    """The five quiz answers.

    Slider answers (pace, era) may be given as numbers; they are stored as
    text because they are only ever interpolated into the prompt. Blank
    answers fall back to the quiz defaults.
    """

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    vibe: str = QuizDefaults.VIBE
    pace: str = QuizDefaults.PACE
    era: str = QuizDefaults.ERA
    violence: str = QuizDefaults.VIOLENCE
    focus: str = QuizDefaults.FOCUS

    @field_validator("vibe", "pace", "era", "violence", "focus", mode="before")
    @classmethod
    def _blank_to_default(cls, value: object, info: ValidationInfo) -> object:
        if value is None or (isinstance(value, str) and not value.strip()):
            return cls.model_fields[info.field_name].default
        return value.strip() if isinstance(value, str) else value


class RecommendationResult(BaseModel):
    """Ordered title list produced for one quiz or seed request.

    Titles are in the model's preference order. ``error`` is set only on
    fallback results and describes why the fallback was used.
    """

    model_config = ConfigDict(frozen=True)

    titles: list[str] = Field(max_length=ParserRules.MAX_TITLES)
    source: RecommendationSource
    kind: RecommendationKind
    seed_titles: list[str] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    error: str | None = None

    @property
    def is_fallback(self) -> bool:
        return self.source is RecommendationSource.FALLBACK


class ResolvedRecommendation(BaseModel):
    """A recommended title matched to an AniList media record."""

    model_config = ConfigDict(frozen=True)

    media: MediaSummary
    confidence: Confidence
    search_title: str


class RecommendationReport(BaseModel):
    """Recommendation result joined with its resolved media."""

    model_config = ConfigDict(frozen=True)

    result: RecommendationResult
    items: list[ResolvedRecommendation] = Field(default_factory=list)
    unresolved: list[str] = Field(default_factory=list)


__all__ = [
    "Confidence",
    "QuizAnswers",
    "RecommendationKind",
    "RecommendationReport",
    "RecommendationResult",
    "RecommendationSource",
    "ResolvedRecommendation",
    "ResultFilter",
    "SortKey",
]
