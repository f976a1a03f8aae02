"""AniList media models.

Pydantic models mirroring the fields AniRec requests from the AniList
GraphQL API. Field names are snake_case in Python and validated from the
camelCase keys AniList returns. Connection fields (``studios``,
``characters``, ``relations``) arrive wrapped in ``{"nodes": [...]}`` and are
unwrapped during validation.

Every model is frozen: a record is a snapshot of one upstream response.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class _AniListModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


def _unwrap_nodes(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, dict):
        return value.get("nodes") or []
    return value


class MediaTitle(_AniListModel):
    """Title in the three scripts AniList stores."""

    romaji: str | None = None
    english: str | None = None
    native: str | None = None

    @property
    def display_title(self) -> str:
        """English title, else romaji, else native, else an empty string."""
        return self.english or self.romaji or self.native or ""

    def contains(self, query: str) -> bool:
        """Case-insensitive substring test against the romaji and english titles."""
        needle = query.casefold()
        return any(
            needle in candidate.casefold()
            for candidate in (self.romaji, self.english)
            if candidate
        )


class CoverImage(_AniListModel):
    large: str | None = None
    medium: str | None = None


class FuzzyDate(_AniListModel):
    year: int | None = None
    month: int | None = None
    day: int | None = None


class Studio(_AniListModel):
    name: str


class Character(_AniListModel):
    """Character node flattened from ``{name: {full}, image: {medium}}``."""

    name: str | None = None
    image: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _flatten(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        flattened = dict(data)
        if isinstance(flattened.get("name"), dict):
            flattened["name"] = flattened["name"].get("full")
        if isinstance(flattened.get("image"), dict):
            flattened["image"] = flattened["image"].get("medium")
        return flattened


class RelatedMedia(_AniListModel):
    id: int
    title: MediaTitle = Field(default_factory=MediaTitle)
    cover_image: CoverImage | None = None
    format: str | None = None


class ExternalLink(_AniListModel):
    url: str
    site: str | None = None


class Trailer(_AniListModel):
    id: str | None = None
    site: str | None = None


class MediaSummary(_AniListModel):
    """Media record returned by the trending and search queries."""

    id: int
    title: MediaTitle = Field(default_factory=MediaTitle)
    description: str | None = None
    cover_image: CoverImage | None = None
    mean_score: int | None = Field(default=None, ge=0, le=100)
    genres: list[str] = Field(default_factory=list)
    format: str | None = None
    episodes: int | None = None
    start_date: FuzzyDate | None = None
    status: str | None = None
    popularity: int | None = None

    @field_validator("genres", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def display_title(self) -> str:
        return self.title.display_title

    @property
    def start_year(self) -> int | None:
        return self.start_date.year if self.start_date else None


class MediaDetails(MediaSummary):
    """Full media record returned by the details query."""

    banner_image: str | None = None
    duration: int | None = None
    end_date: FuzzyDate | None = None
    season: str | None = None
    studios: list[Studio] = Field(default_factory=list)
    characters: list[Character] = Field(default_factory=list)
    relations: list[RelatedMedia] = Field(default_factory=list)
    external_links: list[ExternalLink] = Field(default_factory=list)
    trailer: Trailer | None = None
    favourites: int | None = None

    @field_validator("studios", "characters", "relations", mode="before")
    @classmethod
    def _unwrap_connection(cls, value: Any) -> Any:
        return _unwrap_nodes(value)

    @field_validator("external_links", mode="before")
    @classmethod
    def _links_none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value


__all__ = [
    "Character",
    "CoverImage",
    "ExternalLink",
    "FuzzyDate",
    "MediaDetails",
    "MediaSummary",
    "MediaTitle",
    "RelatedMedia",
    "Studio",
    "Trailer",
]
