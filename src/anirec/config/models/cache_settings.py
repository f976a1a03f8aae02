"""Cache configuration models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from anirec.shared.constants import CacheDefaults


class CachePolicy(BaseModel):
    """Limits for one in-memory TTL cache."""

    ttl: float = Field(gt=0, description="Entry lifetime in seconds")
    max_size: int = Field(gt=0, description="Maximum number of entries")


class MetadataCachePolicy(CachePolicy):
    """AniList response cache."""

    ttl: float = Field(default=CacheDefaults.METADATA_TTL, gt=0)
    max_size: int = Field(default=CacheDefaults.METADATA_MAX_SIZE, gt=0)


class RecommendationCachePolicy(CachePolicy):
    """Recommendation result cache."""

    ttl: float = Field(default=CacheDefaults.RECOMMENDATION_TTL, gt=0)
    max_size: int = Field(default=CacheDefaults.RECOMMENDATION_MAX_SIZE, gt=0)


class CacheSettings(BaseModel):
    """One cache per upstream."""

    metadata: MetadataCachePolicy = Field(default_factory=MetadataCachePolicy)
    recommendation: RecommendationCachePolicy = Field(default_factory=RecommendationCachePolicy)


__all__ = ["CachePolicy", "CacheSettings", "MetadataCachePolicy", "RecommendationCachePolicy"]
