"""Upstream API configuration models (AniList, recommendation proxy).

Every limit the two clients enforce is a field here, defaulting to the
values in ``anirec.shared.constants.network``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from anirec.shared.constants import AniListConfig, RecommendationConfig


class AniListSettings(BaseModel):
    """AniList GraphQL API configuration."""

    api_url: str = Field(default=AniListConfig.API_URL, description="GraphQL endpoint")
    timeout: float = Field(
        default=AniListConfig.TIMEOUT,
        gt=0,
        description="Whole-request timeout in seconds",
    )
    queue_delay: float = Field(
        default=AniListConfig.QUEUE_DELAY,
        ge=0,
        description="Pause between two queued calls in seconds",
    )
    max_attempts: int = Field(
        default=AniListConfig.MAX_ATTEMPTS,
        ge=1,
        description="Attempts per call; only HTTP 500 is retried",
    )
    server_error_retry_delay: float = Field(
        default=AniListConfig.SERVER_ERROR_RETRY_DELAY,
        ge=0,
        description="Wait before retrying an HTTP 500 in seconds",
    )
    trending_per_page: int = Field(
        default=AniListConfig.TRENDING_PER_PAGE,
        gt=0,
        le=AniListConfig.MAX_PER_PAGE,
    )
    search_per_page: int = Field(
        default=AniListConfig.SEARCH_PER_PAGE,
        gt=0,
        le=AniListConfig.MAX_PER_PAGE,
    )
    resolve_per_page: int = Field(
        default=AniListConfig.RESOLVE_PER_PAGE,
        gt=0,
        le=AniListConfig.MAX_PER_PAGE,
        description="Search results inspected when resolving one title",
    )
    resolve_batch_size: int = Field(
        default=AniListConfig.RESOLVE_BATCH_SIZE,
        gt=0,
        description="Titles resolved concurrently per batch",
    )


class RecommendationSettings(BaseModel):
    """Recommendation proxy configuration.

    Security: api_key is masked in __repr__ so it never reaches the logs.
    """

    endpoint: str = Field(default=RecommendationConfig.ENDPOINT)
    api_key: str = Field(
        default="",
        repr=False,
        description="Optional bearer token for endpoints that require one",
    )
    model: str = Field(default=RecommendationConfig.MODEL)
    temperature: float = Field(default=RecommendationConfig.TEMPERATURE, ge=0, le=2)
    max_tokens: int = Field(default=RecommendationConfig.MAX_TOKENS, gt=0)
    payload_style: Literal["chat", "prompt"] = Field(
        default=RecommendationConfig.PAYLOAD_CHAT,
        description="'chat' sends model/messages, 'prompt' sends {prompt} only",
    )

    timeout: float = Field(
        default=RecommendationConfig.TIMEOUT,
        gt=0,
        description="Per-attempt timeout in seconds",
    )
    queue_delay: float = Field(default=RecommendationConfig.QUEUE_DELAY, ge=0)
    max_attempts: int = Field(default=RecommendationConfig.MAX_ATTEMPTS, ge=1)
    base_delay: float = Field(default=RecommendationConfig.BASE_DELAY, ge=0)
    backoff_factor: float = Field(default=RecommendationConfig.BACKOFF_FACTOR, ge=1)
    max_delay: float = Field(default=RecommendationConfig.MAX_DELAY, ge=0)
    jitter: float = Field(default=RecommendationConfig.JITTER, ge=0)

    def __repr__(self) -> str:
        masked_key = "****" if self.api_key else "[empty]"
        return (
            f"RecommendationSettings("
            f"endpoint={self.endpoint!r}, "
            f"api_key={masked_key}, "
            f"model={self.model!r}, "
            f"timeout={self.timeout}, "
            f"max_attempts={self.max_attempts})"
        )


class APISettings(BaseModel):
    """Container for the upstream API configurations."""

    anilist: AniListSettings = Field(default_factory=AniListSettings)
    recommendation: RecommendationSettings = Field(default_factory=RecommendationSettings)


__all__ = [
    "APISettings",
    "AniListSettings",
    "RecommendationSettings",
]
