"""Configuration domain models."""

from __future__ import annotations

from .api_settings import AniListSettings, APISettings, RecommendationSettings
from .app_settings import AppSettings, LoggingSettings
from .cache_settings import CachePolicy, CacheSettings, MetadataCachePolicy, RecommendationCachePolicy
from .settings import Settings

__all__ = [
    "APISettings",
    "AniListSettings",
    "AppSettings",
    "CachePolicy",
    "CacheSettings",
    "LoggingSettings",
    "MetadataCachePolicy",
    "RecommendationCachePolicy",
    "RecommendationSettings",
    "Settings",
]
