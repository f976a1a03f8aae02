"""AniRec configuration: pydantic-settings models and the global loader."""

from anirec.config.loader import get_config, load_settings, reload_config, set_config
from anirec.config.models import (
    AniListSettings,
    APISettings,
    AppSettings,
    CachePolicy,
    CacheSettings,
    LoggingSettings,
    RecommendationSettings,
    Settings,
)

__all__ = [
    "APISettings",
    "AniListSettings",
    "AppSettings",
    "CachePolicy",
    "CacheSettings",
    "LoggingSettings",
    "RecommendationSettings",
    "Settings",
    "get_config",
    "load_settings",
    "reload_config",
    "set_config",
]
