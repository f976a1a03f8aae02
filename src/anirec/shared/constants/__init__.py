"""
AniRec Constants Module

Centralized constants for AniRec. Defaults for every tunable limit live
here and are surfaced as settings in ``anirec.config``.
"""

from .cli import CLICommands, CLIDefaults, CLIHelp
from .http_codes import ContentTypes, HTTPHeaders, HTTPStatusCodes
from .network import AniListConfig, RecommendationConfig
from .recommendation import (
    FallbackTitles,
    ParserRules,
    Prompts,
    QuizDefaults,
    ResultThresholds,
)
from .system import Application, CacheDefaults, FileSystem

__all__ = [
    "AniListConfig",
    "Application",
    "CLICommands",
    "CLIDefaults",
    "CLIHelp",
    "CacheDefaults",
    "ContentTypes",
    "FallbackTitles",
    "FileSystem",
    "HTTPHeaders",
    "HTTPStatusCodes",
    "ParserRules",
    "Prompts",
    "QuizDefaults",
    "RecommendationConfig",
    "ResultThresholds",
]
