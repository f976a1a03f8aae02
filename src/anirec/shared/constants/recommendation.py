"""
Recommendation Constants

Prompt templates, parser rules and the static fallback lists returned when
the recommendation upstream cannot produce a usable answer.
"""

from typing import ClassVar


class Prompts:
    """Prompt templates sent to the language model."""

    SYSTEM = (
        "Recommend 10-12 anime titles based on user preferences. "
        "Return ONLY a comma-separated list of English titles.\n\n"
        "Format: Title1, Title2, Title3, etc."
    )
    QUIZ = "Genre: {vibe}, Pace: {pace}, Era: {era}, Violence: {violence}, Focus: {focus}"
    SEEDS = "Recommend anime similar to: {titles}"
    SEED_SEPARATOR = ", "


class QuizDefaults:
    """Answers substituted for quiz questions left blank."""

    VIBE = "Mixed"
    PACE = "Medium"
    ERA = "Any"
    VIOLENCE = "Medium"
    FOCUS = "Balanced"


class ParserRules:
    """Rules for turning free-form model text into a title list."""

    # Kept candidates satisfy MIN_LENGTH < len(candidate) < MAX_LENGTH
    MIN_LENGTH = 2
    MAX_LENGTH = 50

    MAX_TITLES = 12
    MIN_TITLES = 5

    # Lower-case fragments marking conversational filler lines
    FILLER_WORDS: ClassVar[tuple[str, ...]] = ("here", "based", "recommend")


class FallbackTitles:
    """Static lists returned instead of model output."""

    QUIZ: ClassVar[tuple[str, ...]] = (
        "Attack on Titan",
        "Demon Slayer",
        "My Hero Academia",
        "Death Note",
        "One Punch Man",
        "Mob Psycho 100",
        "Jujutsu Kaisen",
        "Spirited Away",
        "Your Name",
        "Weathering with You",
        "A Silent Voice",
        "Princess Mononoke",
    )

    SEEDS: ClassVar[tuple[str, ...]] = (
        "Attack on Titan",
        "Demon Slayer",
        "Jujutsu Kaisen",
        "My Hero Academia",
        "One Piece",
        "Naruto",
        "Dragon Ball Super",
        "Hunter x Hunter",
        "Fullmetal Alchemist Brotherhood",
        "Death Note",
        "One Punch Man",
        "Mob Psycho 100",
    )


class ResultThresholds:
    """Cut-offs used by the result filters."""

    HIGH_SCORE = 80
    RECENT_YEAR = 2020
    CLASSIC_YEAR = 2010
