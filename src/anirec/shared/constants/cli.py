"""CLI command names, help text and exit codes."""

from .system import Application


class CLICommands:
    """Command names."""

    TRENDING = "trending"
    SEARCH = "search"
    DETAILS = "details"
    QUIZ = "quiz"
    SEEDS = "seeds"


class CLIDefaults:
    """Exit codes and output defaults."""

    EXIT_SUCCESS = 0
    EXIT_ERROR = 1
    EXIT_INTERRUPTED = 130

    DESCRIPTION_PREVIEW_LENGTH = 120


class CLIHelp:
    """Help strings."""

    APP_NAME = "anirec"
    APP_DESCRIPTION = (
        f"{Application.NAME} - anime recommendations from a quiz or seed titles, "
        "resolved against AniList"
    )
    VERSION_TEXT = f"{Application.NAME} v{{version}}"

    TRENDING_HELP = "Show currently trending anime."
    SEARCH_HELP = "Search AniList by title."
    DETAILS_HELP = "Show the full record for one AniList media id."
    QUIZ_HELP = "Recommend anime from the five quiz answers."
    SEEDS_HELP = "Recommend anime similar to the given titles."

    CONFIG_HELP = "Path to a TOML configuration file."
    SORT_HELP = "Sort resolved results (score, year, popularity, confidence, model). Defaults to score."
    FILTER_HELP = "Filter resolved results (all, high-score, recent, classic, movie, tv)."
