"""Application identity, filesystem and cache defaults."""


class Application:
    """Application metadata."""

    NAME = "AniRec"
    VERSION = "0.1.0"
    USER_AGENT = f"AniRec/{VERSION}"


class FileSystem:
    """Configuration file locations."""

    HOME_DIR = ".anirec"
    CONFIG_FILE = "config.toml"
    ENV_FILE = ".env"


class CacheDefaults:
    """In-memory cache limits per upstream."""

    METADATA_TTL = 10 * 60  # 10 minutes
    METADATA_MAX_SIZE = 1000

    RECOMMENDATION_TTL = 24 * 60 * 60  # 24 hours
    RECOMMENDATION_MAX_SIZE = 500
