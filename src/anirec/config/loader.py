"""Settings loader and singleton manager.

This module handles:
- Environment variable loading from .env files (python-dotenv)
- Configuration file loading from TOML
- Thread-safe singleton pattern for the Settings instance
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

import toml
from dotenv import load_dotenv
from pydantic import ValidationError

from anirec.config.models.settings import Settings
from anirec.shared.constants import FileSystem
from anirec.shared.errors import ErrorCode, create_config_error

logger = logging.getLogger(__name__)


class SettingsLoader:
    """Thread-safe singleton manager for Settings.

    Uses double-checked locking so the common path (already loaded) takes
    no lock.
    """

    _instance: Settings | None = None
    _lock: threading.RLock = threading.RLock()

    def get_config(self) -> Settings:
        """Get the global settings instance, loading it on first use."""
        if self._instance is None:
            with self._lock:
                if self._instance is None:
                    self._instance = load_settings()

        return self._instance

    def reload_config(self, config_path: str | Path | None = None) -> Settings:
        """Reload the global settings instance from configuration files."""
        with self._lock:
            self._instance = load_settings(config_path)

        return self._instance

    def set_config(self, settings: Settings) -> None:
        """Replace the global settings instance."""
        with self._lock:
            self._instance = settings


def _load_env_file(env_file: Path | None = None) -> bool:
    """Load variables from a .env file without overriding the environment.

    A missing file is not an error: every setting has a default.

    Returns:
        True if a file was loaded
    """
    env_file = env_file or Path(FileSystem.ENV_FILE)
    if not env_file.is_file():
        return False

    loaded = load_dotenv(env_file, override=False)
    logger.debug("Loaded environment file %s", env_file)
    return loaded


def default_config_paths() -> list[Path]:
    """Locations searched, in order, when no configuration path is given."""
    return [
        Path("config") / FileSystem.CONFIG_FILE,
        Path(FileSystem.CONFIG_FILE),
        Path.home() / FileSystem.HOME_DIR / FileSystem.CONFIG_FILE,
    ]


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from TOML configuration file or environment.

    Args:
        config_path: Optional path to a TOML file. If None, the default
            locations are searched and the first existing file is used;
            with no file at all, settings come from the environment.

    Raises:
        ApplicationError: If the file is missing, unreadable, or invalid
    """
    _load_env_file()

    if config_path is None:
        config_path = next((path for path in default_config_paths() if path.exists()), None)
        if config_path is None:
            return _build_settings(None)

    return _build_settings(Path(config_path))


def _build_settings(config_path: Path | None) -> Settings:
    path_str = str(config_path) if config_path else None
    try:
        if config_path is None:
            return Settings()
        settings = Settings.from_toml_file(config_path)
    except FileNotFoundError as e:
        raise create_config_error(
            f"Configuration file not found: {config_path}",
            config_path=path_str,
            operation="load_settings",
            original_error=e,
            code=ErrorCode.CONFIG_NOT_FOUND,
        ) from e
    except (toml.TomlDecodeError, OSError) as e:
        raise create_config_error(
            f"Failed to read configuration file {config_path}: {e}",
            config_path=path_str,
            operation="load_settings",
            original_error=e,
        ) from e
    except ValidationError as e:
        raise create_config_error(
            f"Invalid configuration: {e.error_count()} validation error(s)",
            config_path=path_str,
            operation="load_settings",
            original_error=e,
            code=ErrorCode.INVALID_CONFIG,
        ) from e

    logger.debug("Loaded configuration from %s", config_path)
    return settings


# Global loader instance
_loader = SettingsLoader()


def get_config() -> Settings:
    """Get the global settings instance (thread-safe)."""
    return _loader.get_config()


def reload_config(config_path: str | Path | None = None) -> Settings:
    """Reload the global settings instance from configuration files."""
    return _loader.reload_config(config_path)


def set_config(settings: Settings) -> None:
    """Install an already-built Settings instance as the global one."""
    _loader.set_config(settings)


__all__ = [
    "SettingsLoader",
    "default_config_paths",
    "get_config",
    "load_settings",
    "reload_config",
    "set_config",
]
