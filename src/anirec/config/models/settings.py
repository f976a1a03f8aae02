"""AniRec Settings Configuration Model.

Main Settings class consolidating all configuration domains. Values come
from, in increasing priority: model defaults, ``ANIREC_`` environment
variables (nested with ``__``), keys present in a TOML file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import toml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from anirec.config.models.api_settings import APISettings
from anirec.config.models.app_settings import AppSettings, LoggingSettings
from anirec.config.models.cache_settings import CacheSettings


class Settings(BaseSettings):
    """Unified configuration facade."""

    model_config = SettingsConfigDict(
        env_prefix="ANIREC_",
        env_nested_delimiter="__",
        env_ignore_empty=True,
        extra="ignore",
    )

    app: AppSettings = Field(default_factory=AppSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    api: APISettings = Field(default_factory=APISettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)

    @classmethod
    def from_toml_file(cls, file_path: str | Path) -> Settings:
        """Load settings from a TOML file.

        Keys present in the file take precedence over environment variables;
        everything else is still read from the environment.

        Raises:
            FileNotFoundError: If the file does not exist
            toml.TomlDecodeError: If the file is not valid TOML
        """
        file_path = Path(file_path)
        if not file_path.exists():
            msg = f"Configuration file not found: {file_path}"
            raise FileNotFoundError(msg)

        raw_config: dict[str, Any] = toml.load(file_path)
        return cls(**raw_config)

    def to_toml_file(self, file_path: str | Path) -> None:
        """Save settings to a TOML file, creating parent directories."""
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = self.model_dump(exclude_none=True)

        with open(file_path, "w", encoding="utf-8") as f:
            toml.dump(config_dict, f)
