"""Application and logging configuration models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from anirec.shared.constants import Application


class AppSettings(BaseModel):
    """Application identity and debug flag."""

    name: str = Field(default=Application.NAME)
    version: str = Field(default=Application.VERSION)
    debug: bool = Field(default=False, description="Enable debug mode")


class LoggingSettings(BaseModel):
    """Logging configuration.

    ``file`` enables an additional JSON-lines log file; ``rich_console``
    selects the Rich console handler over plain JSON lines on stderr.
    """

    level: str = Field(default="WARNING", description="Logging level")
    file: str | None = Field(default=None, description="Optional log file path")
    rich_console: bool = Field(default=True)


__all__ = ["AppSettings", "LoggingSettings"]
