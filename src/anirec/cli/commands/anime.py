"""Metadata commands: trending, search and details.

Each command resolves the AniList client from the container, runs one
client call on a fresh event loop and closes the client before the loop
ends.
"""

from __future__ import annotations

import logging

from rich.console import Console

from anirec.cli.common.context import get_cli_context
from anirec.cli.common.runner import emit_json, run_command
from anirec.cli.rendering import render_media_details, render_media_table
from anirec.containers import container
from anirec.shared.constants import AniListConfig, CLICommands
from anirec.shared.models import MediaDetails, MediaSummary

logger = logging.getLogger(__name__)


async def _fetch_trending(page: int, per_page: int | None) -> list[MediaSummary]:
    client = container.anilist_client()
    try:
        return await client.fetch_trending(page=page, per_page=per_page)
    finally:
        await client.close()


async def _search(term: str, per_page: int | None) -> list[MediaSummary]:
    client = container.anilist_client()
    try:
        return await client.search_by_text(term, per_page=per_page)
    finally:
        await client.close()


async def _fetch_details(media_id: int) -> MediaDetails:
    client = container.anilist_client()
    try:
        return await client.fetch_details(media_id)
    finally:
        await client.close()


def trending_command(page: int = 1, limit: int | None = None) -> None:
    """Print the trending list."""
    media = run_command(CLICommands.TRENDING, lambda: _fetch_trending(page, limit))
    if get_cli_context().is_json_output_enabled():
        emit_json(CLICommands.TRENDING, {"page": page, "results": media})
        return
    render_media_table(Console(), media, title="Trending on AniList")


def search_command(term: str, limit: int | None = None) -> None:
    """Print search results for ``term``."""
    media = run_command(CLICommands.SEARCH, lambda: _search(term, limit))
    warnings = []
    if len(term.strip()) < AniListConfig.MIN_SEARCH_LENGTH:
        warnings.append("Search terms shorter than two characters return no results")

    if get_cli_context().is_json_output_enabled():
        emit_json(CLICommands.SEARCH, {"term": term, "results": media}, warnings)
        return
    for warning in warnings:
        logger.warning(warning)
    render_media_table(Console(), media, title=f"Search: {term}")


def details_command(media_id: int) -> None:
    """Print the full record of one media id."""
    media = run_command(CLICommands.DETAILS, lambda: _fetch_details(media_id))
    if get_cli_context().is_json_output_enabled():
        emit_json(CLICommands.DETAILS, media)
        return
    render_media_details(Console(), media)
