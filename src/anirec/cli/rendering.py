"""Rich renderings of media records and recommendation reports."""

from __future__ import annotations

import re
from collections.abc import Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from anirec.shared.constants import CLIDefaults
from anirec.shared.models import MediaDetails, MediaSummary, RecommendationReport

_TAGS = re.compile(r"<[^>]+>")


def _plain_description(text: str | None, limit: int | None = None) -> str:
    plain = " ".join(_TAGS.sub(" ", text or "").split())
    if limit is not None and len(plain) > limit:
        return plain[: limit - 3].rstrip() + "..."
    return plain


def _optional(value: object) -> str:
    return "-" if value is None else escape(str(value))


def render_media_table(console: Console, media: Sequence[MediaSummary], title: str) -> None:
    """One row per media record, in the order given."""
    if not media:
        console.print(f"[yellow]{escape(title)}: no results[/yellow]")
        return

    table = Table(title=escape(title), show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Title", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Year", justify="right")
    table.add_column("Format")
    table.add_column("Episodes", justify="right")
    table.add_column("Genres", style="green")

    for item in media:
        table.add_row(
            str(item.id),
            escape(item.display_title),
            _optional(item.mean_score),
            _optional(item.start_year),
            _optional(item.format),
            _optional(item.episodes),
            escape(", ".join(item.genres[:3])),
        )

    console.print(table)


def render_media_details(console: Console, media: MediaDetails) -> None:
    """Details panel followed by characters and relations tables."""
    lines = [
        f"[bold]{escape(media.display_title)}[/bold]",
    ]
    if media.title.native:
        lines.append(f"[dim]{escape(media.title.native)}[/dim]")
    lines.append("")
    lines.append(
        f"Score: {_optional(media.mean_score)}  "
        f"Format: {_optional(media.format)}  "
        f"Episodes: {_optional(media.episodes)}  "
        f"Status: {_optional(media.status)}",
    )
    season = " ".join(str(part) for part in (media.season, media.start_year) if part)
    if season:
        lines.append(f"Season: {season}")
    if media.genres:
        lines.append(f"Genres: {escape(', '.join(media.genres))}")
    if media.studios:
        lines.append(f"Studios: {escape(', '.join(studio.name for studio in media.studios))}")
    description = _plain_description(media.description)
    if description:
        lines.extend(["", escape(description)])

    console.print(Panel("\n".join(lines), title=f"AniList #{media.id}", expand=False))

    if media.characters:
        characters = Table(title="Characters", show_header=False)
        characters.add_column("Name", style="cyan")
        for character in media.characters:
            characters.add_row(_optional(character.name))
        console.print(characters)

    if media.relations:
        relations = Table(title="Related", header_style="bold magenta")
        relations.add_column("ID", style="dim", justify="right")
        relations.add_column("Title", style="cyan")
        relations.add_column("Format")
        for related in media.relations:
            relations.add_row(str(related.id), escape(related.title.display_title), _optional(related.format))
        console.print(relations)

    for link in media.external_links:
        console.print(f"[blue]{_optional(link.site)}[/blue]: {escape(link.url)}")


def render_report(console: Console, report: RecommendationReport) -> None:
    """Resolved recommendations, with a notice when the fallback list was used."""
    result = report.result
    if result.is_fallback:
        console.print(
            f"[yellow]Showing fallback recommendations ({escape(result.error or 'no model answer')})[/yellow]",
        )
    if result.seed_titles:
        console.print(f"[dim]Seeds: {escape(', '.join(result.seed_titles))}[/dim]")

    if not report.items:
        console.print("[yellow]No recommendations could be resolved on AniList[/yellow]")
    else:
        table = Table(
            title=f"Recommendations ({result.source.value})",
            show_header=True,
            header_style="bold magenta",
        )
        table.add_column("#", style="dim", justify="right")
        table.add_column("Title", style="cyan")
        table.add_column("Score", justify="right")
        table.add_column("Year", justify="right")
        table.add_column("Format")
        table.add_column("Match")
        table.add_column("Description")

        for position, item in enumerate(report.items, start=1):
            media = item.media
            table.add_row(
                str(position),
                escape(media.display_title),
                _optional(media.mean_score),
                _optional(media.start_year),
                _optional(media.format),
                item.confidence.value,
                escape(_plain_description(media.description, CLIDefaults.DESCRIPTION_PREVIEW_LENGTH)),
            )
        console.print(table)

    if report.unresolved:
        console.print(f"[dim]Not found on AniList: {escape(', '.join(report.unresolved))}[/dim]")
