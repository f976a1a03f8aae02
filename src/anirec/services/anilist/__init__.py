"""AniList metadata client, GraphQL queries and title matching."""

from anirec.services.anilist.anilist_client import AniListClient, metadata_retry_policy
from anirec.services.anilist.matching import select_best_match

__all__ = ["AniListClient", "metadata_retry_policy", "select_best_match"]
