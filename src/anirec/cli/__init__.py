"""AniRec command-line interface."""
