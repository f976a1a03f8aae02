"""Command implementations called by the Typer app."""
