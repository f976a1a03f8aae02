"""AniRec - anime recommendation core.

Turns quiz answers or seed titles into a language-model prompt, parses the
answer into a title list and resolves the titles against AniList.
"""

from anirec.shared.constants import Application

__version__ = Application.VERSION

__all__ = ["__version__"]
