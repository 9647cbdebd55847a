"""
Artist credit normalization for diversity checks.

Collapses collaborator and featured-artist credits to the primary artist so
"Artist A feat. Artist B" and "Artist A" count as the same artist.
"""
import re
from typing import List, Optional

from .string_utils import is_blank, normalize_text

UNKNOWN_ARTIST = "Unknown Artist"

# Order matters: each separator is applied to the result of the previous one.
ARTIST_SEPARATORS: List[str] = [
    " and ",
    " & ",
    " feat. ",
    " feat ",
    " featuring ",
    " with ",
    " vs ",
    " vs. ",
    ", ",
]

_SEPARATOR_PATTERNS: List[re.Pattern] = [
    re.compile(re.escape(sep), flags=re.IGNORECASE) for sep in ARTIST_SEPARATORS
]
_LEADING_THE = re.compile(r"^the ", flags=re.IGNORECASE)


def normalize_artist(artist: Optional[str]) -> str:
    """
    Reduce a raw artist credit to its primary artist.

    Examples:
        "The Beatles"              -> "Beatles"
        "Artist A feat. Artist B"  -> "Artist A"
        "DJ A & DJ B"              -> "DJ A"
        ""                         -> "Unknown Artist"

    Only separators found after the first character truncate the credit, so
    a credit that starts with a separator phrase is left alone.
    """
    if is_blank(artist):
        return UNKNOWN_ARTIST

    normalized = artist.strip()

    for pattern in _SEPARATOR_PATTERNS:
        match = pattern.search(normalized)
        if match and match.start() > 0:
            normalized = normalized[:match.start()].strip()

    if _LEADING_THE.match(normalized):
        normalized = normalized[4:]

    return normalized


def artist_diversity_key(artist: Optional[str]) -> str:
    """Casefolded normalized artist, the key held in a block's diversity set."""
    return normalize_text(normalize_artist(artist))


def display_artist(artist: Optional[str]) -> str:
    """Raw credit for display, or the unknown-artist placeholder."""
    if is_blank(artist):
        return UNKNOWN_ARTIST
    return artist.strip()
