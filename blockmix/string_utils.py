"""
Shared string normalization utilities used across the block generator.

Genre keys and artist keys are compared case-insensitively everywhere; these
helpers keep that comparison in one place.
"""
import unicodedata
from typing import Optional


def normalize_text(text: Optional[str], lowercase: bool = True, strip: bool = True) -> str:
    """
    Normalize text for consistent comparisons.

    Handles Unicode normalization (NFC), optional case folding, and whitespace.

    Args:
        text: Text to normalize
        lowercase: Apply case folding (uses casefold() for better Unicode support)
        strip: Remove leading/trailing whitespace

    Returns:
        Normalized text string
    """
    if text is None:
        return ""

    # NFC so composed and decomposed accents compare equal
    text = unicodedata.normalize('NFC', text)

    if lowercase:
        text = text.casefold()

    if strip:
        text = text.strip()

    return text


def genre_key(genre: Optional[str]) -> str:
    """Case-insensitive lookup key for a genre name ('' for blank genres)."""
    return normalize_text(genre)


def is_blank(value: Optional[str]) -> bool:
    """True for None, empty, or whitespace-only strings."""
    return value is None or not str(value).strip()


def contains_casefold(haystack: Optional[str], needle: str) -> bool:
    """Case-insensitive substring test used by track search."""
    if not haystack:
        return False
    return normalize_text(needle) in normalize_text(haystack)
