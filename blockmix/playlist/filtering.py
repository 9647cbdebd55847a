"""
Corpus filtering and lookup ahead of generation.

The engine expects an already-filtered pool; these helpers narrow a library
snapshot by genre and release year, and search it by text for hand-picked
additions.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from ..string_utils import contains_casefold, genre_key, is_blank
from .models import Track

logger = logging.getLogger(__name__)


def filter_by_genres(
    *,
    tracks: Sequence[Track],
    genres: Optional[Iterable[str]],
) -> List[Track]:
    """
    Keep tracks tagged with at least one of ``genres`` (case-insensitive).

    An empty or None genre list disables the filter.
    """
    wanted = {genre_key(g) for g in (genres or ()) if not is_blank(g)}
    if not wanted:
        return list(tracks)

    filtered = [t for t in tracks if any(genre_key(g) in wanted for g in t.genres)]
    logger.debug(f"Genre filter: {len(tracks)} -> {len(filtered)} tracks ({len(wanted)} genres)")
    return filtered


def filter_by_year(
    *,
    tracks: Sequence[Track],
    year_start: Optional[int] = None,
    year_end: Optional[int] = None,
) -> List[Track]:
    """
    Keep tracks released within [year_start, year_end] (inclusive).

    Tracks without a year are dropped whenever either bound is set.
    """
    if year_start is None and year_end is None:
        return list(tracks)
    if year_start is not None and year_end is not None and year_start > year_end:
        raise ValueError(f"year_start {year_start} is after year_end {year_end}")

    def _in_range(track: Track) -> bool:
        if track.year is None:
            return False
        if year_start is not None and track.year < year_start:
            return False
        if year_end is not None and track.year > year_end:
            return False
        return True

    filtered = [t for t in tracks if _in_range(t)]
    logger.debug(f"Year filter: {len(tracks)} -> {len(filtered)} tracks ({year_start}-{year_end})")
    return filtered


def filter_tracks(
    tracks: Sequence[Track],
    *,
    genres: Optional[Iterable[str]] = None,
    year_start: Optional[int] = None,
    year_end: Optional[int] = None,
) -> List[Track]:
    """Apply the genre and year filters in one pass over the library snapshot."""
    filtered = filter_by_genres(tracks=tracks, genres=genres)
    filtered = filter_by_year(tracks=filtered, year_start=year_start, year_end=year_end)
    logger.info(f"Track pool: {len(filtered)} of {len(tracks)} library tracks after filters")
    return filtered


def search_tracks(
    tracks: Sequence[Track],
    *,
    query: Optional[str] = None,
    artist: Optional[str] = None,
    limit: int = 20,
) -> List[Track]:
    """
    Text search over the library snapshot.

    ``query`` matches name, artist or album; ``artist`` matches the artist
    credit only. Both are case-insensitive substrings. Results keep library
    order and stop at ``limit``.
    """
    if limit <= 0:
        return []

    results: List[Track] = []
    for track in tracks:
        if query and not (
            contains_casefold(track.name, query)
            or contains_casefold(track.artist, query)
            or contains_casefold(track.album, query)
        ):
            continue
        if artist and not contains_casefold(track.artist, artist):
            continue
        results.append(track)
        if len(results) >= limit:
            break
    return results
