"""
Genre index: groups the track pool by genre, case-insensitively.

Built once per generation request and shared read-only by every block of
that request. Buckets hold references to the caller's Track objects, so a
multi-genre track is the same object in each of its buckets.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Optional

from ..string_utils import genre_key, is_blank
from .models import GenreCount, Track

logger = logging.getLogger(__name__)


class GenreIndex:
    """Mapping of genre (case-insensitive) to the tracks tagged with it."""

    def __init__(self) -> None:
        self._buckets: Dict[str, List[Track]] = {}
        self._display: Dict[str, str] = {}

    @classmethod
    def build(cls, tracks: Iterable[Track]) -> "GenreIndex":
        """Index every non-blank genre of every track, keeping first-seen casing."""
        index = cls()
        track_count = 0
        for track in tracks:
            track_count += 1
            for genre in track.genres:
                index._add(genre, track)

        logger.debug(f"Genre index built: {track_count} tracks, {len(index)} genres")
        return index

    def _add(self, genre: str, track: Track) -> None:
        if is_blank(genre):
            return
        key = genre_key(genre)
        bucket = self._buckets.get(key)
        if bucket is None:
            bucket = self._buckets[key] = []
            self._display[key] = genre
        bucket.append(track)

    def get(self, genre: str) -> List[Track]:
        """Tracks tagged with ``genre`` (any casing); empty list if unknown."""
        return self._buckets.get(genre_key(genre), [])

    def display_name(self, genre: str) -> Optional[str]:
        return self._display.get(genre_key(genre))

    def genres(self) -> List[str]:
        """Display names in first-seen order."""
        return list(self._display.values())

    def genre_counts(self) -> List[GenreCount]:
        """Catalog of genres with track counts, sorted by name."""
        counts = [
            GenreCount(name=self._display[key], track_count=len(bucket))
            for key, bucket in self._buckets.items()
        ]
        counts.sort(key=lambda c: genre_key(c.name))
        return counts

    def __contains__(self, genre: object) -> bool:
        return isinstance(genre, str) and genre_key(genre) in self._buckets

    def __len__(self) -> int:
        return len(self._buckets)

    def __iter__(self) -> Iterator[str]:
        return iter(self.genres())
