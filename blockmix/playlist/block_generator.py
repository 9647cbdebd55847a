"""
Block generation: fills one named segment up to a target duration.

Each pick draws a genre by weight, then a track from that genre that has not
been used yet and whose primary artist has not played in the current
diversity window. When a genre runs dry it is marked exhausted for the
block; when every weighted genre is exhausted the window resets (exhausted
genres and artist history are cleared) and selection starts over. A window
that ends without a single pick means the pool is spent and the block is
finished, even if it is shorter than the target.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Set

import numpy as np

from ..artist_utils import artist_diversity_key, display_artist, normalize_artist
from ..string_utils import genre_key, is_blank
from .genre_index import GenreIndex
from .models import UNKNOWN_ALBUM, BlockResult, BlockSpec, Track, TrackPick
from .weighted import select_weighted_genre

logger = logging.getLogger(__name__)


@dataclass
class BlockSession:
    """Ephemeral per-block state; discarded once the block is generated."""
    used_track_ids: Set[str] = field(default_factory=set)
    used_artists: Set[str] = field(default_factory=set)
    exhausted_genres: Set[str] = field(default_factory=set)
    picks_in_window: int = 0
    windows: int = 1
    relaxations: int = 0
    _artist_keys: Dict[str, str] = field(default_factory=dict)

    def artist_key(self, track: Track) -> str:
        key = self._artist_keys.get(track.id)
        if key is None:
            key = self._artist_keys[track.id] = artist_diversity_key(track.artist)
        return key

    def mark_exhausted(self, genre: str) -> None:
        self.exhausted_genres.add(genre_key(genre))

    def start_new_window(self) -> None:
        self.exhausted_genres.clear()
        self.used_artists.clear()
        self.picks_in_window = 0
        self.windows += 1


def available_weights(weights: Mapping[str, int], exhausted: Set[str]) -> Dict[str, int]:
    """Weighted genres still eligible, in declared order."""
    return {
        genre: weight
        for genre, weight in weights.items()
        if weight > 0 and genre_key(genre) not in exhausted
    }


def _filter_candidates(
    bucket: List[Track],
    session: BlockSession,
    global_used: Optional[Set[str]],
    enforce_artist: bool,
) -> List[Track]:
    candidates = []
    for track in bucket:
        if track.id in session.used_track_ids:
            continue
        if global_used is not None and track.id in global_used:
            continue
        if enforce_artist and session.artist_key(track) in session.used_artists:
            continue
        candidates.append(track)
    return candidates


def _make_pick(track: Track, genre: str) -> TrackPick:
    return TrackPick(
        id=track.id,
        name=track.name,
        artist=display_artist(track.artist),
        artist_key=normalize_artist(track.artist),
        album=UNKNOWN_ALBUM if is_blank(track.album) else track.album,
        genre=genre,
        year=track.year,
        duration=track.duration,
    )


def generate_block(
    spec: BlockSpec,
    index: GenreIndex,
    target_duration: int,
    *,
    rng: np.random.Generator,
    global_used: Optional[Set[str]] = None,
    max_tracks: int = 0,
) -> BlockResult:
    """
    Fill one block with weighted, artist-diverse picks.

    Args:
        spec: Block name and ordered genre weights
        index: Genre index for this request (read-only)
        target_duration: Stop once accumulated duration (ms) reaches this
        rng: Random source for genre rolls and track picks
        global_used: Track ids already used elsewhere in the playlist; picks
            are added to it. None when regenerating a block on its own.
        max_tracks: Optional cap on tracks in the block (0 = no cap)

    Returns:
        BlockResult, possibly shorter than the target when the pool runs out.
    """
    if target_duration < 0:
        raise ValueError(f"target_duration must be >= 0, got {target_duration}")

    if spec.total_weight == 0:
        logger.debug(f"Block '{spec.name}': all genre weights are zero, returning empty block")
        return BlockResult(name=spec.name, genre_weights=dict(spec.genre_weights))

    session = BlockSession()
    picks: List[TrackPick] = []
    accumulated = 0

    while accumulated < target_duration:
        if max_tracks and len(picks) >= max_tracks:
            logger.debug(f"Block '{spec.name}': reached track cap of {max_tracks}")
            break

        available = available_weights(spec.genre_weights, session.exhausted_genres)
        if not available:
            if session.picks_in_window == 0:
                logger.debug(f"Block '{spec.name}': genre pool spent after {session.windows} window(s)")
                break
            session.start_new_window()
            available = available_weights(spec.genre_weights, session.exhausted_genres)
            if not available:
                break

        genre = select_weighted_genre(available, sum(available.values()), rng)

        bucket = index.get(genre)
        if not bucket:
            logger.debug(f"Block '{spec.name}': no tracks for genre '{genre}', marking exhausted")
            session.mark_exhausted(genre)
            continue

        candidates = _filter_candidates(bucket, session, global_used, enforce_artist=True)
        if not candidates:
            candidates = _filter_candidates(bucket, session, global_used, enforce_artist=False)
            if candidates:
                session.relaxations += 1

        if not candidates:
            session.mark_exhausted(genre)
            continue

        track = candidates[int(rng.integers(0, len(candidates)))]

        session.used_track_ids.add(track.id)
        if global_used is not None:
            global_used.add(track.id)
        session.used_artists.add(session.artist_key(track))
        session.picks_in_window += 1

        picks.append(_make_pick(track, genre))
        accumulated += track.duration

    logger.debug(
        f"Block '{spec.name}': {len(picks)} tracks, {accumulated}/{target_duration}ms, "
        f"windows={session.windows}, artist relaxations={session.relaxations}"
    )
    if accumulated < target_duration:
        logger.info(f"Block '{spec.name}' under-filled: {accumulated}ms of {target_duration}ms target")

    return BlockResult(
        name=spec.name,
        genre_weights=dict(spec.genre_weights),
        tracks=tuple(picks),
        total_duration=accumulated,
    )
