"""
Playlist orchestration: runs the block generator once per block.

A full generation shares one used-track set across all blocks so no track
repeats anywhere in the playlist. Remixing a single block skips that set on
purpose: the new block may reuse tracks that sit in other, untouched blocks.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Set, Union

import numpy as np

from ..logging_utils import format_count, stage_timer, truncate_list
from .block_generator import generate_block
from .genre_index import GenreIndex
from .models import BlockResult, BlockSpec, PlaylistResult, Track

logger = logging.getLogger(__name__)

TrackSource = Union[GenreIndex, Iterable[Track]]


def resolve_rng(
    rng: Optional[np.random.Generator] = None,
    random_seed: Optional[int] = None,
) -> np.random.Generator:
    """Use the injected generator, or seed a fresh one (None = OS entropy)."""
    if rng is not None and random_seed is not None:
        raise ValueError("Pass either rng or random_seed, not both")
    if rng is not None:
        return rng
    return np.random.default_rng(random_seed)


def _as_index(source: TrackSource) -> GenreIndex:
    if isinstance(source, GenreIndex):
        return source
    with stage_timer("Genre index build", logger):
        return GenreIndex.build(source)


def per_block_target(total_duration: int, block_count: int) -> int:
    """
    Split the requested duration evenly across blocks.

    Floor division: any remainder is dropped, so the per-block targets may
    add up to slightly less than the requested total.
    """
    if block_count <= 0:
        raise ValueError(f"At least one block is required, got {block_count}")
    if total_duration < 0:
        raise ValueError(f"total_duration must be >= 0, got {total_duration}")
    return total_duration // block_count


def generate_playlist(
    name: str,
    blocks: Sequence[BlockSpec],
    tracks: TrackSource,
    total_duration: int,
    *,
    rng: Optional[np.random.Generator] = None,
    random_seed: Optional[int] = None,
    max_tracks_per_block: int = 0,
) -> PlaylistResult:
    """
    Generate every block of a playlist against one shared genre index.

    Args:
        name: Playlist name, passed through to the result
        blocks: Block specs in playlist order
        tracks: Track pool (already filtered) or a prebuilt GenreIndex
        total_duration: Requested playlist duration in ms
        rng: Injected random source
        random_seed: Seed for a fresh random source when rng is not given
        max_tracks_per_block: Optional per-block track cap (0 = no cap)

    Returns:
        PlaylistResult whose total_duration is the sum of realized block
        durations, not the requested total.

    Raises:
        ValueError: No blocks, negative duration, or both rng and seed given
    """
    target = per_block_target(total_duration, len(blocks))
    generator = resolve_rng(rng, random_seed)
    index = _as_index(tracks)

    remainder = total_duration - target * len(blocks)
    logger.info(
        f"Generating playlist '{name}': {format_count(len(blocks), 'block')}, "
        f"{target}ms per block ({truncate_list([b.name for b in blocks])})"
    )
    if remainder:
        logger.debug(f"Per-block split drops {remainder}ms of the requested {total_duration}ms")

    global_used: Set[str] = set()
    results: List[BlockResult] = []
    for spec in blocks:
        results.append(
            generate_block(
                spec,
                index,
                target,
                rng=generator,
                global_used=global_used,
                max_tracks=max_tracks_per_block,
            )
        )

    playlist = PlaylistResult(
        name=name,
        blocks=tuple(results),
        total_duration=sum(b.total_duration for b in results),
    )
    logger.info(
        f"Playlist '{name}' generated: {format_count(playlist.track_count, 'track')}, "
        f"{playlist.duration_display}"
    )
    return playlist


def remix_block(
    spec: BlockSpec,
    tracks: TrackSource,
    target_duration: int,
    *,
    rng: Optional[np.random.Generator] = None,
    random_seed: Optional[int] = None,
    max_tracks: int = 0,
) -> BlockResult:
    """Regenerate one block in isolation, without cross-block exclusions."""
    if target_duration < 0:
        raise ValueError(f"target_duration must be >= 0, got {target_duration}")
    generator = resolve_rng(rng, random_seed)
    index = _as_index(tracks)

    logger.info(f"Remixing block '{spec.name}' to {target_duration}ms")
    return generate_block(spec, index, target_duration, rng=generator, max_tracks=max_tracks)
