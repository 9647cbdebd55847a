from .models import (
    BlockResult,
    BlockSpec,
    GenreCount,
    PlaylistResult,
    Track,
    TrackPick,
    format_duration,
)
from .genre_index import GenreIndex
from .weighted import genre_for_roll, select_weighted_genre
from .block_generator import generate_block
from .playlist_generator import generate_playlist, per_block_target, remix_block

from . import filtering

__all__ = [
    # Models
    "BlockResult",
    "BlockSpec",
    "GenreCount",
    "PlaylistResult",
    "Track",
    "TrackPick",
    "format_duration",
    # Engine
    "GenreIndex",
    "genre_for_roll",
    "select_weighted_genre",
    "generate_block",
    "generate_playlist",
    "per_block_target",
    "remix_block",
    # Corpus helpers
    "filtering",
]
