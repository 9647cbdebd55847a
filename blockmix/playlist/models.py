"""
Typed containers for tracks, block specs and generation results.

Tracks are read-only inputs owned by the host library. Results are frozen
once a block has been generated so they can be handed to an exporter or
serialized without defensive copies.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..string_utils import is_blank

UNKNOWN_ALBUM = "Unknown Album"


def format_duration(duration_ms: int, with_hours: bool = True) -> str:
    """
    Render a millisecond duration for listings.

    with_hours=True gives "h:mm:ss" (blocks, playlists), otherwise "m:ss"
    (single tracks; minutes are not wrapped at 60).
    """
    total_seconds = max(0, int(duration_ms or 0)) // 1000
    minutes, seconds = divmod(total_seconds, 60)
    if not with_hours:
        return f"{minutes}:{seconds:02d}"
    hours, minutes = divmod(minutes, 60)
    return f"{hours}:{minutes:02d}:{seconds:02d}"


@dataclass(frozen=True)
class Track:
    """A single library track. ``duration`` is in milliseconds."""
    id: str
    name: str
    artist: str = ""
    album: str = ""
    genres: Tuple[str, ...] = ()
    year: Optional[int] = None
    duration: int = 0
    file_path: Optional[str] = None

    def __post_init__(self):
        if self.duration is None or int(self.duration) < 0:
            raise ValueError(f"Track {self.id!r} has invalid duration {self.duration!r}")
        if not isinstance(self.genres, tuple):
            object.__setattr__(self, "genres", tuple(self.genres or ()))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Track":
        """
        Build a Track from a host library record.

        Accepts ``title`` as an alias for ``name``, ``duration_ms`` as an
        alias for ``duration``, and genres either as a list or as a single
        ``;``-separated string.
        """
        if data.get("id") is None:
            raise ValueError("Track record is missing 'id'")

        for key in ("name", "title", "artist", "album", "file_path"):
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"Track {data['id']!r}: '{key}' must be a string, got {value!r}")

        genres = data.get("genres", data.get("genre")) or ()
        if isinstance(genres, str):
            genres = [g.strip() for g in genres.split(";")]
        elif not isinstance(genres, (list, tuple)):
            raise ValueError(f"Track {data['id']!r}: genres must be a list or string, got {genres!r}")
        for genre in genres:
            if not isinstance(genre, str):
                raise ValueError(f"Track {data['id']!r}: genre {genre!r} is not a string")
        genres = tuple(g for g in genres if not is_blank(g))

        year = data.get("year")
        duration = data.get("duration_ms", data.get("duration")) or 0

        return cls(
            id=str(data["id"]),
            name=data.get("name") or data.get("title") or "",
            artist=data.get("artist") or "",
            album=data.get("album") or "",
            genres=genres,
            year=int(year) if year not in (None, "") else None,
            duration=int(duration),
            file_path=data.get("file_path"),
        )

    @property
    def duration_display(self) -> str:
        return format_duration(self.duration, with_hours=False)


@dataclass(frozen=True)
class TrackPick:
    """A track as placed in a block, tagged with the genre it was drawn under."""
    id: str
    name: str
    artist: str
    artist_key: str
    album: str
    genre: str
    year: Optional[int]
    duration: int

    @property
    def duration_display(self) -> str:
        return format_duration(self.duration, with_hours=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "artist": self.artist,
            "artist_key": self.artist_key,
            "album": self.album,
            "genre": self.genre,
            "year": self.year,
            "duration": self.duration,
            "duration_display": self.duration_display,
        }


@dataclass(frozen=True)
class BlockSpec:
    """
    One named segment request.

    ``genre_weights`` keeps its declared order; that order is the tie-break
    for weighted selection, so it must never be re-sorted.
    """
    name: str
    genre_weights: Dict[str, int] = field(default_factory=dict)

    def __post_init__(self):
        weights = dict(self.genre_weights or {})
        for genre, weight in weights.items():
            if isinstance(weight, bool) or not isinstance(weight, int):
                raise ValueError(f"Block {self.name!r}: weight for {genre!r} must be an integer, got {weight!r}")
            if weight < 0:
                raise ValueError(f"Block {self.name!r}: weight for {genre!r} must be >= 0, got {weight}")
        object.__setattr__(self, "genre_weights", weights)

    @property
    def total_weight(self) -> int:
        return sum(self.genre_weights.values())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BlockSpec":
        weights = data.get("genre_weights") or {}
        if isinstance(weights, list):
            # [{"genre": "Rock", "weight": 50}, ...] as stored by the host
            weights = {item["genre"]: item["weight"] for item in weights}
        return cls(name=str(data.get("name") or ""), genre_weights=dict(weights))

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "genre_weights": dict(self.genre_weights)}


@dataclass(frozen=True)
class BlockResult:
    """Output of one block generation run; tracks are in selection order."""
    name: str
    genre_weights: Dict[str, int]
    tracks: Tuple[TrackPick, ...] = ()
    total_duration: int = 0

    @property
    def track_ids(self) -> List[str]:
        return [t.id for t in self.tracks]

    @property
    def duration_display(self) -> str:
        return format_duration(self.total_duration)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "genre_weights": dict(self.genre_weights),
            "tracks": [t.to_dict() for t in self.tracks],
            "total_duration": self.total_duration,
            "duration_display": self.duration_display,
        }


@dataclass(frozen=True)
class PlaylistResult:
    """A whole generated playlist; total_duration is the realized sum."""
    name: str
    blocks: Tuple[BlockResult, ...] = ()
    total_duration: int = 0

    @property
    def track_count(self) -> int:
        return sum(len(b.tracks) for b in self.blocks)

    @property
    def track_ids(self) -> List[str]:
        return [tid for b in self.blocks for tid in b.track_ids]

    @property
    def duration_display(self) -> str:
        return format_duration(self.total_duration)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "blocks": [b.to_dict() for b in self.blocks],
            "track_count": self.track_count,
            "total_duration": self.total_duration,
            "duration_display": self.duration_display,
        }


@dataclass(frozen=True)
class GenreCount:
    """Genre catalog entry: display name and number of tracks tagged with it."""
    name: str
    track_count: int
