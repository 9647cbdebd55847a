"""Test configuration and fixtures."""

import json
import sys
from pathlib import Path

import numpy as np
import pytest

# Add repo root to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from blockmix.playlist.models import Track


def make_track(track_id, artist="Artist", genres=("Rock",), duration=1000, **kwargs):
    """Build a Track with short defaults for tests."""
    return Track(
        id=track_id,
        name=kwargs.pop("name", f"Song {track_id}"),
        artist=artist,
        genres=tuple(genres),
        duration=duration,
        **kwargs,
    )


def build_corpus(genres=("Rock", "Pop", "Jazz"), per_genre=10, artists_per_genre=5, duration=1000):
    """Synthetic corpus: ``per_genre`` single-genre tracks per genre."""
    tracks = []
    for genre in genres:
        for i in range(per_genre):
            tracks.append(
                make_track(
                    f"{genre.lower()}-{i}",
                    artist=f"{genre} Artist {i % artists_per_genre}",
                    genres=(genre,),
                    duration=duration,
                    album=f"{genre} Album",
                    year=1990 + i,
                    file_path=f"/music/{genre}/{i}.flac",
                )
            )
    return tracks


@pytest.fixture()
def corpus():
    return build_corpus()


@pytest.fixture()
def rng():
    return np.random.default_rng(42)


@pytest.fixture()
def library_file(tmp_path, corpus):
    """JSON library export written from the synthetic corpus."""
    records = [
        {
            "id": t.id,
            "name": t.name,
            "artist": t.artist,
            "album": t.album,
            "genres": list(t.genres),
            "year": t.year,
            "duration_ms": t.duration,
            "file_path": t.file_path,
        }
        for t in corpus
    ]
    path = tmp_path / "library.json"
    path.write_text(json.dumps(records), encoding="utf-8")
    return path


@pytest.fixture()
def track_factory():
    return make_track


@pytest.fixture()
def corpus_factory():
    return build_corpus
