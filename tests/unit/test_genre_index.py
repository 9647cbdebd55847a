from blockmix.playlist.genre_index import GenreIndex


def test_case_insensitive_buckets_keep_first_casing(track_factory):
    tracks = [
        track_factory("1", genres=("Rock",)),
        track_factory("2", genres=("rock",)),
        track_factory("3", genres=("ROCK", "Pop")),
    ]
    index = GenreIndex.build(tracks)

    assert [t.id for t in index.get("rock")] == ["1", "2", "3"]
    assert index.display_name("ROCK") == "Rock"
    assert index.genres() == ["Rock", "Pop"]
    assert len(index) == 2


def test_multi_genre_track_is_shared_reference(track_factory):
    track = track_factory("1", genres=("Rock", "Pop"))
    index = GenreIndex.build([track])
    assert index.get("Rock")[0] is index.get("Pop")[0]


def test_blank_genres_skipped(track_factory):
    index = GenreIndex.build([track_factory("1", genres=("", "  ", "Jazz"))])
    assert index.genres() == ["Jazz"]
    assert "" not in index


def test_unknown_genre_returns_empty(track_factory):
    index = GenreIndex.build([track_factory("1")])
    assert index.get("Polka") == []
    assert "Polka" not in index
    assert "rock" in index


def test_genre_counts_sorted_by_name(track_factory):
    tracks = [
        track_factory("1", genres=("rock",)),
        track_factory("2", genres=("Ambient",)),
        track_factory("3", genres=("Rock",)),
    ]
    counts = GenreIndex.build(tracks).genre_counts()
    assert [(c.name, c.track_count) for c in counts] == [("Ambient", 1), ("rock", 2)]


def test_empty_corpus():
    index = GenreIndex.build([])
    assert len(index) == 0
    assert list(index) == []
