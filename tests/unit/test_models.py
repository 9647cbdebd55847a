import pytest

from blockmix.playlist.models import BlockSpec, Track, format_duration


class TestFormatDuration:
    def test_track_style(self):
        assert format_duration(0, with_hours=False) == "0:00"
        assert format_duration(215_000, with_hours=False) == "3:35"
        assert format_duration(3_725_000, with_hours=False) == "62:05"

    def test_block_style(self):
        assert format_duration(3_725_000) == "1:02:05"
        assert format_duration(59_999) == "0:00:59"


class TestTrack:
    def test_from_dict_aliases(self):
        track = Track.from_dict(
            {"id": 7, "title": "Song", "duration_ms": 215000, "genres": "Rock; Pop ;", "year": "1999"}
        )
        assert track.id == "7"
        assert track.name == "Song"
        assert track.duration == 215000
        assert track.genres == ("Rock", "Pop")
        assert track.year == 1999
        assert track.duration_display == "3:35"

    def test_from_dict_requires_id(self):
        with pytest.raises(ValueError):
            Track.from_dict({"name": "No id"})

    def test_negative_duration_rejected(self):
        with pytest.raises(ValueError):
            Track(id="1", name="x", duration=-5)

    def test_genres_coerced_to_tuple(self):
        assert Track(id="1", name="x", genres=["Rock"]).genres == ("Rock",)


class TestBlockSpec:
    def test_weight_order_preserved(self):
        spec = BlockSpec(name="B", genre_weights={"Pop": 1, "Rock": 3, "Jazz": 2})
        assert list(spec.genre_weights) == ["Pop", "Rock", "Jazz"]
        assert spec.total_weight == 6

    @pytest.mark.parametrize("weight", [-1, 1.5, "3", True])
    def test_bad_weights_rejected(self, weight):
        with pytest.raises(ValueError):
            BlockSpec(name="B", genre_weights={"Rock": weight})

    def test_from_dict_list_form(self):
        spec = BlockSpec.from_dict(
            {"name": "Evening", "genre_weights": [{"genre": "Jazz", "weight": 2}, {"genre": "Soul", "weight": 1}]}
        )
        assert spec.genre_weights == {"Jazz": 2, "Soul": 1}
        assert spec.to_dict() == {"name": "Evening", "genre_weights": {"Jazz": 2, "Soul": 1}}
