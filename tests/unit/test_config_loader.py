import textwrap

import pytest

from blockmix.config_loader import Config


def _write(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(textwrap.dedent(text), encoding="utf-8")
    return str(path)


def test_defaults_for_empty_file(tmp_path):
    config = Config(_write(tmp_path, ""))
    assert config.default_duration_minutes == 240
    assert config.default_duration_ms == 240 * 60 * 1000
    assert config.default_block_count == 3
    assert config.max_tracks_per_block == 0
    assert config.random_seed is None
    assert config.blocks == []
    assert config.genres == []
    assert config.log_level == "INFO"
    assert config.get("generation", "anything", "fallback") == "fallback"


def test_full_config(tmp_path, monkeypatch):
    monkeypatch.delenv("LIBRARY_TRACKS_PATH", raising=False)
    config = Config(_write(tmp_path, """
        library:
          tracks_path: data/library.json
        generation:
          default_duration_minutes: 90
          random_seed: 5
          blocks:
            - name: Morning
              genre_weights:
                Jazz: 3
                Soul: 1
            - name: Evening
              genre_weights:
                Rock: 1
        filters:
          genres: [Jazz, Soul, Rock]
          year_start: 1960
          year_end: 1999
        export:
          m3u_path: out/
        logging:
          level: DEBUG
    """))
    assert config.library_tracks_path == "data/library.json"
    assert config.default_duration_minutes == 90
    assert config.random_seed == 5
    assert [b.name for b in config.blocks] == ["Morning", "Evening"]
    assert list(config.blocks[0].genre_weights) == ["Jazz", "Soul"]
    assert config.genres == ["Jazz", "Soul", "Rock"]
    assert (config.year_start, config.year_end) == (1960, 1999)
    assert config.m3u_export_path == "out/"
    assert config.log_level == "DEBUG"


def test_env_overrides_library_path(tmp_path, monkeypatch):
    monkeypatch.setenv("LIBRARY_TRACKS_PATH", "/env/library.json")
    config = Config(_write(tmp_path, "library:\n  tracks_path: file.json\n"))
    assert config.library_tracks_path == "/env/library.json"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        Config(str(tmp_path / "nope.yaml"))


@pytest.mark.parametrize("text", [
    "- just\n- a list\n",
    "generation: 5\n",
    "generation:\n  default_duration_minutes: -1\n",
    "generation:\n  default_block_count: 0\n",
    "filters:\n  year_start: 2000\n  year_end: 1990\n",
    "generation:\n  blocks:\n    - name: Bad\n      genre_weights:\n        Rock: -3\n",
    "generation:\n  blocks: nope\n",
])
def test_invalid_config(tmp_path, text):
    with pytest.raises(ValueError):
        Config(_write(tmp_path, text))


def test_default_blocks():
    blocks = Config.default_blocks(["Rock", "Pop", "Rock"], 2)
    assert [b.name for b in blocks] == ["Block 1", "Block 2"]
    assert blocks[0].genre_weights == {"Rock": 1, "Pop": 1}
    with pytest.raises(ValueError):
        Config.default_blocks(["Rock"], 0)


@pytest.mark.parametrize("section,field,value", [
    ("filters", "year_start", "'1990'"),
    ("filters", "year_end", "'1999'"),
    ("filters", "year_start", "true"),
    ("generation", "random_seed", "'42'"),
    ("generation", "random_seed", "1.5"),
])
def test_non_integer_fields_rejected(tmp_path, section, field, value):
    path = _write(tmp_path, f"{section}:\n  {field}: {value}\n")
    with pytest.raises(ValueError, match=f"{section}.{field}"):
        Config(path)
