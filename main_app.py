# -*- coding: utf-8 -*-
"""
blockmix - Main Application
Generates segmented, genre-weighted playlists from a library export
"""
import argparse
import json
import logging
import sys
import uuid
from typing import Any, Dict, List, Optional

from blockmix.config_loader import Config
from blockmix.local_library_client import LocalLibraryClient
from blockmix.logging_utils import (
    RunSummary,
    add_logging_args,
    configure_logging,
    format_count,
    resolve_log_level,
    truncate_list,
)
from blockmix.m3u_exporter import M3UExporter
from blockmix.playlist import BlockSpec, GenreIndex, generate_playlist, remix_block
from blockmix.playlist.filtering import filter_tracks, search_tracks
from blockmix.playlist.models import Track, format_duration

logger = logging.getLogger("blockmix.main")

DEFAULT_DURATION_MS = 240 * 60 * 1000


def parse_block_arg(value: str) -> BlockSpec:
    """
    Parse a ``--block`` value of the form ``Name:Rock=50,Pop=50``.

    Weights keep the order they are written in.
    """
    name, sep, weights_part = value.partition(':')
    if not sep or not name.strip():
        raise ValueError(f"Block must look like 'Name:Genre=weight,...', got {value!r}")

    weights: Dict[str, int] = {}
    for item in filter(None, (p.strip() for p in weights_part.split(','))):
        genre, eq, weight = item.rpartition('=')
        if not eq or not genre.strip():
            raise ValueError(f"Bad genre weight {item!r} in block {name.strip()!r}")
        try:
            weights[genre.strip()] = int(weight)
        except ValueError:
            raise ValueError(f"Weight for {genre.strip()!r} must be an integer, got {weight!r}") from None
    return BlockSpec(name=name.strip(), genre_weights=weights)


class BlockMixApp:
    """Main application orchestrator"""

    def __init__(self, config: Optional[Config] = None, library_path: Optional[str] = None):
        self.config = config
        path = library_path or (config.library_tracks_path if config else None)
        if not path:
            raise ValueError("No library export given (use --library or library.tracks_path)")
        self.library = LocalLibraryClient(path)

    def _setting(self, value: Any, prop: str, default: Any) -> Any:
        # CLI > config > built-in default
        if value is not None:
            return value
        if self.config is not None:
            return getattr(self.config, prop)
        return default

    def track_pool(self, genres: Optional[List[str]] = None,
                   year_start: Optional[int] = None, year_end: Optional[int] = None) -> List[Track]:
        return filter_tracks(
            self.library.get_all_tracks(),
            genres=self._setting(genres or None, 'genres', []),
            year_start=self._setting(year_start, 'year_start', None),
            year_end=self._setting(year_end, 'year_end', None),
        )

    def resolve_blocks(self, block_args: Optional[List[str]], block_count: Optional[int],
                       genres: Optional[List[str]]) -> List[BlockSpec]:
        if block_args:
            return [parse_block_arg(b) for b in block_args]
        if self.config is not None and self.config.blocks:
            return self.config.blocks
        genres = self._setting(genres or None, 'genres', [])
        if genres:
            count = self._setting(block_count, 'default_block_count', 3)
            return Config.default_blocks(genres, count)
        raise ValueError("No blocks given (use --block, --genre, or generation.blocks in the config)")

    def generate(self, args: argparse.Namespace) -> Dict[str, Any]:
        summary = RunSummary("Playlist generation", logger)
        pool = self.track_pool(args.genre, args.year_start, args.year_end)
        blocks = self.resolve_blocks(args.block, args.block_count, args.genre)
        if args.duration_minutes is not None:
            duration_ms = args.duration_minutes * 60 * 1000
        else:
            duration_ms = self.config.default_duration_ms if self.config else DEFAULT_DURATION_MS

        index = GenreIndex.build(pool)
        missing = sorted({g for spec in blocks for g in spec.genre_weights if index.display_name(g) is None})
        if missing:
            logger.warning(f"No tracks in the pool for: {truncate_list(missing, max_items=5)}")

        playlist = generate_playlist(
            args.name,
            blocks,
            index,
            duration_ms,
            random_seed=self._setting(args.seed, 'random_seed', None),
            max_tracks_per_block=self._setting(args.max_tracks_per_block, 'max_tracks_per_block', 0),
        )

        summary.add("pool_tracks", len(pool))
        summary.add("blocks", len(playlist.blocks))
        summary.add("tracks", playlist.track_count)
        summary.add("duration", playlist.duration_display)

        m3u_dir = args.m3u or (self.config.m3u_export_path if self.config else None)
        if m3u_dir:
            path = M3UExporter(m3u_dir).export_playlist(playlist, self.library.get_tracks_by_id())
            summary.add("m3u", path or "not written")

        summary.log()
        return playlist.to_dict()

    def remix(self, args: argparse.Namespace) -> Dict[str, Any]:
        spec = parse_block_arg(args.block)
        pool = self.track_pool(args.genre, args.year_start, args.year_end)
        result = remix_block(
            spec,
            pool,
            args.duration_minutes * 60 * 1000,
            random_seed=self._setting(args.seed, 'random_seed', None),
            max_tracks=self._setting(args.max_tracks, 'max_tracks_per_block', 0),
        )
        logger.info(
            f"Remixed '{result.name}': {format_count(len(result.tracks), 'track')}, "
            f"{result.duration_display}"
        )
        return result.to_dict()

    def genres(self) -> List[Dict[str, Any]]:
        index = GenreIndex.build(self.library.get_all_tracks())
        return [{"name": g.name, "track_count": g.track_count} for g in index.genre_counts()]

    def search(self, args: argparse.Namespace) -> List[Dict[str, Any]]:
        hits = search_tracks(
            self.library.get_all_tracks(),
            query=args.query,
            artist=args.artist,
            limit=args.limit,
        )
        return [
            {
                "id": t.id,
                "name": t.name,
                "artist": t.artist,
                "album": t.album,
                "duration": format_duration(t.duration, with_hours=False),
            }
            for t in hits
        ]


def _add_pool_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--genre",
        action="append",
        help="Restrict the track pool to this genre (repeatable)",
    )
    parser.add_argument("--year-start", type=int, help="Earliest release year (inclusive)")
    parser.add_argument("--year-end", type=int, help="Latest release year (inclusive)")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible output")
    parser.add_argument("--output", help="Write the JSON result to this file instead of stdout")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate segmented, genre-weighted playlists from a library export"
    )
    parser.add_argument("--config", help="Path to YAML configuration file")
    parser.add_argument("--library", help="Path to JSON library export (overrides config)")
    add_logging_args(parser)

    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate a full playlist")
    gen.add_argument("--name", default="Mix", help="Playlist name (default: Mix)")
    gen.add_argument(
        "--duration-minutes",
        type=int,
        help="Total playlist duration in minutes (default: 240)",
    )
    gen.add_argument(
        "--block",
        action="append",
        help="Block as 'Name:Genre=weight,...' (repeatable, in playlist order)",
    )
    gen.add_argument(
        "--block-count",
        type=int,
        help="Number of evenly-weighted blocks built from --genre when no --block is given",
    )
    gen.add_argument("--max-tracks-per-block", type=int, help="Per-block track cap (0 = none)")
    gen.add_argument("--m3u", help="Also export an M3U8 file into this directory")
    _add_pool_args(gen)

    rmx = sub.add_parser("remix", help="Regenerate a single block")
    rmx.add_argument("--block", required=True, help="Block as 'Name:Genre=weight,...'")
    rmx.add_argument(
        "--duration-minutes",
        type=int,
        required=True,
        help="Target duration for this block in minutes",
    )
    rmx.add_argument("--max-tracks", type=int, help="Track cap for the block (0 = none)")
    _add_pool_args(rmx)

    sub.add_parser("genres", help="List library genres with track counts")

    srch = sub.add_parser("search", help="Search library tracks")
    srch.add_argument("--query", help="Match name, artist or album")
    srch.add_argument("--artist", help="Match artist only")
    srch.add_argument("--limit", type=int, default=20, help="Max results (default: 20)")
    srch.add_argument("--output", help="Write the JSON result to this file instead of stdout")

    return parser


def _emit(data: Any, output: Optional[str]) -> None:
    text = json.dumps(data, indent=2, ensure_ascii=False)
    if output:
        with open(output, 'w', encoding='utf-8') as f:
            f.write(text + '\n')
        logger.info(f"Wrote result to {output}")
    else:
        print(text)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = Config(args.config) if args.config else None
        configure_logging(
            level=resolve_log_level(args, default=config.log_level if config else 'INFO'),
            log_file=args.log_file or (config.log_file if config else None),
            show_run_id=args.show_run_id,
            run_id=uuid.uuid4().hex[:8],
            force=True,
        )

        app = BlockMixApp(config, library_path=args.library)
        if args.command == "generate":
            _emit(app.generate(args), args.output)
        elif args.command == "remix":
            _emit(app.remix(args), args.output)
        elif args.command == "genres":
            _emit(app.genres(), None)
        elif args.command == "search":
            _emit(app.search(args), args.output)
    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Invalid input: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
