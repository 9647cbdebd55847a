"""
M3U Playlist Exporter - writes generated playlists as extended M3U8 files
"""
import logging
from pathlib import Path
from typing import Mapping, Optional

from .playlist.models import PlaylistResult, Track

logger = logging.getLogger(__name__)


class M3UExporter:
    """Exports playlists to M3U format"""

    def __init__(self, export_path: str):
        """
        Initialize M3U exporter

        Args:
            export_path: Directory to save M3U files
        """
        self.export_path = Path(export_path)
        self.export_path.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Initialized M3U exporter: {self.export_path}")

    def export_playlist(
        self,
        playlist: PlaylistResult,
        tracks_by_id: Mapping[str, Track],
        *,
        title: Optional[str] = None,
    ) -> Optional[str]:
        """
        Export a generated playlist to M3U format

        Tracks are written in block order. Picks whose library track has no
        file_path are skipped with a warning.

        Args:
            playlist: Generated playlist
            tracks_by_id: Library tracks keyed by id (for file paths)
            title: Filename stem (defaults to the playlist name)

        Returns:
            Path to created M3U file, or None if no track had a file path
        """
        title = title or playlist.name or "playlist"
        m3u_path = self.export_path / f"{self._sanitize_filename(title)}.m3u8"

        lines = ['#EXTM3U']
        skipped = 0
        for block in playlist.blocks:
            for pick in block.tracks:
                track = tracks_by_id.get(pick.id)
                if track is None or not track.file_path:
                    skipped += 1
                    continue
                duration_sec = pick.duration // 1000 if pick.duration else -1
                lines.append(f"#EXTINF:{duration_sec},{pick.artist} - {pick.name}")
                lines.append(track.file_path)

        if skipped:
            logger.warning(f"{skipped} track(s) in '{title}' have no file path and were skipped")

        if len(lines) == 1:
            logger.warning(f"No valid file paths found for playlist: {title}")
            return None

        with open(m3u_path, 'w', encoding='utf-8') as f:
            f.write('\n'.join(lines) + '\n')

        logger.info(f"Exported {(len(lines) - 1) // 2} tracks to: {m3u_path}")
        return str(m3u_path)

    def _sanitize_filename(self, filename: str) -> str:
        """
        Sanitize filename by removing invalid characters

        Args:
            filename: Original filename

        Returns:
            Safe filename
        """
        invalid_chars = '<>:"/\\|?*'
        for char in invalid_chars:
            filename = filename.replace(char, '_')

        return filename.strip('. ') or "playlist"
