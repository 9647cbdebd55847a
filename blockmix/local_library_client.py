"""
Local Library Client - loads a read-only track snapshot from a library export.

The host media server exports its audio items as a JSON array (or an object
with a "tracks" array); this client turns that export into Track records for
one generation request.
"""
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from .playlist.models import Track

logger = logging.getLogger(__name__)


class LocalLibraryClient:
    """Library client backed by a JSON export of the host library."""

    def __init__(self, tracks_path: str):
        """
        Initialize local library client

        Args:
            tracks_path: Path to the JSON track export
        """
        self.tracks_path = Path(tracks_path)
        if not self.tracks_path.exists():
            raise FileNotFoundError(f"Track export not found: {self.tracks_path}")
        self._tracks: Optional[List[Track]] = None
        logger.debug(f"Initialized LocalLibraryClient: {self.tracks_path}")

    def _load(self) -> List[Track]:
        with open(self.tracks_path, 'r', encoding='utf-8') as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON in {self.tracks_path}: {e}") from e

        if isinstance(data, dict):
            data = data.get('tracks', [])
        if not isinstance(data, list):
            raise ValueError(f"{self.tracks_path}: expected a list of tracks")

        tracks = []
        seen_ids = set()
        for i, record in enumerate(data):
            if not isinstance(record, dict):
                raise ValueError(f"{self.tracks_path}: track #{i} is not an object")
            try:
                track = Track.from_dict(record)
            except (TypeError, ValueError) as e:
                raise ValueError(f"{self.tracks_path}: track #{i} is invalid: {e}") from e
            if track.id in seen_ids:
                logger.warning(f"Duplicate track id {track.id!r} in library export; keeping first")
                continue
            seen_ids.add(track.id)
            tracks.append(track)

        logger.info(f"Retrieved {len(tracks)} tracks from local library")
        return tracks

    def get_all_tracks(self) -> List[Track]:
        """
        Get all tracks from the export (loaded once, then cached)

        Returns:
            List of Track records in export order
        """
        if self._tracks is None:
            self._tracks = self._load()
        return list(self._tracks)

    def get_tracks_by_id(self) -> Dict[str, Track]:
        """Track lookup by id, used when exporting results."""
        return {t.id: t for t in self.get_all_tracks()}
