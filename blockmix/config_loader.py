"""
Configuration Loader - Manages YAML configuration and environment variables
"""
import os
from typing import Any, Iterable, List, Optional

import yaml

from .playlist.models import BlockSpec


class Config:
    """Configuration manager for blockmix"""

    def __init__(self, config_path: str = "config.yaml"):
        self.config_path = config_path
        self.config = self._load_config()
        self._validate_config()

    def _load_config(self) -> dict:
        """Load configuration from YAML file"""
        if not os.path.exists(self.config_path):
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        with open(self.config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"{self.config_path}: top level must be a mapping")
        return data

    def _validate_config(self):
        """Validate section shapes and generation values"""
        for section in ('library', 'generation', 'filters', 'export', 'logging'):
            value = self.config.get(section)
            if value is not None and not isinstance(value, dict):
                raise ValueError(f"Configuration section '{section}' must be a mapping")

        for field in ('default_duration_minutes', 'default_block_count', 'max_tracks_per_block'):
            value = self.get('generation', field)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"generation.{field} must be a non-negative integer, got {value!r}")

        if self.get('generation', 'default_block_count') == 0:
            raise ValueError("generation.default_block_count must be at least 1")

        for section, field in (('filters', 'year_start'), ('filters', 'year_end'), ('generation', 'random_seed')):
            value = self.get(section, field)
            if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
                raise ValueError(f"{section}.{field} must be an integer, got {value!r}")

        start, end = self.year_start, self.year_end
        if start is not None and end is not None and start > end:
            raise ValueError(f"filters.year_start ({start}) is after filters.year_end ({end})")

        # Parse eagerly so bad weights surface at load time
        self.blocks

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """
        Get configuration value

        Args:
            section: Configuration section
            key: Configuration key
            default: Default value if not found

        Returns:
            Configuration value or default
        """
        if section not in self.config or not self.config[section]:
            return default
        return self.config[section].get(key, default)

    @property
    def library_tracks_path(self) -> Optional[str]:
        """Get path to the JSON library export (LIBRARY_TRACKS_PATH overrides)"""
        return os.getenv('LIBRARY_TRACKS_PATH') or self.get('library', 'tracks_path')

    @property
    def default_duration_minutes(self) -> int:
        """Get default playlist duration in minutes"""
        return self.get('generation', 'default_duration_minutes', 240)

    @property
    def default_duration_ms(self) -> int:
        return self.default_duration_minutes * 60 * 1000

    @property
    def default_block_count(self) -> int:
        """Get number of blocks used when none are configured"""
        return self.get('generation', 'default_block_count', 3)

    @property
    def max_tracks_per_block(self) -> int:
        """Get per-block track cap (0 = unlimited)"""
        return self.get('generation', 'max_tracks_per_block', 0)

    @property
    def random_seed(self) -> Optional[int]:
        """Get random seed (None = non-deterministic)"""
        return self.get('generation', 'random_seed')

    @property
    def genres(self) -> List[str]:
        """Get genre filter applied to the library before generation"""
        return list(self.get('filters', 'genres') or [])

    @property
    def year_start(self) -> Optional[int]:
        return self.get('filters', 'year_start')

    @property
    def year_end(self) -> Optional[int]:
        return self.get('filters', 'year_end')

    @property
    def blocks(self) -> List[BlockSpec]:
        """
        Get configured block specs in playlist order

        Each entry is a mapping with ``name`` and ``genre_weights``; weights
        keep their YAML order.
        """
        raw = self.get('generation', 'blocks') or []
        if not isinstance(raw, list):
            raise ValueError("generation.blocks must be a list")

        specs = []
        for i, entry in enumerate(raw):
            if not isinstance(entry, dict):
                raise ValueError(f"generation.blocks[{i}] must be a mapping")
            try:
                specs.append(BlockSpec.from_dict(entry))
            except (KeyError, TypeError, ValueError) as e:
                raise ValueError(f"generation.blocks[{i}] is invalid: {e}") from e
        return specs

    @property
    def m3u_export_path(self) -> Optional[str]:
        """Get directory for M3U exports"""
        return self.get('export', 'm3u_path')

    @property
    def log_level(self) -> str:
        return self.get('logging', 'level', 'INFO')

    @property
    def log_file(self) -> Optional[str]:
        return self.get('logging', 'file')

    @staticmethod
    def default_blocks(genres: Iterable[str], count: int) -> List[BlockSpec]:
        """
        Build ``count`` evenly-weighted blocks named "Block 1".."Block N".

        Used when a request names genres but no explicit block layout.
        """
        if count <= 0:
            raise ValueError(f"Block count must be at least 1, got {count}")
        weights = {g: 1 for g in dict.fromkeys(genres)}
        return [BlockSpec(name=f"Block {i + 1}", genre_weights=dict(weights)) for i in range(count)]
