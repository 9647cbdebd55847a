"""blockmix - segmented, genre-weighted playlist generation."""

__version__ = "0.3.0"
