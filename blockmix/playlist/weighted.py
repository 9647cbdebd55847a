"""
Weighted genre selection.

Selection walks the weights in their declared order, so the same roll always
maps to the same genre for a given mapping. Callers must pass the mapping in
the order the user declared it.
"""
from __future__ import annotations

from typing import Mapping

import numpy as np


def genre_for_roll(weights: Mapping[str, int], roll: int) -> str:
    """
    Map a roll in [0, total_weight) to a genre.

    Returns the first genre whose cumulative weight strictly exceeds the
    roll: with {"Rock": 50, "Pop": 50}, roll 49 is Rock and roll 50 is Pop.
    """
    if roll < 0:
        raise ValueError(f"Roll must be >= 0, got {roll}")
    cumulative = 0
    for genre, weight in weights.items():
        cumulative += weight
        if roll < cumulative:
            return genre
    raise ValueError(f"Roll {roll} is outside total weight {cumulative}")


def select_weighted_genre(
    weights: Mapping[str, int],
    total_weight: int,
    rng: np.random.Generator,
) -> str:
    """
    Draw one genre with probability proportional to its weight.

    Args:
        weights: Ordered genre -> weight mapping (weights >= 0)
        total_weight: Sum of the weights; must be > 0
        rng: Random source for the roll

    Raises:
        ValueError: If total_weight is not a positive sum of ``weights``
    """
    if total_weight <= 0:
        raise ValueError(f"total_weight must be > 0, got {total_weight}")
    actual = sum(weights.values())
    if actual != total_weight:
        raise ValueError(f"total_weight {total_weight} does not match weights sum {actual}")

    roll = int(rng.integers(0, total_weight))
    return genre_for_roll(weights, roll)
