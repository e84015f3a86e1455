"""Sampling utilities for the matchday engine.

Centralized, reproducible randomness for the squad shuffle.
"""

from __future__ import annotations

from typing import Sequence, TypeVar

import numpy as np

T = TypeVar("T")


def make_rng(seed: int | None = None) -> np.random.Generator:
    """Create a seeded random number generator.

    Args:
        seed: Random seed. If None, uses system entropy.

    Returns:
        NumPy Generator instance
    """
    return np.random.default_rng(seed)


def fisher_yates_shuffle(rng: np.random.Generator, items: Sequence[T]) -> list[T]:
    """Return a uniformly shuffled copy of `items`.

    Walks from the last index down, swapping each element with a uniformly
    drawn index at or below it.

    Args:
        rng: Random number generator
        items: Items to shuffle (left untouched)

    Returns:
        New list holding the same items in random order
    """
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = int(rng.integers(0, i + 1))
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled
