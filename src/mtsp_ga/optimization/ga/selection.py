"""Tournament selection over disjoint groups of the population."""

from __future__ import annotations

from typing import Sequence

import numpy as np

__all__ = ["tournament_groups", "group_winners"]


def tournament_groups(
    pop_size: int, group_size: int, rng: np.random.Generator
) -> np.ndarray:
    """Shuffle population indices into a ``(pop_size // group_size, group_size)`` array."""

    if group_size <= 0 or pop_size % group_size:
        raise ValueError("pop_size must be a multiple of group_size")
    return rng.permutation(pop_size).reshape(-1, group_size)


def group_winners(fitness: Sequence[float], groups: np.ndarray) -> np.ndarray:
    """Index of the lowest-distance member of each group.

    Ties go to the member appearing first in the shuffled group.
    """

    values = np.asarray(fitness, dtype=float)
    if groups.size and groups.max() >= values.size:
        raise ValueError("group indices exceed the fitness array")
    local = np.argmin(values[groups], axis=1)
    return groups[np.arange(groups.shape[0]), local]
