"""Random route partitions honouring a minimum segment length."""

from __future__ import annotations

import numpy as np

from .errors import InfeasibleConstraintError

__all__ = ["slack_weights", "sample_breakpoints", "segment_lengths", "random_depots"]


def slack_weights(slack: int, n_breaks: int) -> np.ndarray:
    """Number of ways to spread ``j`` extra units over ``n_breaks`` gaps.

    Entry ``j`` (``0 <= j <= slack``) equals ``C(j + n_breaks - 1, n_breaks - 1)``
    and is obtained by ``n_breaks - 1`` repeated prefix sums of a vector of ones.
    """

    weights = np.ones(slack + 1, dtype=float)
    for _ in range(n_breaks - 1):
        weights = np.cumsum(weights)
    return weights


def sample_breakpoints(
    n: int, k: int, min_tour: int, rng: np.random.Generator
) -> np.ndarray:
    """Cut ``n`` route positions into ``k`` segments of length ``>= min_tour``.

    Returns ``k - 1`` strictly increasing exclusive-end cut positions.
    """

    if k < 1:
        raise InfeasibleConstraintError("at least one segment is required")
    if min_tour < 1:
        raise InfeasibleConstraintError("min_tour must be positive")
    if min_tour * k > n:
        raise InfeasibleConstraintError(
            f"cannot split {n} cities into {k} tours of at least {min_tour}"
        )
    n_breaks = k - 1
    if n_breaks == 0:
        return np.empty(0, dtype=np.intp)
    if min_tour == 1:
        cuts = rng.choice(np.arange(1, n), size=n_breaks, replace=False)
        return np.sort(cuts).astype(np.intp)

    slack = n - min_tour * k
    cum_prob = np.cumsum(slack_weights(slack, n_breaks))
    cum_prob /= cum_prob[-1]
    n_adjust = int(np.searchsorted(cum_prob, rng.random(), side="right"))
    n_adjust = min(n_adjust, slack)
    spaces = rng.integers(0, n_breaks, size=n_adjust)
    adjust = np.bincount(spaces, minlength=n_breaks)
    return (min_tour * np.arange(1, n_breaks + 1) + np.cumsum(adjust)).astype(np.intp)


def segment_lengths(breakpoints: np.ndarray, n: int) -> np.ndarray:
    bounds = np.concatenate(([0], np.asarray(breakpoints, dtype=np.intp), [n]))
    return np.diff(bounds)


def random_depots(depot_cities: np.ndarray, rng: np.random.Generator) -> np.ndarray:
    """Assign one depot per segment by array position."""

    return rng.permutation(np.asarray(depot_cities, dtype=np.intp))
