"""Read-only distance lookups shared by every chromosome of a run."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .errors import ConfigurationError

__all__ = ["DistanceOracle"]


def _as_cost_matrix(matrix: Sequence[Sequence[float]] | np.ndarray) -> np.ndarray:
    array = np.array(matrix, dtype=float, copy=True)
    if array.ndim != 2 or array.shape[0] != array.shape[1]:
        raise ConfigurationError(
            f"distance matrix must be square, got shape {array.shape}"
        )
    if array.shape[0] == 0:
        raise ConfigurationError("distance matrix must not be empty")
    if not np.isfinite(array).all():
        raise ConfigurationError("distance matrix contains non-finite values")
    if (array < 0).any():
        raise ConfigurationError("distance matrix contains negative costs")
    array.setflags(write=False)
    return array


class DistanceOracle:
    """Immutable wrapper around an ``N x N`` cost matrix.

    The matrix does not need to be symmetric. Batched lookups go through the
    flattened matrix so that a whole population can be priced with a single
    fancy-indexing call.
    """

    __slots__ = ("_matrix", "_flat")

    def __init__(
        self,
        matrix: Sequence[Sequence[float]] | np.ndarray,
        *,
        n_cities: int | None = None,
    ) -> None:
        self._matrix = _as_cost_matrix(matrix)
        self._flat = self._matrix.ravel()
        if n_cities is not None:
            self.require_size(n_cities)

    @classmethod
    def from_points(cls, points: Sequence[Sequence[float]] | np.ndarray) -> "DistanceOracle":
        from mtsp_ga.data.cities import euclidean_distance_matrix

        return cls(euclidean_distance_matrix(points))

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix

    @property
    def size(self) -> int:
        return int(self._matrix.shape[0])

    def require_size(self, n_cities: int) -> None:
        if self.size != int(n_cities):
            raise ConfigurationError(
                f"distance matrix is {self.size}x{self.size} but {n_cities} cities were declared"
            )

    def cost(self, origin: int, target: int) -> float:
        return float(self._matrix[origin, target])

    def lookup(self, origins: np.ndarray, targets: np.ndarray) -> np.ndarray:
        """Vectorised ``matrix[origins, targets]`` over arrays of equal shape."""

        origins = np.asarray(origins, dtype=np.intp)
        targets = np.asarray(targets, dtype=np.intp)
        return self._flat[origins * self.size + targets]

    def path_length(self, cities: Sequence[int]) -> float:
        """Length of an open path visiting ``cities`` in order."""

        path = np.asarray(cities, dtype=np.intp)
        if path.size < 2:
            return 0.0
        return float(self.lookup(path[:-1], path[1:]).sum())

    def __repr__(self) -> str:
        return f"DistanceOracle(size={self.size})"
