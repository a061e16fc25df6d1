"""City layouts and distance matrices consumed by the solver."""

from .cities import (
    euclidean_distance_matrix,
    load_distance_matrix,
    load_points,
    random_points,
)

__all__ = [
    "euclidean_distance_matrix",
    "load_distance_matrix",
    "load_points",
    "random_points",
]
