"""Helpers producing city coordinates and distance matrices.

Points and matrices are read from CSV with pandas. Coordinate files carry
one row per city with numeric columns (``x``, ``y`` and optionally ``z``),
with or without a header row; matrix files are square tables with neither
header nor index column.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

import numpy as np
import pandas as pd

from mtsp_ga.config.constants import DEFAULT_LAYOUT_SCALE

__all__ = [
    "random_points",
    "euclidean_distance_matrix",
    "load_points",
    "load_distance_matrix",
]

logger = logging.getLogger(__name__)


def random_points(
    n: int,
    *,
    dims: int = 2,
    scale: float = DEFAULT_LAYOUT_SCALE,
    rng: np.random.Generator | None = None,
) -> np.ndarray:
    if n <= 0:
        raise ValueError("n must be positive")
    if dims not in (2, 3):
        raise ValueError("dims must be 2 or 3")
    rng = rng or np.random.default_rng()
    return scale * rng.random((n, dims))


def euclidean_distance_matrix(points: Sequence[Sequence[float]] | np.ndarray) -> np.ndarray:
    coords = np.asarray(points, dtype=float)
    if coords.ndim != 2:
        raise ValueError("points must be a 2-dimensional array")
    deltas = coords[:, None, :] - coords[None, :, :]
    return np.sqrt((deltas**2).sum(axis=-1))


def load_points(path: str | Path) -> np.ndarray:
    """Read city coordinates; the header row is optional.

    Coordinate columns are those whose values below the first row are all
    numeric. A first row that is numeric in every coordinate column is a
    city, one that is numeric in none is a header, and a mix is rejected
    rather than guessed.
    """

    raw = pd.read_csv(path, header=None, dtype=str, skipinitialspace=True)
    if raw.empty:
        raise ValueError(f"{path}: no cities found")
    parsed = raw.apply(pd.to_numeric, errors="coerce")
    body, body_raw = (parsed.iloc[1:], raw.iloc[1:]) if len(raw) > 1 else (parsed, raw)
    columns = [
        column
        for column in raw.columns
        if body[column].notna().any() and (body[column].notna() | body_raw[column].isna()).all()
    ]
    if len(columns) not in (2, 3):
        raise ValueError(f"{path}: expected 2 or 3 numeric coordinate columns, found {len(columns)}")

    first_numeric = parsed.iloc[0][columns].notna()
    if first_numeric.all():
        coords = parsed[columns]
    elif not first_numeric.any():
        coords = parsed[columns].iloc[1:]
    else:
        raise ValueError(
            f"{path}: first row mixes numbers and labels; cannot tell a header from a city"
        )
    if coords.empty:
        raise ValueError(f"{path}: no cities found")
    if coords.isna().any().any():
        raise ValueError(f"{path}: coordinates contain missing values")
    logger.info("Loaded %d cities from %s", len(coords), path)
    return coords.to_numpy(dtype=float)


def load_distance_matrix(path: str | Path) -> np.ndarray:
    frame = pd.read_csv(path, header=None)
    if frame.shape[0] != frame.shape[1]:
        raise ValueError(f"{path}: distance matrix must be square, got {frame.shape}")
    logger.info("Loaded %dx%d distance matrix from %s", frame.shape[0], frame.shape[1], path)
    return frame.to_numpy(dtype=float)
