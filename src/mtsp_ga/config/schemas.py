"""Pydantic schemas for solver run configuration.

This module defines typed configuration schemas using Pydantic v2 for:
- The routing problem (variant, salesmen, minimum tour length)
- Genetic algorithm parameters
- The city layout source (random cities, coordinates or a distance matrix)

YAML files passed to ``mtsp-ga solve --config`` validate against
:class:`SolverConfig`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, model_validator

__all__ = [
    "VariantName",
    "ProblemConfig",
    "GAConfig",
    "CitiesConfig",
    "SolverConfig",
]

VariantName = Literal["open", "fixed_start", "multi_variable", "multi_depot"]


class ProblemConfig(BaseModel):
    """Routing problem definition.

    Attributes
    ----------
    variant : Literal
        One of ``open``, ``fixed_start``, ``multi_variable``, ``multi_depot``
    salesmen : int, optional
        Number of salesmen (``multi_depot`` only); variant default when None
    min_tour : int, optional
        Minimum free cities per salesman; variant default when None
    """

    variant: VariantName = Field(default="fixed_start", description="Traversal variant")
    salesmen: int | None = Field(default=None, ge=1, description="Number of salesmen")
    min_tour: int | None = Field(default=None, ge=1, description="Minimum tour length")

    @model_validator(mode="after")
    def validate_salesmen_usage(self) -> "ProblemConfig":
        """Salesmen count is only meaningful for the depot variant."""
        if self.salesmen not in (None, 1) and self.variant != "multi_depot":
            raise ValueError(
                f"salesmen can only be set for the multi_depot variant, got variant={self.variant}"
            )
        return self


class GAConfig(BaseModel):
    """Genetic algorithm parameters.

    Attributes
    ----------
    pop_size : int, optional
        Population size; rounded up to a multiple of the group size by the CLI
    num_iter : int, optional
        Number of generations
    seed : int, optional
        Random seed; ``Settings.random_seed`` when None
    progress_every : int, optional
        Iterations between progress reports; about 100 reports per run when None
    """

    pop_size: int | None = Field(default=None, gt=0, description="Population size")
    num_iter: int | None = Field(default=None, gt=0, description="Number of iterations")
    seed: int | None = Field(default=None, ge=0, description="Random seed")
    progress_every: int | None = Field(
        default=None, gt=0, description="Iterations between progress reports"
    )


class CitiesConfig(BaseModel):
    """Source of the city layout.

    Exactly one of ``count``, ``points_file`` or ``matrix_file`` may be set;
    when none is set a random layout with the variant default size is used.
    """

    count: int | None = Field(default=None, gt=0, description="Random city count")
    points_file: Path | None = Field(default=None, description="CSV with x,y[,z] columns")
    matrix_file: Path | None = Field(default=None, description="CSV distance matrix")

    @model_validator(mode="after")
    def validate_single_source(self) -> "CitiesConfig":
        """Ensure at most one city source is configured."""
        sources = [
            name
            for name in ("count", "points_file", "matrix_file")
            if getattr(self, name) is not None
        ]
        if len(sources) > 1:
            raise ValueError(f"Only one city source may be set, got: {', '.join(sources)}")
        return self


class SolverConfig(BaseModel):
    """Top-level configuration for one solver run."""

    problem: ProblemConfig = Field(default_factory=ProblemConfig)
    ga: GAConfig = Field(default_factory=GAConfig)
    cities: CitiesConfig = Field(default_factory=CitiesConfig)
