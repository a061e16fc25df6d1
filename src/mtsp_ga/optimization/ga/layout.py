"""City layouts and traversal shapes for the supported route variants.

City ids are laid out as ``[fixed starts][free cities][depots]``. Only the
free cities are permuted by the genetic algorithm; starts and depots are
attached to the route segments when the chromosome is priced or decoded.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

import numpy as np

from .errors import ConfigurationError

__all__ = [
    "ROUTE_OPERATOR_COUNT",
    "VARIANTS",
    "TraversalShape",
    "RouteLayout",
    "layout_for_variant",
]

ROUTE_OPERATOR_COUNT: Final[int] = 4
"""identity, flip, swap and slide."""

VARIANTS: Final[tuple[str, ...]] = ("open", "fixed_start", "multi_variable", "multi_depot")


@dataclass(frozen=True)
class TraversalShape:
    """Capability flags selecting chromosome structure and leg costs."""

    has_fixed_start: bool = False
    has_breakpoints: bool = False
    variable_agents: bool = False
    has_depots: bool = False

    @property
    def group_size(self) -> int:
        size = ROUTE_OPERATOR_COUNT
        if self.has_breakpoints:
            size *= 2
        if self.has_depots:
            size *= 2
        return size


@dataclass(frozen=True)
class RouteLayout:
    """Structural parameters of one problem instance.

    ``fixed_starts`` is 0 (free start), 1 (start shared by every agent) or
    ``agents`` (one origin per agent). ``depots`` is 0 or ``agents``. For
    variable-agent layouts ``agents`` is ignored and every chromosome picks
    its own count in ``1..max_agents``.
    """

    n_cities: int
    agents: int = 1
    min_tour: int = 1
    fixed_starts: int = 0
    depots: int = 0
    variable_agents: bool = False

    def __post_init__(self) -> None:
        if self.n_cities < 1:
            raise ConfigurationError("at least one city is required")
        if self.agents < 1:
            raise ConfigurationError("at least one salesman is required")
        if self.min_tour < 1:
            raise ConfigurationError("min_tour must be a positive integer")
        if self.fixed_starts not in {0, 1, self.agents}:
            raise ConfigurationError(
                "fixed_starts must be 0, 1 or equal to the number of salesmen"
            )
        if self.depots not in {0, self.agents}:
            raise ConfigurationError("depots must be 0 or one per salesman")
        if self.variable_agents and (self.depots or self.fixed_starts > 1):
            raise ConfigurationError(
                "variable salesman counts only support a shared start without depots"
            )
        if self.n_free < 1:
            raise ConfigurationError(
                f"{self.n_cities} cities leave no free city once starts and depots are reserved"
            )
        if self.min_tour * self.min_agents > self.n_free:
            raise ConfigurationError(
                f"min_tour={self.min_tour} with {self.min_agents} salesmen needs "
                f"{self.min_tour * self.min_agents} free cities, only {self.n_free} available"
            )

    @property
    def n_free(self) -> int:
        return self.n_cities - self.fixed_starts - self.depots

    @property
    def min_agents(self) -> int:
        return 1 if self.variable_agents else self.agents

    @property
    def max_agents(self) -> int:
        if self.variable_agents:
            return self.n_free // self.min_tour
        return self.agents

    @property
    def shape(self) -> TraversalShape:
        return TraversalShape(
            has_fixed_start=self.fixed_starts > 0,
            has_breakpoints=self.variable_agents or self.agents > 1,
            variable_agents=self.variable_agents,
            has_depots=self.depots > 0,
        )

    @property
    def group_size(self) -> int:
        return self.shape.group_size

    @property
    def per_agent_starts(self) -> bool:
        return self.fixed_starts > 1

    @property
    def start_cities(self) -> np.ndarray:
        return np.arange(self.fixed_starts, dtype=np.intp)

    @property
    def free_cities(self) -> np.ndarray:
        return np.arange(self.fixed_starts, self.fixed_starts + self.n_free, dtype=np.intp)

    @property
    def depot_cities(self) -> np.ndarray:
        return np.arange(self.n_cities - self.depots, self.n_cities, dtype=np.intp)

    def require_population_size(self, pop_size: int) -> None:
        group = self.group_size
        if pop_size <= 0 or pop_size % group:
            raise ConfigurationError(
                f"pop_size must be a positive multiple of {group}, got {pop_size}"
            )


def layout_for_variant(
    variant: str,
    n_cities: int,
    *,
    salesmen: int = 1,
    min_tour: int = 1,
) -> RouteLayout:
    """Build the layout of one of the named :data:`VARIANTS`."""

    key = str(variant).lower()
    if key == "open":
        return RouteLayout(n_cities)
    if key == "fixed_start":
        return RouteLayout(n_cities, fixed_starts=1)
    if key == "multi_variable":
        return RouteLayout(n_cities, min_tour=min_tour, fixed_starts=1, variable_agents=True)
    if key == "multi_depot":
        return RouteLayout(
            n_cities,
            agents=salesmen,
            min_tour=min_tour,
            fixed_starts=salesmen,
            depots=salesmen,
        )
    raise ConfigurationError(f"unknown variant '{variant}', expected one of {VARIANTS}")
