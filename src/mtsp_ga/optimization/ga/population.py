"""Chromosomes and populations for the route genetic algorithm."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping, Sequence

import numpy as np

from .layout import RouteLayout
from .partition import random_depots, sample_breakpoints, segment_lengths

__all__ = [
    "Chromosome",
    "Population",
    "random_breakpoints",
    "random_depot_assignment",
    "random_chromosome",
    "is_feasible",
    "coerce_seed",
    "initial_population",
    "decode_tours",
]

logger = logging.getLogger(__name__)


def _frozen_ids(values: Sequence[int] | np.ndarray | None) -> np.ndarray:
    if values is None:
        array = np.empty(0, dtype=np.intp)
    else:
        raw = np.asarray(values)
        if raw.ndim != 1:
            raise ValueError("chromosome genes must be 1-dimensional")
        if raw.size and not np.all(np.equal(np.mod(raw, 1), 0)):
            raise ValueError("chromosome genes must be integers")
        array = raw.astype(np.intp, copy=True)
    array.setflags(write=False)
    return array


@dataclass(frozen=True, eq=False)
class Chromosome:
    """Immutable candidate solution.

    ``breakpoints`` and ``depots`` are empty arrays for variants that do not
    carry them.
    """

    route: np.ndarray
    breakpoints: np.ndarray = field(default_factory=lambda: np.empty(0, dtype=np.intp))
    depots: np.ndarray = field(default_factory=lambda: np.empty(0, dtype=np.intp))

    def __post_init__(self) -> None:
        object.__setattr__(self, "route", _frozen_ids(self.route))
        object.__setattr__(self, "breakpoints", _frozen_ids(self.breakpoints))
        object.__setattr__(self, "depots", _frozen_ids(self.depots))

    @property
    def agents(self) -> int:
        return int(self.breakpoints.size) + 1

    def segments(self) -> list[np.ndarray]:
        return np.split(self.route, self.breakpoints)

    def copy(
        self,
        *,
        route: Sequence[int] | np.ndarray | None = None,
        breakpoints: Sequence[int] | np.ndarray | None = None,
        depots: Sequence[int] | np.ndarray | None = None,
    ) -> "Chromosome":
        return Chromosome(
            self.route if route is None else route,
            self.breakpoints if breakpoints is None else breakpoints,
            self.depots if depots is None else depots,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Chromosome):
            return NotImplemented
        return (
            np.array_equal(self.route, other.route)
            and np.array_equal(self.breakpoints, other.breakpoints)
            and np.array_equal(self.depots, other.depots)
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "route": self.route.tolist(),
            "breakpoints": self.breakpoints.tolist(),
            "depots": self.depots.tolist(),
        }

    @staticmethod
    def from_dict(payload: Mapping[str, Any]) -> "Chromosome":
        return Chromosome(
            payload["route"],
            payload.get("breakpoints"),
            payload.get("depots"),
        )


@dataclass(frozen=True)
class Population:
    """Population stored as parallel arrays.

    ``routes`` is a ``(P, n)`` matrix, ``breakpoints`` holds one variable
    length array per chromosome and ``depots`` is ``(P, m)`` (``m`` may be 0).
    """

    routes: np.ndarray
    breakpoints: tuple[np.ndarray, ...]
    depots: np.ndarray

    def __post_init__(self) -> None:
        if self.routes.ndim != 2:
            raise ValueError("routes must be a 2-dimensional array")
        size = self.routes.shape[0]
        if len(self.breakpoints) != size or self.depots.shape[0] != size:
            raise ValueError("population arrays must have the same length")

    def __len__(self) -> int:
        return int(self.routes.shape[0])

    def __getitem__(self, index: int) -> Chromosome:
        return Chromosome(self.routes[index], self.breakpoints[index], self.depots[index])

    def __iter__(self) -> Iterator[Chromosome]:
        for index in range(len(self)):
            yield self[index]

    @classmethod
    def from_chromosomes(cls, chromosomes: Sequence[Chromosome]) -> "Population":
        if not chromosomes:
            raise ValueError("population must not be empty")
        routes = np.stack([c.route for c in chromosomes]).astype(np.intp)
        depots = np.stack([c.depots for c in chromosomes]).astype(np.intp)
        breakpoints = tuple(c.breakpoints for c in chromosomes)
        return cls(routes, breakpoints, depots)

    def segment_starts(self) -> np.ndarray:
        """Boolean ``(P, n)`` mask marking the first position of every segment."""

        size, n = self.routes.shape
        mask = np.zeros((size, n), dtype=bool)
        if n == 0:
            return mask
        mask[:, 0] = True
        lengths = [b.size for b in self.breakpoints]
        if any(lengths):
            rows = np.repeat(np.arange(size), lengths)
            cols = np.concatenate(self.breakpoints).astype(np.intp)
            mask[rows, cols] = True
        return mask


def random_breakpoints(layout: RouteLayout, rng: np.random.Generator) -> np.ndarray:
    if not layout.shape.has_breakpoints:
        return np.empty(0, dtype=np.intp)
    if layout.variable_agents:
        agents = int(rng.integers(1, layout.max_agents + 1))
    else:
        agents = layout.agents
    return sample_breakpoints(layout.n_free, agents, layout.min_tour, rng)


def random_depot_assignment(layout: RouteLayout, rng: np.random.Generator) -> np.ndarray:
    if not layout.depots:
        return np.empty(0, dtype=np.intp)
    return random_depots(layout.depot_cities, rng)


def random_chromosome(
    layout: RouteLayout,
    rng: np.random.Generator,
    *,
    route: np.ndarray | None = None,
) -> Chromosome:
    if route is None:
        route = rng.permutation(layout.free_cities)
    return Chromosome(
        route,
        random_breakpoints(layout, rng),
        random_depot_assignment(layout, rng),
    )


def is_feasible(chromosome: Chromosome, layout: RouteLayout) -> bool:
    """Check every structural invariant of ``chromosome`` against ``layout``."""

    route = chromosome.route
    if route.size != layout.n_free:
        return False
    if not np.array_equal(np.sort(route), layout.free_cities):
        return False

    breaks = chromosome.breakpoints
    if layout.shape.has_breakpoints:
        if layout.variable_agents:
            if not 1 <= breaks.size + 1 <= layout.max_agents:
                return False
        elif breaks.size != layout.agents - 1:
            return False
        if breaks.size:
            if breaks[0] < 1 or breaks[-1] > layout.n_free - 1:
                return False
            if np.any(np.diff(breaks) <= 0):
                return False
            if segment_lengths(breaks, layout.n_free).min() < layout.min_tour:
                return False
    elif breaks.size:
        return False

    depots = chromosome.depots
    if layout.depots:
        if depots.size != layout.depots:
            return False
        if not np.array_equal(np.sort(depots), layout.depot_cities):
            return False
    elif depots.size:
        return False
    return True


def coerce_seed(
    seed: Chromosome | Mapping[str, Any] | None, layout: RouteLayout
) -> Chromosome | None:
    """Return ``seed`` as a chromosome when it is valid for ``layout``.

    Invalid seeds are discarded rather than raised: seeding only speeds the
    search up.
    """

    if seed is None:
        return None
    if isinstance(seed, Chromosome):
        candidate = seed
    else:
        try:
            candidate = Chromosome.from_dict(seed)
        except (KeyError, TypeError, ValueError) as exc:
            logger.info("Discarding malformed seed chromosome: %s", exc)
            return None
    if not is_feasible(candidate, layout):
        logger.info("Discarding seed chromosome that does not fit the layout")
        return None
    return candidate


def initial_population(
    layout: RouteLayout,
    size: int,
    rng: np.random.Generator,
    *,
    seed: Chromosome | Mapping[str, Any] | None = None,
) -> Population:
    """First generation: an ordered route (or the seed) plus random chromosomes."""

    layout.require_population_size(size)
    members = [random_chromosome(layout, rng, route=layout.free_cities)]
    members.extend(random_chromosome(layout, rng) for _ in range(size - 1))
    seeded = coerce_seed(seed, layout)
    if seeded is not None:
        members[0] = seeded
    return Population.from_chromosomes(members)


def decode_tours(chromosome: Chromosome, layout: RouteLayout) -> list[list[int]]:
    """Expand a chromosome into each salesman's full city sequence."""

    tours: list[list[int]] = []
    for index, segment in enumerate(chromosome.segments()):
        tour: list[int] = []
        if layout.fixed_starts:
            tour.append(int(layout.start_cities[index if layout.per_agent_starts else 0]))
        tour.extend(int(city) for city in segment)
        if layout.depots:
            tour.append(int(chromosome.depots[index]))
        tours.append(tour)
    return tours
