"""Mutation operators used by the route genetic algorithm."""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Callable, Mapping

import numpy as np

from .layout import TraversalShape
from .population import Chromosome

__all__ = [
    "ROUTE_OPERATORS",
    "MutationSlot",
    "identity",
    "flip",
    "swap",
    "slide",
    "mutation_slots",
    "insertion_points",
]


def identity(route: np.ndarray, i: int, j: int) -> np.ndarray:
    return route.copy()


def flip(route: np.ndarray, i: int, j: int) -> np.ndarray:
    """Reverse ``route[i..j]``."""

    mutated = route.copy()
    mutated[i : j + 1] = route[i : j + 1][::-1]
    return mutated


def swap(route: np.ndarray, i: int, j: int) -> np.ndarray:
    mutated = route.copy()
    mutated[i], mutated[j] = route[j], route[i]
    return mutated


def slide(route: np.ndarray, i: int, j: int) -> np.ndarray:
    """Rotate ``route[i..j]`` left by one; the head moves to position ``j``."""

    mutated = route.copy()
    mutated[i : j + 1] = np.roll(route[i : j + 1], -1)
    return mutated


ROUTE_OPERATORS: Mapping[str, Callable[[np.ndarray, int, int], np.ndarray]] = {
    "identity": identity,
    "flip": flip,
    "swap": swap,
    "slide": slide,
}


@dataclass(frozen=True)
class MutationSlot:
    """Recipe for one offspring slot of a tournament group."""

    operator: str = "identity"
    new_breakpoints: bool = False
    new_depots: bool = False

    @property
    def label(self) -> str:
        parts = [self.operator]
        if self.new_breakpoints:
            parts.append("breaks")
        if self.new_depots:
            parts.append("depots")
        return "+".join(parts)

    def apply(
        self,
        parent: Chromosome,
        i: int,
        j: int,
        breakpoints: Callable[[], np.ndarray],
        depots: Callable[[], np.ndarray],
    ) -> Chromosome:
        route = ROUTE_OPERATORS[self.operator](parent.route, i, j)
        return Chromosome(
            route,
            breakpoints() if self.new_breakpoints else parent.breakpoints,
            depots() if self.new_depots else parent.depots,
        )


def mutation_slots(shape: TraversalShape) -> tuple[MutationSlot, ...]:
    """Every operator combination the shape supports; slot 0 is the plain clone."""

    depot_flags = (False, True) if shape.has_depots else (False,)
    break_flags = (False, True) if shape.has_breakpoints else (False,)
    return tuple(
        MutationSlot(operator, new_breaks, new_depots)
        for new_depots, new_breaks, operator in itertools.product(
            depot_flags, break_flags, ROUTE_OPERATORS
        )
    )


def insertion_points(n: int, rng: np.random.Generator) -> tuple[int, int]:
    """Two distinct positions ``i < j``; ``(0, 0)`` for single-city routes."""

    if n < 2:
        return 0, 0
    i, j = np.sort(rng.choice(n, size=2, replace=False))
    return int(i), int(j)
