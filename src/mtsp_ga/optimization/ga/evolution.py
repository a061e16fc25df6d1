"""One generation of tournament selection followed by structural mutation."""

from __future__ import annotations

from functools import partial
from typing import Sequence

import numpy as np

from .layout import RouteLayout
from .mutation import MutationSlot, insertion_points, mutation_slots
from .population import Chromosome, Population, random_breakpoints, random_depot_assignment
from .selection import group_winners, tournament_groups

__all__ = ["group_offspring", "next_generation"]


def group_offspring(
    parent: Chromosome,
    layout: RouteLayout,
    rng: np.random.Generator,
    *,
    slots: Sequence[MutationSlot] | None = None,
) -> list[Chromosome]:
    """Clone and mutate ``parent`` into one offspring per slot.

    The two insertion points are drawn once and shared by every slot.
    """

    slots = slots or mutation_slots(layout.shape)
    i, j = insertion_points(parent.route.size, rng)
    new_breaks = partial(random_breakpoints, layout, rng)
    new_depots = partial(random_depot_assignment, layout, rng)
    return [slot.apply(parent, i, j, new_breaks, new_depots) for slot in slots]


def next_generation(
    population: Population,
    fitness: Sequence[float],
    layout: RouteLayout,
    rng: np.random.Generator,
) -> Population:
    """Replace ``population`` by the offspring of every group winner.

    The result is written into a fresh population; the input is left intact.
    """

    if len(fitness) != len(population):
        raise ValueError("population and fitness must have the same length")
    slots = mutation_slots(layout.shape)
    groups = tournament_groups(len(population), len(slots), rng)
    offspring: list[Chromosome] = []
    for winner in group_winners(fitness, groups):
        offspring.extend(group_offspring(population[int(winner)], layout, rng, slots=slots))
    return Population.from_chromosomes(offspring)
