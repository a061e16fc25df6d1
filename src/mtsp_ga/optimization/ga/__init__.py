"""Public API for the route genetic-algorithm components."""

from .distance import DistanceOracle
from .errors import ConfigurationError, InfeasibleConstraintError
from .evaluation import chromosome_distance, evaluate_population
from .evolution import group_offspring, next_generation
from .genetic import (
    CancellationToken,
    GeneticRun,
    GeneticSolver,
    RunStatus,
    run_genetic_algorithm,
)
from .layout import VARIANTS, RouteLayout, TraversalShape, layout_for_variant
from .mutation import MutationSlot, flip, mutation_slots, slide, swap
from .partition import random_depots, sample_breakpoints, segment_lengths
from .population import (
    Chromosome,
    Population,
    coerce_seed,
    decode_tours,
    initial_population,
    is_feasible,
    random_chromosome,
)
from .selection import group_winners, tournament_groups

__all__ = [
    "DistanceOracle",
    "ConfigurationError",
    "InfeasibleConstraintError",
    "chromosome_distance",
    "evaluate_population",
    "group_offspring",
    "next_generation",
    "CancellationToken",
    "GeneticRun",
    "GeneticSolver",
    "RunStatus",
    "run_genetic_algorithm",
    "VARIANTS",
    "RouteLayout",
    "TraversalShape",
    "layout_for_variant",
    "MutationSlot",
    "flip",
    "mutation_slots",
    "slide",
    "swap",
    "random_depots",
    "sample_breakpoints",
    "segment_lengths",
    "Chromosome",
    "Population",
    "coerce_seed",
    "decode_tours",
    "initial_population",
    "is_feasible",
    "random_chromosome",
    "group_winners",
    "tournament_groups",
]
