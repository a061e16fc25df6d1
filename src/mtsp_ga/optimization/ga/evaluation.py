"""Fitness evaluation helpers for the route genetic algorithm."""

from __future__ import annotations

import numpy as np

from .distance import DistanceOracle
from .layout import RouteLayout
from .population import Chromosome, Population

__all__ = ["evaluate_population", "chromosome_distance"]


def _route_legs(routes: np.ndarray, starts: np.ndarray, oracle: DistanceOracle) -> np.ndarray:
    if routes.shape[1] < 2:
        return np.zeros(routes.shape[0])
    legs = oracle.lookup(routes[:, :-1], routes[:, 1:])
    # a leg ending on a segment start belongs to no salesman
    return np.where(starts[:, 1:], 0.0, legs).sum(axis=1)


def _start_legs(
    routes: np.ndarray,
    starts: np.ndarray,
    segment: np.ndarray,
    layout: RouteLayout,
    oracle: DistanceOracle,
) -> np.ndarray:
    origins = layout.start_cities
    if layout.per_agent_starts:
        origin = origins[segment]
    else:
        origin = np.full_like(routes, origins[0])
    return np.where(starts, oracle.lookup(origin, routes), 0.0).sum(axis=1)


def _depot_legs(
    population: Population,
    starts: np.ndarray,
    segment: np.ndarray,
    oracle: DistanceOracle,
) -> np.ndarray:
    ends = np.ones_like(starts)
    ends[:, :-1] = starts[:, 1:]
    depot = np.take_along_axis(population.depots, segment, axis=1)
    return np.where(ends, oracle.lookup(population.routes, depot), 0.0).sum(axis=1)


def evaluate_population(
    population: Population, oracle: DistanceOracle, layout: RouteLayout
) -> np.ndarray:
    """Total distance of every chromosome, priced in one batched pass.

    Each segment costs its leading leg from the salesman's start (when the
    layout has fixed starts), its intra-segment legs and, with depots, the
    closing leg to the assigned depot. Tours never return to their start.
    """

    routes = population.routes
    starts = population.segment_starts()
    totals = _route_legs(routes, starts, oracle)
    if not (layout.fixed_starts or layout.depots):
        return totals
    segment = np.cumsum(starts, axis=1) - 1
    if layout.fixed_starts:
        totals = totals + _start_legs(routes, starts, segment, layout, oracle)
    if layout.depots:
        totals = totals + _depot_legs(population, starts, segment, oracle)
    return totals


def chromosome_distance(
    chromosome: Chromosome, oracle: DistanceOracle, layout: RouteLayout
) -> float:
    population = Population.from_chromosomes([chromosome])
    return float(evaluate_population(population, oracle, layout)[0])
