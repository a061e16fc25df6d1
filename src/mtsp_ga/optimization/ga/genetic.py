"""Genetic algorithm driver that orchestrates population evolution."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping, Sequence

import numpy as np

from .distance import DistanceOracle
from .errors import ConfigurationError
from .evaluation import evaluate_population
from .evolution import next_generation
from .layout import RouteLayout
from .population import Chromosome, decode_tours, initial_population

__all__ = [
    "RunStatus",
    "CancellationToken",
    "ProgressCallback",
    "GeneticRun",
    "GeneticSolver",
    "run_genetic_algorithm",
]

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, float, Chromosome], None]


class RunStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class CancellationToken:
    """Thread-safe flag polled by the solver once per iteration."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def __call__(self) -> bool:
        return self.cancelled


@dataclass(frozen=True)
class GeneticRun:
    best: Chromosome
    min_distance: float
    history: np.ndarray
    status: RunStatus
    iterations: int
    layout: RouteLayout

    @property
    def salesmen(self) -> int:
        return self.best.agents

    def solution(self) -> list[list[int]]:
        return decode_tours(self.best, self.layout)

    def to_dict(self, *, include_history: bool = True) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "status": self.status.value,
            "iterations": self.iterations,
            "min_distance": self.min_distance,
            "salesmen": self.salesmen,
            "solution": self.solution(),
            **self.best.to_dict(),
        }
        if include_history:
            payload["history"] = self.history.tolist()
        return payload


def _prior_history(values: Sequence[float] | np.ndarray | None) -> np.ndarray:
    if values is None:
        return np.empty(0)
    history = np.asarray(values, dtype=float).ravel()
    return history[~np.isnan(history)]


class GeneticSolver:
    """Run controller: ``idle -> running -> completed | cancelled``.

    Each iteration evaluates the whole population, records the iteration
    minimum, keeps the best chromosome ever seen, polls the cancellation
    signal and only then breeds the next generation.
    """

    def __init__(
        self,
        oracle: DistanceOracle | np.ndarray,
        layout: RouteLayout,
        *,
        pop_size: int,
        num_iter: int,
        rng: np.random.Generator | int | None = None,
    ) -> None:
        if not isinstance(oracle, DistanceOracle):
            oracle = DistanceOracle(oracle)
        oracle.require_size(layout.n_cities)
        layout.require_population_size(int(pop_size))
        if int(num_iter) < 1:
            raise ConfigurationError("num_iter must be a positive integer")
        if not isinstance(rng, np.random.Generator):
            rng = np.random.default_rng(rng)
        self.oracle = oracle
        self.layout = layout
        self.pop_size = int(pop_size)
        self.num_iter = int(num_iter)
        self.rng = rng
        self.status = RunStatus.IDLE

    def run(
        self,
        *,
        seed: Chromosome | Mapping[str, Any] | None = None,
        prior_history: Sequence[float] | np.ndarray | None = None,
        cancel: Callable[[], bool] | None = None,
        progress: ProgressCallback | None = None,
        progress_every: int = 1,
    ) -> GeneticRun:
        if self.status is not RunStatus.IDLE:
            raise RuntimeError(f"solver already {self.status.value}")
        progress_every = max(1, int(progress_every))
        self.status = RunStatus.RUNNING
        logger.info(
            "Starting route search",
            extra={
                "cities": self.layout.n_cities,
                "pop_size": self.pop_size,
                "num_iter": self.num_iter,
                "group_size": self.layout.group_size,
            },
        )

        population = initial_population(self.layout, self.pop_size, self.rng, seed=seed)
        best: Chromosome | None = None
        best_distance = float("inf")
        history: list[float] = []
        iteration = 0
        status = RunStatus.COMPLETED

        for iteration in range(1, self.num_iter + 1):
            fitness = evaluate_population(population, self.oracle, self.layout)
            index = int(np.argmin(fitness))
            generation_min = float(fitness[index])
            history.append(generation_min)
            if generation_min < best_distance:
                best_distance = generation_min
                best = population[index]
                logger.debug("Iteration %d improved best distance to %.6f", iteration, best_distance)

            if progress is not None and (
                iteration % progress_every == 0 or iteration == self.num_iter
            ):
                progress(iteration, best_distance, best)

            if cancel is not None and cancel():
                status = RunStatus.CANCELLED
                logger.info("Route search cancelled after iteration %d", iteration)
                break
            if iteration == self.num_iter:
                break
            population = next_generation(population, fitness, self.layout, self.rng)

        self.status = status
        full_history = np.concatenate((_prior_history(prior_history), np.asarray(history)))
        logger.info(
            "Route search %s: best distance %.6f after %d iterations",
            status.value,
            best_distance,
            iteration,
        )
        return GeneticRun(
            best=best,
            min_distance=best_distance,
            history=full_history,
            status=status,
            iterations=iteration,
            layout=self.layout,
        )


def run_genetic_algorithm(
    oracle: DistanceOracle | np.ndarray,
    layout: RouteLayout,
    *,
    pop_size: int,
    num_iter: int,
    rng: np.random.Generator | int | None = None,
    seed: Chromosome | Mapping[str, Any] | None = None,
    prior_history: Sequence[float] | np.ndarray | None = None,
    cancel: Callable[[], bool] | None = None,
    progress: ProgressCallback | None = None,
    progress_every: int = 1,
) -> GeneticRun:
    solver = GeneticSolver(oracle, layout, pop_size=pop_size, num_iter=num_iter, rng=rng)
    return solver.run(
        seed=seed,
        prior_history=prior_history,
        cancel=cancel,
        progress=progress,
        progress_every=progress_every,
    )
