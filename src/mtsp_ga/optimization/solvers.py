"""Public entry points for configured solver runs."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

import numpy as np

from mtsp_ga.config import (
    CitiesConfig,
    Settings,
    SolverConfig,
    get_settings,
    merge_defaults,
    progress_interval,
    round_population_size,
)
from mtsp_ga.data.cities import load_distance_matrix, load_points, random_points
from mtsp_ga.optimization.ga import (
    DistanceOracle,
    GeneticRun,
    layout_for_variant,
    run_genetic_algorithm,
)
from mtsp_ga.optimization.ga.genetic import ProgressCallback

__all__ = [
    "SolveResult",
    "resolve_config_path",
    "build_oracle",
    "run_solver",
    "save_result",
]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SolveResult:
    config_path: Path | None
    environment: str
    variant: str
    seed: int
    pop_size: int
    run: GeneticRun

    @property
    def status(self) -> str:
        return self.run.status.value

    def to_dict(self, include_history: bool = False) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "config_path": str(self.config_path) if self.config_path else None,
            "environment": self.environment,
            "variant": self.variant,
            "cities": self.run.layout.n_cities,
            "seed": self.seed,
            "pop_size": self.pop_size,
        }
        payload.update(self.run.to_dict(include_history=include_history))
        return payload


def resolve_config_path(
    config_path: str | Path,
    *,
    settings: Settings | None = None,
) -> Path:
    """Locate ``config_path`` as given, under ``configs_dir`` or the project root."""

    settings = settings or get_settings()
    candidate = Path(config_path).expanduser()
    if not candidate.is_absolute() and not candidate.exists():
        in_configs = settings.configs_dir / candidate
        candidate = in_configs if in_configs.exists() else settings.project_root / candidate

    candidate = candidate.resolve()
    if not candidate.exists():
        raise FileNotFoundError(f"solver config not found: {candidate}")
    return candidate


def _resolve_relative_path(value: Path, *, base: Path | None, settings: Settings) -> Path:
    candidate = value.expanduser()
    if not candidate.is_absolute():
        anchor = base if base is not None else Path.cwd()
        candidate = (anchor / candidate).resolve()
    if not candidate.exists():
        fallback = (settings.project_root / value).resolve()
        if fallback.exists():
            candidate = fallback
    if not candidate.exists():
        raise FileNotFoundError(f"Data file not found: {candidate}")
    return candidate


def build_oracle(
    cities: CitiesConfig,
    *,
    default_count: int,
    rng: np.random.Generator,
    base: Path | None = None,
    settings: Settings | None = None,
) -> DistanceOracle:
    """Build the distance oracle described by ``cities``.

    Random layouts draw from ``rng`` so the same seed reproduces both the
    cities and the search.
    """

    settings = settings or get_settings()
    if cities.matrix_file is not None:
        path = _resolve_relative_path(cities.matrix_file, base=base, settings=settings)
        logger.info("Loading distance matrix from %s", path)
        return DistanceOracle(load_distance_matrix(path))
    if cities.points_file is not None:
        path = _resolve_relative_path(cities.points_file, base=base, settings=settings)
        logger.info("Loading city coordinates from %s", path)
        return DistanceOracle.from_points(load_points(path))
    count = cities.count or default_count
    logger.info("Generating %d random cities", count)
    return DistanceOracle.from_points(random_points(count, rng=rng))


def run_solver(
    config: SolverConfig | None = None,
    *,
    config_path: Path | None = None,
    settings: Settings | None = None,
    cancel: Callable[[], bool] | None = None,
    progress: ProgressCallback | None = None,
) -> SolveResult:
    """Run the genetic algorithm described by ``config``.

    Unset values fall back to the variant defaults, and the population size
    is rounded up to a multiple of the variant group size.
    """

    settings = settings or get_settings()
    config = config or SolverConfig()
    problem = config.problem
    defaults = merge_defaults(
        problem.variant,
        {
            "cities": config.cities.count,
            "pop_size": config.ga.pop_size,
            "num_iter": config.ga.num_iter,
            "min_tour": problem.min_tour,
            "salesmen": problem.salesmen,
        },
    )
    seed = settings.random_seed if config.ga.seed is None else config.ga.seed
    rng = np.random.default_rng(seed)

    base = config_path.parent if config_path is not None else None
    oracle = build_oracle(
        config.cities,
        default_count=defaults.cities,
        rng=rng,
        base=base,
        settings=settings,
    )
    layout = layout_for_variant(
        problem.variant,
        oracle.size,
        salesmen=defaults.salesmen,
        min_tour=defaults.min_tour,
    )

    pop_size = round_population_size(defaults.pop_size, layout.group_size)
    if pop_size != defaults.pop_size:
        logger.warning(
            "Population size %d is not a multiple of %d; using %d",
            defaults.pop_size,
            layout.group_size,
            pop_size,
        )
    progress_every = config.ga.progress_every or progress_interval(defaults.num_iter)

    run = run_genetic_algorithm(
        oracle,
        layout,
        pop_size=pop_size,
        num_iter=defaults.num_iter,
        rng=rng,
        cancel=cancel,
        progress=progress,
        progress_every=progress_every,
    )
    return SolveResult(
        config_path=config_path,
        environment=settings.environment,
        variant=problem.variant,
        seed=int(seed),
        pop_size=pop_size,
        run=run,
    )


def save_result(
    result: SolveResult,
    target: str | Path,
    *,
    settings: Settings | None = None,
) -> Path:
    """Write the full payload, history included, as JSON.

    Relative targets land under ``settings.outputs_dir``.
    """

    settings = settings or get_settings()
    path = Path(target).expanduser()
    if not path.is_absolute():
        path = settings.outputs_dir / path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(result.to_dict(include_history=True), indent=2, sort_keys=True),
        encoding="utf-8",
    )
    logger.info("Saved %s run to %s", result.status, path)
    return path
