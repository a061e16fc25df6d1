from __future__ import annotations

import json
import logging
from pathlib import Path

import numpy as np
import pytest

from mtsp_ga.config import Settings, SolverConfig, reset_settings_cache
from mtsp_ga.optimization.ga import ConfigurationError, RunStatus
from mtsp_ga.optimization.solvers import resolve_config_path, run_solver, save_result


def teardown_function() -> None:  # pragma: no cover - helper
    reset_settings_cache()


def _make_settings(tmp_path: Path) -> Settings:
    configs_dir = tmp_path / "configs"
    logs_dir = tmp_path / "logs"
    for directory in (configs_dir, logs_dir):
        directory.mkdir(parents=True, exist_ok=True)
    return Settings.from_env(
        overrides={
            "project_root": tmp_path,
            "CONFIGS_DIR": configs_dir,
            "LOGS_DIR": logs_dir,
            "RANDOM_SEED": 11,
        },
        environ={},
    )


def test_resolve_config_path_prefers_configs_dir(tmp_path: Path) -> None:
    settings = _make_settings(tmp_path)
    target = settings.configs_dir / "run.yaml"
    target.write_text("ga:\n  num_iter: 3\n", encoding="utf-8")

    assert resolve_config_path("run.yaml", settings=settings) == target.resolve()
    with pytest.raises(FileNotFoundError):
        resolve_config_path("missing.yaml", settings=settings)


def test_run_solver_random_cities_uses_settings_seed(tmp_path: Path) -> None:
    settings = _make_settings(tmp_path)
    config = SolverConfig.model_validate(
        {"problem": {"variant": "open"}, "ga": {"pop_size": 8, "num_iter": 5}, "cities": {"count": 7}}
    )

    first = run_solver(config, settings=settings)
    second = run_solver(config, settings=settings)

    assert first.seed == 11
    assert first.run.layout.n_cities == 7
    assert first.status == RunStatus.COMPLETED.value
    assert first.run.best == second.run.best
    np.testing.assert_array_equal(first.run.history, second.run.history)


def test_run_solver_rounds_population(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    settings = _make_settings(tmp_path)
    config = SolverConfig.model_validate(
        {
            "problem": {"variant": "multi_depot", "salesmen": 2, "min_tour": 1},
            "ga": {"pop_size": 20, "num_iter": 3, "seed": 1},
            "cities": {"count": 9},
        }
    )

    with caplog.at_level(logging.WARNING, logger="mtsp_ga.optimization.solvers"):
        result = run_solver(config, settings=settings)

    assert result.pop_size == 32
    assert "not a multiple of 16" in caplog.text
    payload = result.to_dict()
    assert payload["variant"] == "multi_depot"
    assert payload["salesmen"] == 2
    assert [tour[0] for tour in payload["solution"]] == [0, 1]
    assert "history" not in payload


def test_run_solver_reads_matrix_relative_to_config(tmp_path: Path) -> None:
    settings = _make_settings(tmp_path)
    config_path = settings.configs_dir / "matrix_run.yaml"
    (settings.configs_dir / "matrix.csv").write_text(
        "0,1,9,9\n9,0,1,9\n9,9,0,1\n1,9,9,0\n", encoding="utf-8"
    )
    config = SolverConfig.model_validate(
        {
            "problem": {"variant": "fixed_start"},
            "ga": {"pop_size": 8, "num_iter": 50, "seed": 2},
            "cities": {"matrix_file": "matrix.csv"},
        }
    )

    result = run_solver(config, config_path=config_path, settings=settings)

    assert result.run.min_distance == pytest.approx(3.0)
    assert result.run.solution() == [[0, 1, 2, 3]]
    assert result.to_dict()["config_path"] == str(config_path)


def test_run_solver_missing_points_file(tmp_path: Path) -> None:
    settings = _make_settings(tmp_path)
    config = SolverConfig.model_validate({"cities": {"points_file": "absent.csv"}})

    with pytest.raises(FileNotFoundError):
        run_solver(config, settings=settings)


def test_run_solver_infeasible_layout(tmp_path: Path) -> None:
    settings = _make_settings(tmp_path)
    config = SolverConfig.model_validate(
        {
            "problem": {"variant": "multi_depot", "salesmen": 4, "min_tour": 3},
            "ga": {"num_iter": 1},
            "cities": {"count": 12},
        }
    )

    with pytest.raises(ConfigurationError):
        run_solver(config, settings=settings)


def test_run_solver_stops_on_cancel(tmp_path: Path) -> None:
    settings = _make_settings(tmp_path)
    config = SolverConfig.model_validate({"ga": {"pop_size": 8, "num_iter": 500}, "cities": {"count": 6}})

    result = run_solver(config, settings=settings, cancel=lambda: True)

    assert result.status == "cancelled"
    assert result.run.iterations == 1


def test_save_result_relative_and_absolute_targets(tmp_path: Path) -> None:
    settings = _make_settings(tmp_path)
    config = SolverConfig.model_validate({"ga": {"pop_size": 8, "num_iter": 3}, "cities": {"count": 6}})
    result = run_solver(config, settings=settings)

    relative = save_result(result, "nested/run.json", settings=settings)
    absolute = save_result(result, tmp_path / "elsewhere.json", settings=settings)

    assert relative == settings.outputs_dir / "nested" / "run.json"
    assert absolute == tmp_path / "elsewhere.json"
    payload = json.loads(relative.read_text(encoding="utf-8"))
    assert payload["seed"] == 11
    assert payload["history"] == result.run.history.tolist()
    assert payload["solution"] == result.run.solution()
