from __future__ import annotations

import numpy as np
import pytest

from mtsp_ga.optimization.ga import (
    DistanceOracle,
    evaluate_population,
    group_offspring,
    group_winners,
    initial_population,
    is_feasible,
    layout_for_variant,
    mutation,
    next_generation,
    tournament_groups,
)


@pytest.fixture
def fixed_start_setup():
    layout = layout_for_variant("fixed_start", 9)
    rng = np.random.default_rng(17)
    oracle = DistanceOracle(rng.random((9, 9)) * 100)
    population = initial_population(layout, 16, rng)
    fitness = evaluate_population(population, oracle, layout)
    return layout, population, fitness


def test_each_group_yields_clone_and_three_mutants(fixed_start_setup) -> None:
    layout, population, fitness = fixed_start_setup

    offspring = next_generation(population, fitness, layout, np.random.default_rng(7))

    replay = np.random.default_rng(7)
    groups = tournament_groups(len(population), layout.group_size, replay)
    winners = group_winners(fitness, groups)
    assert len(offspring) == 16
    for g, winner in enumerate(winners):
        parent = population.routes[winner]
        i, j = mutation.insertion_points(parent.size, replay)
        block = offspring.routes[4 * g : 4 * g + 4]
        np.testing.assert_array_equal(block[0], parent)
        np.testing.assert_array_equal(block[1], mutation.flip(parent, i, j))
        np.testing.assert_array_equal(block[2], mutation.swap(parent, i, j))
        np.testing.assert_array_equal(block[3], mutation.slide(parent, i, j))


def test_next_generation_leaves_input_untouched(fixed_start_setup) -> None:
    layout, population, fitness = fixed_start_setup
    routes = population.routes.copy()

    next_generation(population, fitness, layout, np.random.default_rng(0))

    np.testing.assert_array_equal(population.routes, routes)


def test_best_member_survives(fixed_start_setup) -> None:
    layout, population, fitness = fixed_start_setup
    best_route = population.routes[int(np.argmin(fitness))]

    offspring = next_generation(population, fitness, layout, np.random.default_rng(3))

    assert any(np.array_equal(route, best_route) for route in offspring.routes)


def test_fitness_length_must_match(fixed_start_setup) -> None:
    layout, population, fitness = fixed_start_setup
    with pytest.raises(ValueError):
        next_generation(population, fitness[:-1], layout, np.random.default_rng(0))


def test_depot_offspring_stay_feasible() -> None:
    layout = layout_for_variant("multi_depot", 16, salesmen=3, min_tour=2)
    rng = np.random.default_rng(9)
    oracle = DistanceOracle(rng.random((16, 16)))
    population = initial_population(layout, 32, rng)

    for _ in range(5):
        fitness = evaluate_population(population, oracle, layout)
        population = next_generation(population, fitness, layout, rng)
        assert len(population) == 32
        assert all(is_feasible(member, layout) for member in population)


def test_group_offspring_clone_shares_parent_structure() -> None:
    layout = layout_for_variant("multi_variable", 12, min_tour=2)
    rng = np.random.default_rng(4)
    parent = initial_population(layout, 8, rng)[3]

    children = group_offspring(parent, layout, rng)

    assert len(children) == 8
    assert children[0] == parent
    for child in children[1:4]:
        np.testing.assert_array_equal(child.breakpoints, parent.breakpoints)
    for child in children:
        assert is_feasible(child, layout)


def test_zero_slack_partition_is_kept_for_fifty_generations() -> None:
    # 3 starts + 9 free cities + 3 depots
    layout = layout_for_variant("multi_depot", 15, salesmen=3, min_tour=3)
    rng = np.random.default_rng(12)
    oracle = DistanceOracle(rng.random((15, 15)))
    population = initial_population(layout, 32, rng)

    for _ in range(50):
        for member in population:
            np.testing.assert_array_equal(member.breakpoints, [3, 6])
        fitness = evaluate_population(population, oracle, layout)
        population = next_generation(population, fitness, layout, rng)
