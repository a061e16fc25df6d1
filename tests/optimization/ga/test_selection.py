from __future__ import annotations

import numpy as np
import pytest

from mtsp_ga.optimization.ga import group_winners, tournament_groups


def test_groups_partition_the_population() -> None:
    groups = tournament_groups(16, 4, np.random.default_rng(0))

    assert groups.shape == (4, 4)
    assert sorted(groups.ravel().tolist()) == list(range(16))


def test_group_size_must_divide_population() -> None:
    with pytest.raises(ValueError):
        tournament_groups(10, 4, np.random.default_rng(0))


def test_winner_is_group_minimum() -> None:
    fitness = np.array([5.0, 1.0, 7.0, 3.0, 2.0, 9.0, 0.5, 4.0])
    groups = np.array([[0, 1, 2, 3], [4, 5, 6, 7]])

    np.testing.assert_array_equal(group_winners(fitness, groups), [1, 6])


def test_ties_go_to_first_member_of_shuffled_group() -> None:
    fitness = np.array([1.0, 1.0, 1.0, 1.0])
    groups = np.array([[2, 0, 3, 1]])

    np.testing.assert_array_equal(group_winners(fitness, groups), [2])


def test_group_indices_must_fit_fitness() -> None:
    with pytest.raises(ValueError):
        group_winners([1.0, 2.0], np.array([[0, 2]]))
