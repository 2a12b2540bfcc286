"""Tests for the greedy classical fallback."""

import numpy as np
import pytest

from swarm_assignment.hybrid import ClassicalFallbackSolver, validate_assignment


def test_greedy_order():
    cost = np.array([
        [2.0, 1.0, 3.0],
        [5.0, 1.0, 4.0],
        [1.0, 9.0, 9.0],
    ])
    # Row 0 takes col 1 first, so row 1 must settle for col 2
    assert ClassicalFallbackSolver().solve(cost) == ((0, 1), (1, 2), (2, 0))


def test_single_agent():
    assert ClassicalFallbackSolver().solve(np.array([[4.2]])) == ((0, 0),)


def test_all_costs_equal_takes_lowest_free_column():
    assert ClassicalFallbackSolver().solve(np.full((4, 4), 7.0)) == (
        (0, 0), (1, 1), (2, 2), (3, 3)
    )


@pytest.mark.parametrize("n", [1, 2, 3, 5, 8, 13])
def test_always_a_bijection(n):
    rng = np.random.default_rng(n)
    solver = ClassicalFallbackSolver()
    for _ in range(10):
        cost = rng.uniform(0, 100, size=(n, n))
        pairs = solver.solve(cost)
        assert validate_assignment(pairs, n).is_valid
        assert [row for row, _ in pairs] == list(range(n))


def test_zero_matrix():
    pairs = ClassicalFallbackSolver().solve(np.zeros((3, 3)))
    assert validate_assignment(pairs, 3).is_valid
