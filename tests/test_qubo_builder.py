"""Tests for QUBO encoding, penalties and the Ising conversion."""

import itertools

import numpy as np
import pytest

from swarm_assignment.config import PenaltyConfig
from swarm_assignment.qubo import (
    PenaltyCalculator,
    QuboEncoder,
    VariableIndexer,
    encode_qubo,
    qubo_energy,
    qubo_to_ising,
    qubo_to_sparse,
    validate_cost_matrix,
)
from swarm_assignment.result import InputErrorKind


def _all_bitstrings(num_vars):
    return np.array(list(itertools.product([0, 1], repeat=num_vars)), dtype=np.float64)


def _is_permutation_grid(bits, n):
    grid = bits.reshape(n, n)
    return bool(np.all(grid.sum(axis=0) == 1) and np.all(grid.sum(axis=1) == 1))


def _split_energies(cost, penalty):
    """Energies of every bit vector, split into feasible and infeasible."""
    n = cost.shape[0]
    qubo = QuboEncoder(cost, penalty).build()
    bits = _all_bitstrings(n * n)
    energies = np.einsum("ij,jk,ik->i", bits, qubo, bits)
    feasible = np.array([_is_permutation_grid(b, n) for b in bits])
    return energies[feasible], energies[~feasible]


class TestVariableIndexer:
    def test_flat_index_round_trip(self):
        indexer = VariableIndexer(4)
        for row in range(4):
            for col in range(4):
                idx = indexer.index(row, col)
                assert idx == row * 4 + col
                assert indexer.position(idx) == (row, col)

    def test_row_and_column_groups(self):
        indexer = VariableIndexer(3)
        assert indexer.row_indices(1) == [3, 4, 5]
        assert indexer.column_indices(2) == [2, 5, 8]
        assert indexer.total_variables == 9


class TestValidateCostMatrix:
    def test_accepts_lists(self):
        result = validate_cost_matrix([[1, 2], [3, 4]])
        assert result.is_ok
        assert result.value.dtype == np.float64

    @pytest.mark.parametrize("matrix", [
        [[1, 2, 3], [4, 5, 6]],
        [1.0, 2.0],
        [[[1.0]]],
    ])
    def test_rejects_non_square(self, matrix):
        result = validate_cost_matrix(matrix)
        assert result.is_err
        assert result.error.kind is InputErrorKind.INVALID_MATRIX

    def test_rejects_empty(self):
        result = validate_cost_matrix(np.zeros((0, 0)))
        assert result.is_err
        assert result.error.kind is InputErrorKind.EMPTY_INPUT

    @pytest.mark.parametrize("bad", [np.nan, np.inf, -np.inf, -1.0])
    def test_rejects_non_finite_and_negative(self, bad):
        matrix = np.ones((2, 2))
        matrix[1, 0] = bad
        result = validate_cost_matrix(matrix)
        assert result.is_err
        assert result.error.kind is InputErrorKind.INVALID_MATRIX


class TestQuboEncoder:
    def test_shape_and_symmetry(self, random_costs):
        for cost in random_costs:
            n = cost.shape[0]
            qubo = QuboEncoder(cost, 10.0).build()
            assert qubo.shape == (n * n, n * n)
            np.testing.assert_allclose(qubo, qubo.T)

    def test_coefficients_follow_encoding(self):
        cost = np.array([[1.0, 2.0], [3.0, 4.0]])
        penalty = 10.0
        qubo = QuboEncoder(cost, penalty).build()

        # Diagonal: cost - λ (row) - λ (column)
        np.testing.assert_allclose(np.diag(qubo), cost.ravel() - 2 * penalty)

        # Same row or same column: 2λ; otherwise 0
        assert qubo[0, 1] == qubo[1, 0] == 2 * penalty   # row 0
        assert qubo[0, 2] == qubo[2, 0] == 2 * penalty   # column 0
        assert qubo[0, 3] == qubo[3, 0] == 0.0           # (0,0) vs (1,1)
        assert qubo[1, 2] == 0.0                         # (0,1) vs (1,0)

    def test_single_agent(self):
        encoder = QuboEncoder(np.array([[7.5]]), 15.0)
        qubo = encoder.build()
        assert qubo.shape == (1, 1)
        assert qubo[0, 0] == pytest.approx(7.5 - 30.0)

    def test_feasible_energy_plus_constant_is_total_cost(self, random_costs):
        for cost in random_costs:
            n = cost.shape[0]
            encoder = QuboEncoder(cost, PenaltyCalculator().compute_penalty_weight(cost))
            for perm in itertools.permutations(range(n)):
                bits = encoder.indexer.encode_permutation(perm)
                expected = sum(cost[i, perm[i]] for i in range(n))
                assert encoder.compute_energy(bits, include_constant=True) == pytest.approx(expected)

    def test_build_is_idempotent(self):
        encoder = QuboEncoder(np.ones((2, 2)), 5.0)
        first = encoder.build().copy()
        np.testing.assert_array_equal(encoder.build(), first)
        assert encoder.constant == pytest.approx(4 * 5.0)

    def test_sparse_export_reproduces_energy(self):
        rng = np.random.default_rng(3)
        cost = rng.uniform(0, 10, size=(3, 3))
        encoder = QuboEncoder(cost, 60.0)
        qubo = encoder.build()
        sparse = encoder.to_sparse()

        assert all(a <= b for a, b in sparse)
        for bits in rng.integers(0, 2, size=(20, 9)):
            from_sparse = sum(v * bits[a] * bits[b] for (a, b), v in sparse.items())
            assert from_sparse == pytest.approx(qubo_energy(qubo, bits))

        assert qubo_to_sparse(qubo) == sparse

    def test_encode_qubo_uses_lucas_rule(self):
        cost = np.array([[0.0, 4.0], [4.0, 0.0]])
        result = encode_qubo(cost)
        assert result.is_ok
        penalty = 2 * 2 * 4.0
        np.testing.assert_allclose(np.diag(result.value), cost.ravel() - 2 * penalty)

    def test_encode_qubo_rejects_bad_input(self):
        result = encode_qubo([[1.0, np.nan], [0.0, 1.0]])
        assert result.is_err
        assert result.error.kind is InputErrorKind.INVALID_MATRIX


class TestPenaltyDominance:
    def test_default_is_lucas_rule(self):
        cost = np.array([[1.0, 9.0], [3.0, 2.0]])
        calc = PenaltyCalculator()
        assert calc.compute_penalty_weight(cost) == pytest.approx(2 * 2 * 9.0)
        assert calc.lucas_bound(cost) == pytest.approx(36.0)
        assert calc.is_dominant(36.0, cost)

    def test_override_bypasses_rule(self):
        calc = PenaltyCalculator(PenaltyConfig(override=123.0))
        assert calc.compute_penalty_weight(np.ones((3, 3))) == 123.0

    def test_zero_matrix_still_gets_positive_penalty(self):
        calc = PenaltyCalculator()
        assert calc.compute_penalty_weight(np.zeros((3, 3))) == pytest.approx(6.0)

    @pytest.mark.parametrize("n", [2, 3])
    def test_feasible_always_below_infeasible(self, n):
        rng = np.random.default_rng(n)
        calc = PenaltyCalculator()
        for _ in range(5):
            cost = rng.uniform(0, 100, size=(n, n))
            feasible, infeasible = _split_energies(cost, calc.compute_penalty_weight(cost))
            assert feasible.max() < infeasible.min()

    @pytest.mark.parametrize("multiplier", [1.01, 1.1, 1.5, 2.0, 3.0])
    def test_multiplier_sweep_above_bound(self, multiplier):
        rng = np.random.default_rng(99)
        calc = PenaltyCalculator(PenaltyConfig(multiplier=multiplier))
        for n in (2, 3):
            for _ in range(3):
                cost = rng.uniform(0, 20, size=(n, n))
                penalty = calc.compute_penalty_weight(cost)
                assert calc.is_dominant(penalty, cost)
                feasible, infeasible = _split_energies(cost, penalty)
                assert feasible.max() < infeasible.min()

    def test_degenerate_matrices(self):
        calc = PenaltyCalculator()
        for cost in (np.zeros((3, 3)), np.full((3, 3), 5.0)):
            feasible, infeasible = _split_energies(cost, calc.compute_penalty_weight(cost))
            assert feasible.max() < infeasible.min()

    def test_penalty_below_bound_lets_empty_sample_win(self):
        cost = np.full((2, 2), 10.0)
        calc = PenaltyCalculator()
        assert not calc.is_dominant(1.0, cost)

        qubo = QuboEncoder(cost, 1.0).build()
        empty = np.zeros(4)
        identity = VariableIndexer(2).encode_permutation([0, 1])
        assert qubo_energy(qubo, empty) < qubo_energy(qubo, identity)


class TestQuboToIsing:
    def test_energies_match(self):
        rng = np.random.default_rng(11)
        cost = rng.uniform(0, 5, size=(2, 2))
        encoder = QuboEncoder(cost, 25.0)
        qubo = encoder.build()
        h, J, offset = qubo_to_ising(qubo, encoder.constant)

        for bits in _all_bitstrings(4):
            spins = 1 - 2 * bits  # bit 0 -> +1
            ising = h @ spins + spins @ J @ spins + offset
            assert ising == pytest.approx(qubo_energy(qubo, bits) + encoder.constant)

    def test_couplings_upper_triangular(self):
        qubo = QuboEncoder(np.ones((2, 2)), 4.0).build()
        _, J, _ = qubo_to_ising(qubo)
        np.testing.assert_array_equal(J, np.triu(J, k=1))
