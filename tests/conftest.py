"""Shared fixtures and sampler test doubles."""

import numpy as np
import pytest

from swarm_assignment.qubo.qubo_builder import VariableIndexer
from swarm_assignment.result import Err, Ok, SamplerError


class StaticSampler:
    """Returns a fixed batch of bit vectors and records the calls."""

    def __init__(self, samples):
        self.samples = [np.asarray(s) for s in samples]
        self.calls = []

    def sample(self, qubo, shots):
        self.calls.append((qubo.shape, shots))
        return Ok(list(self.samples))


class ZeroSampler:
    """Every shot is the all-zero bit vector."""

    def sample(self, qubo, shots):
        return Ok([np.zeros(qubo.shape[0], dtype=np.int64) for _ in range(shots)])


class FailingSampler:
    """Reports failure through the Result channel."""

    def sample(self, qubo, shots):
        return Err(SamplerError("backend unavailable"))


class RaisingSampler:
    """Raises instead of returning a Result."""

    def sample(self, qubo, shots):
        raise ConnectionError("lost connection to backend")


def permutation_bits(columns):
    """One-hot bit vector for row i -> columns[i]."""
    return VariableIndexer(len(columns)).encode_permutation(columns)


@pytest.fixture
def diagonal_cost():
    """3x3 costs with a zero diagonal and 100 everywhere else."""
    cost = np.full((3, 3), 100.0)
    np.fill_diagonal(cost, 0.0)
    return cost


@pytest.fixture
def random_costs():
    """Seeded random cost matrices, N = 1..4."""
    rng = np.random.default_rng(1234)
    return [rng.uniform(0, 50, size=(n, n)) for n in (1, 2, 3, 4) for _ in range(3)]
