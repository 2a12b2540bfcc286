"""
Data models for swarm assignment.

Defines positions, formations, sampled candidates and the final solution.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

import numpy as np


Pair = Tuple[int, int]  # (row, column) = (agent, target slot)
Assignment = Tuple[Pair, ...]


@dataclass(frozen=True)
class Position3D:
    """
    Position in metres relative to the ground origin.

    Attributes:
        x: positive = right
        y: positive = forward
        z: positive = up (altitude)
    """
    x: float
    y: float
    z: float = 0.0

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.float64)


@dataclass(frozen=True)
class Formation:
    """A named, ordered set of target slots."""
    name: str
    positions: Tuple[Position3D, ...]

    def __post_init__(self):
        if not self.positions:
            raise ValueError(f"Formation '{self.name}' has no positions")

    @property
    def size(self) -> int:
        return len(self.positions)


class Provenance(Enum):
    """Where a solution came from."""
    SAMPLED_VALID = "sampled_valid"
    CLASSICAL_FALLBACK = "classical_fallback"


class SolveState(Enum):
    """Orchestrator states, in the order a solve() call visits them."""
    IDLE = "idle"
    ENCODING = "encoding"
    AWAITING_SAMPLES = "awaiting_samples"
    SELECTING_BEST = "selecting_best"
    FALLBACK = "fallback"
    DONE = "done"
    ERROR = "error"


@dataclass(frozen=True)
class Candidate:
    """A decoded sample that passed validation."""
    assignment: Assignment
    total_cost: float
    sample_index: int  # Position in the sampler's batch
    energy: Optional[float] = None  # QUBO energy x^T Q x, when available


@dataclass
class Solution:
    """Result of a successful solve() call."""

    assignment: Assignment  # Sorted by row
    total_cost: float
    provenance: Provenance

    # Diagnostics
    penalty_weight: float = 0.0
    num_samples: int = 0
    num_valid_samples: int = 0
    sampler_error: Optional[str] = None  # Set when the fallback policy absorbed it
    states: Tuple[SolveState, ...] = field(default_factory=tuple)
    encode_time: float = 0.0
    sample_time: float = 0.0

    @property
    def size(self) -> int:
        return len(self.assignment)

    @property
    def used_fallback(self) -> bool:
        return self.provenance is Provenance.CLASSICAL_FALLBACK

    def as_mapping(self) -> Dict[int, int]:
        """Row -> column dictionary."""
        return {row: col for row, col in self.assignment}

    def columns(self) -> List[int]:
        """Assigned column for each row, in row order."""
        return [col for _, col in self.assignment]


def total_cost(cost_matrix: np.ndarray, pairs) -> float:
    """Sum of cost[row, col] over the given pairs."""
    return float(sum(cost_matrix[row, col] for row, col in pairs))
