"""
Penalty weight calculator for the one-hot assignment constraints.

Ensures constraint penalties dominate cost minimization in the QUBO.
"""

from typing import Optional

import numpy as np

from ..config import PenaltyConfig


class PenaltyCalculator:
    """
    Computes penalty weights satisfying the dominance condition.

    With the row/column one-hot encoding each constraint contributes
    λ·f(s), f(s) = 2s² - 3s, where s is the number of set bits in the
    row (or column). f is integer valued with unique minimum f(1) = -1, so
    any violated constraint costs at least λ more than a satisfied one.
    Feasible assignments cost at most N·max(c), infeasible ones at least 0,
    hence λ > N·max(c) keeps every infeasible energy above every feasible one.

    The shipped default is the Lucas rule λ = 2·N·max(c).
    """

    def __init__(self, config: Optional[PenaltyConfig] = None):
        """
        Initialize penalty calculator.

        Args:
            config: Penalty multiplier and optional fixed override
        """
        self.config = config if config is not None else PenaltyConfig()

    @staticmethod
    def base_cost(cost_matrix: np.ndarray) -> float:
        """
        Largest single assignment cost.

        A zero matrix still needs a positive penalty, so 1.0 is used instead.
        """
        max_cost = float(np.max(cost_matrix))
        return max_cost if max_cost > 0 else 1.0

    def dominance_bound(self, cost_matrix: np.ndarray) -> float:
        """Penalty must strictly exceed N·max(c) for non-dominance."""
        n = cost_matrix.shape[0]
        return n * self.base_cost(cost_matrix)

    def lucas_bound(self, cost_matrix: np.ndarray) -> float:
        """λ = 2·N·max(c)."""
        return 2.0 * self.dominance_bound(cost_matrix)

    def compute_penalty_weight(self, cost_matrix: np.ndarray) -> float:
        """
        Compute penalty weight for the one-hot constraints.

        Args:
            cost_matrix: Validated N x N cost matrix

        Returns:
            Penalty weight λ (config override when set)
        """
        if self.config.override is not None:
            return float(self.config.override)
        return self.config.multiplier * self.dominance_bound(cost_matrix)

    def is_dominant(self, penalty_weight: float, cost_matrix: np.ndarray) -> bool:
        """True when ``penalty_weight`` guarantees feasible < infeasible energy."""
        return penalty_weight > self.dominance_bound(cost_matrix)
