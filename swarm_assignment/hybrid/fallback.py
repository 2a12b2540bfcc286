"""
Classical fallback for when no sampled candidate is usable.

Greedy nearest-available-slot assignment, always a valid bijection.
"""

import logging
from typing import List

import numpy as np

from ..data.models import Assignment

logger = logging.getLogger(__name__)


class ClassicalFallbackSolver:
    """
    Greedy nearest-unused-column assignment.

    Algorithm:
    1. Visit rows in index order
    2. Give each row its minimum-cost column not yet used (lowest index on ties)

    Complexity: O(N²). For a square finite matrix, at every step at least
    one unused column remains, so the result is always a full bijection.
    """

    def solve(self, cost_matrix: np.ndarray) -> Assignment:
        """
        Assign every row to a distinct column.

        Args:
            cost_matrix: Square finite cost matrix

        Returns:
            Tuple of (row, col) pairs sorted by row
        """
        n = cost_matrix.shape[0]
        used = np.zeros(n, dtype=bool)
        pairs: List = []

        for row in range(n):
            col = self._get_nearest_unused(cost_matrix[row], used)
            used[col] = True
            pairs.append((row, col))

        logger.debug("Greedy fallback assigned %d rows", n)
        return tuple(pairs)

    @staticmethod
    def _get_nearest_unused(costs: np.ndarray, used: np.ndarray) -> int:
        """Get the cheapest column not yet taken."""
        available = np.where(used, np.inf, costs)
        return int(np.argmin(available))
