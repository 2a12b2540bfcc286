"""
Constraint encoding for the assignment QUBO.

Implements the one-hot penalty for rows ("each agent takes one slot")
and columns ("each slot takes one agent").
"""

from typing import List, Tuple

import numpy as np


class OneHotConstraintEncoder:
    """
    Encodes Σ_r z_r = 1 over a group of variables as QUBO penalties.

    QUBO updates for a group G with penalty λ:
    Q[a,a] -= λ              for a in G
    Q[a,b] += 2λ, Q[b,a] += 2λ  for a != b in G
    const  += λ

    Satisfied groups contribute exactly 0 once the constant is added.
    """

    def __init__(self, penalty_weight: float):
        """
        Initialize constraint encoder.

        Args:
            penalty_weight: λ applied to every one-hot group
        """
        self.penalty_weight = penalty_weight

    def encode_one_hot(self, qubo_matrix: np.ndarray, variable_indices: List[int]) -> float:
        """
        Add one one-hot group to ``qubo_matrix`` in place.

        Args:
            qubo_matrix: Dense QUBO matrix to update
            variable_indices: Indices of the variables in the group

        Returns:
            Constant term added to the QUBO
        """
        λ = self.penalty_weight
        n = len(variable_indices)

        for idx in variable_indices:
            qubo_matrix[idx, idx] -= λ

        for a in range(n):
            for b in range(a + 1, n):
                idx_a = variable_indices[a]
                idx_b = variable_indices[b]
                qubo_matrix[idx_a, idx_b] += 2 * λ
                qubo_matrix[idx_b, idx_a] += 2 * λ

        return λ


def qubo_to_ising(
    qubo_matrix: np.ndarray,
    constant: float = 0.0
) -> Tuple[np.ndarray, np.ndarray, float]:
    """
    Convert QUBO to Ising formulation.

    Map: x_a = (1 - σ_a)/2, so σ_a = +1 (qubit |0>) is bit 0.

    Given E(x) = x^T Q x + const and S = Q + Q^T:
    h_a = -(1/2)Q_aa - (1/4) Σ_{b≠a} S_ab
    J_ab = S_ab / 4 for a < b
    const' = const + (1/2) Σ_a Q_aa + (1/4) Σ_{a<b} S_ab

    Args:
        qubo_matrix: QUBO Q matrix (n x n)
        constant: Constant offset in QUBO

    Returns:
        Tuple of (h local fields, J upper-triangular couplings, new constant)
    """
    diag = np.diag(qubo_matrix).astype(np.float64)
    off = qubo_matrix + qubo_matrix.T
    np.fill_diagonal(off, 0.0)

    h = -diag / 2 - off.sum(axis=1) / 4
    J = np.triu(off, k=1) / 4
    new_const = constant + diag.sum() / 2 + np.triu(off, k=1).sum() / 4

    return h, J, float(new_const)
