"""
QUBO matrix builder for the one-to-one assignment problem.

Binary variable x_{i,j} = 1 iff agent i takes target slot j.
"""

import logging
from typing import Dict, List, Optional, Tuple

import numpy as np

from ..result import Err, InputError, InputErrorKind, Ok, Result
from .constraints import OneHotConstraintEncoder
from .penalties import PenaltyCalculator

logger = logging.getLogger(__name__)


class VariableIndexer:
    """
    Maps binary decision variables to QUBO matrix indices.

    Variables:
        x_{i,j} ∈ {0,1} at flat index i·N + j
    """

    def __init__(self, size: int):
        self.size = size

    @property
    def total_variables(self) -> int:
        return self.size * self.size

    def index(self, row: int, col: int) -> int:
        return row * self.size + col

    def position(self, idx: int) -> Tuple[int, int]:
        """Inverse of ``index``: flat index -> (row, col)."""
        return divmod(idx, self.size)

    def row_indices(self, row: int) -> List[int]:
        return [self.index(row, col) for col in range(self.size)]

    def column_indices(self, col: int) -> List[int]:
        return [self.index(row, col) for row in range(self.size)]

    def encode_permutation(self, columns) -> np.ndarray:
        """One-hot bit vector with x_{i, columns[i]} = 1."""
        bits = np.zeros(self.total_variables, dtype=np.int64)
        for row, col in enumerate(columns):
            bits[self.index(row, col)] = 1
        return bits


def validate_cost_matrix(cost_matrix) -> Result[np.ndarray, InputError]:
    """
    Check the cost matrix invariants: square, N >= 1, finite, non-negative.

    Returns:
        Ok(float64 copy of the matrix) or Err(InputError)
    """
    try:
        matrix = np.array(cost_matrix, dtype=np.float64)
    except (TypeError, ValueError) as e:
        return Err(InputError(InputErrorKind.INVALID_MATRIX, f"not a numeric matrix: {e}"))

    if matrix.size == 0:
        return Err(InputError(InputErrorKind.EMPTY_INPUT, "cost matrix is empty"))
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        return Err(InputError(
            InputErrorKind.INVALID_MATRIX,
            f"cost matrix must be square, got shape {matrix.shape}"
        ))
    if not np.all(np.isfinite(matrix)):
        return Err(InputError(InputErrorKind.INVALID_MATRIX, "cost matrix has non-finite values"))
    if np.any(matrix < 0):
        return Err(InputError(InputErrorKind.INVALID_MATRIX, "cost matrix has negative values"))

    return Ok(matrix)


class QuboEncoder:
    """
    Builds the (N²)x(N²) QUBO matrix for the assignment problem.

    QUBO energy form:
    E(x) = x^T Q x + const

    Components:
    - Assignment cost terms (linear in x, on the diagonal)
    - Row and column one-hot penalties (diagonal and quadratic)

    Precondition: ``penalty_weight`` must exceed N·max(cost) (the default
    Lucas rule 2·N·max(cost) does). Below that bound an infeasible bit
    vector may have lower energy than the optimal assignment.
    """

    def __init__(self, cost_matrix: np.ndarray, penalty_weight: float):
        """
        Initialize QUBO encoder.

        Args:
            cost_matrix: Validated N x N cost matrix
            penalty_weight: Penalty λ for each one-hot constraint
        """
        self.cost_matrix = cost_matrix
        self.penalty_weight = float(penalty_weight)
        self.indexer = VariableIndexer(cost_matrix.shape[0])

        n = self.indexer.total_variables
        self.qubo_matrix = np.zeros((n, n), dtype=np.float64)
        self.constant = 0.0
        self._built = False

    def build(self) -> np.ndarray:
        """
        Build the complete QUBO matrix.

        Returns:
            Dense symmetric QUBO matrix
        """
        if self._built:
            return self.qubo_matrix

        # 1. Objective on the diagonal
        self._add_cost_terms()

        # 2-3. One-hot constraints
        encoder = OneHotConstraintEncoder(self.penalty_weight)
        self._add_row_constraints(encoder)
        self._add_column_constraints(encoder)

        self._built = True
        logger.debug(
            "Built QUBO with %d variables (penalty=%.3f)",
            self.indexer.total_variables, self.penalty_weight
        )
        return self.qubo_matrix

    def _add_cost_terms(self):
        """Add linear cost terms to QUBO diagonal."""
        diag = np.arange(self.indexer.total_variables)
        self.qubo_matrix[diag, diag] += self.cost_matrix.ravel()

    def _add_row_constraints(self, encoder: OneHotConstraintEncoder):
        """Add constraints: Σ_j x_{i,j} = 1 for each agent i."""
        for row in range(self.indexer.size):
            self.constant += encoder.encode_one_hot(
                self.qubo_matrix, self.indexer.row_indices(row)
            )

    def _add_column_constraints(self, encoder: OneHotConstraintEncoder):
        """Add constraints: Σ_i x_{i,j} = 1 for each slot j."""
        for col in range(self.indexer.size):
            self.constant += encoder.encode_one_hot(
                self.qubo_matrix, self.indexer.column_indices(col)
            )

    def compute_energy(self, bitstring, include_constant: bool = False) -> float:
        """
        Compute QUBO energy for a given bitstring.

        With ``include_constant`` the energy of a feasible assignment equals
        its total cost.
        """
        energy = qubo_energy(self.build(), bitstring)
        if include_constant:
            energy += self.constant
        return energy

    def to_sparse(self, tolerance: float = 1e-12) -> Dict[Tuple[int, int], float]:
        """
        Export the upper triangle as {(a, b): coefficient}.

        Off-diagonal coefficients are folded (Q_ab + Q_ba) so that
        E(x) = Σ_{a<=b} coeff_ab x_a x_b.
        """
        return qubo_to_sparse(self.build(), tolerance)


def qubo_energy(qubo_matrix: np.ndarray, bitstring) -> float:
    """E(x) = x^T Q x."""
    bits = np.asarray(bitstring, dtype=np.float64).ravel()
    return float(bits @ qubo_matrix @ bits)


def qubo_to_sparse(qubo_matrix: np.ndarray, tolerance: float = 1e-12) -> Dict[Tuple[int, int], float]:
    """Upper-triangular key/value view of a dense QUBO matrix."""
    folded = np.triu(qubo_matrix + qubo_matrix.T, k=1)
    folded[np.diag_indices_from(folded)] = np.diag(qubo_matrix)
    rows, cols = np.nonzero(np.abs(folded) > tolerance)
    return {(int(a), int(b)): float(folded[a, b]) for a, b in zip(rows, cols)}


def encode_qubo(
    cost_matrix,
    penalty_weight: Optional[float] = None
) -> Result[np.ndarray, InputError]:
    """
    Validate ``cost_matrix`` and build its QUBO matrix.

    Args:
        cost_matrix: N x N cost matrix
        penalty_weight: λ; the Lucas rule 2·N·max(cost) when omitted

    Returns:
        Ok(QUBO matrix) or Err(InputError)
    """
    validated = validate_cost_matrix(cost_matrix)
    if validated.is_err:
        return validated

    matrix = validated.value
    if penalty_weight is None:
        penalty_weight = PenaltyCalculator().compute_penalty_weight(matrix)

    return Ok(QuboEncoder(matrix, penalty_weight).build())
