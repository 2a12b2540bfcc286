"""
Cost matrix computation utilities.

Builds the N x N cost matrix between current agent positions and target slots.
"""

import logging
from typing import Callable, Sequence

import numpy as np

from ..result import Err, InputError, InputErrorKind, Ok, Result
from .models import Formation, Position3D

logger = logging.getLogger(__name__)

DistanceFunction = Callable[[np.ndarray, np.ndarray], float]


def _as_point(position) -> np.ndarray:
    if isinstance(position, Position3D):
        return position.as_array()
    return np.asarray(position, dtype=np.float64).ravel()


def euclidean_distance(p1, p2) -> float:
    """Calculate Euclidean distance between two points of equal dimension."""
    a = _as_point(p1)
    b = _as_point(p2)
    return float(np.sqrt(np.sum((a - b) ** 2)))


def manhattan_distance(p1, p2) -> float:
    """Calculate Manhattan (L1) distance between two points."""
    return float(np.sum(np.abs(_as_point(p1) - _as_point(p2))))


def build_cost_matrix(
    current_positions: Sequence,
    target_positions: Sequence,
    distance: DistanceFunction = euclidean_distance
) -> Result[np.ndarray, InputError]:
    """
    Compute the cost matrix from current positions to target positions.

    Mathematical notation:
        D_{i,j}: distance from agent i to target slot j

    Args:
        current_positions: Ordered agent positions (length N)
        target_positions: Ordered target positions (length N)
        distance: Distance function, Euclidean by default

    Returns:
        Ok(N x N float matrix) or Err(InputError)
    """
    n_current = len(current_positions)
    n_target = len(target_positions)

    if n_current != n_target:
        return Err(InputError(
            InputErrorKind.DIMENSION_MISMATCH,
            f"{n_current} current positions but {n_target} target positions"
        ))
    if n_current == 0:
        return Err(InputError(InputErrorKind.EMPTY_INPUT, "no positions given"))

    points_from = [_as_point(p) for p in current_positions]
    points_to = [_as_point(p) for p in target_positions]

    n = n_current
    cost = np.zeros((n, n), dtype=np.float64)
    for i in range(n):
        for j in range(n):
            if points_from[i].shape != points_to[j].shape:
                return Err(InputError(
                    InputErrorKind.DIMENSION_MISMATCH,
                    f"position {i} has {points_from[i].size} coordinates, "
                    f"target {j} has {points_to[j].size}"
                ))
            cost[i, j] = distance(points_from[i], points_to[j])

    if not np.all(np.isfinite(cost)):
        return Err(InputError(
            InputErrorKind.INVALID_MATRIX,
            "distance function produced non-finite values"
        ))

    logger.debug("Built %dx%d cost matrix (max %.3f)", n, n, float(cost.max()))
    return Ok(cost)


def build_transition_matrix(
    current_positions: Sequence[Position3D],
    formation: Formation
) -> Result[np.ndarray, InputError]:
    """Build the Euclidean cost matrix from current positions to a formation."""
    return build_cost_matrix(current_positions, formation.positions)
