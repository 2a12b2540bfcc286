# Data layer for swarm assignment
"""
Contains data models and cost matrix construction.
"""

from .models import (
    Assignment,
    Candidate,
    Formation,
    Position3D,
    Provenance,
    Solution,
    SolveState,
    total_cost,
)
from .distances import (
    build_cost_matrix,
    build_transition_matrix,
    euclidean_distance,
    manhattan_distance,
)

__all__ = [
    "Assignment", "Candidate", "Formation", "Position3D", "Provenance",
    "Solution", "SolveState", "total_cost",
    "build_cost_matrix", "build_transition_matrix",
    "euclidean_distance", "manhattan_distance",
]
