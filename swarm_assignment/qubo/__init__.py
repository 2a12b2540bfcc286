# QUBO Package
"""
QUBO formulation of the one-to-one assignment problem.

Binary decision variables:
- x_{i,j}: agent i is assigned to target slot j
"""

from .qubo_builder import (
    QuboEncoder,
    VariableIndexer,
    encode_qubo,
    qubo_energy,
    qubo_to_sparse,
    validate_cost_matrix,
)
from .constraints import OneHotConstraintEncoder, qubo_to_ising
from .penalties import PenaltyCalculator

__all__ = [
    "QuboEncoder",
    "VariableIndexer",
    "encode_qubo",
    "qubo_energy",
    "qubo_to_sparse",
    "validate_cost_matrix",
    "OneHotConstraintEncoder",
    "qubo_to_ising",
    "PenaltyCalculator",
]
