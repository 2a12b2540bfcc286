# Swarm Assignment Package
"""
QUBO-based one-to-one assignment (agents -> target slots):
- QUBO encoding with one-hot row/column penalties
- Decoding and validation of sampled bit vectors
- Greedy classical fallback that always yields a bijection
"""

__version__ = "0.1.0"

from .config import SamplerErrorPolicy, SolverConfig, create_default_config
from .data.models import Formation, Position3D, Provenance, Solution
from .hybrid.coordinator import AssignmentSolver, solve
from .result import Err, Ok

__all__ = [
    "SamplerErrorPolicy",
    "SolverConfig",
    "create_default_config",
    "Formation",
    "Position3D",
    "Provenance",
    "Solution",
    "AssignmentSolver",
    "solve",
    "Err",
    "Ok",
]
