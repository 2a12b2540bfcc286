# Hybrid Solver Package
"""
Sample decoding, candidate selection, classical fallback and orchestration.
"""

from .decoding import (
    ConstraintViolation,
    ValidationReport,
    ViolationKind,
    decode_sample,
    validate_assignment,
)
from .selection import CandidateSelector, SelectionReport
from .fallback import ClassicalFallbackSolver
from .coordinator import AssignmentSolver, solve
from .choreography import ShowPlan, TransitionResult, plan_transitions

__all__ = [
    "ConstraintViolation",
    "ValidationReport",
    "ViolationKind",
    "decode_sample",
    "validate_assignment",
    "CandidateSelector",
    "SelectionReport",
    "ClassicalFallbackSolver",
    "AssignmentSolver",
    "solve",
    "ShowPlan",
    "TransitionResult",
    "plan_transitions",
]
