"""
Formation sequence planning.

Chains one assignment solve per formation transition, moving every agent
to the slot it was assigned before planning the next transition.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..config import SolverConfig
from ..data.distances import build_transition_matrix
from ..data.models import Assignment, Formation, Position3D, Provenance
from ..result import Err, Ok, Result, SolveError
from ..sampling.base import Sampler
from .coordinator import AssignmentSolver

logger = logging.getLogger(__name__)


@dataclass
class TransitionResult:
    """One formation-to-formation move."""
    from_formation: str
    to_formation: str
    assignment: Assignment
    total_distance: float
    provenance: Provenance


@dataclass
class ShowPlan:
    """Planned sequence of transitions."""
    transitions: List[TransitionResult] = field(default_factory=list)
    final_positions: List[Position3D] = field(default_factory=list)

    @property
    def total_distance(self) -> float:
        return sum(t.total_distance for t in self.transitions)

    @property
    def sampled_count(self) -> int:
        return sum(1 for t in self.transitions if t.provenance is Provenance.SAMPLED_VALID)

    @property
    def fallback_count(self) -> int:
        return sum(1 for t in self.transitions if t.provenance is Provenance.CLASSICAL_FALLBACK)


def plan_transitions(
    start: Formation,
    formations: Sequence[Formation],
    sampler: Sampler,
    shots: Optional[int] = None,
    config: Optional[SolverConfig] = None
) -> Result[ShowPlan, SolveError]:
    """
    Plan the moves from ``start`` through every formation in order.

    Agent i starts at ``start.positions[i]``. After each transition it sits
    at the slot it was assigned, and that becomes its next start position.

    Args:
        start: Initial formation (one slot per agent)
        formations: Target formations, visited in order
        sampler: External sampler capability
        shots: Samples per transition
        config: Solver configuration

    Returns:
        Ok(ShowPlan) or the first Err encountered
    """
    solver = AssignmentSolver(config)
    plan = ShowPlan()
    current_positions = list(start.positions)
    current_name = start.name

    for step, target in enumerate(formations, start=1):
        cost = build_transition_matrix(current_positions, target)
        if cost.is_err:
            logger.error("Transition %d (%s -> %s): %s", step, current_name, target.name, cost.error)
            return cost

        solved = solver.solve(cost.value, sampler, shots)
        if solved.is_err:
            return solved
        solution = solved.value

        plan.transitions.append(TransitionResult(
            from_formation=current_name,
            to_formation=target.name,
            assignment=solution.assignment,
            total_distance=solution.total_cost,
            provenance=solution.provenance
        ))
        logger.info(
            "Transition %d: %s -> %s, distance %.2f (%s)",
            step, current_name, target.name, solution.total_cost, solution.provenance.value
        )

        current_positions = [target.positions[col] for _, col in solution.assignment]
        current_name = target.name

    plan.final_positions = current_positions
    return Ok(plan)
