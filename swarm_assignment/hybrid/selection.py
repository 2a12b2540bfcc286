"""
Selection of the best valid candidate from a batch of samples.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

import numpy as np

from ..data.models import Candidate, total_cost
from ..qubo.qubo_builder import qubo_energy
from .decoding import decode_sample, validate_assignment

logger = logging.getLogger(__name__)


@dataclass
class SelectionReport:
    """Valid candidates ranked by total cost, plus batch statistics."""
    ranked: List[Candidate] = field(default_factory=list)
    num_samples: int = 0
    decode_failures: int = 0
    invalid: int = 0

    @property
    def best(self) -> Optional[Candidate]:
        return self.ranked[0] if self.ranked else None

    @property
    def num_valid(self) -> int:
        return len(self.ranked)


class CandidateSelector:
    """
    Filters and ranks sampled bit vectors.

    Decode -> validate -> cost -> stable ascending sort. Ties keep the
    sampler's order, so a fixed batch always yields the same winner.
    """

    def __init__(self, cost_matrix: np.ndarray, qubo_matrix: Optional[np.ndarray] = None):
        """
        Args:
            cost_matrix: Validated N x N cost matrix
            qubo_matrix: When given, each candidate also records its QUBO energy
        """
        self.cost_matrix = cost_matrix
        self.qubo_matrix = qubo_matrix
        self.size = cost_matrix.shape[0]

    def rank(self, samples: Iterable) -> SelectionReport:
        report = SelectionReport()

        for sample_index, bits in enumerate(samples):
            report.num_samples += 1

            decoded = decode_sample(bits, self.size)
            if decoded.is_err:
                report.decode_failures += 1
                logger.debug("Sample %d not decodable: %s", sample_index, decoded.error)
                continue

            pairs = decoded.value
            if not validate_assignment(pairs, self.size).is_valid:
                report.invalid += 1
                continue

            energy = None
            if self.qubo_matrix is not None:
                energy = qubo_energy(self.qubo_matrix, bits)

            report.ranked.append(Candidate(
                assignment=tuple(sorted(pairs)),
                total_cost=total_cost(self.cost_matrix, pairs),
                sample_index=sample_index,
                energy=energy
            ))

        # list.sort is stable: equal costs stay in first-seen order
        report.ranked.sort(key=lambda c: c.total_cost)
        return report

    def select(self, samples: Iterable) -> Optional[Candidate]:
        """Lowest-cost valid candidate, or None if the batch has none."""
        return self.rank(samples).best
