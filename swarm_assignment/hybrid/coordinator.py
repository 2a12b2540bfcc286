"""
Hybrid solver coordinator: QUBO encoding, external sampling, selection,
and classical fallback.
"""

import logging
import time
from typing import List, Optional

import numpy as np

from ..config import SamplerErrorPolicy, SolverConfig, create_default_config
from ..data.models import Provenance, Solution, SolveState, total_cost
from ..qubo.penalties import PenaltyCalculator
from ..qubo.qubo_builder import QuboEncoder, validate_cost_matrix
from ..result import (
    Err,
    InputError,
    InputErrorKind,
    NoValidSample,
    Ok,
    Result,
    SamplerError,
    SolveError,
)
from ..sampling.base import Sampler
from .fallback import ClassicalFallbackSolver
from .selection import CandidateSelector, SelectionReport

logger = logging.getLogger(__name__)


class AssignmentSolver:
    """
    Orchestrates one assignment solve.

    Idle -> Encoding -> AwaitingSamples -> {SelectingBest | Fallback} -> Done
    with Error reachable from Encoding (bad input) and AwaitingSamples
    (sampler failure under FAIL_FAST).

    Holds only configuration; every solve() call works on its own locals,
    so one instance can serve concurrent callers as long as the sampler can.
    """

    def __init__(self, config: Optional[SolverConfig] = None):
        """
        Initialize solver.

        Args:
            config: Penalty settings, default shots and policies
        """
        self.config = config if config is not None else create_default_config()
        self.penalty_calc = PenaltyCalculator(self.config.penalties)
        self.fallback = ClassicalFallbackSolver()

    def solve(
        self,
        cost_matrix,
        sampler: Sampler,
        shots: Optional[int] = None,
        penalty_weight: Optional[float] = None
    ) -> Result[Solution, SolveError]:
        """
        Solve the assignment problem described by ``cost_matrix``.

        Args:
            cost_matrix: N x N non-negative finite costs
            sampler: External sampler capability
            shots: Samples to request (config.shots when omitted)
            penalty_weight: Overrides the configured penalty rule

        Returns:
            Ok(Solution) or Err(InputError | SamplerError | NoValidSample)
        """
        states: List[SolveState] = [SolveState.IDLE]
        shots = self.config.shots if shots is None else shots

        # Encoding
        states.append(SolveState.ENCODING)
        encode_start = time.time()

        validated = validate_cost_matrix(cost_matrix)
        if validated.is_err:
            return self._fail(states, validated.error)
        matrix = validated.value
        n = matrix.shape[0]

        if shots < 1:
            return self._fail(states, InputError(
                InputErrorKind.INVALID_SHOTS, f"shots must be >= 1, got {shots}"
            ))
        if penalty_weight is not None and not (np.isfinite(penalty_weight) and penalty_weight > 0):
            return self._fail(states, InputError(
                InputErrorKind.INVALID_PENALTY,
                f"penalty weight must be positive and finite, got {penalty_weight}"
            ))

        if penalty_weight is None:
            penalty_weight = self.penalty_calc.compute_penalty_weight(matrix)
        if not self.penalty_calc.is_dominant(penalty_weight, matrix):
            logger.warning(
                "Penalty %.3f does not exceed N*max(cost)=%.3f; "
                "infeasible samples may outrank feasible ones",
                penalty_weight, self.penalty_calc.dominance_bound(matrix)
            )

        encoder = QuboEncoder(matrix, penalty_weight)
        qubo_matrix = encoder.build()
        encode_time = time.time() - encode_start
        logger.info(
            "QUBO size: %d variables (N=%d, penalty=%.3f)",
            qubo_matrix.shape[0], n, penalty_weight
        )

        # Sampling
        states.append(SolveState.AWAITING_SAMPLES)
        sample_start = time.time()
        sampled = self._run_sampler(sampler, qubo_matrix, shots)
        sample_time = time.time() - sample_start

        sampler_error: Optional[SamplerError] = None
        report = SelectionReport()

        if sampled.is_err:
            sampler_error = sampled.error
            if self.config.policy.on_sampler_error is SamplerErrorPolicy.FAIL_FAST:
                logger.error("Sampler failed: %s", sampler_error)
                return self._fail(states, sampler_error)
            logger.warning("Sampler failed (%s), treating as zero valid samples", sampler_error)
        else:
            states.append(SolveState.SELECTING_BEST)
            selector = CandidateSelector(matrix, qubo_matrix)
            report = selector.rank(sampled.value)
            logger.info(
                "Samples: %d total, %d valid, %d invalid, %d undecodable",
                report.num_samples, report.num_valid, report.invalid, report.decode_failures
            )

        best = report.best
        if best is not None:
            states.append(SolveState.DONE)
            return Ok(Solution(
                assignment=best.assignment,
                total_cost=best.total_cost,
                provenance=Provenance.SAMPLED_VALID,
                penalty_weight=penalty_weight,
                num_samples=report.num_samples,
                num_valid_samples=report.num_valid,
                states=tuple(states),
                encode_time=encode_time,
                sample_time=sample_time,
            ))

        # Fallback
        if not self.config.policy.fallback_enabled:
            return self._fail(states, NoValidSample(report.num_samples))

        states.append(SolveState.FALLBACK)
        logger.info("No valid sample, using classical greedy fallback")
        assignment = self.fallback.solve(matrix)
        states.append(SolveState.DONE)

        return Ok(Solution(
            assignment=assignment,
            total_cost=total_cost(matrix, assignment),
            provenance=Provenance.CLASSICAL_FALLBACK,
            penalty_weight=penalty_weight,
            num_samples=report.num_samples,
            num_valid_samples=0,
            sampler_error=str(sampler_error) if sampler_error is not None else None,
            states=tuple(states),
            encode_time=encode_time,
            sample_time=sample_time,
        ))

    @staticmethod
    def _run_sampler(sampler: Sampler, qubo_matrix: np.ndarray, shots: int):
        """Call the sampler; exceptions it raises become SamplerError values."""
        try:
            sampled = sampler.sample(qubo_matrix, shots)
        except Exception as e:
            return Err(SamplerError(f"sampler raised {type(e).__name__}", cause=e))

        if not isinstance(sampled, (Ok, Err)):
            return Err(SamplerError(
                f"sampler returned {type(sampled).__name__}, expected Ok or Err"
            ))
        if sampled.is_ok and not isinstance(sampled.value, (list, tuple, np.ndarray)):
            return Err(SamplerError(
                f"sampler returned Ok({type(sampled.value).__name__}), expected a list of bit vectors"
            ))
        return sampled

    @staticmethod
    def _fail(states: List[SolveState], error: SolveError) -> Err:
        states.append(SolveState.ERROR)
        logger.debug("solve() failed after states %s", [s.value for s in states])
        return Err(error)


def solve(
    cost_matrix,
    sampler: Sampler,
    shots: Optional[int] = None,
    penalty_weight: Optional[float] = None,
    config: Optional[SolverConfig] = None
) -> Result[Solution, SolveError]:
    """
    Convenience function to run one solve with a fresh AssignmentSolver.

    Args:
        cost_matrix: N x N cost matrix
        sampler: External sampler capability
        shots: Samples to request
        penalty_weight: Optional penalty override
        config: Solver configuration

    Returns:
        Ok(Solution) or Err(SolveError)
    """
    return AssignmentSolver(config).solve(cost_matrix, sampler, shots, penalty_weight)
