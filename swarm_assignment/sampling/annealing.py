"""
Simulated annealing sampler.

Classical stand-in for a probabilistic backend: every shot is one
independent annealing read over the QUBO.
"""

import logging
from typing import Optional

import numpy as np

from ..config import AnnealingConfig
from ..result import Err, Ok, Result, SamplerError
from .base import Samples

logger = logging.getLogger(__name__)


class SimulatedAnnealingSampler:
    """
    Metropolis annealing with single-bit flips.

    All reads advance together: each sweep visits every variable once and
    evaluates the flip for every read in a vectorized step, using the
    incremental energy change

        ΔE_i = (1 - 2x_i) · (Q_ii + Σ_{j≠i} (Q_ij + Q_ji) x_j)
    """

    def __init__(self, config: Optional[AnnealingConfig] = None):
        """
        Initialize sampler.

        Args:
            config: Sweeps, temperature schedule and seed
        """
        self.config = config if config is not None else AnnealingConfig()

    def sample(self, qubo: np.ndarray, shots: int) -> Result[Samples, SamplerError]:
        """
        Draw ``shots`` annealed bit vectors.

        Args:
            qubo: Square QUBO matrix
            shots: Number of independent reads

        Returns:
            Ok(list of int bit vectors) or Err(SamplerError)
        """
        qubo = np.asarray(qubo, dtype=np.float64)
        if qubo.ndim != 2 or qubo.shape[0] != qubo.shape[1]:
            return Err(SamplerError(f"QUBO must be square, got shape {qubo.shape}"))
        if shots < 1:
            return Err(SamplerError(f"shots must be >= 1, got {shots}"))

        n = qubo.shape[0]
        rng = np.random.default_rng(self.config.seed)

        diag = np.diag(qubo).copy()
        coupling = qubo + qubo.T
        np.fill_diagonal(coupling, 0.0)

        t_start, t_end = self._temperature_range(qubo)
        sweeps = max(1, self.config.sweeps)
        temperatures = np.geomspace(t_start, t_end, sweeps)

        # Random initial states, one row per read
        states = rng.integers(0, 2, size=(shots, n)).astype(np.float64)
        fields = states @ coupling  # Σ_j S_ij x_j for every read

        for temp in temperatures:
            for i in range(n):
                direction = 1.0 - 2.0 * states[:, i]
                delta = direction * (diag[i] + fields[:, i])

                accept = delta <= 0
                uphill = ~accept
                if np.any(uphill):
                    accept[uphill] = rng.random(int(uphill.sum())) < np.exp(-delta[uphill] / temp)

                if np.any(accept):
                    step = np.where(accept, direction, 0.0)
                    states[:, i] += step
                    fields += np.outer(step, coupling[i])

        logger.debug(
            "Annealed %d reads over %d variables (%d sweeps, T %.3g -> %.3g)",
            shots, n, sweeps, t_start, t_end
        )
        return Ok([row.astype(np.int64) for row in np.rint(states)])

    def _temperature_range(self, qubo: np.ndarray):
        t_start = self.config.initial_temperature
        if t_start is None:
            t_start = float(np.max(np.abs(qubo))) if qubo.size else 1.0
            t_start = t_start if t_start > 0 else 1.0

        t_end = self.config.final_temperature
        if t_end is None or t_end <= 0:
            t_end = t_start / 1000.0

        return t_start, min(t_end, t_start)
