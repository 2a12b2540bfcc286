"""
QAOA sampler integration with Qiskit.

Runs the assignment QUBO through the Quantum Approximate Optimization
Algorithm and returns the measured bitstrings as samples. Uses the local
statevector sampler by default; any SamplerV2 primitive (Aer, IBM Runtime)
can be passed in instead.
"""

import logging
from typing import List, Optional

import numpy as np
from qiskit.circuit.library import QAOAAnsatz
from qiskit.primitives import StatevectorSampler
from qiskit.quantum_info import SparsePauliOp
from scipy.optimize import minimize

from ..config import QAOAConfig
from ..qubo.constraints import qubo_to_ising
from ..result import Err, Ok, Result, SamplerError
from .base import Samples

logger = logging.getLogger(__name__)


def build_cost_hamiltonian(qubo_matrix: np.ndarray, tolerance: float = 1e-12) -> SparsePauliOp:
    """
    Build the cost Hamiltonian H = Σ_i h_i Z_i + Σ_{i<j} J_ij Z_i Z_j.

    The constant offset is dropped; it does not change the optimum.
    """
    n = qubo_matrix.shape[0]
    h, J, _ = qubo_to_ising(qubo_matrix)

    terms = []
    for i in range(n):
        if abs(h[i]) > tolerance:
            terms.append(("Z", [i], float(h[i])))
    for i in range(n):
        for j in range(i + 1, n):
            if abs(J[i, j]) > tolerance:
                terms.append(("ZZ", [i, j], float(J[i, j])))

    if not terms:
        # Trivial Hamiltonian
        terms.append(("", [], 0.0))

    return SparsePauliOp.from_sparse_list(terms, num_qubits=n)


def bitstrings_to_array(bitstrings: List[str], n: int) -> np.ndarray:
    """Convert Qiskit bitstrings (qubit 0 rightmost) to an (k, n) int array."""
    return np.array(
        [[int(b) for b in s[::-1][:n]] for s in bitstrings],
        dtype=np.int64
    ).reshape(len(bitstrings), n)


class QAOASampler:
    """
    QAOA sampler for the assignment QUBO.

    1. Convert QUBO -> Ising cost operator
    2. Optimize (β, γ) with a classical optimizer against the mean sampled energy
    3. Measure ``shots`` bitstrings at the optimal parameters
    """

    def __init__(self, config: Optional[QAOAConfig] = None, sampler=None):
        """
        Initialize QAOA sampler.

        Args:
            config: QAOA configuration (depth, maxiter, optimizer, ...)
            sampler: SamplerV2 primitive; StatevectorSampler when omitted
        """
        self.config = config if config is not None else QAOAConfig()
        self.sampler = sampler if sampler is not None else StatevectorSampler(seed=self.config.seed)

    def sample(self, qubo: np.ndarray, shots: int) -> Result[Samples, SamplerError]:
        """
        Draw ``shots`` bitstrings from the optimized QAOA circuit.

        Args:
            qubo: Square QUBO matrix
            shots: Number of final measurements

        Returns:
            Ok(list of bit vectors) or Err(SamplerError)
        """
        qubo = np.asarray(qubo, dtype=np.float64)
        n = qubo.shape[0]

        if n > self.config.max_qubits:
            return Err(SamplerError(
                f"problem size ({n} qubits) exceeds limit of {self.config.max_qubits}"
            ))
        if shots < 1:
            return Err(SamplerError(f"shots must be >= 1, got {shots}"))

        try:
            circuit = self._build_circuit(qubo)
            optimal_params = self._optimize(circuit, qubo)

            job = self.sampler.run([(circuit, optimal_params)], shots=shots)
            bitstrings = job.result()[0].data.meas.get_bitstrings()
        except Exception as e:
            logger.warning("QAOA failed (%s: %s)", type(e).__name__, e)
            return Err(SamplerError("QAOA execution failed", cause=e))

        samples = bitstrings_to_array(bitstrings, n)
        logger.debug("QAOA returned %d samples over %d qubits", len(samples), n)
        return Ok(list(samples))

    def _build_circuit(self, qubo: np.ndarray):
        cost_hamiltonian = build_cost_hamiltonian(qubo)
        circuit = QAOAAnsatz(cost_operator=cost_hamiltonian, reps=self.config.depth)
        circuit.measure_all()
        return circuit

    def _optimize(self, circuit, qubo: np.ndarray) -> np.ndarray:
        """Minimize the mean sampled QUBO energy over the circuit parameters."""
        n = qubo.shape[0]
        rng = np.random.default_rng(self.config.seed)
        num_params = circuit.num_parameters
        iteration_count = [0]

        def cost_function(params):
            iteration_count[0] += 1
            job = self.sampler.run([(circuit, params)], shots=self.config.optimization_shots)
            counts = job.result()[0].data.meas.get_counts()

            bits = bitstrings_to_array(list(counts.keys()), n).astype(np.float64)
            weights = np.array(list(counts.values()), dtype=np.float64)
            energies = np.einsum("ij,jk,ik->i", bits, qubo, bits)
            return float(np.dot(weights, energies) / weights.sum())

        initial_params = rng.uniform(0, 2 * np.pi, num_params)
        options = {"maxiter": self.config.maxiter}
        if self.config.optimizer.upper() == "COBYLA":
            options["rhobeg"] = 0.5

        result = minimize(
            cost_function,
            initial_params,
            method=self.config.optimizer,
            options=options
        )
        logger.debug(
            "QAOA optimization: %d evaluations, mean energy %.3f",
            iteration_count[0], result.fun
        )
        return np.asarray(result.x)
