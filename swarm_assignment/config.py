"""
Configuration module for swarm assignment optimization.

Contains penalty settings, sampler parameters and the fallback policies.
"""

import copy
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv


ENV_PREFIX = "SWARM_ASSIGN_"


class SamplerErrorPolicy(Enum):
    """What ``solve()`` does when the external sampler fails."""
    FALLBACK = "fallback"    # treat as zero valid samples, run greedy solver
    FAIL_FAST = "fail_fast"  # return the SamplerError to the caller


@dataclass
class PenaltyConfig:
    """Penalty weight for the one-hot constraints (Lucas rule)."""
    multiplier: float = 2.0  # penalty = multiplier * N * max(cost)
    override: Optional[float] = None  # Fixed penalty, bypasses the rule

    def __post_init__(self):
        if self.multiplier <= 0:
            raise ValueError(f"Penalty multiplier must be positive, got {self.multiplier}")
        if self.override is not None and self.override <= 0:
            raise ValueError(f"Penalty override must be positive, got {self.override}")


@dataclass
class AnnealingConfig:
    """Simulated annealing sampler settings."""
    sweeps: int = 200  # Single-bit flip sweeps per read (n flips each)
    initial_temperature: Optional[float] = None  # Auto: max |Q_ab|
    final_temperature: Optional[float] = None  # Auto: initial / 1000
    seed: Optional[int] = 42


@dataclass
class QAOAConfig:
    """QAOA sampler configuration."""
    depth: int = 1  # p: QAOA circuit depth
    maxiter: int = 50  # Maximum classical optimizer iterations
    optimizer: str = "COBYLA"  # scipy.optimize method
    optimization_shots: int = 256  # Shots per energy evaluation
    max_qubits: int = 20  # Statevector practical limit (N <= 4)
    seed: Optional[int] = 42


@dataclass
class PolicyConfig:
    """Error and fallback policies for the orchestrator."""
    on_sampler_error: SamplerErrorPolicy = SamplerErrorPolicy.FALLBACK
    fallback_enabled: bool = True


@dataclass
class SolverConfig:
    """Master configuration for a solve() invocation."""
    shots: int = 1024  # Samples requested from the external sampler
    penalties: PenaltyConfig = field(default_factory=PenaltyConfig)
    annealing: AnnealingConfig = field(default_factory=AnnealingConfig)
    qaoa: QAOAConfig = field(default_factory=QAOAConfig)
    policy: PolicyConfig = field(default_factory=PolicyConfig)

    def __post_init__(self):
        if self.shots < 1:
            raise ValueError(f"shots must be >= 1, got {self.shots}")


def create_default_config() -> SolverConfig:
    """Create a default configuration."""
    return SolverConfig()


def create_small_config() -> SolverConfig:
    """Create a small configuration for quick runs and tests."""
    return SolverConfig(
        shots=32,
        annealing=AnnealingConfig(sweeps=50),
        qaoa=QAOAConfig(depth=1, maxiter=10, optimization_shots=64),
    )


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _getenv(name: str, parse):
    """Parsed value of SWARM_ASSIGN_<name>, or None when unset or empty."""
    value = os.getenv(ENV_PREFIX + name)
    return parse(value) if value else None


def load_config_from_env(
    env_file: Optional[Union[str, Path]] = None,
    base: Optional[SolverConfig] = None
) -> SolverConfig:
    """
    Build a config from environment variables (and an optional .env file).

    Recognised variables:
        SWARM_ASSIGN_SHOTS, SWARM_ASSIGN_PENALTY_MULTIPLIER,
        SWARM_ASSIGN_SAMPLER_ERROR_POLICY (fallback | fail_fast),
        SWARM_ASSIGN_FALLBACK_ENABLED, SWARM_ASSIGN_SEED

    Args:
        env_file: Path of a .env file; defaults to searching from the cwd
        base: Config to start from (defaults to create_default_config())

    Returns:
        SolverConfig with overrides applied
    """
    if env_file is not None:
        load_dotenv(env_file)
    else:
        load_dotenv()

    shots = _getenv("SHOTS", int)
    if shots is not None and shots < 1:
        raise ValueError(f"{ENV_PREFIX}SHOTS must be >= 1, got {shots}")
    multiplier = _getenv("PENALTY_MULTIPLIER", float)
    policy = _getenv("SAMPLER_ERROR_POLICY", lambda v: SamplerErrorPolicy(v.strip().lower()))
    fallback = _getenv("FALLBACK_ENABLED", _parse_bool)
    seed = _getenv("SEED", int)

    # All values parsed; only now copy and update
    config = copy.deepcopy(base) if base is not None else create_default_config()

    if shots is not None:
        config.shots = shots
    if multiplier is not None:
        config.penalties = PenaltyConfig(
            multiplier=multiplier,
            override=config.penalties.override
        )
    if policy is not None:
        config.policy.on_sampler_error = policy
    if fallback is not None:
        config.policy.fallback_enabled = fallback
    if seed is not None:
        config.annealing.seed = seed
        config.qaoa.seed = seed

    return config
