# Sampling Package
"""
Sampler interface and the bundled annealing / QAOA samplers.
"""

from .base import Sampler, Samples
from .annealing import SimulatedAnnealingSampler
from .qaoa import QAOASampler

__all__ = [
    "Sampler",
    "Samples",
    "SimulatedAnnealingSampler",
    "QAOASampler",
]
