"""
Narrow sampler interface consumed by the orchestrator.
"""

from typing import List, Protocol, runtime_checkable

import numpy as np

from ..result import Result, SamplerError

Samples = List[np.ndarray]


@runtime_checkable
class Sampler(Protocol):
    """
    Anything that can draw bit vectors from a QUBO.

    ``sample`` returns ``shots`` bit vectors of length ``qubo.shape[0]``,
    or ``Err(SamplerError)``. How the samples are produced is not the
    orchestrator's concern.
    """

    def sample(self, qubo: np.ndarray, shots: int) -> Result[Samples, SamplerError]:
        ...
