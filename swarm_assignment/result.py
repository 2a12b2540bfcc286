"""
Tagged result type and error kinds.

Expected failure paths (malformed input, sampler failure, no valid sample)
are returned as ``Err`` values instead of raised exceptions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


class ResultError(RuntimeError):
    """Raised by ``unwrap`` when called on an ``Err``."""


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful result carrying ``value``."""
    value: T

    @property
    def is_ok(self) -> bool:
        return True

    @property
    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: Any) -> T:
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed result carrying ``error``."""
    error: E

    @property
    def is_ok(self) -> bool:
        return False

    @property
    def is_err(self) -> bool:
        return True

    def unwrap(self):
        raise ResultError(f"called unwrap() on Err: {self.error}")

    def unwrap_or(self, default: Any) -> Any:
        return default


Result = Union[Ok[T], Err[E]]


class InputErrorKind(Enum):
    """Kinds of malformed input rejected before any sampling."""
    EMPTY_INPUT = "empty_input"
    DIMENSION_MISMATCH = "dimension_mismatch"
    INVALID_MATRIX = "invalid_matrix"
    INVALID_SHOTS = "invalid_shots"
    INVALID_PENALTY = "invalid_penalty"


@dataclass(frozen=True)
class InputError:
    """Malformed input. Fatal, returned immediately, never retried."""
    kind: InputErrorKind
    message: str

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


@dataclass(frozen=True)
class DecodeError:
    """A bit vector could not be read as an N x N one-hot grid."""
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class SamplerError:
    """Failure reported by (or raised from) the external sampler."""
    message: str
    cause: Optional[BaseException] = None

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message} ({type(self.cause).__name__}: {self.cause})"
        return self.message


@dataclass(frozen=True)
class NoValidSample:
    """No sampled candidate satisfied the one-hot constraints."""
    num_samples: int

    def __str__(self) -> str:
        return f"none of {self.num_samples} samples encoded a valid assignment"


SolveError = Union[InputError, SamplerError, NoValidSample]
