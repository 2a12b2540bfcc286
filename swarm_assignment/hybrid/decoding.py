"""
Decoding and validation of sampled bit vectors.

Decoding only reads the bit grid; constraint checking is a separate step so
malformed samples and infeasible samples stay distinguishable.
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Sequence, Tuple

import numpy as np

from ..data.models import Pair
from ..result import DecodeError, Err, Ok, Result


def decode_sample(bitstring, n: int) -> Result[List[Pair], DecodeError]:
    """
    Decode a length-N² bit vector to the (row, col) pairs whose bit is 1.

    Args:
        bitstring: Sampled bits, flat index i·N + j
        n: Problem size N

    Returns:
        Ok(pairs in flat-index order) or Err(DecodeError)
    """
    try:
        bits = np.asarray(bitstring, dtype=np.float64).ravel()
    except (TypeError, ValueError) as e:
        return Err(DecodeError(f"sample is not a flat numeric vector: {e}"))

    if bits.size != n * n:
        return Err(DecodeError(f"expected {n * n} bits, got {bits.size}"))

    if not np.all((bits == 0) | (bits == 1)):
        bad = bits[(bits != 0) & (bits != 1)][0]
        return Err(DecodeError(f"non-binary value {bad!r} in sample"))

    return Ok([divmod(int(idx), n) for idx in np.flatnonzero(bits)])


class ViolationKind(Enum):
    """Which assignment constraint a candidate breaks."""
    ROW_DUPLICATED = "row_duplicated"
    ROW_MISSING = "row_missing"
    COLUMN_DUPLICATED = "column_duplicated"
    COLUMN_MISSING = "column_missing"
    OUT_OF_RANGE = "out_of_range"
    WRONG_SIZE = "wrong_size"


@dataclass(frozen=True)
class ConstraintViolation:
    kind: ViolationKind
    index: int  # Row/column concerned; pair count for WRONG_SIZE


@dataclass(frozen=True)
class ValidationReport:
    """Outcome of checking a decoded candidate for a bijection."""
    is_valid: bool
    violations: Tuple[ConstraintViolation, ...] = field(default_factory=tuple)

    def __bool__(self) -> bool:
        return self.is_valid

    def kinds(self) -> set:
        return {v.kind for v in self.violations}


def validate_assignment(pairs: Sequence[Pair], n: int) -> ValidationReport:
    """
    Check that ``pairs`` is a bijection on 0..N-1.

    Valid iff there are exactly N pairs, N distinct rows and N distinct
    columns, all in range. The pair count is checked separately so a sample
    that repeats a cell cannot pass.

    Args:
        pairs: Decoded (row, col) pairs
        n: Problem size N

    Returns:
        ValidationReport listing every violation found
    """
    violations: List[ConstraintViolation] = []

    for row, col in pairs:
        if not (0 <= row < n):
            violations.append(ConstraintViolation(ViolationKind.OUT_OF_RANGE, row))
        if not (0 <= col < n):
            violations.append(ConstraintViolation(ViolationKind.OUT_OF_RANGE, col))

    if len(pairs) != n:
        violations.append(ConstraintViolation(ViolationKind.WRONG_SIZE, len(pairs)))

    row_counts = Counter(row for row, _ in pairs)
    col_counts = Counter(col for _, col in pairs)

    for idx in range(n):
        if row_counts[idx] == 0:
            violations.append(ConstraintViolation(ViolationKind.ROW_MISSING, idx))
        elif row_counts[idx] > 1:
            violations.append(ConstraintViolation(ViolationKind.ROW_DUPLICATED, idx))

        if col_counts[idx] == 0:
            violations.append(ConstraintViolation(ViolationKind.COLUMN_MISSING, idx))
        elif col_counts[idx] > 1:
            violations.append(ConstraintViolation(ViolationKind.COLUMN_DUPLICATED, idx))

    return ValidationReport(is_valid=not violations, violations=tuple(violations))
