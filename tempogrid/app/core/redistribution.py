"""
Helpers used by the model builder to move quantities between partitions.
"""

from numbers import Real
from typing import Dict, List, Sequence, Union
import logging
import pulp
from scipy.sparse import csr_matrix
from schemas import TimeBlock
from .partitions import overlap

_LOGGER = logging.getLogger(__name__)

LinearTerm = Union[float, pulp.LpVariable, pulp.LpAffineExpression]


def duration(block_a: TimeBlock, block_b: TimeBlock, resolution: float) -> float:
    """Duration (in hours) of the part of block_b that lies within block_a."""
    return overlap(block_a, block_b) * resolution


def profile_sum(
    profiles: Dict[int, Sequence[float]],
    rp: int,
    block: TimeBlock,
    default_value: float,
) -> float:
    """
    Sum the profile of representative period rp over the time steps of block.

    Time steps are 1-based. When rp has no profile every step counts as
    default_value.
    """
    if rp not in profiles:
        return len(block) * default_value

    profile = profiles[rp]
    if block.start < 1:
        message = f"Profile positions start at 1, block {block} starts at {block.start}"
        _LOGGER.error(message)
        raise ValueError(message)
    if block.end > len(profile):
        message = f"Profile of period {rp} has {len(profile)} steps, block {block} exceeds it"
        _LOGGER.error(message)
        raise ValueError(message)

    return float(sum(profile[block.start - 1:block.end]))


def project(values: Sequence[LinearTerm], matrix: csr_matrix) -> List[LinearTerm]:
    """
    Project per-column values onto the matrix rows: out[i] = sum_j M[i, j] * values[j].

    values may be plain numbers, giving floats, or pulp variables/expressions,
    giving one pulp.LpAffineExpression per row that can be used directly in
    constraints.
    """
    n_rows, n_cols = matrix.shape
    if len(values) != n_cols:
        message = f"Expected {n_cols} values (one per matrix column), got {len(values)}"
        _LOGGER.error(message)
        raise ValueError(message)

    numeric = all(isinstance(v, Real) for v in values)

    projected: List[LinearTerm] = []
    for row in range(n_rows):
        lo, hi = matrix.indptr[row], matrix.indptr[row + 1]
        terms = [
            float(matrix.data[k]) * values[int(matrix.indices[k])]
            for k in range(lo, hi)
        ]
        if numeric:
            projected.append(float(sum(terms)))
        else:
            projected.append(pulp.lpSum(terms))

    return projected
