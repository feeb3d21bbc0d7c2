"""
Duration-weighted overlap matrices between two partitions.

Entry (i, j) is scale * |reference[i] ∩ target[j]| / |target[j]|, so a
quantity defined per target block is split over the reference blocks in
proportion to the shared duration.
"""

from typing import List, Sequence, Tuple
import logging
from scipy.sparse import csr_matrix
from schemas import TimeBlock
from .partitions import overlap

_LOGGER = logging.getLogger(__name__)

Triplet = Tuple[int, int, float]


def resolution_triplets(
    reference: Sequence[TimeBlock],
    target: Sequence[TimeBlock],
    scale: float = 1.0,
) -> List[Triplet]:
    """
    Non-zero entries of the resolution matrix as 0-based (row, column, value).

    Both partitions are walked once, side by side, so the cost is
    O(len(reference) + len(target)). Spans are not required to match;
    time steps outside the common range simply contribute nothing.
    """
    if scale <= 0:
        message = f"scale must be positive, got {scale}"
        _LOGGER.error(message)
        raise ValueError(message)

    entries: List[Triplet] = []
    i = j = 0
    while i < len(reference) and j < len(target):
        period, time_block = reference[i], target[j]

        shared = overlap(period, time_block)
        if shared:
            entries.append((i, j, scale * shared / len(time_block)))

        if period.end < time_block.end:
            i += 1
        elif time_block.end < period.end:
            j += 1
        else:
            i += 1
            j += 1

    return entries


def resolution_matrix(
    reference: Sequence[TimeBlock],
    target: Sequence[TimeBlock],
    scale: float = 1.0,
) -> csr_matrix:
    """
    Sparse len(reference) x len(target) resolution matrix.

    Example: reference [1:4, 5:8, 9:12], target [1:3, 4:6, 7:9, 10:12], scale 1.5

        1.5  0.5   .    .
         .   1.0  1.0   .
         .    .   0.5  1.5
    """
    entries = resolution_triplets(reference, target, scale)
    shape = (len(reference), len(target))

    rows = [row for row, _, _ in entries]
    cols = [col for _, col, _ in entries]
    data = [value for _, _, value in entries]

    _LOGGER.debug(f"Resolution matrix {shape[0]}x{shape[1]} with {len(data)} stored entries")

    return csr_matrix((data, (rows, cols)), shape=shape, dtype=float)
