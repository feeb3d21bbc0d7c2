"""
Partition helpers shared by reconciliation and resolution matrices.

A partition is an ordered list of TimeBlocks covering 1..N without gaps
or overlaps. N is its span.
"""

from typing import Iterable, List, Sequence, Tuple
import logging
from schemas import Partition, TimeBlock

_LOGGER = logging.getLogger(__name__)


class PartitionError(Exception):
    """Base class for partition validation failures"""
    pass


class InvalidStrategyError(PartitionError):
    """Raised when the merge strategy is not recognised"""
    pass


class EmptyInputError(PartitionError):
    """Raised when there is nothing to reconcile"""
    pass


class MisalignedPartitionsError(PartitionError):
    """Raised when partitions do not start at 1 or do not share a span"""
    pass


class MalformedPartitionError(PartitionError):
    """Raised when a partition has gaps or overlapping blocks"""
    pass


def _fail(error_cls, message: str):
    _LOGGER.error(message)
    raise error_cls(message)


def make_partition(pairs: Iterable[Tuple[int, int]]) -> Partition:
    """Build a partition from (start, end) pairs, e.g. [(1, 4), (5, 8)]."""
    return [TimeBlock.from_pair(pair) for pair in pairs]


def uniform_partition(span: int, block_length: int) -> Partition:
    """
    Split 1..span into blocks of block_length time steps.

    The last block is shorter when block_length does not divide span.
    """
    if span <= 0:
        _fail(EmptyInputError, f"span must be positive, got {span}")
    if block_length <= 0:
        _fail(MalformedPartitionError, f"block_length must be positive, got {block_length}")

    return [
        TimeBlock(start=start, end=min(start + block_length - 1, span))
        for start in range(1, span + 1, block_length)
    ]


def span(partition: Sequence[TimeBlock]) -> int:
    return partition[-1].end


def breakpoints(partition: Sequence[TimeBlock]) -> List[int]:
    return [block.end for block in partition]


def overlap(a: TimeBlock, b: TimeBlock) -> int:
    """Number of integer time steps shared by two blocks (0 if disjoint)."""
    return max(0, min(a.end, b.end) - max(a.start, b.start) + 1)


def validate_partition(partition: Sequence[TimeBlock], label: str = "partition") -> int:
    """
    Check that a partition is non-empty, starts at 1 and is contiguous.

    Returns:
        The span N of the partition

    Raises:
        EmptyInputError: no blocks
        MisalignedPartitionsError: first block does not start at 1
        MalformedPartitionError: gap or overlap between consecutive blocks
    """
    if not partition:
        _fail(EmptyInputError, f"{label} is empty")
    if partition[0].start != 1:
        _fail(
            MisalignedPartitionsError,
            f"{label} must start at 1, starts at {partition[0].start}"
        )

    for previous, block in zip(partition, partition[1:]):
        if block.start != previous.end + 1:
            _fail(
                MalformedPartitionError,
                f"{label} is not contiguous: {previous} is followed by {block}"
            )

    return span(partition)


def check_same_span(partitions: Sequence[Sequence[TimeBlock]], strict: bool = False) -> int:
    """
    Precondition check for reconciliation, run before any output is built.

    Every partition must be non-empty, start at 1 and end at the same N.
    With strict=True each partition must also be internally contiguous.

    Returns:
        The shared span N
    """
    if not partitions:
        _fail(EmptyInputError, "At least one partition is required")

    for idx, partition in enumerate(partitions):
        if not partition:
            _fail(EmptyInputError, f"Partition {idx} is empty")

    rp_end = span(partitions[0])
    for idx, partition in enumerate(partitions):
        if partition[0].start != 1:
            _fail(
                MisalignedPartitionsError,
                f"Partition {idx} must start at 1, starts at {partition[0].start}"
            )
        if span(partition) != rp_end:
            _fail(
                MisalignedPartitionsError,
                f"Partition {idx} ends at {span(partition)}, expected {rp_end} (span of partition 0)"
            )

    # Contiguity only after every partition is known to share 1..N
    if strict:
        for idx, partition in enumerate(partitions):
            validate_partition(partition, label=f"Partition {idx}")

    return rp_end
