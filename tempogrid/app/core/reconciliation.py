"""
Merge the partitions of several assets/flows into one shared time grid.

Two strategies are available:

- greedy: coarsest grid whose block ends are all ends of some input block.
  Starting at s = 1, every partition proposes the end of the block that
  contains s; the largest proposal closes the output block [s, e].
- all: finest common refinement, i.e. every input block end becomes a
  breakpoint of the output.
"""

from typing import List, Sequence, Union
import logging
from schemas import Partition, Strategy, TimeBlock
from .partitions import (
    InvalidStrategyError,
    MalformedPartitionError,
    check_same_span,
)

_LOGGER = logging.getLogger(__name__)


def parse_strategy(strategy: Union[Strategy, str]) -> Strategy:
    """
    Resolve a strategy given as enum member or string ('greedy', 'ALL', ...).

    Unknown values are rejected, never defaulted.
    """
    if isinstance(strategy, Strategy):
        return strategy

    if isinstance(strategy, str):
        try:
            return Strategy(strategy.strip().lower())
        except ValueError:
            pass

    valid = [s.value for s in Strategy]
    message = f"`strategy` should be one of {valid}, got {strategy!r}"
    _LOGGER.error(message)
    raise InvalidStrategyError(message)


def _greedy_breakpoints(partitions: Sequence[Sequence[TimeBlock]], rp_end: int) -> List[int]:
    # One cursor per partition; it only moves forward across steps
    cursors = [0] * len(partitions)
    ends: List[int] = []

    block_start = 1
    while block_start <= rp_end:
        block_end = block_start
        for idx, partition in enumerate(partitions):
            cursor = cursors[idx]
            while partition[cursor].end < block_start:
                cursor += 1
            cursors[idx] = cursor
            block_end = max(block_end, partition[cursor].end)

        ends.append(block_end)
        block_start = block_end + 1

    return ends


def _all_breakpoints(partitions: Sequence[Sequence[TimeBlock]]) -> List[int]:
    return sorted({block.end for partition in partitions for block in partition})


def _blocks_from_breakpoints(ends: List[int], rp_end: int) -> Partition:
    # Output must satisfy the partition invariants; a breakpoint outside 1..N
    # can only come from an input that is not internally contiguous
    if not ends or ends[0] < 1 or ends[-1] != rp_end:
        message = (
            f"Reconciled breakpoints {ends} do not cover 1..{rp_end}; "
            "an input partition is not contiguous"
        )
        _LOGGER.error(message)
        raise MalformedPartitionError(message)

    result: Partition = []
    block_start = 1
    for block_end in ends:
        result.append(TimeBlock(start=block_start, end=block_end))
        block_start = block_end + 1
    return result


def reconcile(
    partitions: Sequence[Sequence[TimeBlock]],
    strategy: Union[Strategy, str] = Strategy.GREEDY,
    strict: bool = False,
) -> Partition:
    """
    Compute one partition out of several partitions of the same range 1..N.

    Args:
        partitions: Partitions to merge. All must start at 1 and end at N
        strategy: Strategy.GREEDY (default) or Strategy.ALL, or their names
        strict: Also verify that every input is internally contiguous

    Returns:
        A new partition of 1..N

    Raises:
        InvalidStrategyError: unknown strategy
        EmptyInputError: no partitions, or an empty partition
        MisalignedPartitionsError: a partition does not start at 1 or ends elsewhere than N
        MalformedPartitionError: strict check failed, or the result is not a partition

    Example:
        >>> p1 = make_partition([(1, 4), (5, 8), (9, 12)])
        >>> p2 = make_partition([(1, 3), (4, 6), (7, 9), (10, 12)])
        >>> [str(b) for b in reconcile([p1, p2], "all")]
        ['1:3', '4:4', '5:6', '7:8', '9:9', '10:12']
    """
    strategy = parse_strategy(strategy)
    rp_end = check_same_span(partitions, strict=strict)

    if strategy == Strategy.GREEDY:
        ends = _greedy_breakpoints(partitions, rp_end)
    else:
        ends = _all_breakpoints(partitions)

    result = _blocks_from_breakpoints(ends, rp_end)

    _LOGGER.debug(
        f"Reconciled {len(partitions)} partitions of span {rp_end} "
        f"into {len(result)} blocks using '{strategy.value}'"
    )
    return result
