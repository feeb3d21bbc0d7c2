"""
Tests for TimeBlock and the partition helpers.
"""
import pytest
from pydantic import ValidationError

from schemas import RepresentativePeriod, TimeBlock
from core.partitions import (
    EmptyInputError,
    MalformedPartitionError,
    MisalignedPartitionsError,
    PartitionError,
    breakpoints,
    check_same_span,
    make_partition,
    overlap,
    span,
    uniform_partition,
    validate_partition,
)


class TestTimeBlock:

    def test_length_counts_both_ends(self):
        assert len(TimeBlock(start=5, end=8)) == 4
        assert len(TimeBlock(start=3, end=3)) == 1

    def test_membership(self):
        block = TimeBlock(start=4, end=6)
        assert 4 in block
        assert 6 in block
        assert 7 not in block

    def test_inverted_block_rejected(self):
        with pytest.raises(ValidationError, match="must not be after end"):
            TimeBlock(start=5, end=4)

    def test_blocks_are_immutable_and_hashable(self):
        block = TimeBlock.from_pair((1, 4))
        with pytest.raises(ValidationError):
            block.start = 2
        assert {block, TimeBlock(start=1, end=4)} == {block}

    def test_as_range_and_str(self):
        block = TimeBlock(start=2, end=4)
        assert list(block.as_range()) == [2, 3, 4]
        assert str(block) == "2:4"


def test_representative_period_time_steps():
    rp = RepresentativePeriod(weight=52.0, num_time_steps=168, resolution=1.0)
    assert rp.time_steps == TimeBlock(start=1, end=168)


def test_span_and_breakpoints(three_hourly):
    assert span(three_hourly) == 12
    assert breakpoints(three_hourly) == [3, 6, 9, 12]


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ((1, 4), (1, 3), 3),
        ((1, 4), (4, 6), 1),
        ((5, 8), (1, 3), 0),
        ((1, 12), (5, 5), 1),
    ],
)
def test_overlap(a, b, expected):
    assert overlap(TimeBlock.from_pair(a), TimeBlock.from_pair(b)) == expected
    assert overlap(TimeBlock.from_pair(b), TimeBlock.from_pair(a)) == expected


class TestUniformPartition:

    def test_even_split(self, four_hourly):
        assert uniform_partition(12, 4) == four_hourly

    def test_last_block_truncated(self):
        assert uniform_partition(10, 4) == make_partition([(1, 4), (5, 8), (9, 10)])

    def test_block_longer_than_span(self):
        assert uniform_partition(3, 24) == make_partition([(1, 3)])

    def test_invalid_arguments(self):
        with pytest.raises(EmptyInputError):
            uniform_partition(0, 4)
        with pytest.raises(MalformedPartitionError):
            uniform_partition(12, 0)


class TestValidatePartition:

    def test_valid_partition_returns_span(self, three_hourly):
        assert validate_partition(three_hourly) == 12

    def test_empty(self):
        with pytest.raises(EmptyInputError):
            validate_partition([])

    def test_not_starting_at_one(self):
        with pytest.raises(MisalignedPartitionsError, match="must start at 1"):
            validate_partition(make_partition([(2, 4), (5, 8)]))

    def test_gap(self):
        with pytest.raises(MalformedPartitionError, match="not contiguous"):
            validate_partition(make_partition([(1, 4), (6, 8)]))

    def test_overlap(self):
        with pytest.raises(MalformedPartitionError):
            validate_partition(make_partition([(1, 4), (3, 8)]))


class TestCheckSameSpan:

    def test_returns_shared_span(self, four_hourly, three_hourly):
        assert check_same_span([four_hourly, three_hourly]) == 12

    def test_no_partitions(self):
        with pytest.raises(EmptyInputError):
            check_same_span([])

    def test_empty_partition_reported_before_alignment(self, four_hourly):
        misaligned = make_partition([(1, 5)])
        with pytest.raises(EmptyInputError, match="Partition 2 is empty"):
            check_same_span([four_hourly, misaligned, []])

    def test_different_spans(self, four_hourly):
        with pytest.raises(MisalignedPartitionsError, match="Partition 1 ends at 10"):
            check_same_span([four_hourly, uniform_partition(10, 5)])

    def test_lax_check_ignores_internal_gaps(self, four_hourly):
        gappy = make_partition([(1, 2), (5, 12)])
        assert check_same_span([four_hourly, gappy]) == 12

    def test_strict_check_rejects_internal_gaps(self, four_hourly):
        gappy = make_partition([(1, 2), (5, 12)])
        with pytest.raises(MalformedPartitionError, match="Partition 1"):
            check_same_span([four_hourly, gappy], strict=True)

    def test_strict_check_reports_span_mismatch_before_gaps(self):
        gappy = make_partition([(1, 2), (5, 12)])
        shorter = make_partition([(1, 8)])
        with pytest.raises(MisalignedPartitionsError, match="Partition 1 ends at 8"):
            check_same_span([gappy, shorter], strict=True)

    def test_all_errors_share_a_base_class(self):
        for cls in (EmptyInputError, MisalignedPartitionsError, MalformedPartitionError):
            assert issubclass(cls, PartitionError)
