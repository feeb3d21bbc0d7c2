import pytest

from core.partitions import make_partition


@pytest.fixture
def four_hourly():
    return make_partition([(1, 4), (5, 8), (9, 12)])


@pytest.fixture
def three_hourly():
    return make_partition([(1, 3), (4, 6), (7, 9), (10, 12)])


@pytest.fixture
def irregular_pair():
    return [
        make_partition([(1, 1), (2, 3), (4, 6), (7, 10), (11, 12)]),
        make_partition([(1, 2), (3, 4), (5, 5), (6, 7), (8, 9), (10, 12)]),
    ]
