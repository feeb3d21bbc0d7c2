"""
Core modules for reconciling time partitions of energy assets and flows.
"""

from .partitions import (
    PartitionError,
    InvalidStrategyError,
    EmptyInputError,
    MisalignedPartitionsError,
    MalformedPartitionError,
    make_partition,
    uniform_partition,
    validate_partition,
)
from .reconciliation import reconcile, parse_strategy
from .resolution import resolution_matrix, resolution_triplets
from .redistribution import duration, profile_sum, project
from .time_grid import build_asset_time_grids

__all__ = [
    "PartitionError",
    "InvalidStrategyError",
    "EmptyInputError",
    "MisalignedPartitionsError",
    "MalformedPartitionError",
    "make_partition",
    "uniform_partition",
    "validate_partition",
    "reconcile",
    "parse_strategy",
    "resolution_matrix",
    "resolution_triplets",
    "duration",
    "profile_sum",
    "project",
    "build_asset_time_grids",
]
