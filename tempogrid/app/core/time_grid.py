"""
Shared time grid of every asset in every representative period.

An asset's balance constraints are indexed by one partition per period,
obtained by reconciling the asset's own partition with the partitions of
all flows entering or leaving it.
"""

from typing import Dict, Iterable, List, Optional, Tuple, Union
import logging
from schemas import Partition, Strategy
from .partitions import EmptyInputError, PartitionError
from .reconciliation import parse_strategy, reconcile

_LOGGER = logging.getLogger(__name__)

FlowKey = Tuple[str, str]
AssetPartitions = Dict[str, Dict[int, Partition]]
FlowPartitions = Dict[FlowKey, Dict[int, Partition]]
TimeGrids = Dict[Tuple[str, int], Partition]


def incident_flows(asset: str, flow_partitions: FlowPartitions) -> List[FlowKey]:
    """Flows (from, to) that start or end at asset, in input order."""
    return [(u, v) for (u, v) in flow_partitions if u == asset or v == asset]


def build_asset_time_grids(
    asset_partitions: AssetPartitions,
    flow_partitions: FlowPartitions,
    strategy: Union[Strategy, str] = Strategy.GREEDY,
    strict: bool = False,
    rps: Optional[Iterable[int]] = None,
) -> TimeGrids:
    """
    Reconcile, per (asset, rp), the asset partition with its incident flow partitions.

    Args:
        asset_partitions: {asset: {rp: partition}}
        flow_partitions: {(from, to): {rp: partition}}
        strategy: Merge strategy passed to reconcile
        strict: Passed to reconcile
        rps: Representative periods to build; defaults to every period
            found in asset_partitions

    Returns:
        {(asset, rp): partition}

    Raises:
        PartitionError subclasses, with the asset and period in the message.
        A missing partition for a requested period is an EmptyInputError.
    """
    strategy = parse_strategy(strategy)

    if rps is None:
        rps = sorted({rp for per_rp in asset_partitions.values() for rp in per_rp})
    else:
        rps = list(rps)

    grids: TimeGrids = {}
    for asset, own_partitions in asset_partitions.items():
        flows = incident_flows(asset, flow_partitions)

        for rp in rps:
            inputs: List[Partition] = []
            for flow in flows:
                if rp not in flow_partitions[flow]:
                    message = f"Flow {flow} has no partition for representative period {rp}"
                    _LOGGER.error(message)
                    raise EmptyInputError(message)
                inputs.append(flow_partitions[flow][rp])

            if rp not in own_partitions:
                message = f"Asset '{asset}' has no partition for representative period {rp}"
                _LOGGER.error(message)
                raise EmptyInputError(message)
            inputs.append(own_partitions[rp])

            try:
                grids[(asset, rp)] = reconcile(inputs, strategy, strict=strict)
            except PartitionError as e:
                raise type(e)(f"Asset '{asset}', representative period {rp}: {e}") from e

    _LOGGER.info(f"Built {len(grids)} time grids for {len(asset_partitions)} assets")
    return grids
