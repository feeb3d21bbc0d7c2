from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import List, Dict, Optional, Tuple, TypeAlias


class TimeBlock(BaseModel):
    """Contiguous inclusive integer interval [start, end]"""
    model_config = ConfigDict(frozen=True)

    start: int = Field(description="First time step covered by the block")
    end: int = Field(description="Last time step covered by the block (inclusive)")

    @model_validator(mode='after')
    def validate_bounds(self):
        """Ensure the block is not inverted"""
        if self.start > self.end:
            raise ValueError(f"TimeBlock start ({self.start}) must not be after end ({self.end})")
        return self

    @classmethod
    def from_pair(cls, pair: Tuple[int, int]) -> "TimeBlock":
        start, end = pair
        return cls(start=start, end=end)

    def as_range(self) -> range:
        return range(self.start, self.end + 1)

    def __len__(self) -> int:
        return self.end - self.start + 1

    def __contains__(self, step: int) -> bool:
        return self.start <= step <= self.end

    def __str__(self) -> str:
        return f"{self.start}:{self.end}"


# Type alias for a partition: ordered, gap-free blocks covering 1..N
Partition: TypeAlias = List[TimeBlock]


class Strategy(str, Enum):
    """Merge policy used when reconciling partitions"""
    GREEDY = "greedy"
    ALL = "all"


class RepresentativePeriod(BaseModel):
    """A representative period of the planning horizon"""
    weight: float = Field(gt=0, description="Number of times the period is repeated in the horizon")
    num_time_steps: int = Field(gt=0, description="Number of time steps N in the period")
    resolution: float = Field(gt=0, description="Duration of one time step in hours")

    @property
    def time_steps(self) -> TimeBlock:
        return TimeBlock(start=1, end=self.num_time_steps)


class ReconciliationConfig(BaseModel):
    """Reconciliation configuration"""
    default_strategy: Strategy = Field(default=Strategy.GREEDY, description="Strategy used when a request does not name one")
    strict_partitions: bool = Field(
        default=False,
        description=(
            "Also check that every block starts right after the previous one. "
            "When disabled only the first start and the last end are checked."
        )
    )
    scale: float = Field(default=1.0, gt=0, description="Default scale applied to resolution matrices")


# ---------------- REQUEST ----------------

class ReconcileRequest(BaseModel):
    """Merge several partitions of the same period into one"""
    partitions: List[Partition] = Field(description="Partitions to merge, all spanning 1..N")
    strategy: Optional[str] = Field(None, description="'greedy' or 'all' (defaults to the configured strategy)")
    strict: Optional[bool] = Field(None, description="Override the configured strictness")


class ResolutionMatrixRequest(BaseModel):
    """Build the overlap matrix between two partitions"""
    reference: Partition = Field(description="Partition indexing the rows")
    target: Partition = Field(description="Partition indexing the columns")
    scale: Optional[float] = Field(None, gt=0, description="Multiplier applied to every entry")


class FlowPartitions(BaseModel):
    """Partitions of a single flow between two assets, per representative period"""
    from_asset: str
    to_asset: str
    partitions: Dict[int, Partition] = Field(description="Partition per representative period index")


class TimeGridRequest(BaseModel):
    """Compute the shared time grid of every asset in every representative period"""
    assets: Dict[str, Dict[int, Partition]] = Field(description="Own partition per asset, per representative period")
    flows: List[FlowPartitions] = Field(default_factory=list)
    strategy: Optional[str] = Field(None, description="'greedy' or 'all' (defaults to the configured strategy)")
    strict: Optional[bool] = Field(None, description="Override the configured strictness")

    @model_validator(mode='after')
    def validate_flow_endpoints(self):
        """Ensure every flow connects known assets and appears only once"""
        seen = set()
        for flow in self.flows:
            key = (flow.from_asset, flow.to_asset)
            if key in seen:
                raise ValueError(f"Flow ({flow.from_asset}, {flow.to_asset}) is listed more than once")
            seen.add(key)
            for asset in (flow.from_asset, flow.to_asset):
                if asset not in self.assets:
                    raise ValueError(
                        f"Flow ({flow.from_asset}, {flow.to_asset}) references unknown asset '{asset}'"
                    )
        return self


# ---------------- RESPONSE ----------------

class MatrixEntry(BaseModel):
    """Single non-zero entry of a resolution matrix (0-based indices)"""
    row: int = Field(ge=0)
    column: int = Field(ge=0)
    value: float


class ReconcileResponse(BaseModel):
    status: str = Field(description="Response status: 'ok' or 'error'")
    strategy: Optional[Strategy] = None
    partition: Optional[Partition] = None
    error_kind: Optional[str] = Field(None, description="Error category if status is 'error'")
    error: Optional[str] = Field(None, description="Error message if status is 'error'")


class ResolutionMatrixResponse(BaseModel):
    status: str = Field(description="Response status: 'ok' or 'error'")
    shape: Tuple[int, int]
    entries: List[MatrixEntry] = Field(default_factory=list)


class AssetTimeGrid(BaseModel):
    """Shared time grid of one asset in one representative period"""
    asset: str
    rp: int
    partition: Partition


class TimeGridResponse(BaseModel):
    status: str = Field(description="Response status: 'ok' or 'error'")
    strategy: Optional[Strategy] = None
    grids: List[AssetTimeGrid] = Field(default_factory=list)
    error_kind: Optional[str] = Field(None, description="Error category if status is 'error'")
    error: Optional[str] = Field(None, description="Error message if status is 'error'")
