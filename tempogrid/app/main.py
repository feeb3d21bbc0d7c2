from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from schemas import (
    AssetTimeGrid,
    MatrixEntry,
    ReconcileRequest,
    ReconcileResponse,
    ReconciliationConfig,
    ResolutionMatrixRequest,
    ResolutionMatrixResponse,
    TimeGridRequest,
    TimeGridResponse,
)
import logging
import os
import json

# Configure logging - level will be controlled by uvicorn's --log-level parameter
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

_LOGGER = logging.getLogger(__name__)

from core.partitions import (
    EmptyInputError,
    InvalidStrategyError,
    MalformedPartitionError,
    MisalignedPartitionsError,
    PartitionError,
)
from core.reconciliation import parse_strategy, reconcile
from core.resolution import resolution_triplets
from core.time_grid import build_asset_time_grids

ERROR_KINDS = {
    InvalidStrategyError: "InvalidStrategy",
    EmptyInputError: "EmptyInput",
    MisalignedPartitionsError: "MisalignedPartitions",
    MalformedPartitionError: "MalformedPartition",
}


def load_config() -> ReconciliationConfig:
    """Read defaults from the environment (TEMPOGRID_DEFAULT_STRATEGY, TEMPOGRID_STRICT_PARTITIONS)"""
    values = {}
    default_strategy = os.environ.get("TEMPOGRID_DEFAULT_STRATEGY")
    if default_strategy:
        values["default_strategy"] = default_strategy.strip().lower()
    strict = os.environ.get("TEMPOGRID_STRICT_PARTITIONS")
    if strict:
        values["strict_partitions"] = strict.strip().lower() in ("1", "true", "yes", "on")
    return ReconciliationConfig(**values)


CONFIG = load_config()
_LOGGER.info(
    f"Default strategy: {CONFIG.default_strategy.value}, strict partitions: {CONFIG.strict_partitions}"
)


def error_kind(exc: PartitionError) -> str:
    for cls, kind in ERROR_KINDS.items():
        if isinstance(exc, cls):
            return kind
    return "PartitionError"


app = FastAPI(
    title="Time Partition Service",
    description="Reconciles heterogeneous time partitions of energy assets and flows",
    version="0.1.0"
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Custom handler for validation errors (422).
    Provides detailed error messages with field locations and error types.
    """
    errors = exc.errors()

    _LOGGER.error(f"Validation error on {request.url.path}")

    # Errors may contain exception objects, serialize with str as fallback
    try:
        _LOGGER.error(f"Validation errors: {json.dumps(errors, indent=2, default=str)}")
    except (TypeError, ValueError) as e:
        _LOGGER.error(f"Validation errors (raw): {errors}")
        _LOGGER.error(f"Failed to serialize errors to JSON: {e}")

    detailed_errors = []
    for error in errors:
        field_path = " -> ".join(str(loc) for loc in error["loc"])
        detailed_errors.append({
            "field": field_path,
            "message": error["msg"],
            "type": error["type"],
            "input": error.get("input")
        })

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=json.loads(json.dumps({
            "detail": "Validation Error",
            "errors": detailed_errors,
            "error_count": len(detailed_errors),
            "help": "Check the 'errors' field for detailed information about each validation failure."
        }, default=str))
    )


@app.get("/")
def root():
    """Health check endpoint"""
    return {"status": "ok", "service": "Time Partition Service"}


@app.post("/reconcile", response_model=ReconcileResponse)
def reconcile_partitions(req: ReconcileRequest):
    """Merge the given partitions into one shared partition."""
    strict = CONFIG.strict_partitions if req.strict is None else req.strict
    strategy = req.strategy if req.strategy is not None else CONFIG.default_strategy

    _LOGGER.info(f"Reconciling {len(req.partitions)} partitions (strategy={strategy}, strict={strict})")

    try:
        strategy = parse_strategy(strategy)
        partition = reconcile(req.partitions, strategy, strict=strict)
    except PartitionError as e:
        response = ReconcileResponse(status="error", error_kind=error_kind(e), error=str(e))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=response.model_dump(mode="json")
        )

    return ReconcileResponse(status="ok", strategy=strategy, partition=partition)


@app.post("/resolution-matrix", response_model=ResolutionMatrixResponse)
def build_resolution_matrix(req: ResolutionMatrixRequest):
    """Sparse overlap matrix between reference (rows) and target (columns), 0-based."""
    scale = CONFIG.scale if req.scale is None else req.scale
    entries = resolution_triplets(req.reference, req.target, scale)

    _LOGGER.debug(f"Resolution matrix entries: {entries}")

    return ResolutionMatrixResponse(
        status="ok",
        shape=(len(req.reference), len(req.target)),
        entries=[MatrixEntry(row=r, column=c, value=v) for r, c, v in entries]
    )


@app.post("/time-grids", response_model=TimeGridResponse)
def build_time_grids(req: TimeGridRequest):
    """Shared time grid of every asset in every representative period."""
    strict = CONFIG.strict_partitions if req.strict is None else req.strict
    strategy = req.strategy if req.strategy is not None else CONFIG.default_strategy

    flow_partitions = {
        (flow.from_asset, flow.to_asset): flow.partitions
        for flow in req.flows
    }

    try:
        strategy = parse_strategy(strategy)
        grids = build_asset_time_grids(req.assets, flow_partitions, strategy, strict=strict)
    except PartitionError as e:
        response = TimeGridResponse(status="error", error_kind=error_kind(e), error=str(e))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=response.model_dump(mode="json")
        )

    return TimeGridResponse(
        status="ok",
        strategy=strategy,
        grids=[
            AssetTimeGrid(asset=asset, rp=rp, partition=partition)
            for (asset, rp), partition in sorted(grids.items(), key=lambda item: item[0])
        ]
    )
