from .errors import (
    ConfigurationError,
    FshelpersError,
    QueueClosedError,
    StoreError,
)
from .models import Operation, OperationOutcome, RunStats, WorkerStats
from .config import GeneratorConfig, OperationWeights, PipelineConfig, parse_duration

__all__ = [
    "ConfigurationError",
    "FshelpersError",
    "QueueClosedError",
    "StoreError",
    "Operation",
    "OperationOutcome",
    "RunStats",
    "WorkerStats",
    "GeneratorConfig",
    "OperationWeights",
    "PipelineConfig",
    "parse_duration",
]
