from .pipeline_queue import PipelineQueue, CLOSED
from .content_store import ContentStore
from .traversal_service import TraversalService
from .sampler_service import SamplerService
from .operations import FileOperations, compute_range
from .worker_pool import WorkerPool
from .reporter import Reporter, format_bytes
from .pipeline_service import PipelineService
from .generator_service import GeneratorService


__all__ = [
    'PipelineQueue',
    'CLOSED',
    'ContentStore',
    'TraversalService',
    'SamplerService',
    'FileOperations',
    'compute_range',
    'WorkerPool',
    'Reporter',
    'format_bytes',
    'PipelineService',
    'GeneratorService',
]
