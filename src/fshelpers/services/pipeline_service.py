# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import logging
import random
import threading
import time
from pathlib import Path
from typing import Callable

from ..domain.config import PipelineConfig
from ..domain.models import RunStats
from ..ports.filesystem import FilesystemPort
from .content_store import ContentStore
from .pipeline_queue import PipelineQueue
from .reporter import Reporter
from .sampler_service import SamplerService
from .traversal_service import TraversalService
from .worker_pool import WorkerPool

logger = logging.getLogger(__name__)

TRAVERSAL_QUEUE_CAPACITY = 2


class PipelineService:
    """
    Wires and runs: Traversal -> queue(2) -> Sampler -> queue(2*N) -> N workers.

    Traversal runs on the calling thread; the sampler and the workers run on
    their own threads. Shutdown is driven only by queue closure: traversal
    closes its queue when done, the sampler closes the worker queue once it
    has drained its input, and workers stop when their queue is closed and
    empty. `run` returns after every stage has finished.
    """

    def __init__(
        self,
        fs: FilesystemPort,
        store: ContentStore,
        config: PipelineConfig,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._fs = fs
        self._store = store
        self._config = config
        self._clock = clock

    def run(self, label: str = "handled") -> RunStats:
        cfg = self._config

        # One master draw seeds every stage; stages never share a generator.
        master = random.Random(cfg.seed)
        sampler_rng = random.Random(master.getrandbits(64))
        worker_seeds = [master.getrandbits(64) for _ in range(cfg.workers)]

        if cfg.weights.write > 0:
            self._store.init()

        discovered_q: PipelineQueue[Path] = PipelineQueue(TRAVERSAL_QUEUE_CAPACITY)
        work_q: PipelineQueue[Path] = PipelineQueue(cfg.worker_queue_capacity)

        reporter = Reporter(every=cfg.report_every, count_bytes=cfg.count_bytes, clock=self._clock)
        sampler = SamplerService(
            sampler_rng,
            admit_probability=cfg.admit_probability,
            max_replicas=cfg.max_replicas,
            reporter=reporter,
        )
        pool = WorkerPool(
            self._store, worker_seeds, cfg.weights, range_fraction=cfg.range_fraction
        )
        traversal = TraversalService(self._fs, clock=self._clock)

        admitted: list[int] = []
        sampler_thread = threading.Thread(
            target=lambda: admitted.append(sampler.run(discovered_q, work_q)),
            name="fsh-sampler",
            daemon=True,
        )

        deadline = None
        if cfg.duration is not None:
            deadline = self._clock() + cfg.duration

        logger.debug(
            "PipelineService.run: root=%s workers=%d duration=%s",
            cfg.root,
            cfg.workers,
            cfg.duration,
        )
        sampler_thread.start()
        pool.start(work_q)
        emitted = 0
        try:
            emitted = traversal.run(Path(cfg.root), discovered_q, deadline)
        finally:
            discovered_q.close()
            sampler_thread.join()
            workers = pool.join()

        reporter.summary(label)
        stats = RunStats(
            discovered=emitted,
            dispatched=admitted[0] if admitted else 0,
            workers=workers,
        )
        if stats.integrity_failures:
            logger.warning("integrity failures: %d", stats.integrity_failures)
        if stats.failed_workers:
            logger.warning("%d of %d workers stopped on errors", stats.failed_workers, cfg.workers)
        return stats
