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
from typing import Optional, Sequence

from ..domain.config import OperationWeights
from ..domain.errors import FshelpersError
from ..domain.models import WorkerStats
from .content_store import ContentStore
from .operations import FileOperations, RangeFraction
from .pipeline_queue import PipelineQueue

logger = logging.getLogger(__name__)


class WorkerPool:
    """
    Fixed set of worker threads draining one pipeline queue.

    Each worker owns its random generator, its FileOperations and its
    WorkerStats. A worker that hits a real I/O error logs it and stops for
    good; the others keep going. If the last live worker stops that way it
    discards the rest of the queue so upstream stages can still finish.
    """

    def __init__(
        self,
        store: ContentStore,
        seeds: Sequence[int],
        weights: Optional[OperationWeights] = None,
        *,
        range_fraction: RangeFraction = (0.1, 0.6),
    ) -> None:
        if not seeds:
            raise ValueError("WorkerPool needs at least one worker seed")
        self._store = store
        self._seeds = list(seeds)
        self._ops, self._weights = (weights or OperationWeights()).as_pairs()
        self._fraction = range_fraction
        self._threads: list[threading.Thread] = []
        self._stats: list[WorkerStats] = []
        self._live = 0
        self._live_lock = threading.Lock()

    @property
    def size(self) -> int:
        return len(self._seeds)

    def start(self, queue: PipelineQueue) -> None:
        self._stats = [WorkerStats(index=i) for i in range(self.size)]
        self._live = self.size
        for i, seed in enumerate(self._seeds):
            t = threading.Thread(
                target=self._work,
                args=(i, seed, queue),
                name=f"fsh-worker-{i:02d}",
                daemon=True,
            )
            self._threads.append(t)
            t.start()

    def join(self) -> list[WorkerStats]:
        for t in self._threads:
            t.join()
        self._threads = []
        return self._stats

    def run(self, queue: PipelineQueue) -> list[WorkerStats]:
        """Start the workers and wait for all of them (queue must get closed)."""
        self.start(queue)
        return self.join()

    def _work(self, index: int, seed: int, queue: PipelineQueue) -> None:
        rng = random.Random(seed)
        ops = FileOperations(self._store, index, rng, range_fraction=self._fraction)
        stats = self._stats[index]
        try:
            for path in queue:
                op = rng.choices(self._ops, weights=self._weights)[0]
                try:
                    outcome = ops.run(op, path)
                except (OSError, FshelpersError) as e:
                    logger.error(
                        "%02d: %s failed on '%s' with '%s'; worker stopping",
                        index,
                        op.value,
                        path,
                        e,
                    )
                    stats.failed = True
                    break
                stats.record(op, outcome)
        finally:
            stats.bytes_written = ops.bytes_written
            stats.files_written = ops.files_written
            with self._live_lock:
                self._live -= 1
                last = self._live == 0
            if last:
                dropped = queue.drain()
                if dropped:
                    logger.warning("no workers left; discarded %d queued paths", dropped)
