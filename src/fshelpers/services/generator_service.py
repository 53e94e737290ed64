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

from ..adapters.streams.copy import RandomReader
from ..domain.config import GeneratorConfig
from ..domain.errors import FshelpersError
from ..domain.models import RunStats, WorkerStats
from ..ports.filesystem import FilesystemPort
from .content_store import ContentStore

logger = logging.getLogger(__name__)

PROGRESS_EVERY = 100


class GeneratorService:
    """
    Fills a store root with random-content entries up to a byte budget.

    The budget is either explicit or `percent` of the free space reported by
    the filesystem port, split evenly between the writers. Each writer owns
    a seeded generator and writes through ContentStore, so every file it
    leaves behind is a committed, digest-named entry.
    """

    def __init__(self, fs: FilesystemPort, store: ContentStore, config: GeneratorConfig) -> None:
        self._fs = fs
        self._store = store
        self._config = config

    def budget(self) -> int:
        cfg = self._config
        if cfg.budget is not None:
            return cfg.budget
        free = self._fs.free_space(self._store.root)
        return free * cfg.percent // 100

    def run(self) -> RunStats:
        cfg = self._config
        self._store.init()

        total = self.budget()
        per_writer = total // cfg.writers
        logger.info(
            "writing %d bytes to %s with %d writer(s)", total, self._store.root, cfg.writers
        )

        master = random.Random(cfg.seed)
        seeds = [master.getrandbits(64) for _ in range(cfg.writers)]
        stats = [WorkerStats(index=i) for i in range(cfg.writers)]

        threads = []
        for i, seed in enumerate(seeds):
            t = threading.Thread(
                target=self._write_files,
                args=(i, seed, per_writer, stats[i]),
                name=f"fsh-writer-{i:02d}",
                daemon=True,
            )
            threads.append(t)
            t.start()
        for t in threads:
            t.join()

        return RunStats(workers=stats)

    def _write_files(self, index: int, seed: int, nbytes: int, stats: WorkerStats) -> None:
        cfg = self._config
        logger.info("%02d: writing %d bytes to %s", index, nbytes, self._store.root)

        rng = random.Random(seed)
        source = RandomReader(rng)
        while nbytes > 0:
            size = min(rng.randint(cfg.min_size, cfg.max_size), nbytes)
            try:
                self._store.write(index, source, size)
            except (OSError, FshelpersError) as e:
                logger.error("%02d: write failed with: %s", index, e)
                stats.failed = True
                break

            nbytes -= size
            stats.files_written += 1
            stats.bytes_written += size
            if index == 0 and stats.files_written % PROGRESS_EVERY == 0:
                logger.info("%02d: files written: %d", index, stats.files_written)
