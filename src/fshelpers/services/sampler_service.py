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
from typing import Optional

from .pipeline_queue import PipelineQueue
from .reporter import Reporter

logger = logging.getLogger(__name__)


class SamplerService:
    """
    Middle pipeline stage: decides which discovered files get exercised.

    Each path is admitted with `admit_probability`; an admitted path is
    re-emitted between 1 and `max_replicas` times to mimic hot files.
    """

    def __init__(
        self,
        rng: random.Random,
        *,
        admit_probability: float = 0.25,
        max_replicas: int = 3,
        reporter: Optional[Reporter] = None,
    ) -> None:
        self._rng = rng
        self._admit_probability = float(admit_probability)
        self._max_replicas = int(max_replicas)
        self._reporter = reporter

    @classmethod
    def passthrough(cls, reporter: Optional[Reporter] = None) -> "SamplerService":
        """Admit every path exactly once."""
        return cls(random.Random(0), admit_probability=1.0, max_replicas=1, reporter=reporter)

    def admit(self) -> bool:
        if self._admit_probability >= 1.0:
            return True
        return self._rng.random() < self._admit_probability

    def replicas(self) -> int:
        return self._rng.randint(1, self._max_replicas)

    def run(self, inp: PipelineQueue, out: PipelineQueue) -> int:
        """
        Drain `inp` into `out` until `inp` is closed, then close `out`.

        Returns:
            Number of admitted paths (before replication).
        """
        admitted = 0
        try:
            for path in inp:
                if not self.admit():
                    continue
                for _ in range(self.replicas()):
                    out.put(path)
                admitted += 1
                if self._reporter is not None:
                    self._reporter.observe(path)
        finally:
            out.close()
        return admitted
