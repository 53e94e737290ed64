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
import time
from pathlib import Path
from typing import Callable, Optional

from ..ports.filesystem import FilesystemPort
from .pipeline_queue import PipelineQueue

logger = logging.getLogger(__name__)


class TraversalService:
    """
    Pipeline producer: enumerates files under a root into a bounded queue.

    Without a deadline the tree is walked once. With a deadline the walk is
    restarted from the root every time it is exhausted, until the deadline
    passes; files near the root are therefore visited more often. Emission
    blocks when the queue is full, which is what throttles the whole pipeline.
    """

    def __init__(
        self,
        fs: FilesystemPort,
        *,
        clock: Callable[[], float] = time.monotonic,
        idle_pause: float = 0.01,
    ) -> None:
        self._fs = fs
        self._clock = clock
        self._idle_pause = float(idle_pause)

    def run(
        self, root: Path, out: PipelineQueue, deadline: Optional[float] = None
    ) -> int:
        """
        Feed `out` with file paths, then close it.

        Args:
            deadline: absolute `clock()` value; None for a single pass.

        Returns:
            Number of paths emitted.
        """
        root = Path(root)
        emitted = 0
        try:
            if deadline is None:
                emitted += self._pass(root, out, None)
            else:
                passes = 0
                while self._clock() < deadline:
                    found = self._pass(root, out, deadline)
                    passes += 1
                    emitted += found
                    if found == 0:
                        # Empty (or vanished) tree; don't spin.
                        time.sleep(self._idle_pause)
                logger.debug("TraversalService.run: %d passes over %s", passes, root)
        finally:
            out.close()
        return emitted

    def _pass(self, root: Path, out: PipelineQueue, deadline: Optional[float]) -> int:
        count = 0
        for path in self._fs.walk(root, deadline=deadline, clock=self._clock):
            out.put(path)
            count += 1
        return count
