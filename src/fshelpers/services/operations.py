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

"""
File operations dispatched by pipeline workers.

Every operation treats a missing target as a benign race with another
worker and returns OperationOutcome.MISSING. Any other OSError propagates
to the worker loop.
"""

from __future__ import annotations

import io
import logging
import math
import random
from pathlib import Path

from ..adapters.streams.copy import NullSink, RandomReader, copy_stream
from ..domain.models import Operation, OperationOutcome
from .content_store import ContentStore

logger = logging.getLogger(__name__)

RangeFraction = tuple[float, float]


def compute_range(
    size: int, rng: random.Random, fraction: RangeFraction = (0.1, 0.6)
) -> tuple[int, int]:
    """
    Pick a (offset, length) window inside a file of `size` bytes.

    offset = floor(U[0,1) * size), so 0 <= offset < size for non-empty files.
    length = floor(U[lo,hi) * size); offset + length may run past EOF.
    """
    size = max(0, int(size))
    lo, hi = fraction
    offset = math.floor(rng.random() * size)
    length = math.floor(rng.uniform(lo, hi) * size)
    if size:
        offset = min(offset, size - 1)
    return offset, max(0, length)


class FileOperations:
    """Executes one operation against one path on behalf of one worker."""

    def __init__(
        self,
        store: ContentStore,
        worker_index: int,
        rng: random.Random,
        *,
        range_fraction: RangeFraction = (0.1, 0.6),
    ) -> None:
        self._store = store
        self._index = int(worker_index)
        self._rng = rng
        self._fraction = range_fraction
        self.bytes_written = 0
        self.files_written = 0

    def run(self, op: Operation, path: Path) -> OperationOutcome:
        logger.debug("%02d: %s %s", self._index, op.value, path)
        handler = {
            Operation.VERIFY_READ: self.verify_read,
            Operation.RANGE_READ: self.range_read,
            Operation.RANGE_READ_WRITE: self.range_read_write,
            Operation.WRITE_NEW: self.write_new,
        }[op]
        try:
            return handler(Path(path))
        except FileNotFoundError:
            logger.debug("%02d: %s vanished during %s", self._index, path, op.value)
            return OperationOutcome.MISSING

    def verify_read(self, path: Path) -> OperationOutcome:
        ok, digest = self._store.check(path)
        if ok:
            return OperationOutcome.OK
        logger.warning("%02d: bad hash for file %s: %s", self._index, path.name, digest)
        return OperationOutcome.CORRUPT

    def range_read(self, path: Path) -> OperationOutcome:
        offset, length = compute_range(path.stat().st_size, self._rng, self._fraction)
        with open(path, "rb") as fh:
            fh.seek(offset)
            copy_stream(fh, NullSink(), length=length)
        return OperationOutcome.OK

    def range_read_write(self, path: Path) -> OperationOutcome:
        offset, length = compute_range(path.stat().st_size, self._rng, self._fraction)

        buf = io.BytesIO()
        with open(path, "rb") as fh:
            fh.seek(offset)
            copy_stream(fh, buf, length=length)

        # Reopen read-write and put the same bytes back where they came from.
        data = buf.getvalue()
        with open(path, "r+b") as fh:
            fh.seek(offset)
            fh.write(data)
        return OperationOutcome.OK

    def write_new(self, path: Path) -> OperationOutcome:
        size = path.stat().st_size
        target = self._store.write(self._index, RandomReader(self._rng), size)
        self.bytes_written += size
        self.files_written += 1

        if target != path:
            try:
                path.unlink()
            except FileNotFoundError:
                pass
        return OperationOutcome.OK
