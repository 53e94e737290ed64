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

from __future__ import annotations

import hashlib
from typing import Any, BinaryIO, Optional


class HashingStream:
    """
    Byte-stream decorator that hashes everything passing through it.

    Wraps a readable or writable binary stream. `read` hashes exactly the
    bytes handed back to the caller; `write` hashes exactly the bytes the
    underlying sink accepted. The same instance can be used on either side
    of a copy, so both the write path (digest of generated data) and the
    verify path (digest of stored data) share one implementation.
    """

    def __init__(self, stream: BinaryIO, hasher: Optional[Any] = None) -> None:
        self._stream = stream
        self._hash = hasher if hasher is not None else hashlib.sha256()
        self._count = 0

    # --- stream API ---------------------------------------------------------

    def read(self, size: int = -1) -> bytes:
        data = self._stream.read(size)
        if data:
            self._hash.update(data)
            self._count += len(data)
        return data

    def write(self, data: bytes) -> int:
        written = self._stream.write(data)
        if written is None:
            written = len(data)
        if written:
            view = memoryview(data)[:written]
            self._hash.update(view)
            self._count += written
        return written

    def flush(self) -> None:
        flush = getattr(self._stream, "flush", None)
        if flush is not None:
            flush()

    def close(self) -> None:
        self._stream.close()

    def __enter__(self) -> HashingStream:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # --- digest -------------------------------------------------------------

    @property
    def bytes_hashed(self) -> int:
        return self._count

    def hexdigest(self) -> str:
        # hashlib objects return a digest without consuming state
        return self._hash.hexdigest()
