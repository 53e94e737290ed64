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

import logging
import os
from pathlib import Path
from typing import Any, Iterator, Optional

from ..adapters.hashing.sha256_hasher import SHA256Hasher
from ..adapters.streams.copy import DEFAULT_CHUNK, copy_stream
from ..adapters.streams.hashing_stream import HashingStream
from ..domain.errors import StoreError
from ..domain.models import STAGING_NAME
from ..ports.hasher import HasherPort

logger = logging.getLogger(__name__)


class ContentStore:
    """
    Content-addressable file store rooted at `root`.

    Layout:
      root/staging/<NNNN>        per-worker write buffer
      root/<digest[:4]>/<digest> committed entry; basename == digest(contents)

    Entries only ever appear through an atomic rename out of staging, so a
    reader never sees a digest-named file holding anything but the bytes that
    hash to its name (until something mutates it in place).
    """

    def __init__(
        self,
        root: Path,
        hasher: Optional[HasherPort] = None,
        *,
        shard_width: int = 4,
        chunk_size: int = DEFAULT_CHUNK,
    ) -> None:
        self._root = Path(root)
        self._hasher = hasher or SHA256Hasher(chunk_size=chunk_size)
        self._shard_width = int(shard_width)
        self._chunk_size = int(chunk_size)

    @property
    def root(self) -> Path:
        return self._root

    @property
    def staging_dir(self) -> Path:
        return self._root / STAGING_NAME

    def init(self) -> None:
        """Create the staging area; an existing one is fine."""
        self.staging_dir.mkdir(parents=True, exist_ok=True)

    def staging_path(self, worker_index: int) -> Path:
        return self.staging_dir / f"{worker_index:04d}"

    def entry_path(self, digest: str) -> Path:
        return self._root / digest[: self._shard_width] / digest

    # --- write protocol -----------------------------------------------------

    def write(self, worker_index: int, source: Any, size: int) -> Path:
        """
        Stream exactly `size` bytes from `source` into a new store entry.

        Returns:
            Path of the committed entry.

        Raises:
            StoreError: if `source` ran out before `size` bytes.
            OSError: on any filesystem failure. The staging file is removed
                before the error propagates.
        """
        staging = self.staging_path(worker_index)
        try:
            with open(staging, "wb") as fh:
                hs = HashingStream(fh, self._hasher.new())
                copied = copy_stream(source, hs, length=size, chunk_size=self._chunk_size)
            if copied != size:
                raise StoreError(
                    f"source ended after {copied} of {size} bytes for {staging}"
                )
            digest = hs.hexdigest()

            shard = self._root / digest[: self._shard_width]
            try:
                shard.mkdir()
            except FileExistsError:
                pass  # another worker got there first

            target = shard / digest
            os.replace(staging, target)
        except Exception:
            try:
                staging.unlink()
            except FileNotFoundError:
                pass
            raise

        logger.debug("%02d: committed %s (%d bytes)", worker_index, target, size)
        return target

    # --- verify -------------------------------------------------------------

    def digest_of(self, path: Path) -> str:
        with open(path, "rb") as fh:
            return self._hasher.hash_stream(fh)

    def check(self, path: Path) -> tuple[bool, str]:
        """
        Recompute the digest of `path` and compare it with the basename.

        Returns:
            (matches, recomputed digest)

        FileNotFoundError propagates; callers decide whether it is benign.
        """
        path = Path(path)
        digest = self.digest_of(path)
        return digest == path.name, digest

    def verify(self, path: Path) -> bool:
        return self.check(path)[0]

    def iter_entries(self) -> Iterator[Path]:
        """Yield committed entries (shard directories only, staging excluded)."""
        if not self._root.is_dir():
            return
        for shard in sorted(self._root.iterdir()):
            if shard.name == STAGING_NAME or not shard.is_dir():
                continue
            for entry in sorted(shard.iterdir()):
                if entry.is_file():
                    yield entry
