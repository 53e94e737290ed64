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
import time
from pathlib import Path
from typing import Callable, Iterator, Optional

from ...domain.models import STAGING_NAME
from ...ports.filesystem import FilesystemPort

logger = logging.getLogger(__name__)

READDIR_BATCH = 10  # entries between deadline checks


class LocalFS(FilesystemPort):
    """
    Local filesystem adapter.

    `walk` is iterative: it keeps an explicit stack of open directory
    iterators instead of recursing, so deep trees cannot exhaust the
    interpreter stack. Emission order matches a recursive pre-order walk
    in directory order: a subdirectory is fully walked as soon as it is
    encountered, then its parent resumes.
    """

    def walk(
        self,
        root: Path,
        deadline: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> Iterator[Path]:
        root = Path(root)
        stack: list[tuple[Path, Iterator[os.DirEntry], int]] = []

        def push(dirpath: Path) -> None:
            try:
                it = os.scandir(dirpath)
            except OSError as e:
                logger.warning("LocalFS.walk: cannot open %s: %s", dirpath, e)
                return
            stack.append((dirpath, it, 0))

        push(root)
        try:
            while stack:
                dirpath, it, seen = stack[-1]
                if seen % READDIR_BATCH == 0 and deadline is not None and clock() > deadline:
                    break
                try:
                    entry = next(it, None)
                except OSError as e:
                    logger.warning("LocalFS.walk: error reading %s: %s", dirpath, e)
                    entry = None
                if entry is None:
                    stack.pop()
                    it.close()
                    continue
                stack[-1] = (dirpath, it, seen + 1)

                if entry.name == STAGING_NAME:
                    continue
                try:
                    if entry.is_file(follow_symlinks=False):
                        yield Path(entry.path)
                    elif entry.is_dir(follow_symlinks=False):
                        push(Path(entry.path))
                except OSError as e:
                    logger.warning("LocalFS.walk: cannot stat %s: %s", entry.path, e)
        finally:
            for _dirpath, it, _seen in stack:
                it.close()

    def free_space(self, path: Path) -> int:
        st = os.statvfs(path)
        return st.f_bavail * st.f_frsize
