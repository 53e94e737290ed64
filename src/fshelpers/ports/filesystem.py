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

import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Iterator, Optional


class FilesystemPort(ABC):
    """Abstract interface for filesystem access."""

    @abstractmethod
    def walk(
        self,
        root: Path,
        deadline: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> Iterator[Path]:
        """
        Yield regular file paths under `root`, skipping anything named `staging`.
        Stops early once `clock()` passes `deadline`.
        """
        raise NotImplementedError

    @abstractmethod
    def free_space(self, path: Path) -> int:
        """Return the bytes available to an unprivileged writer on the volume of `path`."""
        raise NotImplementedError
