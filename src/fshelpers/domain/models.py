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

from dataclasses import dataclass, field
from enum import Enum

# Reserved directory name for in-flight writes; traversal never enters it.
STAGING_NAME = "staging"


class Operation(str, Enum):
    """File operations a worker can apply to a dispatched path."""

    VERIFY_READ = "verify"
    RANGE_READ = "range"
    RANGE_READ_WRITE = "rangewrite"
    WRITE_NEW = "write"


class OperationOutcome(str, Enum):
    OK = "ok"
    MISSING = "missing"  # target vanished under us; benign
    CORRUPT = "corrupt"  # digest did not match the basename


@dataclass
class WorkerStats:
    """Counters owned by exactly one worker (or writer) thread."""

    index: int
    operations: dict[Operation, int] = field(default_factory=dict)
    outcomes: dict[OperationOutcome, int] = field(default_factory=dict)
    bytes_written: int = 0
    files_written: int = 0
    failed: bool = False

    def record(self, op: Operation, outcome: OperationOutcome) -> None:
        self.operations[op] = self.operations.get(op, 0) + 1
        self.outcomes[outcome] = self.outcomes.get(outcome, 0) + 1


@dataclass
class RunStats:
    """Aggregate of every worker's stats, built after all stages joined."""

    discovered: int = 0
    dispatched: int = 0
    workers: list[WorkerStats] = field(default_factory=list)

    @property
    def integrity_failures(self) -> int:
        return sum(w.outcomes.get(OperationOutcome.CORRUPT, 0) for w in self.workers)

    @property
    def failed_workers(self) -> int:
        return sum(1 for w in self.workers if w.failed)

    @property
    def files_written(self) -> int:
        return sum(w.files_written for w in self.workers)

    @property
    def bytes_written(self) -> int:
        return sum(w.bytes_written for w in self.workers)

    def count(self, op: Operation) -> int:
        return sum(w.operations.get(op, 0) for w in self.workers)
