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

import re
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigurationError
from .models import Operation

# Seconds per unit, Go time.ParseDuration style.
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(text: str) -> float:
    """
    Parse a duration string such as "90s", "1h30m" or "1.5m" into seconds.

    Raises:
        ConfigurationError: on an empty, negative or malformed string.
    """
    s = (text or "").strip()
    if s == "0":
        return 0.0
    if not s:
        raise ConfigurationError("invalid duration: empty string")
    if s.startswith("-"):
        raise ConfigurationError(f"invalid duration {text!r}: must not be negative")
    if s.startswith("+"):
        s = s[1:]

    total = 0.0
    pos = 0
    while pos < len(s):
        m = _DURATION_PART.match(s, pos)
        if m is None:
            raise ConfigurationError(f"invalid duration {text!r}")
        total += float(m.group(1)) * _DURATION_UNITS[m.group(2)]
        pos = m.end()
    if pos == 0:
        raise ConfigurationError(f"invalid duration {text!r}")
    return total


@dataclass(frozen=True)
class OperationWeights:
    """Relative draw weights for each worker operation."""

    verify: float = 1.0
    range: float = 1.0
    rangewrite: float = 1.0
    write: float = 1.0

    def __post_init__(self) -> None:
        values = (self.verify, self.range, self.rangewrite, self.write)
        if any(v < 0 for v in values):
            raise ConfigurationError("operation weights must be >= 0")
        if sum(values) <= 0:
            raise ConfigurationError("at least one operation weight must be > 0")

    @classmethod
    def only(cls, op: Operation) -> OperationWeights:
        weights = {o.value: 0.0 for o in Operation}
        weights[op.value] = 1.0
        return cls(**weights)

    @classmethod
    def parse(cls, text: Optional[str]) -> OperationWeights:
        """
        Parse "verify=1,range=2,rangewrite=1,write=0". Omitted names keep
        their default weight of 1.
        """
        if not text:
            return cls()
        weights: dict[str, float] = {}
        valid = {o.value for o in Operation}
        for part in text.split(","):
            part = part.strip()
            if not part:
                continue
            name, sep, raw = part.partition("=")
            name = name.strip().lower()
            if not sep or name not in valid:
                raise ConfigurationError(
                    f"Unknown weight {part!r}. Valid names: {', '.join(sorted(valid))}"
                )
            try:
                weights[name] = float(raw)
            except ValueError as e:
                raise ConfigurationError(f"weight for {name!r} must be a number") from e
        return cls(**weights)

    def as_pairs(self) -> tuple[list[Operation], list[float]]:
        ops = list(Operation)
        return ops, [float(getattr(self, op.value)) for op in ops]


@dataclass(frozen=True)
class PipelineConfig:
    """Settings for the traversal -> sampler -> worker pipeline."""

    root: str
    workers: int = 1
    duration: Optional[float] = None  # seconds; None means a single traversal pass
    weights: OperationWeights = OperationWeights()
    admit_probability: float = 0.25
    max_replicas: int = 3
    range_fraction: tuple[float, float] = (0.1, 0.6)
    report_every: int = 1000
    count_bytes: bool = False
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.workers < 1:
            raise ConfigurationError("number of workers must be at least 1")
        if self.duration is not None and self.duration < 0:
            raise ConfigurationError("duration must not be negative")
        if not 0.0 < self.admit_probability <= 1.0:
            raise ConfigurationError("admit probability must be in (0, 1]")
        if self.max_replicas < 1:
            raise ConfigurationError("max replicas must be at least 1")
        lo, hi = self.range_fraction
        if not 0.0 <= lo < hi:
            raise ConfigurationError("range fraction must satisfy 0 <= low < high")

    @property
    def worker_queue_capacity(self) -> int:
        return 2 * self.workers


@dataclass(frozen=True)
class GeneratorConfig:
    """Settings for filling a store root with random content entries."""

    root: str
    writers: int = 1
    percent: int = 0
    budget: Optional[int] = None  # explicit byte budget; overrides percent
    min_size: int = 1_000_000
    max_size: int = 30_000_000
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.writers < 1:
            raise ConfigurationError("number of writers must be at least 1")
        if not 0 <= self.percent <= 100:
            raise ConfigurationError("percent fill must be an integer between 0 and 100")
        if self.budget is not None and self.budget < 0:
            raise ConfigurationError("byte budget must not be negative")
        if self.min_size < 1:
            raise ConfigurationError("minimum file size must be at least 1 byte")
        if self.min_size > self.max_size:
            raise ConfigurationError("minimum file size exceeds maximum file size")
