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

import threading
from collections import deque
from typing import Deque, Generic, Iterator, TypeVar

from ..domain.errors import QueueClosedError

T = TypeVar("T")


class _Closed:
    pass


CLOSED = _Closed()


class PipelineQueue(Generic[T]):
    """
    Bounded FIFO connecting two pipeline stages.

      - put() blocks while the queue is full (backpressure)
      - get() blocks while the queue is empty; returns CLOSED once the
        queue is closed and drained
      - close() wakes every waiter; values already queued are still delivered

    Iterating the queue yields values until it is closed and drained.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("queue capacity must be at least 1")
        self._capacity = int(capacity)
        self._items: Deque[T] = deque()
        self._closed = False
        self._lock = threading.Lock()
        self._not_full = threading.Condition(self._lock)
        self._not_empty = threading.Condition(self._lock)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def put(self, item: T) -> None:
        with self._not_full:
            while len(self._items) >= self._capacity and not self._closed:
                self._not_full.wait()
            if self._closed:
                raise QueueClosedError("put on a closed pipeline queue")
            self._items.append(item)
            self._not_empty.notify()

    def get(self):
        with self._not_empty:
            while not self._items and not self._closed:
                self._not_empty.wait()
            if not self._items:
                return CLOSED
            item = self._items.popleft()
            self._not_full.notify()
            return item

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._not_empty.notify_all()
            self._not_full.notify_all()

    def drain(self) -> int:
        """Discard values until the queue is closed; returns how many were dropped."""
        dropped = 0
        while self.get() is not CLOSED:
            dropped += 1
        return dropped

    def __iter__(self) -> Iterator[T]:
        while True:
            item = self.get()
            if item is CLOSED:
                return
            yield item
