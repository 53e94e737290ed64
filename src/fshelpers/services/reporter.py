# Licensed under the Apache License, Version 2.0
from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Callable

logger = logging.getLogger(__name__)

_UNITS = ["B", "kB", "MB", "GB", "TB", "PB", "EB"]


def format_bytes(n: int) -> str:
    """SI-formatted byte count: 999 B, 1.2 MB, 34 GB."""
    value = float(n)
    for unit in _UNITS:
        if value < 1000 or unit == _UNITS[-1]:
            if unit == "B":
                return f"{int(value)} B"
            return f"{value:.1f} {unit}" if value < 10 else f"{value:.0f} {unit}"
        value /= 1000.0
    return f"{n} B"


class Reporter:
    """
    Periodic progress logging driven by paths crossing the pipeline.

    Called from the sampler thread only; the lock keeps `snapshot()` safe to
    read from the orchestrating thread.
    """

    def __init__(
        self,
        every: int = 1000,
        count_bytes: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._every = max(0, int(every))
        self._count_bytes = bool(count_bytes)
        self._clock = clock
        self._lock = threading.Lock()
        self._files = 0
        self._bytes = 0
        self._start = clock()

    def observe(self, path: Path) -> None:
        size = 0
        if self._count_bytes:
            try:
                size = Path(path).stat().st_size
            except OSError:
                # Vanished or unreadable; progress counting is best-effort.
                return
        with self._lock:
            self._files += 1
            self._bytes += size
            files, nbytes = self._files, self._bytes
        if self._every and files % self._every == 0:
            if self._count_bytes:
                logger.info("files: %s, bytes: %s", f"{files:,}", format_bytes(nbytes))
            else:
                logger.info("file count: %s", f"{files:,}")

    def snapshot(self) -> tuple[int, int]:
        with self._lock:
            return self._files, self._bytes

    def summary(self, label: str = "handled") -> str:
        files, nbytes = self.snapshot()
        elapsed = max(self._clock() - self._start, 1e-9)
        minutes = elapsed / 60.0
        if self._count_bytes:
            rate = nbytes / elapsed / 1024.0 / 1024.0
            msg = (
                f"{label} {files:,} files ({format_bytes(nbytes)}) "
                f"in {minutes:.4g} minutes at {rate:.4g} MB/s"
            )
        else:
            msg = f"{label} {files:,} files in {minutes:.4g} minutes"
        logger.info(msg)
        return msg
