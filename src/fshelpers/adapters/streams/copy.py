# Licensed under the Apache License, Version 2.0
from __future__ import annotations

import random
from typing import Any, Optional

DEFAULT_CHUNK = 1 << 20  # 1 MiB


class NullSink:
    """Writable stream that discards everything."""

    def write(self, data: bytes) -> int:
        return len(data)

    def flush(self) -> None:
        pass


class RandomReader:
    """Endless readable stream of bytes drawn from an owned random generator."""

    def __init__(self, rng: random.Random) -> None:
        self._rng = rng

    def read(self, size: int = -1) -> bytes:
        if size is None or size < 0:
            size = DEFAULT_CHUNK
        return self._rng.randbytes(size)


def copy_stream(
    src: Any, dst: Any, length: Optional[int] = None, chunk_size: int = DEFAULT_CHUNK
) -> int:
    """
    Copy bytes from `src` to `dst`; returns the number of bytes copied.

    With `length=None` copies until EOF. Otherwise copies at most `length`
    bytes; a source that ends first is a short copy, not an error.
    """
    copied = 0
    while length is None or copied < length:
        want = chunk_size if length is None else min(chunk_size, length - copied)
        chunk = src.read(want)
        if not chunk:
            break
        dst.write(chunk)
        copied += len(chunk)
    return copied
