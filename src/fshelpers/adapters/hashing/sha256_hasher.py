# Licensed under the Apache License, Version 2.0
from __future__ import annotations

import hashlib
from typing import BinaryIO

from ...ports.hasher import HasherPort
from ..streams.copy import NullSink, copy_stream
from ..streams.hashing_stream import HashingStream


class SHA256Hasher(HasherPort):
    """Cryptographic strong hash (full-file SHA-256), 64 hex characters."""

    def __init__(self, chunk_size: int = 1 << 20) -> None:
        self._chunk_size = int(chunk_size)

    @property
    def name(self) -> str:
        return "sha256"

    def new(self):
        return hashlib.sha256()

    def hash_stream(self, stream: BinaryIO) -> str:
        hs = HashingStream(stream, self.new())
        copy_stream(hs, NullSink(), chunk_size=self._chunk_size)
        return hs.hexdigest()
