"""Chunked content generation.

ContentGenerator is a lazy, single-pass iterator of Chunk values. Memory
use is bounded by the chunk size, never by the total size.
"""

import random

from filegen.models.content import ContentMode, ContentModeType
from filegen.models.job import Chunk

DEFAULT_CHUNK_SIZE_BYTES = 64 * 1024


class ContentGenerator:
    """Produce ``ceil(total_bytes / chunk_size_bytes)`` chunks of content.

    Every chunk is ``chunk_size_bytes`` long except the last, which holds
    the remainder (or a full chunk when the total divides evenly).

    Content per mode:
        random: fresh pseudo-random bytes for every chunk
        zero_fill: zeros, served from one reused buffer
        hex_pattern: the pattern repeated by global offset, so byte ``o`` is
            ``pattern[o % len(pattern)]`` across chunk boundaries

    Args:
        total_bytes: Exact output length (> 0)
        mode: Content mode
        chunk_size_bytes: Maximum chunk length (> 0)
        seed: Optional PRNG seed for random mode
    """

    def __init__(
        self,
        total_bytes: int,
        mode: ContentMode,
        chunk_size_bytes: int = DEFAULT_CHUNK_SIZE_BYTES,
        seed: int | None = None,
    ) -> None:
        if total_bytes <= 0:
            raise ValueError("total_bytes must be positive")
        if chunk_size_bytes <= 0:
            raise ValueError("chunk_size_bytes must be positive")

        self.total_bytes = total_bytes
        self.mode = mode
        self.chunk_size_bytes = chunk_size_bytes
        self._offset = 0

        self._rng = random.Random(seed)
        self._zero_chunk = b""
        self._pattern_tile = b""

        if mode.type == ContentModeType.ZERO_FILL:
            self._zero_chunk = bytes(min(chunk_size_bytes, total_bytes))
        elif mode.type == ContentModeType.HEX_PATTERN:
            # One chunk plus one full pattern period: any phase can be sliced out
            pattern = mode.pattern
            span = min(chunk_size_bytes, total_bytes) + len(pattern)
            repeats = -(-span // len(pattern))
            self._pattern_tile = pattern * repeats

    @property
    def chunk_count(self) -> int:
        """Total number of chunks this generator yields."""
        return -(-self.total_bytes // self.chunk_size_bytes)

    @property
    def remaining_bytes(self) -> int:
        return self.total_bytes - self._offset

    def __iter__(self) -> "ContentGenerator":
        return self

    def __next__(self) -> Chunk:
        remaining = self.total_bytes - self._offset
        if remaining <= 0:
            raise StopIteration

        size = min(self.chunk_size_bytes, remaining)
        offset = self._offset
        data = self._generate(offset, size)
        self._offset = offset + size
        return Chunk(data=data, offset=offset, is_last=self._offset == self.total_bytes)

    def _generate(self, offset: int, size: int) -> bytes:
        mode_type = self.mode.type
        if mode_type == ContentModeType.RANDOM:
            return self._rng.randbytes(size)
        if mode_type == ContentModeType.ZERO_FILL:
            if size == len(self._zero_chunk):
                return self._zero_chunk
            return self._zero_chunk[:size]
        phase = offset % len(self.mode.pattern)
        return self._pattern_tile[phase : phase + size]
