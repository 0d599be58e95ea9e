"""Stream sink abstraction layer.

This module provides an abstract interface for consuming generated chunks
that can be implemented with different backends (in-memory buffer, local
filesystem, HTTP response stream, etc.). Which sink a job writes to is the
caller's choice.
"""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from pathlib import Path
from typing import BinaryIO

from filegen.config import get_settings
from filegen.core.exceptions import ValidationError, WriteError


class StreamSink(ABC):
    """Abstract base class for chunk sinks.

    A sink receives chunks serially: the caller awaits each ``write``
    before producing the next chunk.
    """

    @abstractmethod
    async def write(self, chunk: bytes) -> None:
        """Consume one chunk. Raise on failure."""
        pass

    async def close(self) -> None:
        """Release any resources held by the sink."""
        return None

    async def __aenter__(self) -> "StreamSink":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


class BufferSink(StreamSink):
    """In-memory accumulator handed off to the caller as one blob."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    async def write(self, chunk: bytes) -> None:
        self._buffer += chunk

    def getvalue(self) -> bytes:
        """Return everything written so far."""
        return bytes(self._buffer)

    def __len__(self) -> int:
        return len(self._buffer)


class FileSink(StreamSink):
    """Direct-to-storage writer for a local file.

    The file is opened (and its parent directories created) on the first
    write, so a job that fails validation never touches the filesystem.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._file: BinaryIO | None = None

    async def write(self, chunk: bytes) -> None:
        try:
            if self._file is None:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self._file = open(self.path, "wb")
            self._file.write(chunk)
        except OSError as e:
            raise WriteError(f"Failed to write {self.path}: {e}") from e

    async def close(self) -> None:
        if self._file is not None:
            try:
                self._file.close()
            except OSError as e:
                raise WriteError(f"Failed to close {self.path}: {e}") from e
            finally:
                self._file = None


class ChannelSink(StreamSink):
    """Hand-off to a concurrent consumer, one chunk at a time.

    ``write`` returns once the consumer has taken the chunk. Consumers
    iterate with ``async for``; iteration ends once the sink is closed.
    Closing never blocks.
    """

    _CLOSED = object()

    def __init__(self) -> None:
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def write(self, chunk: bytes) -> None:
        if self._closed:
            raise WriteError("Channel is closed")
        self._queue.put_nowait(chunk)
        await self._queue.join()

    async def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(self._CLOSED)

    async def __aiter__(self) -> AsyncIterator[bytes]:
        while True:
            item = await self._queue.get()
            self._queue.task_done()
            if item is self._CLOSED:
                return
            yield item


def resolve_output_path(filename: str, base_dir: str | Path | None = None) -> Path:
    """Resolve a bare filename inside the output directory.

    Raises:
        ValidationError: If the filename contains path components
    """
    name = filename.strip()
    if not name or name in (".", "..") or Path(name).name != name or "\\" in name:
        raise ValidationError(f"Invalid filename: {filename!r}", field="filename")

    base = Path(base_dir or get_settings().output_dir)
    return base / name
