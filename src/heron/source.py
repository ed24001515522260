from __future__ import annotations

from typing import Any, Protocol

CHUNK_SIZE = 4096


class ByteSource(Protocol):
    def peek(self) -> int | None: ...

    def read_byte(self) -> int | None: ...


class StreamSource:
    """Peek/read-one-byte view over a readable stream.

    Reads the stream in chunks. Pipes use `read1` when available so bytes are
    seen as soon as they arrive instead of after a full chunk.
    """

    def __init__(self, stream: Any, *, chunk_size: int = CHUNK_SIZE):
        self._stream = stream
        self._chunk_size = chunk_size
        self._read = getattr(stream, "read1", None) or stream.read
        self._buf = b""
        self._pos = 0
        self._eof = False

    def _fill(self) -> bool:
        if self._pos < len(self._buf):
            return True
        if self._eof:
            return False
        chunk = self._read(self._chunk_size)
        if chunk is None:
            # Non-blocking streams return None when no data is ready.
            raise TypeError("non-blocking streams are not supported: read() returned None")
        if isinstance(chunk, str):
            chunk = chunk.encode("utf-8")
        if not chunk:
            # Sticky: never read the underlying stream again.
            self._eof = True
            return False
        self._buf = bytes(chunk)
        self._pos = 0
        return True

    def peek(self) -> int | None:
        if not self._fill():
            return None
        return self._buf[self._pos]

    def read_byte(self) -> int | None:
        if not self._fill():
            return None
        b = self._buf[self._pos]
        self._pos += 1
        return b


class BytesSource:
    """Source over an in-memory bytes-like object."""

    def __init__(self, data: bytes | bytearray | memoryview):
        self._data = bytes(data)
        self._pos = 0

    def peek(self) -> int | None:
        if self._pos >= len(self._data):
            return None
        return self._data[self._pos]

    def read_byte(self) -> int | None:
        if self._pos >= len(self._data):
            return None
        b = self._data[self._pos]
        self._pos += 1
        return b


def as_source(obj: Any) -> ByteSource:
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return BytesSource(obj)
    if hasattr(obj, "peek") and hasattr(obj, "read_byte"):
        return obj
    if hasattr(obj, "read"):
        return StreamSource(obj)
    raise TypeError(f"expected a readable stream or bytes, got {type(obj).__name__}")
