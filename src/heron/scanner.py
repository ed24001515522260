from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from .decoder import OPEN, ValueDecoder
from .errors import DecodeError, UnexpectedShapeError
from .source import ByteSource, as_source

logger = logging.getLogger(__name__)

# Default size of the buffer that accumulates non-JSON bytes.
DEFAULT_BUF_SIZE = 512

NEWLINE = 0x0A


def _noop(_: Any) -> None:
    return None


class Scanner:
    """Split a byte stream into JSON objects/arrays and raw byte chunks.

    Raw bytes are buffered and flushed on newline, when the buffer reaches
    `buf_size`, before a JSON value is emitted, and at end of stream.
    `buf_size=0` disables buffering: raw bytes are read and discarded.
    """

    def __init__(
        self,
        *,
        buf_size: int = DEFAULT_BUF_SIZE,
        on_json: Callable[[Any], None] | None = None,
        on_bytes: Callable[[bytes], None] | None = None,
        on_error: Callable[[Exception], None] | None = None,
        keep_newline: bool = False,
        decoder_factory: Callable[[ByteSource], Any] = ValueDecoder,
    ):
        if isinstance(buf_size, bool) or not isinstance(buf_size, int) or buf_size < 0:
            raise ValueError(f"buf_size must be a non-negative integer, got {buf_size!r}")

        self._buf_size = buf_size
        self._buf: bytearray | None = bytearray() if buf_size > 0 else None
        self._on_json = on_json or _noop
        self._on_bytes = on_bytes or _noop
        self._on_error = on_error or _noop
        self._keep_newline = keep_newline
        self._decoder_factory = decoder_factory

    @property
    def buf_size(self) -> int:
        return self._buf_size

    def process(self, stream: Any) -> None:
        """Read `stream` to the end, emitting values, byte chunks and errors."""

        decoder = self._decoder_factory(as_source(stream))
        while True:
            # Only objects and arrays are emitted; anything else is a raw byte.
            if decoder.peek() in OPEN:
                self._decode_one(decoder)
                continue
            if not self._process_byte(decoder):
                return

    def flush(self) -> None:
        if not self._buf:
            return
        data = bytes(self._buf)
        self._buf.clear()
        self._on_bytes(data)

    def _decode_one(self, decoder: Any) -> None:
        try:
            value = decoder.decode()
        except DecodeError as e:
            logger.debug("decode attempt failed after %d bytes: %s", len(e.raw), e)
            self.flush()
            self._on_error(e)
            return

        # Raw bytes read before the attempt go out first, whatever its outcome.
        self.flush()
        if isinstance(value, (dict, list)):
            self._on_json(value)
        else:
            err = UnexpectedShapeError(value)
            logger.debug("%s", err)
            self._on_error(err)

    def _process_byte(self, decoder: Any) -> bool:
        b = decoder.read_byte()
        if b is None:
            self.flush()
            return False

        if b == NEWLINE:
            if self._keep_newline:
                self._push(b)
            self.flush()
            return True

        self._push(b)
        if self._buf is not None and len(self._buf) >= self._buf_size:
            self.flush()
        return True

    def _push(self, b: int) -> None:
        if self._buf is None:
            return
        self._buf.append(b)
