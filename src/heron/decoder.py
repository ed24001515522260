from __future__ import annotations

import json
from decimal import Decimal
from typing import Any

from .errors import DecodeError
from .source import ByteSource

OPEN = frozenset(b"{[")
CLOSE = frozenset(b"}]")
QUOTE = 0x22
BACKSLASH = 0x5C


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant {name!r}")


def _parse_int(s: str) -> int | Decimal:
    try:
        return int(s)
    except ValueError:
        # Longer than the interpreter's int string conversion limit.
        return Decimal(s)


def loads(text: str) -> Any:
    """Parse JSON text keeping every number lossless (ints as int, the rest as Decimal)."""

    return json.loads(text, parse_float=Decimal, parse_int=_parse_int, parse_constant=_reject_constant)


class ValueDecoder:
    """Decode one JSON value at a time from a byte source.

    `decode` reads from the start marker until brackets balance, then parses
    that span. Brackets inside strings do not count.
    """

    def __init__(self, source: ByteSource):
        self._source = source
        self.last_raw = b""

    def peek(self) -> int | None:
        # Raw next byte: whitespace before a value belongs to the byte stream.
        return self._source.peek()

    def read_byte(self) -> int | None:
        return self._source.read_byte()

    def _read_span(self) -> bytes:
        raw = bytearray()
        depth = 0
        in_string = False
        escaped = False
        while True:
            b = self._source.read_byte()
            if b is None:
                self.last_raw = bytes(raw)
                raise DecodeError("unexpected end of stream inside JSON value", self.last_raw)
            raw.append(b)

            if in_string:
                if escaped:
                    escaped = False
                elif b == BACKSLASH:
                    escaped = True
                elif b == QUOTE:
                    in_string = False
            elif b == QUOTE:
                in_string = True
            elif b in OPEN:
                depth += 1
            elif b in CLOSE:
                depth -= 1

            if depth <= 0 and not in_string:
                return bytes(raw)

    def decode(self) -> Any:
        raw = self._read_span()
        self.last_raw = raw
        try:
            return loads(raw.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise DecodeError(f"invalid UTF-8 in JSON value: {e}", raw) from e
        except ValueError as e:
            raise DecodeError(f"invalid JSON value: {e}", raw) from e
        except RecursionError as e:
            raise DecodeError(f"JSON value nested too deeply: {e}", raw) from e
