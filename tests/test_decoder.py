from __future__ import annotations

import io
from decimal import Decimal

import pytest

from heron.decoder import ValueDecoder, loads
from heron.errors import DecodeError
from heron.source import BytesSource, StreamSource, as_source


def test_decoder_peek_does_not_skip_whitespace() -> None:
    d = ValueDecoder(BytesSource(b' {"a": 1}'))
    assert d.peek() == ord(" ")
    assert d.read_byte() == ord(" ")
    assert d.peek() == ord("{")
    assert d.decode() == {"a": 1}
    assert d.peek() is None


def test_decoder_consumes_exactly_one_value() -> None:
    d = ValueDecoder(BytesSource(b"[1, [2, 3]]rest"))
    assert d.decode() == [1, [2, 3]]
    assert d.last_raw == b"[1, [2, 3]]"
    assert d.read_byte() == ord("r")


def test_decoder_invalid_json_keeps_raw_span() -> None:
    d = ValueDecoder(BytesSource(b"{not: json} after"))
    with pytest.raises(DecodeError) as exc:
        d.decode()
    assert exc.value.raw == b"{not: json}"
    assert d.read_byte() == ord(" ")


def test_decoder_rejects_invalid_utf8() -> None:
    d = ValueDecoder(BytesSource(b'["\xff"]'))
    with pytest.raises(DecodeError, match="UTF-8"):
        d.decode()


def test_decoder_rejects_nan() -> None:
    with pytest.raises(DecodeError):
        ValueDecoder(BytesSource(b"[NaN]")).decode()


def test_decoder_end_of_stream_inside_string() -> None:
    d = ValueDecoder(BytesSource(b'{"a": "}'))
    with pytest.raises(DecodeError, match="end of stream") as exc:
        d.decode()
    assert exc.value.raw == b'{"a": "}'


def test_loads_keeps_numbers_lossless() -> None:
    assert loads("[1.10, 2, -3e2]") == [Decimal("1.10"), 2, Decimal("-3e2")]


def test_stream_source_reads_across_chunks() -> None:
    src = StreamSource(io.BytesIO(b"abcdef"), chunk_size=2)
    got = []
    while (b := src.read_byte()) is not None:
        got.append(b)
    assert bytes(got) == b"abcdef"
    assert src.peek() is None


class _CountingStream:
    def __init__(self, data: bytes):
        self._data = io.BytesIO(data)
        self.calls = 0

    def read(self, n: int) -> bytes:
        self.calls += 1
        return self._data.read(n)


def test_stream_source_end_of_stream_is_sticky() -> None:
    stream = _CountingStream(b"x")
    src = StreamSource(stream)
    assert src.read_byte() == ord("x")
    assert src.read_byte() is None
    assert src.peek() is None
    assert stream.calls == 2


def test_as_source_dispatch() -> None:
    assert isinstance(as_source(b"x"), BytesSource)
    assert isinstance(as_source(io.BytesIO(b"x")), StreamSource)
    src = BytesSource(b"x")
    assert as_source(src) is src
    with pytest.raises(TypeError):
        as_source(42)


class _NonBlockingStream:
    def read(self, n: int) -> bytes | None:
        return None


def test_stream_source_rejects_non_blocking_streams() -> None:
    src = StreamSource(_NonBlockingStream())
    with pytest.raises(TypeError, match="non-blocking"):
        src.peek()
