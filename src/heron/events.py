from __future__ import annotations

import json
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Union

from .errors import DecodeError
from .scanner import Scanner


@dataclass(frozen=True)
class JsonEvent:
    value: Any


@dataclass(frozen=True)
class BytesEvent:
    data: bytes


@dataclass(frozen=True)
class ErrorEvent:
    error: Exception


Event = Union[JsonEvent, BytesEvent, ErrorEvent]


def collect(stream: Any, **scanner_kwargs: Any) -> list[Event]:
    """Scan `stream` and return every event in emission order."""

    out: list[Event] = []
    scanner = Scanner(
        on_json=lambda v: out.append(JsonEvent(v)),
        on_bytes=lambda b: out.append(BytesEvent(b)),
        on_error=lambda e: out.append(ErrorEvent(e)),
        **scanner_kwargs,
    )
    scanner.process(stream)
    return out


def encode_value(value: Any) -> str:
    """Compact JSON for a decoded tree. Decimals keep their exact value, e.g. `1E+400` for `1e400`."""

    if isinstance(value, dict):
        items = (f"{json.dumps(str(k))}:{encode_value(v)}" for k, v in value.items())
        return "{" + ",".join(items) + "}"
    if isinstance(value, list):
        return "[" + ",".join(encode_value(v) for v in value) + "]"
    if isinstance(value, Decimal):
        return str(value)
    return json.dumps(value)


def _text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def to_record(event: Event) -> dict[str, Any]:
    if isinstance(event, JsonEvent):
        return {"kind": "json", "value": event.value}
    if isinstance(event, BytesEvent):
        return {"kind": "bytes", "text": _text(event.data)}
    err = event.error
    rec: dict[str, Any] = {"kind": "error", "error": type(err).__name__, "message": str(err)}
    if isinstance(err, DecodeError):
        rec["raw"] = _text(err.raw)
    return rec


def dump_record(rec: dict[str, Any]) -> str:
    """One NDJSON line (without the newline) for a record from `to_record`."""

    if rec["kind"] != "json":
        return json.dumps(rec, ensure_ascii=True)
    # Keep decoded numbers lossless.
    return '{"kind":"json","value":' + encode_value(rec["value"]) + "}"
