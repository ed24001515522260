from __future__ import annotations

from typing import Any


class HeronError(Exception):
    """Base class for errors raised or reported by heron."""


class DecodeError(HeronError, ValueError):
    """Bytes after a start marker did not form a JSON value.

    `raw` holds the bytes the failed attempt consumed from the stream.
    """

    def __init__(self, message: str, raw: bytes = b""):
        super().__init__(message)
        self.raw = raw


class UnexpectedShapeError(HeronError, TypeError):
    def __init__(self, value: Any):
        self.value = value
        self.kind = type(value).__name__
        super().__init__(f"unexpected decoded value type {self.kind!r}")


class ConfigError(HeronError, ValueError):
    pass
