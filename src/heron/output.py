from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Any

from filelock import FileLock, Timeout

from .events import BytesEvent, ErrorEvent, Event, JsonEvent, dump_record, to_record

logger = logging.getLogger(__name__)


class NdjsonWriter:
    """Append scanner events to an NDJSON file.

    The output lock is held while the writer is open so concurrent `heron`
    processes never interleave partial lines in the same file.
    """

    def __init__(self, path: Path, *, lock_timeout_s: float = 30.0):
        self._path = path
        self._lock_timeout_s = lock_timeout_s
        self._lock = FileLock(str(path.with_name(path.name + ".lock")))
        self._f: IO[str] | None = None

    @property
    def path(self) -> Path:
        return self._path

    def open(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._lock.acquire(timeout=self._lock_timeout_s)
        except Timeout as e:
            raise TimeoutError(f"Another writer holds {self._lock.lock_file}") from e
        try:
            self._f = self._path.open("a", encoding="utf-8")
        except OSError:
            self._lock.release()
            raise
        logger.debug("appending events to %s", self._path)

    def close(self) -> None:
        try:
            if self._f is not None:
                self._f.close()
                self._f = None
        finally:
            if self._lock.is_locked:
                self._lock.release()

    def __enter__(self) -> "NdjsonWriter":
        self.open()
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def write(self, event: Event) -> None:
        if self._f is None:
            raise RuntimeError("NdjsonWriter is not open")
        self._f.write(dump_record(to_record(event)))
        self._f.write("\n")
        self._f.flush()

    # Sink adapters for Scanner(on_json=..., on_bytes=..., on_error=...).

    def on_json(self, value: Any) -> None:
        self.write(JsonEvent(value))

    def on_bytes(self, data: bytes) -> None:
        self.write(BytesEvent(data))

    def on_error(self, error: Exception) -> None:
        self.write(ErrorEvent(error))
