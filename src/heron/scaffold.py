from __future__ import annotations

from pathlib import Path

from .paths import CONFIG_NAME
from .scanner import DEFAULT_BUF_SIZE


def _write_text(path: Path, content: str, *, overwrite: bool) -> None:
    if path.exists() and not overwrite:
        raise FileExistsError(str(path))
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def init_config(directory: Path, *, overwrite: bool = False) -> Path:
    """Write a default .heron.yaml into `directory` and return its path."""

    path = directory / CONFIG_NAME
    _write_text(
        path,
        "\n".join(
            [
                "# heron scanner settings",
                "#",
                "# Bytes buffered before a non-JSON chunk is emitted; 0 drops non-JSON output.",
                f"buf_size: {DEFAULT_BUF_SIZE}",
                "# Include the trailing newline in line chunks.",
                "keep_newline: false",
                "show_bytes: true",
                "show_errors: true",
                "# NDJSON file receiving every event (relative to this file).",
                "output: null",
                "lock_timeout_s: 30",
                "",
            ]
        ),
        overwrite=overwrite,
    )
    return path
