from __future__ import annotations

from pathlib import Path

CONFIG_NAME = ".heron.yaml"


def find_config(start: Path | None = None) -> Path | None:
    """Find the nearest .heron.yaml by walking up from `start` (default: cwd).

    This keeps behavior predictable when invoking `heron` from subdirectories.
    """

    cur = (start or Path.cwd()).resolve()
    for p in [cur, *cur.parents]:
        candidate = p / CONFIG_NAME
        if candidate.is_file():
            return candidate
    return None
