from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError
from .scanner import DEFAULT_BUF_SIZE


@dataclass
class ScannerConfig:
    # Raw-byte buffer capacity; 0 disables raw-byte output.
    buf_size: int = DEFAULT_BUF_SIZE

    # Include the newline byte in line-terminated chunks.
    keep_newline: bool = False

    # CLI display switches.
    show_bytes: bool = True
    show_errors: bool = True

    # Optional NDJSON file receiving every event.
    output: Path | None = None
    lock_timeout_s: float = 30.0


_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _as_int(key: str, v: Any) -> int:
    if isinstance(v, bool) or not isinstance(v, int) or v < 0:
        raise ConfigError(f"{key} must be a non-negative integer, got {v!r}")
    return v


def _as_bool(key: str, v: Any) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, str) and v.strip().lower() in _TRUE | _FALSE:
        return v.strip().lower() in _TRUE
    raise ConfigError(f"{key} must be a boolean, got {v!r}")


def _as_float(key: str, v: Any) -> float:
    if isinstance(v, bool) or not isinstance(v, (int, float)) or v < 0:
        raise ConfigError(f"{key} must be a non-negative number, got {v!r}")
    return float(v)


def _as_path(key: str, v: Any, *, base: Path) -> Path | None:
    if v is None:
        return None
    if not isinstance(v, str) or not v:
        raise ConfigError(f"{key} must be a path string, got {v!r}")
    p = Path(v).expanduser()
    return p if p.is_absolute() else (base / p).resolve()


def load_config(path: Path | None) -> ScannerConfig:
    """Load a YAML config file; a missing file or empty document gives defaults."""

    cfg = ScannerConfig()
    if path is None or not path.exists():
        return cfg

    try:
        loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if loaded is None:
        return cfg
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path} must contain a mapping, got {type(loaded).__name__}")

    base = path.resolve().parent
    if "buf_size" in loaded:
        cfg.buf_size = _as_int("buf_size", loaded["buf_size"])
    if "keep_newline" in loaded:
        cfg.keep_newline = _as_bool("keep_newline", loaded["keep_newline"])
    if "show_bytes" in loaded:
        cfg.show_bytes = _as_bool("show_bytes", loaded["show_bytes"])
    if "show_errors" in loaded:
        cfg.show_errors = _as_bool("show_errors", loaded["show_errors"])
    if "output" in loaded:
        cfg.output = _as_path("output", loaded["output"], base=base)
    if "lock_timeout_s" in loaded:
        cfg.lock_timeout_s = _as_float("lock_timeout_s", loaded["lock_timeout_s"])
    return cfg


def apply_env(cfg: ScannerConfig, env: Mapping[str, str]) -> ScannerConfig:
    """Override file values with HERON_* environment variables."""

    v = env.get("HERON_BUF_SIZE")
    if v:
        try:
            n = int(v)
        except ValueError as e:
            raise ConfigError(f"HERON_BUF_SIZE must be an integer, got {v!r}") from e
        cfg.buf_size = _as_int("HERON_BUF_SIZE", n)

    v = env.get("HERON_KEEP_NEWLINE")
    if v:
        cfg.keep_newline = _as_bool("HERON_KEEP_NEWLINE", v)

    v = env.get("HERON_OUTPUT")
    if v:
        cfg.output = _as_path("HERON_OUTPUT", v, base=Path.cwd())
    return cfg


def scanner_kwargs(cfg: ScannerConfig) -> dict[str, Any]:
    return {"buf_size": cfg.buf_size, "keep_newline": cfg.keep_newline}
