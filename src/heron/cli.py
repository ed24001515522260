from __future__ import annotations

import logging
import os
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import Any

import typer

from .config import ScannerConfig, apply_env, load_config, scanner_kwargs
from .errors import ConfigError
from .events import encode_value
from .output import NdjsonWriter
from .paths import find_config
from .scaffold import init_config as init_config_scaffold
from .scanner import Scanner

app = typer.Typer(add_completion=False, help="heron: split a byte stream into JSON values and raw text")


def _resolve_config(
    config: Path | None,
    *,
    buf_size: int | None,
    keep_newline: bool | None,
    no_bytes: bool,
    no_errors: bool,
    output: Path | None,
    lock_timeout_s: float | None,
) -> ScannerConfig:
    # Precedence: CLI flags > HERON_* env > config file > defaults.
    cfg_path = config if config is not None else find_config()
    if config is not None and not config.exists():
        raise ConfigError(f"Config file not found: {config}")

    cfg = apply_env(load_config(cfg_path), os.environ)
    if buf_size is not None:
        cfg.buf_size = buf_size
    if keep_newline is not None:
        cfg.keep_newline = keep_newline
    if no_bytes:
        cfg.show_bytes = False
    if no_errors:
        cfg.show_errors = False
    if output is not None:
        cfg.output = output.resolve()
    if lock_timeout_s is not None:
        cfg.lock_timeout_s = lock_timeout_s
    return cfg


class _Console:
    """Print events to stdout/stderr, keeping JSON values on their own lines."""

    def __init__(self, cfg: ScannerConfig):
        self._cfg = cfg
        self._at_line_start = True

    def on_json(self, value: Any) -> None:
        if not self._at_line_start:
            typer.echo("")
        typer.echo(encode_value(value))
        self._at_line_start = True

    def on_bytes(self, data: bytes) -> None:
        if not self._cfg.show_bytes:
            return
        if self._cfg.keep_newline:
            typer.echo(data, nl=False)
            self._at_line_start = data.endswith(b"\n")
        else:
            # Chunk boundaries are line boundaries when newlines are dropped.
            typer.echo(data)
            self._at_line_start = True

    def on_error(self, error: Exception) -> None:
        if self._cfg.show_errors:
            typer.secho(f"error: {error}", fg=typer.colors.RED, err=True)


def _fanout(*sinks: Any) -> Any:
    def emit(item: Any) -> None:
        for s in sinks:
            s(item)

    return emit


@app.command()
def scan(
    path: Path | None = typer.Argument(None, help="Input file (defaults to stdin; '-' also reads stdin)"),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Config file (defaults to the nearest .heron.yaml)",
    ),
    buf_size: int | None = typer.Option(None, "--buf-size", min=0, help="Raw-byte buffer size; 0 hides raw bytes"),
    keep_newline: bool | None = typer.Option(
        None,
        "--keep-newline/--drop-newline",
        help="Include the newline byte in raw line chunks",
    ),
    no_bytes: bool = typer.Option(False, "--no-bytes", help="Do not print raw (non-JSON) chunks"),
    no_errors: bool = typer.Option(False, "--no-errors", help="Do not print decode errors"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Also append every event to this NDJSON file"),
    lock_timeout_s: float | None = typer.Option(
        None,
        "--lock-timeout-s",
        help="Seconds to wait for the output file lock",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr"),
) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    try:
        cfg = _resolve_config(
            config,
            buf_size=buf_size,
            keep_newline=keep_newline,
            no_bytes=no_bytes,
            no_errors=no_errors,
            output=output,
            lock_timeout_s=lock_timeout_s,
        )
    except ConfigError as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2) from e

    console = _Console(cfg)
    with ExitStack() as stack:
        if path is None or str(path) == "-":
            stream = typer.get_binary_stream("stdin")
        else:
            try:
                stream = stack.enter_context(path.open("rb"))
            except OSError as e:
                typer.secho(f"Cannot read {path}: {e}", fg=typer.colors.RED, err=True)
                raise typer.Exit(code=2) from e

        sinks: list[Any] = [console]
        if cfg.output is not None:
            try:
                sinks.append(stack.enter_context(NdjsonWriter(cfg.output, lock_timeout_s=cfg.lock_timeout_s)))
            except TimeoutError as e:
                typer.secho(str(e), fg=typer.colors.RED, err=True)
                raise typer.Exit(code=2) from e

        scanner = Scanner(
            on_json=_fanout(*(s.on_json for s in sinks)),
            on_bytes=_fanout(*(s.on_bytes for s in sinks)),
            on_error=_fanout(*(s.on_error for s in sinks)),
            **scanner_kwargs(cfg),
        )
        scanner.process(stream)


@app.command("init-config")
def init_config(
    directory: Path = typer.Argument(Path("."), help="Directory to write .heron.yaml into"),
    overwrite: bool = typer.Option(False, "--overwrite", help="Overwrite an existing config"),
) -> None:
    try:
        path = init_config_scaffold(directory.resolve(), overwrite=overwrite)
    except FileExistsError as e:
        typer.secho(f"Refusing to overwrite existing file: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=2) from e

    typer.secho(f"Created config: {path}", fg=typer.colors.GREEN)


def main() -> None:
    # Entry point for console script.
    app()


if __name__ == "__main__":
    main()
