from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from heron.cli import app
from heron.paths import CONFIG_NAME

runner = CliRunner()


# Keep config discovery and HERON_* overrides out of the tests.
pytestmark = pytest.mark.usefixtures("isolated_cwd")


def test_scan_stdin_splits_json_and_text() -> None:
    res = runner.invoke(app, ["scan"], input=b'boot\n{"a": 1}\nmore text')
    assert res.exit_code == 0
    assert res.output == 'boot\n{"a":1}\nmore text\n'


def test_scan_keep_newline_puts_values_on_own_line() -> None:
    res = runner.invoke(app, ["scan", "--keep-newline"], input=b'pre {"a": 1} post\n')
    assert res.exit_code == 0
    assert res.output == 'pre \n{"a":1}\n post\n'


def test_scan_reports_errors() -> None:
    res = runner.invoke(app, ["scan"], input=b"{bad}\nok\n")
    assert res.exit_code == 0
    assert "error: invalid JSON value" in res.output
    assert "ok\n" in res.output

    res = runner.invoke(app, ["scan", "--no-errors"], input=b"{bad}\nok\n")
    assert res.output == "ok\n"


def test_scan_buf_size_zero_prints_only_json() -> None:
    res = runner.invoke(app, ["scan", "--buf-size", "0"], input=b'noise [1, 2.50] noise\n')
    assert res.exit_code == 0
    assert res.output == "[1,2.50]\n"


def test_scan_file_with_output(tmp_path) -> None:
    src = tmp_path / "app.log"
    src.write_bytes(b'starting\n{"event": "ready"}\n')
    out = tmp_path / "events.ndjson"

    res = runner.invoke(app, ["scan", str(src), "--no-bytes", "--output", str(out)])
    assert res.exit_code == 0
    assert res.output == '{"event":"ready"}\n'

    records = [json.loads(line) for line in out.read_text(encoding="utf-8").splitlines()]
    assert records == [
        {"kind": "bytes", "text": "starting"},
        {"kind": "json", "value": {"event": "ready"}},
    ]


def test_scan_uses_discovered_config(tmp_path) -> None:
    (tmp_path / CONFIG_NAME).write_text("buf_size: 2\n", encoding="utf-8")
    res = runner.invoke(app, ["scan"], input=b"abcde")
    assert res.exit_code == 0
    assert res.output == "ab\ncd\ne\n"

    # Flags win over the file.
    res = runner.invoke(app, ["scan", "--buf-size", "512"], input=b"abcde")
    assert res.output == "abcde\n"


def test_scan_bad_config_exits_2(tmp_path) -> None:
    cfg = tmp_path / "bad.yaml"
    cfg.write_text("buf_size: -5\n", encoding="utf-8")
    res = runner.invoke(app, ["scan", "--config", str(cfg)], input=b"")
    assert res.exit_code == 2

    res = runner.invoke(app, ["scan", "--config", str(tmp_path / "missing.yaml")], input=b"")
    assert res.exit_code == 2


def test_scan_missing_input_exits_2(tmp_path) -> None:
    res = runner.invoke(app, ["scan", str(tmp_path / "nope.log")])
    assert res.exit_code == 2


def test_init_config_refuses_overwrite(tmp_path) -> None:
    res = runner.invoke(app, ["init-config", str(tmp_path)])
    assert res.exit_code == 0
    assert (tmp_path / CONFIG_NAME).exists()

    res = runner.invoke(app, ["init-config", str(tmp_path)])
    assert res.exit_code == 2

    res = runner.invoke(app, ["init-config", str(tmp_path), "--overwrite"])
    assert res.exit_code == 0
