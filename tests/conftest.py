from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_configure() -> None:
    # Ensure `import heron` works when running tests without installing the package.
    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    if src_dir.exists() and str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


@pytest.fixture
def isolated_cwd(tmp_path, monkeypatch) -> Path:
    """Run from an empty tmp dir with no HERON_* overrides in the environment."""

    monkeypatch.chdir(tmp_path)
    for k in ("HERON_BUF_SIZE", "HERON_KEEP_NEWLINE", "HERON_OUTPUT"):
        monkeypatch.delenv(k, raising=False)
    return tmp_path
