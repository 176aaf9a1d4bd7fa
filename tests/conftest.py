"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture(autouse=True)
def isolated_copier_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Point copier env defaults at a per-test directory."""
    monkeypatch.setenv("DOC_COPIER_TRANSFER_ROOT", str(tmp_path / "transfer"))
    monkeypatch.setenv("DOC_COPIER_STATE_FILE", str(tmp_path / "state.json"))
    monkeypatch.delenv("DOC_COPIER_DEFAULT_DEPTH", raising=False)
