"""Fixture file lookup for tests."""

from __future__ import annotations

from pathlib import Path

FIXTURES_ROOT = Path(__file__).resolve().parent / "fixtures"


def fixture_path(relative_path: str) -> Path:
    """Return the absolute path of a file under ``tests/fixtures``.

    Args:
        relative_path: Path below the fixtures root, e.g. ``transfer_plan/valid_plan.yaml``.

    Returns:
        Absolute fixture path.
    """
    return FIXTURES_ROOT / relative_path
