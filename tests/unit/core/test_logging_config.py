"""Unit tests for structured logging setup."""

from __future__ import annotations

import json

from core.logging_config import get_logger


def test_logger_writes_json_events_to_stderr(capsys) -> None:
    """Log events should be JSON lines on stderr, leaving stdout empty."""
    get_logger("tests.logging").info("transfer_checked", path="/a/b", count=2)
    captured = capsys.readouterr()

    event = json.loads(captured.err.strip().splitlines()[-1])
    assert captured.out == ""
    assert (event["event"], event["path"], event["count"], event["level"]) == (
        "transfer_checked",
        "/a/b",
        2,
        "info",
    )


def test_logger_drops_debug_events(capsys) -> None:
    """Debug events should be filtered out."""
    get_logger("tests.logging").debug("noisy_detail", value=1)

    assert capsys.readouterr().err == ""
