"""Printable rows for transfer reports and dependency lists.

CLI commands and transfer-plan execution print the same tab-separated
rows so their output can be diffed and grepped the same way.
"""

from __future__ import annotations

from typing import Iterable

from core.types import DependencyRecord, TransferReport


def dependency_lines(records: Iterable[DependencyRecord]) -> tuple[str, ...]:
    """Format dependency records as ``kind<TAB>path<TAB>reason`` rows."""
    return tuple(f"{record.kind}\t{record.path}\t{record.reason}" for record in records)


def report_lines(command: str, report: TransferReport) -> tuple[str, ...]:
    """Format a transfer report as per-item rows plus a summary row."""
    rows = [
        f"{'ok' if item.succeeded else 'failed'}\t{item.kind}\t{item.path}\t{item.detail}"
        for item in report.items
    ]
    rows.append(
        f"{command} {report.root_path} depth={report.depth}: "
        f"{len(report.items)} items, {report.failed_count} failed"
    )
    return tuple(rows)
