"""Shared transfer-plan execution engine for CLI and SDK workflows.

This module maps validated plan steps to client operations so every
entry point runs a plan through one code path.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from core.errors import CopierPlanError
from core.logging_config import get_logger
from core.report_lines import dependency_lines, report_lines
from core.transfer_plan import TransferPlan, TransferPlanStep, load_transfer_plan
from core.types import DependencyRecord, TransferReport

_LOGGER = get_logger(__name__)


class TransferPlanClient(Protocol):
    """Client API contract required by plan execution."""

    def with_transfer_root(self, transfer_root: str) -> Any: ...

    def export_tree(self, path: str, depth: int | None = None) -> TransferReport: ...

    def import_tree(self, path: str, depth: int | None = None) -> TransferReport: ...

    def list_dependencies(
        self,
        path: str,
        depth: int | None = None,
        from_snapshots: bool = False,
    ) -> list[DependencyRecord]: ...


@dataclass(frozen=True)
class TransferPlanResult:
    """Printable output and failure count of one plan run."""

    lines: tuple[str, ...]
    failed_count: int


def execute_transfer_plan_file(client: TransferPlanClient, plan_file: str) -> TransferPlanResult:
    """Load and execute a plan file."""
    return execute_transfer_plan(client, load_transfer_plan(plan_file))


def execute_transfer_plan(client: TransferPlanClient, plan: TransferPlan) -> TransferPlanResult:
    """Execute a parsed plan step by step.

    Steps run in order; a step with failed items does not stop later steps.
    """
    plan_client = (
        client.with_transfer_root(plan.defaults.transfer_root)
        if plan.defaults.transfer_root
        else client
    )
    output_lines: list[str] = []
    failed_count = 0
    for index, step in enumerate(plan.steps):
        step_client = (
            plan_client.with_transfer_root(step.transfer_root) if step.transfer_root else plan_client
        )
        depth = step.depth if step.depth is not None else plan.defaults.depth
        lines, failures = _execute_step(step_client, step, depth)
        _LOGGER.info(
            "plan_step_finished",
            step=index + 1,
            command=step.command,
            path=step.path,
            failed_count=failures,
        )
        output_lines.extend(lines)
        failed_count += failures
    return TransferPlanResult(lines=tuple(output_lines), failed_count=failed_count)


def _execute_step(
    client: TransferPlanClient,
    step: TransferPlanStep,
    depth: int | None,
) -> tuple[tuple[str, ...], int]:
    if step.command == "export":
        report = client.export_tree(step.path, depth)
        return report_lines("export", report), report.failed_count
    if step.command == "import":
        report = client.import_tree(step.path, depth)
        return report_lines("import", report), report.failed_count
    if step.command == "dependencies":
        return dependency_lines(client.list_dependencies(step.path, depth)), 0
    raise CopierPlanError(f"Unsupported transfer plan command '{step.command}'.")
