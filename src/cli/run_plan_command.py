"""Transfer-plan CLI command wiring.

This module registers the run-plan subcommand and delegates execution to
the shared plan engine used by CLI and SDK entry points.
"""

from __future__ import annotations

import argparse
from typing import Any

from transfer.copier_sdk import CopierClient


def add_run_plan_command(subparsers: Any) -> None:
    """Register run-plan subcommand."""
    parser = subparsers.add_parser(
        "run-plan",
        help="Run a declarative YAML transfer plan",
    )
    parser.add_argument("plan_file", help="Path to YAML transfer plan file")


def run_run_plan_command(client: CopierClient, args: argparse.Namespace) -> int:
    """Handle run-plan command invocation."""
    result = client.run_plan(args.plan_file)
    for line in result.lines:
        print(line)
    return 1 if result.failed_count else 0
