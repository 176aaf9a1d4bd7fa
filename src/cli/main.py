"""Document copier CLI entry points.
This module exposes export, import, and dependency inspection commands.
It maps argparse commands onto SDK calls against a state-file repository.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
import sys
from typing import Any, Sequence

from cli.run_plan_command import add_run_plan_command, run_run_plan_command
from core.config import CopierConfig
from core.errors import CopierError
from core.report_lines import dependency_lines, report_lines
from repository.state_file import load_repository, save_repository
from transfer.copier_sdk import CopierClient

_MUTATING_COMMANDS = ("import", "run-plan")


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="doc-copier",
        description="Copy documents and their dependencies between environments",
    )
    parser.add_argument("--state", help="Override DOC_COPIER_STATE_FILE for this command")
    parser.add_argument(
        "--transfer-root",
        help="Override DOC_COPIER_TRANSFER_ROOT for this command",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_export_command(subparsers)
    _add_import_command(subparsers)
    _add_dependencies_command(subparsers)
    add_run_plan_command(subparsers)
    _add_push_command(subparsers)
    _add_pull_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the document copier CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code: 0 on success, 1 when an item failed or a
        copier error was raised.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args.state, args.transfer_root)
        repository = load_repository(config.state_file)
        client = CopierClient(config, repository)
        exit_code = _dispatch(parser, client, args)
        if args.command in _MUTATING_COMMANDS:
            save_repository(repository, config.state_file)
    except CopierError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    return exit_code


def _dispatch(parser: argparse.ArgumentParser, client: CopierClient, args: argparse.Namespace) -> int:
    if args.command == "export":
        return _run_export_command(client, args)
    if args.command == "import":
        return _run_import_command(client, args)
    if args.command == "dependencies":
        return _run_dependencies_command(client, args)
    if args.command == "run-plan":
        return run_run_plan_command(client, args)
    if args.command == "push":
        return _run_push_command(client, args)
    if args.command == "pull":
        return _run_pull_command(client, args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(state_file: str | None, transfer_root: str | None) -> CopierConfig:
    """Build config with optional state-file and transfer-root overrides.

    Args:
        state_file: Optional state file override.
        transfer_root: Optional transfer root override.

    Returns:
        Configured runtime config.
    """
    config = CopierConfig.from_env()
    if state_file:
        config = replace(config, state_file=Path(state_file).expanduser().resolve())
    if transfer_root:
        config = replace(config, transfer_root=Path(transfer_root).expanduser().resolve())
    return config


def _run_export_command(client: CopierClient, args: argparse.Namespace) -> int:
    """Handle export command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    report = client.export_tree(args.path, args.depth)
    for line in report_lines("export", report):
        print(line)
    return 1 if report.failed_count else 0


def _run_import_command(client: CopierClient, args: argparse.Namespace) -> int:
    """Handle import command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    report = client.import_tree(args.path, args.depth)
    for line in report_lines("import", report):
        print(line)
    return 1 if report.failed_count else 0


def _run_dependencies_command(client: CopierClient, args: argparse.Namespace) -> int:
    """Handle dependencies command."""
    records = client.list_dependencies(args.path, args.depth, from_snapshots=args.from_snapshots)
    for line in dependency_lines(records):
        print(line)
    return 0


def _run_push_command(client: CopierClient, args: argparse.Namespace) -> int:
    """Handle push command."""
    uploaded = client.push(args.uri)
    print(f"pushed {uploaded} files to {args.uri}")
    return 0


def _run_pull_command(client: CopierClient, args: argparse.Namespace) -> int:
    """Handle pull command."""
    downloaded = client.pull(args.uri)
    print(f"pulled {downloaded} files from {args.uri}")
    return 0


def _add_depth_argument(parser: Any) -> None:
    """Add the shared --depth option."""
    parser.add_argument(
        "--depth",
        type=int,
        help="Dependency depth in [0, 10]; 0 transfers only the document",
    )


def _add_export_command(subparsers: Any) -> None:
    """Register export subcommand."""
    parser = subparsers.add_parser("export", help="Export a document tree to the transfer root")
    parser.add_argument("path", help="Document path, e.g. /en/about")
    _add_depth_argument(parser)


def _add_import_command(subparsers: Any) -> None:
    """Register import subcommand."""
    parser = subparsers.add_parser("import", help="Import a document tree from the transfer root")
    parser.add_argument("path", help="Document path of the root snapshot")
    _add_depth_argument(parser)


def _add_dependencies_command(subparsers: Any) -> None:
    """Register dependencies subcommand."""
    parser = subparsers.add_parser("dependencies", help="List resolved dependencies")
    parser.add_argument("path", help="Document path")
    _add_depth_argument(parser)
    parser.add_argument(
        "--from-snapshots",
        action="store_true",
        help="Resolve over stored snapshots instead of the live repository",
    )


def _add_push_command(subparsers: Any) -> None:
    """Register push subcommand."""
    parser = subparsers.add_parser("push", help="Upload the transfer root to S3")
    parser.add_argument("uri", help="Destination s3://bucket/prefix")


def _add_pull_command(subparsers: Any) -> None:
    """Register pull subcommand."""
    parser = subparsers.add_parser("pull", help="Download a transfer root from S3")
    parser.add_argument("uri", help="Source s3://bucket/prefix")
