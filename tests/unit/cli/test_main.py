"""Unit tests for CLI command handling."""

from __future__ import annotations

from pathlib import Path

from cli.main import main
from repository.state_file import load_repository, save_repository
from tests.repository_builders import build_scenario_repository


def _write_scenario_state(tmp_path: Path) -> Path:
    state_file = tmp_path / "source-state.json"
    save_repository(build_scenario_repository(), state_file)
    return state_file


def _base_args(state_file: Path, transfer_root: Path) -> list[str]:
    return ["--state", str(state_file), "--transfer-root", str(transfer_root)]


def test_cli_export_prints_items_and_summary(tmp_path, capsys) -> None:
    """CLI export should print one row per item and a summary row."""
    state_file = _write_scenario_state(tmp_path)
    transfer_root = tmp_path / "transfer"

    exit_code = main(_base_args(state_file, transfer_root) + ["export", "/a/b", "--depth", "1"])
    output = capsys.readouterr().out.strip().splitlines()

    assert exit_code == 0
    assert output[0].startswith("ok\tdocument\t/a/b\t")
    assert output[-1] == "export /a/b depth=1: 3 items, 0 failed"
    assert (transfer_root / "assets" / "x" / "y.png").is_file()


def test_cli_import_persists_target_state(tmp_path, capsys) -> None:
    """CLI import should write imported documents to the target state file."""
    source_state = _write_scenario_state(tmp_path)
    target_state = tmp_path / "target-state.json"
    transfer_root = tmp_path / "transfer"
    main(_base_args(source_state, transfer_root) + ["export", "/a/b", "--depth", "1"])

    exit_code = main(_base_args(target_state, transfer_root) + ["import", "/a/b", "--depth", "1"])
    output = capsys.readouterr().out.strip().splitlines()

    repository = load_repository(target_state)
    assert exit_code == 0
    assert output[-1] == "import /a/b depth=1: 3 items, 0 failed"
    assert repository.get_document_by_path("/a/b/c") is not None
    assert repository.get_asset_by_path("/x/y.png").data == b"\x89PNG"


def test_cli_import_with_failed_item_returns_one(tmp_path, capsys) -> None:
    """A failed dependency should make the import exit non-zero."""
    source_state = _write_scenario_state(tmp_path)
    transfer_root = tmp_path / "transfer"
    main(_base_args(source_state, transfer_root) + ["export", "/a/b", "--depth", "1"])
    (transfer_root / "assets" / "x" / "y.png").unlink()

    exit_code = main(
        _base_args(tmp_path / "target-state.json", transfer_root) + ["import", "/a/b", "--depth", "1"]
    )
    output = capsys.readouterr().out

    assert exit_code == 1
    assert "failed\tasset\t/x/y.png" in output


def test_cli_dependencies_lists_records(tmp_path, capsys) -> None:
    """CLI dependencies should print kind, path, and reason rows."""
    state_file = _write_scenario_state(tmp_path)

    exit_code = main(
        _base_args(state_file, tmp_path / "transfer") + ["dependencies", "/a/b", "--depth", "1"]
    )
    output = capsys.readouterr().out.strip().splitlines()

    assert exit_code == 0
    assert output == [
        "asset\t/x/y.png\tProperty 'image'",
        "document\t/a/b/c\tChild document",
    ]


def test_cli_invalid_depth_reports_error(tmp_path, capsys) -> None:
    """Depth outside 0..10 should print an error and exit 1."""
    state_file = _write_scenario_state(tmp_path)

    exit_code = main(
        _base_args(state_file, tmp_path / "transfer") + ["export", "/a/b", "--depth", "11"]
    )
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "error: " in captured.err


def test_cli_missing_document_reports_error(tmp_path, capsys) -> None:
    """Exporting a missing document should print an error and exit 1."""
    exit_code = main(["export", "/missing"])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "/missing" in captured.err


def test_cli_push_rejects_invalid_uri(tmp_path, capsys) -> None:
    """Push should validate the destination URI."""
    exit_code = main(["--transfer-root", str(tmp_path), "push", "not-a-uri"])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "s3://bucket/prefix" in captured.err
