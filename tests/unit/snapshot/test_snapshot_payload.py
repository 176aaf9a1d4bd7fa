"""Unit tests for snapshot JSON serialization."""

from __future__ import annotations

import json

import pytest

from core.errors import CopierSnapshotError
from core.types import DependencyRecord
from snapshot.portable_snapshot import PortableSnapshot
from snapshot.snapshot_payload import (
    snapshot_from_json,
    snapshot_from_payload,
    snapshot_to_json,
    snapshot_to_payload,
)


def _snapshot() -> PortableSnapshot:
    return PortableSnapshot(
        path="/en/about",
        kind="page",
        fields={"headline": {"type": "input", "data": "Über uns"}},
        properties={"nav": {"type": "text", "data": "main", "inheritable": True}},
        settings={"title": "About"},
        ancestors={"/": "folder", "/en": "folder"},
        dependencies=[{"type": "document", "path": "/en/about/team", "reason": "Child document"}],
    )


def test_snapshot_to_payload_uses_stable_field_names() -> None:
    """Payload should use the documented schema keys."""
    payload = snapshot_to_payload(_snapshot())

    assert set(payload) == {
        "realFullPath",
        "type",
        "ancestors",
        "elements",
        "properties",
        "settings",
        "dependencies",
    }
    assert payload["ancestors"] == {"/": "folder", "/en": "folder"}
    assert payload["dependencies"] == [
        {"type": "document", "path": "/en/about/team", "reason": "Child document"}
    ]


def test_snapshot_json_keeps_non_ascii_text() -> None:
    """JSON output should be UTF-8 friendly rather than escaped."""
    assert "Über uns" in snapshot_to_json(_snapshot())


def test_snapshot_from_json_restores_equal_snapshot() -> None:
    """Decoding encoded JSON should restore an equal snapshot."""
    snapshot = _snapshot()

    assert snapshot_from_json(snapshot_to_json(snapshot)) == snapshot


def test_snapshot_from_payload_accepts_empty_list_sections() -> None:
    """Empty list sections written by other encoders should read as empty mappings."""
    payload = {
        "realFullPath": "/a",
        "type": "folder",
        "ancestors": [],
        "elements": [],
        "properties": [],
        "settings": [],
        "dependencies": [],
    }

    snapshot = snapshot_from_payload(payload)

    assert (snapshot.fields, snapshot.properties, snapshot.settings) == ({}, {}, {})


def test_snapshot_from_payload_treats_missing_sections_as_empty() -> None:
    """Only path and kind are required."""
    snapshot = snapshot_from_payload({"realFullPath": "/a", "type": "folder"})

    assert snapshot.ancestors == () and snapshot.dependencies == ()


def test_snapshot_from_payload_filters_dependencies() -> None:
    """Decoded dependencies should go through the snapshot filters."""
    payload = {
        "realFullPath": "/a",
        "type": "page",
        "dependencies": [{"type": "asset", "path": "x.png", "reason": "Property 'img'"}, {"x": 1}],
    }

    snapshot = snapshot_from_payload(payload)

    assert snapshot.dependencies == (
        DependencyRecord(kind="asset", path="/x.png", reason="Property 'img'"),
    )


@pytest.mark.parametrize(
    "text",
    [
        "{not json",
        json.dumps(["a", "list"]),
        json.dumps({"type": "page"}),
        json.dumps({"realFullPath": "/a", "type": "page", "elements": "oops"}),
        json.dumps({"realFullPath": "/a", "type": "page", "dependencies": {"a": 1}}),
        json.dumps({"realFullPath": None, "type": "page"}),
        json.dumps({"realFullPath": 42, "type": "page"}),
        json.dumps({"realFullPath": "/a", "type": None}),
    ],
)
def test_snapshot_from_json_rejects_structural_errors(text: str) -> None:
    """Invalid JSON, non-objects, missing keys, and bad sections should be rejected."""
    with pytest.raises(CopierSnapshotError):
        snapshot_from_json(text, source="test.json")
    assert True
