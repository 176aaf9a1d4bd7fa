"""Unit tests for the portable snapshot model."""

from __future__ import annotations

import pytest

from core.errors import CopierValidationError
from core.types import AncestorStub, DependencyRecord, SnapshotField, SnapshotProperty
from snapshot.portable_snapshot import PortableSnapshot


def test_snapshot_canonicalizes_path() -> None:
    """Snapshot path should be stored in canonical form."""
    snapshot = PortableSnapshot(path="en//about/", kind="page")

    assert snapshot.path == "/en/about"


def test_snapshot_rejects_unknown_kind() -> None:
    """Unknown kinds should be rejected at construction."""
    with pytest.raises(CopierValidationError):
        PortableSnapshot(path="/a", kind="widget")
    assert True


def test_fields_setter_drops_unsupported_and_malformed_entries() -> None:
    """Only supported, well-formed fields should survive."""
    snapshot = PortableSnapshot(
        path="/a",
        kind="page",
        fields={
            "headline": {"type": "input", "data": "Hello"},
            "video": {"type": "video", "data": "clip.mp4"},
            "broken": {"type": "input"},
            "plain": "not-a-field",
            "teaser": SnapshotField(field_type="wysiwyg", data="<p>Hi</p>"),
        },
    )

    assert set(snapshot.fields) == {"headline", "teaser"}
    assert snapshot.fields["headline"] == SnapshotField(field_type="input", data="Hello")


def test_fields_setter_filters_on_reassignment() -> None:
    """Mutating through the setter should apply the same filtering."""
    snapshot = PortableSnapshot(path="/a", kind="page")

    snapshot.fields = {"x": {"type": "renderlet", "data": 1}, "y": {"type": "numeric", "data": 2}}

    assert list(snapshot.fields) == ["y"]


def test_properties_setter_requires_inheritable_flag_and_supported_type() -> None:
    """Properties missing keys or with unsupported types should be dropped."""
    snapshot = PortableSnapshot(
        path="/a",
        kind="folder",
        properties={
            "nav": {"type": "text", "data": "main", "inheritable": True},
            "object": {"type": "object", "data": 4, "inheritable": False},
            "partial": {"type": "text", "data": "x"},
        },
    )

    assert snapshot.properties == {
        "nav": SnapshotProperty(property_type="text", data="main", inheritable=True)
    }


def test_settings_setter_keeps_allow_listed_names_only() -> None:
    """Settings outside the allow-list should be dropped."""
    snapshot = PortableSnapshot(
        path="/a",
        kind="page",
        settings={"title": "About", "creationDate": 1700000000, "_link": None},
    )

    assert snapshot.settings == {"title": "About", "_link": None}


def test_ancestors_accept_mapping_in_root_to_parent_order() -> None:
    """Ancestor mappings should become ordered stubs."""
    snapshot = PortableSnapshot(
        path="/a/b/c",
        kind="page",
        ancestors={"/": "folder", "/a": "folder", "/a/b": "page"},
    )

    assert snapshot.ancestors == (
        AncestorStub(path="/", kind="folder"),
        AncestorStub(path="/a", kind="folder"),
        AncestorStub(path="/a/b", kind="page"),
    )


def test_ancestors_reject_unknown_kind() -> None:
    """Ancestor stubs with unknown kinds should be rejected."""
    with pytest.raises(CopierValidationError):
        PortableSnapshot(path="/a/b", kind="page", ancestors={"/a": "widget"})
    assert True


def test_dependencies_setter_drops_invalid_records() -> None:
    """Dependencies with unknown kinds or bad paths should be dropped."""
    snapshot = PortableSnapshot(
        path="/a",
        kind="page",
        dependencies=[
            {"type": "asset", "path": "/x/y.png", "reason": "Property 'image'"},
            {"type": "object", "path": "/objects/1", "reason": "Relation"},
            {"type": "document", "path": "", "reason": "Empty"},
            {"path": "/missing-type"},
            DependencyRecord(kind="document", path="a//b", reason="Child document"),
        ],
    )

    assert snapshot.dependencies == (
        DependencyRecord(kind="asset", path="/x/y.png", reason="Property 'image'"),
        DependencyRecord(kind="document", path="/a/b", reason="Child document"),
    )


def test_snapshot_equality_compares_all_attributes() -> None:
    """Snapshots with equal attributes should compare equal."""
    first = PortableSnapshot(path="/a", kind="page", settings={"title": "A"})
    second = PortableSnapshot(path="/a/", kind="page", settings={"title": "A"})
    third = PortableSnapshot(path="/a", kind="page", settings={"title": "B"})

    assert first == second
    assert first != third


def test_field_getter_returns_copy() -> None:
    """Mutating the returned mapping should not change the snapshot."""
    snapshot = PortableSnapshot(path="/a", kind="page", fields={"x": {"type": "input", "data": "1"}})

    snapshot.fields.pop("x")

    assert "x" in snapshot.fields
