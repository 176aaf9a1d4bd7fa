"""Shared JSON serialization for PortableSnapshot payloads.

This module owns the on-disk snapshot schema. Field names are stable
across versions: ``realFullPath``, ``type``, ``ancestors``, ``elements``,
``properties``, ``settings``, and ``dependencies``.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

from core.errors import CopierSnapshotError
from snapshot.portable_snapshot import PortableSnapshot

_REQUIRED_KEYS = ("realFullPath", "type")


def snapshot_to_payload(snapshot: PortableSnapshot) -> dict[str, object]:
    """Serialize a snapshot into a JSON-safe payload.

    Args:
        snapshot: Snapshot instance.

    Returns:
        Dictionary payload for JSON encoding.
    """
    return {
        "realFullPath": snapshot.path,
        "type": snapshot.kind,
        "ancestors": {stub.path: stub.kind for stub in snapshot.ancestors},
        "elements": {
            name: {"type": item.field_type, "data": item.data}
            for name, item in snapshot.fields.items()
        },
        "properties": {
            name: {
                "type": item.property_type,
                "data": item.data,
                "inheritable": item.inheritable,
            }
            for name, item in snapshot.properties.items()
        },
        "settings": snapshot.settings,
        "dependencies": [
            {"type": record.kind, "path": record.path, "reason": record.reason}
            for record in snapshot.dependencies
        ],
    }


def snapshot_from_payload(payload: Mapping[str, Any], source: str = "<payload>") -> PortableSnapshot:
    """Deserialize a JSON payload into a snapshot.

    Args:
        payload: Decoded snapshot payload.
        source: Description of where the payload came from, for errors.

    Returns:
        Filtered snapshot.

    Raises:
        CopierSnapshotError: If required keys are missing or sections are malformed.
        CopierValidationError: If the path or kind is invalid.
    """
    missing = [key for key in _REQUIRED_KEYS if key not in payload]
    if missing:
        raise CopierSnapshotError(
            f"Snapshot {source} is missing required keys: {', '.join(missing)}. "
            "Re-export the document to regenerate the file."
        )
    for key in ("realFullPath", "type"):
        if not isinstance(payload[key], str):
            raise CopierSnapshotError(
                f"Snapshot {source} has a non-string '{key}': {payload[key]!r}. "
                "Re-export the document to regenerate the file."
            )
    ancestors = _expect_section(payload, "ancestors", dict, source)
    elements = _expect_section(payload, "elements", dict, source)
    properties = _expect_section(payload, "properties", dict, source)
    settings = _expect_section(payload, "settings", dict, source)
    dependencies = _expect_section(payload, "dependencies", list, source)
    return PortableSnapshot(
        path=payload["realFullPath"],
        kind=payload["type"],
        fields=elements,
        properties=properties,
        settings=settings,
        ancestors={str(path): str(kind) for path, kind in ancestors.items()},
        dependencies=dependencies,
    )


def snapshot_to_json(snapshot: PortableSnapshot) -> str:
    """Encode a snapshot as indented UTF-8 friendly JSON text."""
    return json.dumps(snapshot_to_payload(snapshot), indent=4, ensure_ascii=False) + "\n"


def snapshot_from_json(text: str, source: str = "<json>") -> PortableSnapshot:
    """Decode snapshot JSON text.

    Raises:
        CopierSnapshotError: If the text is not a JSON object with the snapshot schema.
    """
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as error:
        raise CopierSnapshotError(
            f"Failed to parse snapshot {source}: {error.msg} at line {error.lineno}."
        ) from error
    if not isinstance(payload, dict):
        raise CopierSnapshotError(
            f"Failed to parse snapshot {source}: expected JSON object at top level."
        )
    return snapshot_from_payload(payload, source)


def _expect_section(
    payload: Mapping[str, Any],
    key: str,
    expected_type: type,
    source: str,
) -> Any:
    value = payload.get(key)
    if value is None or (expected_type is dict and value == []):
        return expected_type()
    if not isinstance(value, expected_type):
        raise CopierSnapshotError(
            f"Snapshot {source} has invalid '{key}' section: "
            f"expected {expected_type.__name__}, got {type(value).__name__}."
        )
    return value
