"""JSON state file persistence for the in-memory repository.

The CLI keeps its live environment in one state file so separate
invocations see the same documents and assets.
"""

from __future__ import annotations

import base64
from datetime import datetime
import json
from pathlib import Path
from typing import Any

from core.errors import CopierIOError, CopierSnapshotError
from core.paths import parent_path
from repository.memory_repository import InMemoryRepository
from repository.models import (
    HardlinkDocument,
    LinkDocument,
    LiveAsset,
    LiveDocument,
    LiveField,
    LiveProperty,
    PageLikeDocument,
    create_document,
)

_STATE_VERSION = 1
_DATETIME_MARKER = "__datetime__"


def load_repository(state_path: Path) -> InMemoryRepository:
    """Load a repository from a state file, or start empty if absent.

    Args:
        state_path: State JSON path.

    Returns:
        Repository populated from the file.

    Raises:
        CopierIOError: If the file exists but cannot be read.
        CopierSnapshotError: If the file content is invalid.
    """
    repository = InMemoryRepository()
    if not state_path.exists():
        return repository
    payload = _read_state_payload(state_path)
    try:
        for document_payload in sorted(payload["documents"], key=lambda item: item["path"].count("/")):
            _restore_document(repository, document_payload)
        for asset_payload in payload["assets"]:
            repository.restore_asset(
                LiveAsset(
                    path=str(asset_payload["path"]),
                    data=base64.b64decode(asset_payload["data"]),
                    is_folder=bool(asset_payload["is_folder"]),
                    id=int(asset_payload["id"]),
                )
            )
    except (KeyError, TypeError, ValueError, AttributeError) as error:
        raise CopierSnapshotError(
            f"Invalid repository state file {state_path}: {error}. "
            "Delete the state file or restore it from a backup."
        ) from error
    return repository


def save_repository(repository: InMemoryRepository, state_path: Path) -> None:
    """Write every document and asset to a state file.

    Raises:
        CopierIOError: If the file cannot be written.
    """
    payload = {
        "version": _STATE_VERSION,
        "documents": [
            _document_to_payload(document)
            for document in repository.documents()
            if document.parent is not None
        ],
        "assets": [
            {
                "id": asset.id,
                "path": asset.path,
                "is_folder": asset.is_folder,
                "data": base64.b64encode(asset.data).decode("ascii"),
            }
            for asset in repository.assets()
            if asset.path != "/"
        ],
    }
    try:
        state_path.parent.mkdir(parents=True, exist_ok=True)
        state_path.write_text(
            json.dumps(payload, indent=2, default=_encode_value) + "\n",
            encoding="utf-8",
        )
    except OSError as error:
        raise CopierIOError(
            f"Failed to write repository state to {state_path}: {error}. "
            "Check directory permissions and retry."
        ) from error


def _read_state_payload(state_path: Path) -> dict[str, Any]:
    try:
        payload = json.loads(state_path.read_text(encoding="utf-8"), object_hook=_decode_value)
    except OSError as error:
        raise CopierIOError(
            f"Failed to read repository state at {state_path}: {error}."
        ) from error
    except json.JSONDecodeError as error:
        raise CopierSnapshotError(
            f"Failed to parse repository state at {state_path}: {error.msg}."
        ) from error
    if not isinstance(payload, dict) or payload.get("version") != _STATE_VERSION:
        raise CopierSnapshotError(
            f"Unsupported repository state at {state_path}: expected version {_STATE_VERSION}."
        )
    return payload


def _document_to_payload(document: LiveDocument) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": document.id,
        "kind": document.kind,
        "path": document.path,
        "fields": {
            name: {"type": item.field_type, "data": item.data}
            for name, item in document.fields.items()
        },
        "properties": {
            name: {
                "type": item.property_type,
                "data": item.data,
                "inheritable": item.inheritable,
            }
            for name, item in document.properties.items()
        },
        "settings": dict(document.settings),
    }
    if isinstance(document, PageLikeDocument):
        payload["content_master_id"] = document.content_master_id
    elif isinstance(document, LinkDocument):
        payload["internal_id"] = document.internal_id
        payload["direct_link"] = document.direct_link
    elif isinstance(document, HardlinkDocument):
        payload["source_id"] = document.source_id
    return payload


def _restore_document(repository: InMemoryRepository, payload: dict[str, Any]) -> None:
    path = str(payload["path"])
    parent = repository.get_document_by_path(parent_path(path))
    if parent is None:
        raise ValueError(f"missing parent for {path}")
    document = create_document(str(payload["kind"]), path.rsplit("/", 1)[-1])
    document.parent = parent
    document.id = int(payload["id"])
    document.fields = {
        str(name): LiveField(field_type=str(item["type"]), data=item["data"])
        for name, item in payload["fields"].items()
    }
    document.properties = {
        str(name): LiveProperty(
            name=str(name),
            property_type=str(item["type"]),
            data=item["data"],
            inheritable=bool(item["inheritable"]),
        )
        for name, item in payload["properties"].items()
    }
    document.settings = dict(payload["settings"])
    if isinstance(document, PageLikeDocument):
        document.content_master_id = payload.get("content_master_id")
    elif isinstance(document, LinkDocument):
        document.internal_id = payload.get("internal_id")
        document.direct_link = payload.get("direct_link")
    elif isinstance(document, HardlinkDocument):
        document.source_id = payload.get("source_id")
    repository.save_document(document)


def _encode_value(value: object) -> object:
    if isinstance(value, datetime):
        return {_DATETIME_MARKER: value.isoformat()}
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _decode_value(payload: dict[str, Any]) -> object:
    if set(payload) == {_DATETIME_MARKER}:
        return datetime.fromisoformat(payload[_DATETIME_MARKER])
    return payload
