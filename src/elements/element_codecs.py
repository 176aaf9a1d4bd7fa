"""Per-field-type codec registry.

Each codec converts one field type between its live value and its
portable value, and reports the document or asset the field points at.
Lookups go through ``ELEMENT_CODECS``; unknown or plain types fall back
to the generic pass-through codec.
"""

from __future__ import annotations

import copy
from datetime import datetime, timezone
from typing import Mapping, Protocol

from core.errors import CopierCodecError, CopierReferenceError
from core.types import DependencyRecord, SnapshotField
from repository.memory_repository import DocumentRepository
from repository.models import LiveDocument, LiveField


class ElementCodec(Protocol):
    """Strategy for one field type."""

    def decode(self, live_field: LiveField, repository: DocumentRepository) -> object: ...

    def encode(
        self,
        name: str,
        snapshot_field: SnapshotField,
        document: LiveDocument,
        repository: DocumentRepository,
    ) -> None: ...

    def dependency(
        self,
        name: str,
        live_field: LiveField,
        repository: DocumentRepository,
    ) -> DependencyRecord | None: ...


class GenericCodec:
    """Pass-through codec for plain values."""

    def decode(self, live_field: LiveField, repository: DocumentRepository) -> object:
        return copy.deepcopy(live_field.data)

    def encode(
        self,
        name: str,
        snapshot_field: SnapshotField,
        document: LiveDocument,
        repository: DocumentRepository,
    ) -> None:
        document.set_field(name, snapshot_field.field_type, copy.deepcopy(snapshot_field.data))

    def dependency(
        self,
        name: str,
        live_field: LiveField,
        repository: DocumentRepository,
    ) -> DependencyRecord | None:
        return None


class DateCodec(GenericCodec):
    """Live UTC datetime <-> integer epoch seconds."""

    def decode(self, live_field: LiveField, repository: DocumentRepository) -> object:
        if live_field.data is None:
            return None
        if not isinstance(live_field.data, datetime):
            raise CopierCodecError(
                f"Date field holds {type(live_field.data).__name__}, expected datetime."
            )
        return int(live_field.data.timestamp())

    def encode(
        self,
        name: str,
        snapshot_field: SnapshotField,
        document: LiveDocument,
        repository: DocumentRepository,
    ) -> None:
        timestamp = snapshot_field.data
        if timestamp is None:
            document.set_field(name, snapshot_field.field_type, None)
            return
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            raise CopierCodecError(
                f"Date field '{name}' holds {timestamp!r}, expected epoch seconds."
            )
        try:
            value = datetime.fromtimestamp(timestamp, tz=timezone.utc)
        except (ValueError, OverflowError, OSError) as error:
            raise CopierCodecError(
                f"Date field '{name}' holds {timestamp!r}, outside the supported date range."
            ) from error
        document.set_field(name, snapshot_field.field_type, value)


class ImageCodec(GenericCodec):
    """Image payload keyed by asset id live, by asset path in transit."""

    def decode(self, live_field: LiveField, repository: DocumentRepository) -> object:
        payload = _expect_mapping(live_field.data, "Image")
        asset = repository.get_asset_by_id(payload.get("id"))
        if asset is None:
            return None
        portable = {key: copy.deepcopy(value) for key, value in payload.items() if key != "id"}
        portable["path"] = asset.path
        return portable

    def encode(
        self,
        name: str,
        snapshot_field: SnapshotField,
        document: LiveDocument,
        repository: DocumentRepository,
    ) -> None:
        payload = _expect_mapping(snapshot_field.data, "Image")
        asset = repository.get_asset_by_path(payload.get("path"))
        if asset is None:
            raise CopierReferenceError(
                f"Image field '{name}' points at missing asset {payload.get('path')!r}."
            )
        live = {key: copy.deepcopy(value) for key, value in payload.items() if key != "path"}
        live["id"] = asset.id
        document.set_field(name, snapshot_field.field_type, live)

    def dependency(
        self,
        name: str,
        live_field: LiveField,
        repository: DocumentRepository,
    ) -> DependencyRecord | None:
        if not isinstance(live_field.data, Mapping):
            return None
        asset = repository.get_asset_by_id(live_field.data.get("id"))
        if asset is None:
            return None
        return DependencyRecord(kind="asset", path=asset.path, reason=_reason(name, live_field))


class LinkCodec(GenericCodec):
    """Strips volatile internal ids; import goes through the generic path."""

    def decode(self, live_field: LiveField, repository: DocumentRepository) -> object:
        payload = _expect_mapping(live_field.data, "Link")
        return {
            key: copy.deepcopy(value)
            for key, value in payload.items()
            if key not in ("internal", "internalId")
        }


class SnippetCodec(GenericCodec):
    """Embedded snippet keyed by document id live, by path in transit."""

    def decode(self, live_field: LiveField, repository: DocumentRepository) -> object:
        snippet = _find_snippet(repository.get_document_by_id(live_field.data))
        return snippet.path if snippet is not None else None

    def encode(
        self,
        name: str,
        snapshot_field: SnapshotField,
        document: LiveDocument,
        repository: DocumentRepository,
    ) -> None:
        snippet = _find_snippet(repository.get_document_by_path(snapshot_field.data))
        if snippet is None or snippet.id is None:
            raise CopierReferenceError(
                f"Snippet field '{name}' points at missing snippet {snapshot_field.data!r}."
            )
        document.set_field(name, snapshot_field.field_type, snippet.id)

    def dependency(
        self,
        name: str,
        live_field: LiveField,
        repository: DocumentRepository,
    ) -> DependencyRecord | None:
        snippet = _find_snippet(repository.get_document_by_id(live_field.data))
        if snippet is None:
            return None
        return DependencyRecord(kind="document", path=snippet.path, reason=_reason(name, live_field))


_GENERIC_CODEC = GenericCodec()

ELEMENT_CODECS: dict[str, ElementCodec] = {
    "date": DateCodec(),
    "image": ImageCodec(),
    "link": LinkCodec(),
    "snippet": SnippetCodec(),
}


def get_codec(field_type: str) -> ElementCodec:
    """Return the codec registered for a field type, generic by default."""
    return ELEMENT_CODECS.get(field_type, _GENERIC_CODEC)


def decode_field(live_field: LiveField, repository: DocumentRepository) -> object:
    """Convert a live field value into its portable value.

    Raises:
        CopierCodecError: If the live value does not match the field type.
    """
    return get_codec(live_field.field_type).decode(live_field, repository)


def encode_field(
    name: str,
    snapshot_field: SnapshotField,
    document: LiveDocument,
    repository: DocumentRepository,
) -> None:
    """Write a portable field value onto a live document.

    Raises:
        CopierCodecError: If the portable value does not match the field type.
        CopierReferenceError: If the referenced asset or snippet is missing.
    """
    get_codec(snapshot_field.field_type).encode(name, snapshot_field, document, repository)


def field_dependency(
    name: str,
    live_field: LiveField,
    repository: DocumentRepository,
) -> DependencyRecord | None:
    """Return the document or asset a live field references, if it resolves."""
    return get_codec(live_field.field_type).dependency(name, live_field, repository)


def _expect_mapping(value: object, label: str) -> Mapping[str, object]:
    if not isinstance(value, Mapping):
        raise CopierCodecError(f"{label} field holds {type(value).__name__}, expected a mapping.")
    return value


def _find_snippet(document: LiveDocument | None) -> LiveDocument | None:
    if document is None or document.kind != "snippet":
        return None
    return document


def _reason(name: str, live_field: LiveField) -> str:
    return f"Element '{name}' of type '{live_field.field_type}'"
