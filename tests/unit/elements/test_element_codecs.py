"""Unit tests for the element codec registry."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from core.errors import CopierCodecError, CopierReferenceError
from core.types import DependencyRecord, SnapshotField
from elements.element_codecs import (
    GenericCodec,
    decode_field,
    encode_field,
    field_dependency,
    get_codec,
)
from repository.memory_repository import InMemoryRepository
from repository.models import LiveField
from tests.repository_builders import add_asset, add_document


def test_get_codec_falls_back_to_generic_codec() -> None:
    """Plain field types should use the generic codec."""
    assert isinstance(get_codec("wysiwyg"), GenericCodec)


def test_generic_codec_copies_nested_values() -> None:
    """Decoded values should not alias live field data."""
    repository = InMemoryRepository()
    live_field = LiveField(field_type="table", data=[["a", "b"]])

    decoded = decode_field(live_field, repository)
    decoded[0].append("c")

    assert live_field.data == [["a", "b"]]


def test_date_codec_converts_datetime_to_epoch_seconds() -> None:
    """Dates should export as integer timestamps."""
    repository = InMemoryRepository()
    live_field = LiveField(field_type="date", data=datetime(2024, 1, 1, tzinfo=timezone.utc))

    assert decode_field(live_field, repository) == 1704067200


def test_date_codec_exports_unset_date_as_none() -> None:
    """Unset dates should export as None."""
    assert decode_field(LiveField(field_type="date"), InMemoryRepository()) is None


def test_date_codec_rejects_non_datetime_value() -> None:
    """A date field holding text should raise a codec error."""
    with pytest.raises(CopierCodecError):
        decode_field(LiveField(field_type="date", data="yesterday"), InMemoryRepository())
    assert True


def test_date_codec_imports_timestamp_as_utc_datetime() -> None:
    """Timestamps should import as UTC datetimes."""
    repository = InMemoryRepository()
    document = add_document(repository, "/page")

    encode_field("when", SnapshotField(field_type="date", data=1704067200), document, repository)

    assert document.fields["when"].data == datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.mark.parametrize("timestamp", [10**12, -(10**14), float("nan"), float("inf")])
def test_date_codec_rejects_out_of_range_timestamp(timestamp: float) -> None:
    """Timestamps no datetime can hold should raise a codec error."""
    repository = InMemoryRepository()
    document = add_document(repository, "/page")

    with pytest.raises(CopierCodecError):
        encode_field("when", SnapshotField(field_type="date", data=timestamp), document, repository)
    assert "when" not in document.fields


def test_image_codec_swaps_asset_id_for_path() -> None:
    """Image export should reference the asset by path, not id."""
    repository = InMemoryRepository()
    asset = add_asset(repository, "/img/hero.png")
    live_field = LiveField(field_type="image", data={"id": asset.id, "alt": "Hero"})

    assert decode_field(live_field, repository) == {"alt": "Hero", "path": "/img/hero.png"}


def test_image_codec_exports_missing_asset_as_none() -> None:
    """Image pointing at a deleted asset should export as None."""
    live_field = LiveField(field_type="image", data={"id": 999, "alt": "Gone"})

    assert decode_field(live_field, InMemoryRepository()) is None


def test_image_codec_imports_path_as_target_asset_id() -> None:
    """Image import should resolve the path in the target repository."""
    repository = InMemoryRepository()
    asset = add_asset(repository, "/img/hero.png")
    document = add_document(repository, "/page")
    snapshot_field = SnapshotField(field_type="image", data={"path": "/img/hero.png", "alt": "Hero"})

    encode_field("hero", snapshot_field, document, repository)

    assert document.fields["hero"].data == {"alt": "Hero", "id": asset.id}


def test_image_codec_import_raises_for_missing_asset() -> None:
    """Image import with an unknown asset path should raise a reference error."""
    repository = InMemoryRepository()
    document = add_document(repository, "/page")
    snapshot_field = SnapshotField(field_type="image", data={"path": "/img/missing.png"})

    with pytest.raises(CopierReferenceError):
        encode_field("hero", snapshot_field, document, repository)
    assert "hero" not in document.fields


def test_image_codec_reports_asset_dependency() -> None:
    """Image fields should report their asset as a dependency."""
    repository = InMemoryRepository()
    asset = add_asset(repository, "/img/hero.png")
    live_field = LiveField(field_type="image", data={"id": asset.id})

    assert field_dependency("hero", live_field, repository) == DependencyRecord(
        kind="asset",
        path="/img/hero.png",
        reason="Element 'hero' of type 'image'",
    )


def test_link_codec_strips_internal_ids() -> None:
    """Link export should drop volatile internal ids."""
    live_field = LiveField(
        field_type="link",
        data={"text": "Docs", "path": "/docs", "internal": 4, "internalId": 4},
    )

    assert decode_field(live_field, InMemoryRepository()) == {"text": "Docs", "path": "/docs"}


def test_snippet_codec_round_trips_through_path() -> None:
    """Snippet fields should export as a path and import as the target id."""
    repository = InMemoryRepository()
    snippet = add_document(repository, "/snippets/footer", "snippet")
    page = add_document(repository, "/page")
    live_field = LiveField(field_type="snippet", data=snippet.id)

    exported = decode_field(live_field, repository)
    encode_field("footer", SnapshotField(field_type="snippet", data=exported), page, repository)

    assert exported == "/snippets/footer"
    assert page.fields["footer"].data == snippet.id


def test_snippet_codec_ignores_non_snippet_targets() -> None:
    """A snippet field pointing at a page should export as None and report nothing."""
    repository = InMemoryRepository()
    page = add_document(repository, "/page")
    live_field = LiveField(field_type="snippet", data=page.id)

    assert decode_field(live_field, repository) is None
    assert field_dependency("footer", live_field, repository) is None


def test_snippet_codec_import_raises_for_missing_snippet() -> None:
    """Snippet import with an unknown path should raise a reference error."""
    repository = InMemoryRepository()
    page = add_document(repository, "/page")

    with pytest.raises(CopierReferenceError):
        encode_field(
            "footer",
            SnapshotField(field_type="snippet", data="/snippets/missing"),
            page,
            repository,
        )
    assert True
