"""Unit tests for the in-memory document repository."""

from __future__ import annotations

import pytest

from core.errors import CopierStoreError, CopierValidationError
from repository.memory_repository import InMemoryRepository
from repository.models import FolderDocument, PageDocument, create_document
from tests.repository_builders import add_asset, add_document


def test_new_repository_has_root_document_and_asset_folder() -> None:
    """Fresh repository should expose the root document and root asset folder."""
    repository = InMemoryRepository()

    assert repository.get_document_by_path("/") is repository.root
    assert repository.get_asset_by_path("/").is_folder


def test_save_document_assigns_id_and_path() -> None:
    """Saving should assign an id and make the document reachable by path."""
    repository = InMemoryRepository()
    document = add_document(repository, "/en/about")

    assert document.id is not None
    assert repository.get_document_by_path("en//about/") is document
    assert repository.get_document_by_id(document.id) is document


def test_save_document_rejects_unsaved_parent() -> None:
    """Children of unsaved parents should be rejected."""
    repository = InMemoryRepository()
    parent = FolderDocument(key="floating", parent=repository.root)
    child = PageDocument(key="child", parent=parent)

    with pytest.raises(CopierStoreError):
        repository.save_document(child)
    assert child.id is None


def test_save_document_rejects_occupied_path() -> None:
    """A second document at an occupied path should be rejected."""
    repository = InMemoryRepository()
    add_document(repository, "/page")
    duplicate = PageDocument(key="page", parent=repository.root)

    with pytest.raises(CopierStoreError):
        repository.save_document(duplicate)
    assert True


def test_save_document_rejects_empty_key() -> None:
    """Non-root documents must have a key."""
    repository = InMemoryRepository()

    with pytest.raises(CopierStoreError):
        repository.save_document(PageDocument(key="", parent=repository.root))
    assert True


def test_delete_document_removes_subtree() -> None:
    """Deleting a document should delete all of its descendants."""
    repository = InMemoryRepository()
    parent = add_document(repository, "/a", "folder")
    add_document(repository, "/a/b/c")

    repository.delete_document(parent)

    assert [document.path for document in repository.documents()] == ["/"]


def test_delete_document_rejects_root() -> None:
    """The root document cannot be deleted."""
    repository = InMemoryRepository()

    with pytest.raises(CopierStoreError):
        repository.delete_document(repository.root)
    assert True


def test_children_of_returns_direct_children_sorted_by_key() -> None:
    """Only direct children should be returned, ordered by key."""
    repository = InMemoryRepository()
    parent = add_document(repository, "/a", "folder")
    add_document(repository, "/a/zeta")
    add_document(repository, "/a/alpha")
    add_document(repository, "/a/alpha/deep")

    children = repository.children_of(parent)

    assert [child.key for child in children] == ["alpha", "zeta"]


def test_properties_of_marks_inherited_properties() -> None:
    """Inheritable ancestor properties should appear flagged as inherited."""
    repository = InMemoryRepository()
    parent = add_document(repository, "/a", "folder")
    parent.set_property("navigation", "text", "main", inheritable=True)
    parent.set_property("private", "text", "hidden", inheritable=False)
    child = add_document(repository, "/a/b")
    child.set_property("own", "bool", True)

    properties = repository.properties_of(child)

    assert properties["navigation"].inherited
    assert not properties["own"].inherited
    assert "private" not in properties


def test_properties_of_prefers_own_property_over_inherited() -> None:
    """An own property should shadow an inherited one with the same name."""
    repository = InMemoryRepository()
    parent = add_document(repository, "/a", "folder")
    parent.set_property("navigation", "text", "main", inheritable=True)
    child = add_document(repository, "/a/b")
    child.set_property("navigation", "text", "footer")

    properties = repository.properties_of(child)

    assert (properties["navigation"].data, properties["navigation"].inherited) == ("footer", False)


def test_save_asset_creates_folders_and_updates_in_place() -> None:
    """Saving an asset should create folders and keep its id on update."""
    repository = InMemoryRepository()
    first = add_asset(repository, "/images/logos/logo.png", b"v1")
    second = add_asset(repository, "/images/logos/logo.png", b"v2")

    assert first.id == second.id and second.data == b"v2"
    assert repository.get_asset_by_path("/images/logos").is_folder


def test_save_asset_rejects_folder_path() -> None:
    """Asset data cannot be stored over an asset folder."""
    repository = InMemoryRepository()
    add_asset(repository, "/images/logo.png")

    with pytest.raises(CopierStoreError):
        repository.save_asset("/images", b"data")
    assert True


def test_lookups_return_none_for_invalid_input() -> None:
    """Malformed lookups should return None rather than raise."""
    repository = InMemoryRepository()

    assert repository.get_document_by_path(None) is None
    assert repository.get_document_by_path("/a/../b") is None
    assert repository.get_document_by_id("1") is None
    assert repository.get_asset_by_id(True) is None


def test_create_document_rejects_unknown_kind() -> None:
    """Unknown kinds should be rejected by the factory."""
    with pytest.raises(CopierValidationError):
        create_document("widget", "key")
    assert True


def test_set_setting_ignores_settings_the_kind_does_not_expose() -> None:
    """Folders should only accept the published setting."""
    folder = create_document("folder", "f")

    assert folder.set_setting("published", True)
    assert not folder.set_setting("title", "Ignored")
    assert folder.settings == {"published": True}
