"""Document repository contract and in-memory engine.

The copier treats storage as a black box with path lookup, save, and
delete. ``InMemoryRepository`` is the engine used by the SDK, the CLI
state file, and tests.
"""

from __future__ import annotations

from typing import Protocol

from core.constants import ROOT_PATH
from core.errors import CopierStoreError, CopierValidationError
from core.logging_config import get_logger
from core.paths import canonical_path, join_path, parent_path
from repository.models import FolderDocument, LiveAsset, LiveDocument, LiveProperty

_LOGGER = get_logger(__name__)


class DocumentRepository(Protocol):
    """Storage operations the copier depends on."""

    def get_document_by_path(self, path: object) -> LiveDocument | None: ...

    def get_document_by_id(self, document_id: object) -> LiveDocument | None: ...

    def get_asset_by_path(self, path: object) -> LiveAsset | None: ...

    def get_asset_by_id(self, asset_id: object) -> LiveAsset | None: ...

    def children_of(self, document: LiveDocument) -> list[LiveDocument]: ...

    def properties_of(self, document: LiveDocument) -> dict[str, LiveProperty]: ...

    def save_document(self, document: LiveDocument) -> LiveDocument: ...

    def delete_document(self, document: LiveDocument) -> None: ...

    def save_asset(self, path: str, data: bytes) -> LiveAsset: ...


class InMemoryRepository:
    """Dictionary-backed document and asset store.

    The repository starts with a root folder document and a root asset
    folder, both at ``/``.
    """

    def __init__(self) -> None:
        self._documents: dict[int, LiveDocument] = {}
        self._assets: dict[int, LiveAsset] = {}
        self._last_id = 0
        self.root = self.save_document(FolderDocument(key=""))
        self._save_asset_record(LiveAsset(path=ROOT_PATH, is_folder=True))

    def get_document_by_path(self, path: object) -> LiveDocument | None:
        """Return the saved document at ``path`` or ``None``."""
        lookup_path = _lookup_path(path)
        if lookup_path is None:
            return None
        for document in self._documents.values():
            if document.path == lookup_path:
                return document
        return None

    def get_document_by_id(self, document_id: object) -> LiveDocument | None:
        """Return the saved document with ``document_id`` or ``None``."""
        if isinstance(document_id, bool) or not isinstance(document_id, int):
            return None
        return self._documents.get(document_id)

    def get_asset_by_path(self, path: object) -> LiveAsset | None:
        """Return the saved asset at ``path`` or ``None``."""
        lookup_path = _lookup_path(path)
        if lookup_path is None:
            return None
        for asset in self._assets.values():
            if asset.path == lookup_path:
                return asset
        return None

    def get_asset_by_id(self, asset_id: object) -> LiveAsset | None:
        """Return the saved asset with ``asset_id`` or ``None``."""
        if isinstance(asset_id, bool) or not isinstance(asset_id, int):
            return None
        return self._assets.get(asset_id)

    def children_of(self, document: LiveDocument) -> list[LiveDocument]:
        """Return saved direct children sorted by key."""
        children = [item for item in self._documents.values() if item.parent is document]
        return sorted(children, key=lambda item: item.key)

    def properties_of(self, document: LiveDocument) -> dict[str, LiveProperty]:
        """Return own properties merged over inherited ancestor properties.

        Inheritable properties of ancestors appear with ``inherited=True``
        unless the document or a closer ancestor defines the same name.
        """
        merged: dict[str, LiveProperty] = {}
        for ancestor in reversed(_ancestors_of(document)):
            for name, prop in ancestor.properties.items():
                if prop.inheritable:
                    merged[name] = LiveProperty(
                        name=name,
                        property_type=prop.property_type,
                        data=prop.data,
                        inheritable=True,
                        inherited=True,
                    )
        merged.update(document.properties)
        return merged

    def save_document(self, document: LiveDocument) -> LiveDocument:
        """Persist a document, assigning an id on first save.

        Raises:
            CopierStoreError: If the document cannot be placed in the tree.
        """
        is_root = document.parent is None and not document.key
        if is_root and getattr(self, "root", document) is not document:
            raise CopierStoreError("Cannot save a second root document. Attach it to a parent.")
        if not is_root:
            _validate_placement(self, document)
        occupant = self.get_document_by_path(document.path)
        if occupant is not None and occupant is not document:
            raise CopierStoreError(
                f"Cannot save document at {document.path}: path already belongs to "
                f"document {occupant.id}. Delete or rename the existing document first."
            )
        if document.id is None or (
            document.id in self._documents and self._documents[document.id] is not document
        ):
            document.id = self._next_id()
        else:
            self._last_id = max(self._last_id, document.id)
        self._documents[document.id] = document
        _LOGGER.debug("document_saved", path=document.path, id=document.id, kind=document.kind)
        return document

    def delete_document(self, document: LiveDocument) -> None:
        """Delete a document and its whole subtree.

        Raises:
            CopierStoreError: If the document is the root or not saved.
        """
        if document.id is None or self._documents.get(document.id) is not document:
            raise CopierStoreError(
                f"Cannot delete document at {document.path}: it is not saved in this repository."
            )
        if document.parent is None:
            raise CopierStoreError("Cannot delete the root document.")
        doomed = [
            document_id
            for document_id, item in self._documents.items()
            if item is document or document in _ancestors_of(item)
        ]
        for document_id in doomed:
            del self._documents[document_id]
        _LOGGER.debug("document_deleted", path=document.path, removed=len(doomed))

    def save_asset(self, path: str, data: bytes) -> LiveAsset:
        """Create or update an asset, creating missing asset folders.

        Raises:
            CopierStoreError: If the path is taken by an asset folder.
        """
        asset_path = canonical_path(path)
        if asset_path == ROOT_PATH:
            raise CopierStoreError("Cannot store asset data at the root asset folder.")
        self._ensure_asset_folder(parent_path(asset_path))
        asset = self.get_asset_by_path(asset_path)
        if asset is not None and asset.is_folder:
            raise CopierStoreError(
                f"Cannot store asset data at {asset_path}: path is an asset folder."
            )
        if asset is None:
            asset = LiveAsset(path=asset_path)
        asset.data = data
        return self._save_asset_record(asset)

    def restore_asset(self, asset: LiveAsset) -> LiveAsset:
        """Insert an asset record as-is, keeping its id."""
        return self._save_asset_record(asset)

    def documents(self) -> list[LiveDocument]:
        """Return all saved documents ordered by path."""
        return sorted(self._documents.values(), key=lambda item: item.path)

    def assets(self) -> list[LiveAsset]:
        """Return all saved assets ordered by path."""
        return sorted(self._assets.values(), key=lambda item: item.path)

    def _ensure_asset_folder(self, folder_path: str) -> LiveAsset:
        current_path = ROOT_PATH
        folder = self.get_asset_by_path(ROOT_PATH)
        for key in [segment for segment in folder_path.split("/") if segment]:
            current_path = join_path(current_path, key)
            folder = self.get_asset_by_path(current_path)
            if folder is None:
                folder = self._save_asset_record(LiveAsset(path=current_path, is_folder=True))
            elif not folder.is_folder:
                raise CopierStoreError(
                    f"Cannot create asset folder {current_path}: path holds an asset."
                )
        assert folder is not None
        return folder

    def _save_asset_record(self, asset: LiveAsset) -> LiveAsset:
        if asset.id is None:
            asset.id = self._next_id()
        else:
            self._last_id = max(self._last_id, asset.id)
        self._assets[asset.id] = asset
        _LOGGER.debug("asset_saved", path=asset.path, id=asset.id, is_folder=asset.is_folder)
        return asset

    def _next_id(self) -> int:
        self._last_id += 1
        return self._last_id


def _lookup_path(path: object) -> str | None:
    try:
        return canonical_path(path)
    except CopierValidationError:
        return None


def _ancestors_of(document: LiveDocument) -> list[LiveDocument]:
    """Return ancestors nearest-first."""
    ancestors: list[LiveDocument] = []
    parent = document.parent
    while parent is not None:
        ancestors.append(parent)
        parent = parent.parent
    return ancestors


def _validate_placement(repository: InMemoryRepository, document: LiveDocument) -> None:
    if not document.key or "/" in document.key:
        raise CopierStoreError(
            f"Cannot save document with key {document.key!r}: keys must be non-empty "
            "and must not contain '/'."
        )
    parent = document.parent
    if parent is None or parent.id is None or repository.get_document_by_id(parent.id) is not parent:
        raise CopierStoreError(
            f"Cannot save document '{document.key}': its parent is not saved. "
            "Save ancestors before their children."
        )