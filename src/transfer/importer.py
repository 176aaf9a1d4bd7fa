"""Portable snapshot to live document materialization.

Import runs in two phases. ``init_document`` gives a snapshot a live
identity at its path (creating missing ancestors, replacing an object of
another kind) so other documents can reference it. ``import_snapshot``
then populates fields, settings, and properties and persists the result.
"""

from __future__ import annotations

from typing import Iterator

from core.constants import (
    DIRECT_LINK_TYPE,
    HARDLINK_SOURCE_SETTING,
    INTERNAL_LINK_TYPE,
    LINK_TARGET_SETTING,
    LINK_TYPE_SETTING,
    ROOT_PATH,
)
from core.errors import CopierError, CopierStoreError
from core.logging_config import get_logger
from core.paths import join_path, parent_path, path_key
from core.types import ImportOutcome, ImportState, SnapshotProperty
from elements.element_codecs import encode_field
from repository.memory_repository import DocumentRepository
from repository.models import HardlinkDocument, LinkDocument, LiveDocument, create_document
from snapshot.portable_snapshot import PortableSnapshot

_LOGGER = get_logger(__name__)


class Importer:
    """Applies portable snapshots to a target repository."""

    def __init__(self, repository: DocumentRepository) -> None:
        """Initialize the importer.

        Args:
            repository: Target repository receiving imported documents.
        """
        self._repository = repository

    def init_document(self, snapshot: PortableSnapshot, persist: bool = False) -> LiveDocument:
        """Materialize the live identity for a snapshot.

        Existing documents of the same kind are returned as they are, so
        calling this twice is harmless. A document of a different kind at
        the same path is deleted with its subtree and recreated.

        Args:
            snapshot: Snapshot whose path and kind define the identity.
            persist: Whether to save the document before returning.

        Returns:
            Live document at the snapshot path.

        Raises:
            CopierValidationError: If a kind cannot be instantiated.
            CopierStoreError: If the repository rejects a save or delete.
        """
        document = self._repository.get_document_by_path(snapshot.path)
        if document is not None and document.kind != snapshot.kind:
            _LOGGER.info(
                "document_replaced",
                path=snapshot.path,
                old_kind=document.kind,
                new_kind=snapshot.kind,
            )
            self._repository.delete_document(document)
            document = None
        if document is None:
            parent = self._materialize_ancestors(snapshot)
            document = create_document(snapshot.kind, path_key(snapshot.path))
            document.parent = parent
        if persist:
            self._repository.save_document(document)
        return document

    def import_snapshot(self, snapshot: PortableSnapshot) -> ImportOutcome:
        """Import one snapshot and persist it.

        Codec and reference failures skip the affected entry. Identity and
        storage failures end the import in a failed state; nothing is raised.

        Args:
            snapshot: Snapshot to import.

        Returns:
            Terminal import outcome.
        """
        try:
            document = self.init_document(snapshot)
        except CopierError as error:
            return _failed(snapshot, "identity-creation-failed", error)
        _log_state(snapshot, "identity-created")
        if document.carries_fields:
            self._import_fields(snapshot, document)
        self._import_settings(snapshot, document)
        self._import_properties(snapshot, document)
        _log_state(snapshot, "fields-populated")
        try:
            self._repository.save_document(document)
        except CopierStoreError as error:
            return _failed(snapshot, "persist-failed", error)
        _LOGGER.info("document_imported", path=snapshot.path, kind=snapshot.kind, id=document.id)
        return ImportOutcome(path=snapshot.path, state="persisted", document=document)

    def _materialize_ancestors(self, snapshot: PortableSnapshot) -> LiveDocument:
        """Fold over the ancestor chain, creating missing ancestors in order."""
        recorded_kinds = {stub.path: stub.kind for stub in snapshot.ancestors}
        parent = self._repository.get_document_by_path(ROOT_PATH)
        if parent is None:
            raise CopierStoreError(
                "Target repository has no root document. Initialize the repository first."
            )
        for ancestor_path in _ancestor_paths(snapshot.path):
            ancestor = self._repository.get_document_by_path(ancestor_path)
            if ancestor is None:
                ancestor = create_document(
                    recorded_kinds.get(ancestor_path, "folder"), path_key(ancestor_path)
                )
                ancestor.parent = parent
                self._repository.save_document(ancestor)
                _LOGGER.info("ancestor_created", path=ancestor_path, kind=ancestor.kind)
            parent = ancestor
        return parent

    def _import_fields(self, snapshot: PortableSnapshot, document: LiveDocument) -> None:
        for name, snapshot_field in snapshot.fields.items():
            try:
                encode_field(name, snapshot_field, document, self._repository)
            except CopierError as error:
                _LOGGER.warning(
                    "element_import_skipped",
                    path=snapshot.path,
                    element=name,
                    element_type=snapshot_field.field_type,
                    error=str(error),
                )

    def _import_settings(self, snapshot: PortableSnapshot, document: LiveDocument) -> None:
        settings = snapshot.settings
        for name, value in settings.items():
            document.set_setting(name, value)
        if isinstance(document, LinkDocument):
            self._import_link_target(snapshot, document)
        elif isinstance(document, HardlinkDocument):
            source_path = settings.get(HARDLINK_SOURCE_SETTING)
            source = self._repository.get_document_by_path(source_path)
            if source is not None:
                document.source_id = source.id
            elif source_path is not None:
                _log_unresolved(snapshot, HARDLINK_SOURCE_SETTING, source_path)

    def _import_link_target(self, snapshot: PortableSnapshot, document: LinkDocument) -> None:
        settings = snapshot.settings
        target_path = settings.get(LINK_TARGET_SETTING)
        link_type = settings.get(LINK_TYPE_SETTING)
        if link_type == INTERNAL_LINK_TYPE:
            target = self._repository.get_document_by_path(target_path)
            if target is not None:
                document.internal_id = target.id
            elif target_path is not None:
                _log_unresolved(snapshot, LINK_TARGET_SETTING, target_path)
        elif link_type == DIRECT_LINK_TYPE:
            document.direct_link = target_path if isinstance(target_path, str) else None

    def _import_properties(self, snapshot: PortableSnapshot, document: LiveDocument) -> None:
        for name, prop in snapshot.properties.items():
            document.set_property(
                name,
                prop.property_type,
                self._import_property_data(snapshot, name, prop),
                inheritable=prop.inheritable,
            )

    def _import_property_data(
        self,
        snapshot: PortableSnapshot,
        name: str,
        prop: SnapshotProperty,
    ) -> object:
        if prop.property_type == "document":
            target = self._repository.get_document_by_path(prop.data)
        elif prop.property_type == "asset":
            target = self._repository.get_asset_by_path(prop.data)
        else:
            return prop.data
        if target is None:
            if prop.data is not None:
                _log_unresolved(snapshot, f"property:{name}", prop.data)
            return None
        return target.id


def _ancestor_paths(path: str) -> Iterator[str]:
    """Yield the non-root ancestor paths of a canonical path, root-to-parent."""
    current = ROOT_PATH
    for key in parent_path(path).split("/"):
        if not key:
            continue
        current = join_path(current, key)
        yield current


def _failed(snapshot: PortableSnapshot, state: ImportState, error: CopierError) -> ImportOutcome:
    _LOGGER.error("document_import_failed", path=snapshot.path, state=state, error=str(error))
    return ImportOutcome(path=snapshot.path, state=state, error=str(error))


def _log_state(snapshot: PortableSnapshot, state: ImportState) -> None:
    _LOGGER.debug("import_state_changed", path=snapshot.path, state=state)


def _log_unresolved(snapshot: PortableSnapshot, reference: str, target: object) -> None:
    _LOGGER.warning(
        "reference_unresolved",
        path=snapshot.path,
        reference=reference,
        target=str(target),
    )
