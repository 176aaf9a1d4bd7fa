"""Live document to portable snapshot projection.

Export is best effort: a field or reference that cannot be projected is
logged and left out, but the document itself always yields a snapshot.
"""

from __future__ import annotations

from core.constants import (
    DIRECT_LINK_TYPE,
    HARDLINK_SOURCE_SETTING,
    INTERNAL_LINK_TYPE,
    LINK_TARGET_SETTING,
    LINK_TYPE_SETTING,
    REFERENCE_PROPERTY_TYPES,
    SUPPORTED_FIELD_TYPES,
    SUPPORTED_PROPERTY_TYPES,
)
from core.errors import CopierError
from core.logging_config import get_logger
from core.types import AncestorStub, DependencyRecord, SnapshotField, SnapshotProperty
from dependencies.dependency_resolver import DependencyResolver
from elements.element_codecs import decode_field
from repository.memory_repository import DocumentRepository
from repository.models import HardlinkDocument, LinkDocument, LiveDocument, LiveProperty
from snapshot.portable_snapshot import PortableSnapshot

_LOGGER = get_logger(__name__)


class Exporter:
    """Builds portable snapshots from live documents."""

    def __init__(
        self,
        repository: DocumentRepository,
        resolver: DependencyResolver | None = None,
    ) -> None:
        """Initialize the exporter.

        Args:
            repository: Source repository for reference lookups.
            resolver: Resolver for one-hop dependencies; built from the
                repository when omitted.
        """
        self._repository = repository
        self._resolver = resolver or DependencyResolver(repository)

    def export(self, document: LiveDocument) -> PortableSnapshot:
        """Project a live document into a snapshot.

        Args:
            document: Saved live document.

        Returns:
            Snapshot with direct (one-hop) dependencies attached.
        """
        snapshot = PortableSnapshot(
            path=document.path,
            kind=document.kind,
            fields=self._export_fields(document),
            properties=self._export_properties(document),
            settings=self._export_settings(document),
            ancestors=_export_ancestors(document),
            dependencies=self._export_dependencies(document),
        )
        _LOGGER.info(
            "snapshot_exported",
            path=snapshot.path,
            kind=snapshot.kind,
            field_count=len(snapshot.fields),
            dependency_count=len(snapshot.dependencies),
        )
        return snapshot

    def _export_fields(self, document: LiveDocument) -> dict[str, SnapshotField]:
        if not document.carries_fields:
            return {}
        fields: dict[str, SnapshotField] = {}
        for name, live_field in document.fields.items():
            if live_field.field_type not in SUPPORTED_FIELD_TYPES:
                _LOGGER.debug(
                    "element_type_unsupported",
                    path=document.path,
                    element=name,
                    element_type=live_field.field_type,
                )
                continue
            try:
                data = decode_field(live_field, self._repository)
            except CopierError as error:
                _LOGGER.warning(
                    "element_export_skipped",
                    path=document.path,
                    element=name,
                    element_type=live_field.field_type,
                    error=str(error),
                )
                continue
            fields[name] = SnapshotField(field_type=live_field.field_type, data=data)
        return fields

    def _export_properties(self, document: LiveDocument) -> dict[str, SnapshotProperty]:
        properties: dict[str, SnapshotProperty] = {}
        for name, prop in self._repository.properties_of(document).items():
            if prop.inherited or prop.property_type not in SUPPORTED_PROPERTY_TYPES:
                continue
            properties[name] = SnapshotProperty(
                property_type=prop.property_type,
                data=self._export_property_data(prop),
                inheritable=prop.inheritable,
            )
        return properties

    def _export_property_data(self, prop: LiveProperty) -> object:
        if prop.property_type not in REFERENCE_PROPERTY_TYPES:
            return prop.data
        if prop.property_type == "document":
            target = self._repository.get_document_by_id(prop.data)
        else:
            target = self._repository.get_asset_by_id(prop.data)
        return target.path if target is not None else None

    def _export_settings(self, document: LiveDocument) -> dict[str, object]:
        settings = {name: document.get_setting(name) for name in document.supported_settings()}
        if isinstance(document, LinkDocument):
            settings[LINK_TARGET_SETTING] = self._export_link_target(document)
        elif isinstance(document, HardlinkDocument):
            source = self._repository.get_document_by_id(document.source_id)
            settings[HARDLINK_SOURCE_SETTING] = source.path if source is not None else None
        return settings

    def _export_link_target(self, document: LinkDocument) -> str | None:
        link_type = document.get_setting(LINK_TYPE_SETTING)
        if link_type == INTERNAL_LINK_TYPE:
            target = self._repository.get_document_by_id(document.internal_id)
            return target.path if target is not None else None
        if link_type == DIRECT_LINK_TYPE:
            return document.direct_link
        return None

    def _export_dependencies(self, document: LiveDocument) -> list[DependencyRecord]:
        try:
            return self._resolver.find_direct_dependencies(document)
        except CopierError as error:
            _LOGGER.error("dependency_export_failed", path=document.path, error=str(error))
            return []


def _export_ancestors(document: LiveDocument) -> list[AncestorStub]:
    """Return ancestor stubs ordered root-to-parent."""
    stubs: list[AncestorStub] = []
    parent = document.parent
    while parent is not None:
        stubs.append(AncestorStub(path=parent.path, kind=parent.kind))
        parent = parent.parent
    stubs.reverse()
    return stubs
