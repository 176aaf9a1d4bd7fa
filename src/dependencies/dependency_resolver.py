"""Direct and transitive dependency resolution.

The resolver works on live documents (export side) and on portable
snapshots (import side, where live objects do not exist yet). Results
are ordered assets first, then by path length, so callers can create
every referenced identity before anything points at it.
"""

from __future__ import annotations

from typing import Callable, Iterable, Union

from core.constants import (
    CHILD_DOCUMENT_REASON,
    CONTENT_MASTER_REASON,
    HARDLINK_SOURCE_REASON,
    INTERNAL_LINK_REASON,
    INTERNAL_LINK_TYPE,
    LINK_TYPE_SETTING,
    SUPPORTED_DOCUMENT_KINDS,
)
from core.errors import CopierError, CopierValidationError
from core.logging_config import get_logger
from core.types import DependencyRecord
from elements.element_codecs import field_dependency
from repository.memory_repository import DocumentRepository
from repository.models import HardlinkDocument, LinkDocument, LiveDocument, PageLikeDocument
from snapshot.portable_snapshot import PortableSnapshot

_LOGGER = get_logger(__name__)

DependencyNode = Union[LiveDocument, PortableSnapshot]
SnapshotLoader = Callable[[str], PortableSnapshot]


class DependencyResolver:
    """Finds direct and depth-bounded transitive dependencies."""

    def __init__(
        self,
        repository: DocumentRepository,
        snapshot_loader: SnapshotLoader | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            repository: Live repository used for live-node traversal.
            snapshot_loader: Loads a snapshot by path for snapshot traversal.
        """
        self._repository = repository
        self._snapshot_loader = snapshot_loader

    def find_direct_dependencies(self, node: DependencyNode) -> list[DependencyRecord]:
        """Return one-hop dependencies of a node.

        Live documents are inspected in a fixed order: children, properties,
        settings links, field references, content master. Snapshots return
        the dependency list stored at export time.

        Raises:
            CopierValidationError: If node is neither a document nor a snapshot.
        """
        if isinstance(node, PortableSnapshot):
            return list(node.dependencies)
        if not isinstance(node, LiveDocument):
            raise CopierValidationError(
                f"Cannot resolve dependencies of {type(node).__name__}: "
                "expected a live document or a portable snapshot."
            )
        dependencies = self._children_dependencies(node)
        dependencies.extend(self._property_dependencies(node))
        dependencies.extend(self._settings_dependencies(node))
        dependencies.extend(self._field_dependencies(node))
        dependencies.extend(self._content_master_dependencies(node))
        return dependencies

    def find_dependencies(
        self,
        node: DependencyNode,
        max_depth: int,
        found: Iterable[DependencyRecord] = (),
    ) -> list[DependencyRecord]:
        """Return the depth-bounded transitive dependency closure of a node.

        Args:
            node: Live document or snapshot to start from.
            max_depth: Number of hops to follow; 0 yields no dependencies.
            found: Records already discovered by the caller.

        Returns:
            Each dependency at most once, assets before documents and
            shorter paths before longer ones.
        """
        accumulated = list(found)
        self._expand(node, max_depth, accumulated, node.path)
        return sort_dependencies(accumulated)

    def _expand(
        self,
        node: DependencyNode,
        depth: int,
        accumulated: list[DependencyRecord],
        root_path: str,
    ) -> None:
        if depth <= 0:
            return
        try:
            direct = self.find_direct_dependencies(node)
        except CopierError as error:
            _LOGGER.warning("dependency_discovery_failed", path=node.path, error=str(error))
            return
        known = {record.path for record in accumulated}
        known.update((node.path, root_path))
        survivors: list[DependencyRecord] = []
        for record in direct:
            if record.path in known:
                continue
            known.add(record.path)
            survivors.append(record)
        accumulated.extend(survivors)
        for record in survivors:
            if record.kind != "document":
                continue
            dependency = self._load_node(node, record)
            if dependency is not None:
                self._expand(dependency, depth - 1, accumulated, root_path)

    def _load_node(self, parent: DependencyNode, record: DependencyRecord) -> DependencyNode | None:
        if isinstance(parent, LiveDocument):
            document = self._repository.get_document_by_path(record.path)
            if document is None:
                _LOGGER.warning("dependency_not_found", path=record.path, reason=record.reason)
            return document
        if self._snapshot_loader is None:
            _LOGGER.warning("dependency_loader_missing", path=record.path)
            return None
        try:
            return self._snapshot_loader(record.path)
        except CopierError as error:
            _LOGGER.warning(
                "dependency_snapshot_unavailable",
                path=record.path,
                reason=record.reason,
                error=str(error),
            )
            return None

    def _children_dependencies(self, document: LiveDocument) -> list[DependencyRecord]:
        if isinstance(document, HardlinkDocument) and document.children_from_source:
            return []
        return [
            DependencyRecord(kind="document", path=child.path, reason=CHILD_DOCUMENT_REASON)
            for child in self._repository.children_of(document)
            if child.kind in SUPPORTED_DOCUMENT_KINDS
        ]

    def _property_dependencies(self, document: LiveDocument) -> list[DependencyRecord]:
        dependencies: list[DependencyRecord] = []
        for name, prop in self._repository.properties_of(document).items():
            if prop.inherited:
                continue
            reason = f"Property '{name}'"
            if prop.property_type == "asset":
                asset = self._repository.get_asset_by_id(prop.data)
                if asset is not None:
                    dependencies.append(DependencyRecord(kind="asset", path=asset.path, reason=reason))
            elif prop.property_type == "document":
                target = self._repository.get_document_by_id(prop.data)
                if target is not None:
                    dependencies.append(
                        DependencyRecord(kind="document", path=target.path, reason=reason)
                    )
        return dependencies

    def _settings_dependencies(self, document: LiveDocument) -> list[DependencyRecord]:
        if isinstance(document, LinkDocument):
            if document.get_setting(LINK_TYPE_SETTING) != INTERNAL_LINK_TYPE:
                return []
            target = self._repository.get_document_by_id(document.internal_id)
            reason = INTERNAL_LINK_REASON
        elif isinstance(document, HardlinkDocument):
            target = self._repository.get_document_by_id(document.source_id)
            reason = HARDLINK_SOURCE_REASON
        else:
            return []
        if target is None:
            return []
        return [DependencyRecord(kind="document", path=target.path, reason=reason)]

    def _field_dependencies(self, document: LiveDocument) -> list[DependencyRecord]:
        if not document.carries_fields:
            return []
        dependencies: list[DependencyRecord] = []
        for name, live_field in document.fields.items():
            record = field_dependency(name, live_field, self._repository)
            if record is not None:
                dependencies.append(record)
        return dependencies

    def _content_master_dependencies(self, document: LiveDocument) -> list[DependencyRecord]:
        if not isinstance(document, PageLikeDocument):
            return []
        master = self._repository.get_document_by_id(document.content_master_id)
        if master is None:
            return []
        return [DependencyRecord(kind="document", path=master.path, reason=CONTENT_MASTER_REASON)]


def sort_dependencies(records: Iterable[DependencyRecord]) -> list[DependencyRecord]:
    """Stable-sort records: assets first, then shorter paths first."""
    return sorted(records, key=lambda record: (record.kind == "document", len(record.path)))
