"""Batch export and import of dependency trees through a transfer root.

Exports write the root snapshot and, when depth allows, every resolved
dependency. Imports pre-create every document identity before any
content is applied, so documents that reference each other resolve.
"""

from __future__ import annotations

from core.errors import CopierError, CopierValidationError
from core.logging_config import get_logger
from core.paths import canonical_path, validate_depth
from core.types import (
    DependencyKind,
    DependencyRecord,
    ImportOutcome,
    TransferItemResult,
    TransferReport,
)
from dependencies.dependency_resolver import DependencyResolver
from repository.memory_repository import DocumentRepository
from repository.models import LiveDocument
from snapshot.portable_snapshot import PortableSnapshot
from transfer.exporter import Exporter
from transfer.file_store import TransferFileStore
from transfer.importer import Importer

_LOGGER = get_logger(__name__)


class TransferService:
    """Moves document trees between a repository and a transfer root."""

    def __init__(self, repository: DocumentRepository, file_store: TransferFileStore) -> None:
        """Initialize the service.

        Args:
            repository: Live repository to export from or import into.
            file_store: Transfer root holding snapshots and asset bytes.
        """
        self._repository = repository
        self._file_store = file_store
        self._live_resolver = DependencyResolver(repository)
        self._exporter = Exporter(repository, self._live_resolver)
        self._importer = Importer(repository)

    def export_tree(self, root_path: str, depth: int) -> TransferReport:
        """Export a document and its dependencies up to ``depth`` hops.

        Args:
            root_path: Path of the document to export.
            depth: Dependency depth; 0 exports only the document.

        Returns:
            Report with one item per exported document or asset.

        Raises:
            CopierValidationError: If the path, depth, or document is invalid.
        """
        path = canonical_path(root_path)
        max_depth = validate_depth(depth)
        document = self._require_document(path)
        items = [self._export_document(document)]
        dependencies: list[DependencyRecord] = []
        if max_depth > 0:
            dependencies = self._live_resolver.find_dependencies(document, max_depth)
            _LOGGER.info("dependencies_resolved", path=path, depth=max_depth, count=len(dependencies))
            items.extend(self._export_dependency(record) for record in dependencies)
        return _finish("export_finished", path, max_depth, dependencies, items)

    def import_tree(self, root_path: str, depth: int) -> TransferReport:
        """Import a document and its dependencies from the transfer root.

        Args:
            root_path: Path of the root snapshot to import.
            depth: Dependency depth; 0 imports only the root snapshot.

        Returns:
            Report with one item per imported document or asset; the
            root document is the last item.

        Raises:
            CopierValidationError: If the path or depth is invalid.
            CopierIOError: If the root snapshot file is missing.
            CopierSnapshotError: If the root snapshot cannot be decoded.
        """
        path = canonical_path(root_path)
        max_depth = validate_depth(depth)
        loader = _CachingSnapshotLoader(self._file_store)
        root_snapshot = loader(path)
        if max_depth == 0:
            items = [_outcome_item(self._importer.import_snapshot(root_snapshot))]
            return _finish("import_finished", path, max_depth, [], items)
        resolver = DependencyResolver(self._repository, snapshot_loader=loader)
        dependencies = resolver.find_dependencies(root_snapshot, max_depth)
        _LOGGER.info("dependencies_resolved", path=path, depth=max_depth, count=len(dependencies))
        snapshots, load_errors = _load_document_snapshots(loader, dependencies)
        self._init_identity(root_snapshot)
        for snapshot in snapshots.values():
            self._init_identity(snapshot)
        items: list[TransferItemResult] = []
        for record in dependencies:
            if record.kind == "asset":
                items.append(self._import_asset(record.path))
            elif record.path in load_errors:
                items.append(_item("document", record.path, False, load_errors[record.path]))
            else:
                items.append(_outcome_item(self._importer.import_snapshot(snapshots[record.path])))
        items.append(_outcome_item(self._importer.import_snapshot(root_snapshot)))
        return _finish("import_finished", path, max_depth, dependencies, items)

    def list_dependencies(
        self,
        root_path: str,
        depth: int,
        from_snapshots: bool = False,
    ) -> list[DependencyRecord]:
        """Resolve dependencies without transferring anything.

        Args:
            root_path: Document path to inspect.
            depth: Dependency depth.
            from_snapshots: Resolve over the transfer root instead of the
                live repository.

        Returns:
            Ordered dependency records.
        """
        path = canonical_path(root_path)
        max_depth = validate_depth(depth)
        if from_snapshots:
            loader = _CachingSnapshotLoader(self._file_store)
            resolver = DependencyResolver(self._repository, snapshot_loader=loader)
            return resolver.find_dependencies(loader(path), max_depth)
        return self._live_resolver.find_dependencies(self._require_document(path), max_depth)

    def _require_document(self, path: str) -> LiveDocument:
        document = self._repository.get_document_by_path(path)
        if document is None:
            raise CopierValidationError(
                f"Document {path} does not exist. Check the path and the repository state."
            )
        return document

    def _export_document(self, document: LiveDocument) -> TransferItemResult:
        try:
            file_path = self._file_store.save_snapshot(self._exporter.export(document))
        except CopierError as error:
            _LOGGER.error("document_export_failed", path=document.path, error=str(error))
            return _item("document", document.path, False, str(error))
        return _item("document", document.path, True, str(file_path))

    def _export_dependency(self, record: DependencyRecord) -> TransferItemResult:
        if record.kind == "document":
            document = self._repository.get_document_by_path(record.path)
            if document is None:
                return _item("document", record.path, False, "Document no longer exists.")
            return self._export_document(document)
        asset = self._repository.get_asset_by_path(record.path)
        if asset is None:
            return _item("asset", record.path, False, "Asset no longer exists.")
        try:
            file_path = self._file_store.save_asset(asset)
        except CopierError as error:
            _LOGGER.error("asset_export_failed", path=record.path, error=str(error))
            return _item("asset", record.path, False, str(error))
        return _item("asset", record.path, True, str(file_path))

    def _import_asset(self, path: str) -> TransferItemResult:
        try:
            asset = self._file_store.load_asset(path, self._repository)
        except CopierError as error:
            _LOGGER.error("asset_import_failed", path=path, error=str(error))
            return _item("asset", path, False, str(error))
        return _item("asset", path, True, f"asset id {asset.id}")

    def _init_identity(self, snapshot: PortableSnapshot) -> None:
        try:
            self._importer.init_document(snapshot, persist=True)
        except CopierError as error:
            _LOGGER.warning("identity_init_failed", path=snapshot.path, error=str(error))


class _CachingSnapshotLoader:
    """Loads each snapshot from the transfer root at most once per run."""

    def __init__(self, file_store: TransferFileStore) -> None:
        self._file_store = file_store
        self._snapshots: dict[str, PortableSnapshot] = {}

    def __call__(self, path: str) -> PortableSnapshot:
        if path not in self._snapshots:
            self._snapshots[path] = self._file_store.load_snapshot(path)
        return self._snapshots[path]


def _load_document_snapshots(
    loader: _CachingSnapshotLoader,
    dependencies: list[DependencyRecord],
) -> tuple[dict[str, PortableSnapshot], dict[str, str]]:
    snapshots: dict[str, PortableSnapshot] = {}
    errors: dict[str, str] = {}
    for record in dependencies:
        if record.kind != "document":
            continue
        try:
            snapshots[record.path] = loader(record.path)
        except CopierError as error:
            _LOGGER.error("snapshot_load_failed", path=record.path, error=str(error))
            errors[record.path] = str(error)
    return snapshots, errors


def _outcome_item(outcome: ImportOutcome) -> TransferItemResult:
    detail = outcome.state if outcome.error is None else f"{outcome.state}: {outcome.error}"
    return _item("document", outcome.path, outcome.succeeded, detail)


def _item(kind: DependencyKind, path: str, succeeded: bool, detail: str) -> TransferItemResult:
    return TransferItemResult(kind=kind, path=path, succeeded=succeeded, detail=detail)


def _finish(
    event: str,
    path: str,
    depth: int,
    dependencies: list[DependencyRecord],
    items: list[TransferItemResult],
) -> TransferReport:
    report = TransferReport(
        root_path=path,
        depth=depth,
        dependencies=tuple(dependencies),
        items=tuple(items),
    )
    _LOGGER.info(
        event,
        path=path,
        depth=depth,
        item_count=len(report.items),
        failed_count=report.failed_count,
    )
    return report
