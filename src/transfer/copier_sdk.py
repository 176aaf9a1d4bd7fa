"""Python SDK for document copier operations.

This module exposes high-level APIs for exporting and importing document
trees, inspecting dependencies, syncing transfer roots with S3, and
running transfer plans against one live repository.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from core.config import CopierConfig
from core.errors import CopierValidationError
from core.paths import canonical_path
from core.transfer_plan_execution import TransferPlanResult, execute_transfer_plan_file
from core.types import DependencyRecord, ImportOutcome, TransferReport
from repository.memory_repository import DocumentRepository, InMemoryRepository
from snapshot.portable_snapshot import PortableSnapshot
from transfer.exporter import Exporter
from transfer.file_store import TransferFileStore
from transfer.importer import Importer
from transfer.s3_sync import pull_transfer_root, push_transfer_root
from transfer.transfer_service import TransferService


class CopierClient:
    """Primary SDK entry point for copier workflows."""

    def __init__(
        self,
        config: CopierConfig | None = None,
        repository: DocumentRepository | None = None,
    ) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration; read from env when omitted.
            repository: Live repository; a fresh in-memory one when omitted.
        """
        self._config = config or CopierConfig.from_env()
        self._repository: DocumentRepository = (
            repository if repository is not None else InMemoryRepository()
        )
        self._file_store = TransferFileStore(self._config.transfer_root)
        self._service = TransferService(self._repository, self._file_store)

    @property
    def config(self) -> CopierConfig:
        return self._config

    @property
    def repository(self) -> DocumentRepository:
        return self._repository

    @property
    def file_store(self) -> TransferFileStore:
        return self._file_store

    def export_document(self, path: str) -> PortableSnapshot:
        """Export one live document to a snapshot without writing files.

        Raises:
            CopierValidationError: If the path is invalid or no document exists there.
        """
        document_path = canonical_path(path)
        document = self._repository.get_document_by_path(document_path)
        if document is None:
            raise CopierValidationError(
                f"Document {document_path} does not exist. Check the path and the repository state."
            )
        return Exporter(self._repository).export(document)

    def import_snapshot(self, snapshot: PortableSnapshot) -> ImportOutcome:
        """Import one snapshot into the live repository."""
        return Importer(self._repository).import_snapshot(snapshot)

    def export_tree(self, path: str, depth: int | None = None) -> TransferReport:
        """Export a document and its dependencies to the transfer root.

        Args:
            path: Root document path.
            depth: Dependency depth; config default when omitted.

        Returns:
            Per-item transfer report.
        """
        return self._service.export_tree(path, self._resolve_depth(depth))

    def import_tree(self, path: str, depth: int | None = None) -> TransferReport:
        """Import a document and its dependencies from the transfer root.

        Args:
            path: Root document path.
            depth: Dependency depth; config default when omitted.

        Returns:
            Per-item transfer report, root last.
        """
        return self._service.import_tree(path, self._resolve_depth(depth))

    def list_dependencies(
        self,
        path: str,
        depth: int | None = None,
        from_snapshots: bool = False,
    ) -> list[DependencyRecord]:
        """Resolve ordered dependencies of a live document or stored snapshot."""
        return self._service.list_dependencies(path, self._resolve_depth(depth), from_snapshots)

    def push(self, output_uri: str) -> int:
        """Upload the transfer root to ``s3://bucket/prefix``; returns file count."""
        return push_transfer_root(self._config.transfer_root, output_uri, self._config)

    def pull(self, input_uri: str) -> int:
        """Download ``s3://bucket/prefix`` into the transfer root; returns file count."""
        return pull_transfer_root(input_uri, self._config.transfer_root, self._config)

    def with_transfer_root(self, transfer_root: str) -> "CopierClient":
        """Clone the client with a different transfer root.

        The clone shares this client's live repository.

        Args:
            transfer_root: New transfer root path.

        Returns:
            New SDK client instance.
        """
        resolved_root = Path(transfer_root).expanduser().resolve()
        updated_config = replace(self._config, transfer_root=resolved_root)
        return CopierClient(updated_config, self._repository)

    def run_plan(self, plan_file: str) -> TransferPlanResult:
        """Execute a YAML transfer plan through the shared execution engine.

        Args:
            plan_file: Path to YAML plan file.

        Returns:
            Output lines and failed item count.
        """
        return execute_transfer_plan_file(self, plan_file)

    def _resolve_depth(self, depth: int | None) -> int:
        return self._config.default_depth if depth is None else depth
