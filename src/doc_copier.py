"""Public SDK surface for the document copier.

This module provides a stable import path for library users.
It re-exports the primary client and typed value models.
"""

from __future__ import annotations

from core.config import CopierConfig
from core.types import (
    AncestorStub,
    DependencyRecord,
    ImportOutcome,
    SnapshotField,
    SnapshotProperty,
    TransferItemResult,
    TransferReport,
)
from dependencies.dependency_resolver import DependencyResolver
from repository.memory_repository import DocumentRepository, InMemoryRepository
from snapshot.portable_snapshot import PortableSnapshot
from snapshot.snapshot_payload import snapshot_from_json, snapshot_to_json
from transfer.copier_sdk import CopierClient
from transfer.exporter import Exporter
from transfer.importer import Importer

__all__ = [
    "AncestorStub",
    "CopierClient",
    "CopierConfig",
    "DependencyRecord",
    "DependencyResolver",
    "DocumentRepository",
    "Exporter",
    "ImportOutcome",
    "Importer",
    "InMemoryRepository",
    "PortableSnapshot",
    "SnapshotField",
    "SnapshotProperty",
    "TransferItemResult",
    "TransferReport",
    "snapshot_from_json",
    "snapshot_to_json",
]
