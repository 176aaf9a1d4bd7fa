"""Shared typed models.

This module defines the closed tag sets and immutable value models used
by the snapshot, dependency, and transfer layers to keep interfaces
explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from repository.models import LiveDocument

DocumentKind = Literal["folder", "page", "snippet", "link", "hardlink", "email"]
FieldType = Literal[
    "input",
    "textarea",
    "wysiwyg",
    "checkbox",
    "date",
    "image",
    "link",
    "numeric",
    "table",
    "multiselect",
    "select",
    "snippet",
    "block",
    "area",
    "areablock",
]
PropertyType = Literal["text", "bool", "document", "asset"]
DependencyKind = Literal["asset", "document"]
ImportState = Literal[
    "absent",
    "identity-created",
    "fields-populated",
    "persisted",
    "identity-creation-failed",
    "persist-failed",
]


@dataclass(frozen=True)
class DependencyRecord:
    """One-hop reference from a node to another document or asset.

    Attributes:
        kind: Whether the target is a document or an asset.
        path: Canonical tree path of the target.
        reason: Human-readable provenance, used for diagnostics only.
    """

    kind: DependencyKind
    path: str
    reason: str


@dataclass(frozen=True)
class AncestorStub:
    """Minimal descriptor of a node that must exist above a document."""

    path: str
    kind: DocumentKind


@dataclass(frozen=True)
class SnapshotField:
    """Portable representation of one document field."""

    field_type: FieldType
    data: object


@dataclass(frozen=True)
class SnapshotProperty:
    """Portable representation of one non-inherited document property."""

    property_type: PropertyType
    data: object
    inheritable: bool


@dataclass(frozen=True)
class ImportOutcome:
    """Result of importing one snapshot.

    Attributes:
        path: Snapshot path that was imported.
        state: Terminal state reached by the import.
        document: Live document when the import persisted.
        error: Failure description for failed states.
    """

    path: str
    state: ImportState
    document: "LiveDocument | None" = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        """Return whether the snapshot was persisted."""
        return self.state == "persisted"


@dataclass(frozen=True)
class TransferItemResult:
    """Outcome of transferring one document or asset in a batch."""

    kind: DependencyKind
    path: str
    succeeded: bool
    detail: str


@dataclass(frozen=True)
class TransferReport:
    """Summary of a batch export or import.

    Attributes:
        root_path: Root document path of the batch.
        depth: Dependency depth used for the batch.
        dependencies: Resolved dependency list in processing order.
        items: Per-item outcomes in processing order.
    """

    root_path: str
    depth: int
    dependencies: tuple[DependencyRecord, ...] = ()
    items: tuple[TransferItemResult, ...] = field(default_factory=tuple)

    @property
    def failed_count(self) -> int:
        """Return the number of failed items."""
        return sum(1 for item in self.items if not item.succeeded)
