"""Live document and asset models.

Each document kind is its own class so kind-specific attributes
(link targets, hardlink sources, content masters) stay explicit.
Documents are created through ``create_document`` rather than by
looking classes up from strings at call sites.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from core.constants import FIELD_BEARING_KINDS, KIND_SETTINGS, ROOT_PATH
from core.errors import CopierValidationError
from core.paths import join_path
from core.types import DocumentKind


@dataclass
class LiveField:
    """Editable field value stored on a live document."""

    field_type: str
    data: object = None


@dataclass
class LiveProperty:
    """Property attached to a live document.

    Document and asset typed properties hold the target id in ``data``.
    ``inherited`` marks properties contributed by an ancestor.
    """

    name: str
    property_type: str
    data: object = None
    inheritable: bool = False
    inherited: bool = False


@dataclass
class LiveAsset:
    """Binary asset or asset folder."""

    path: str
    data: bytes = b""
    is_folder: bool = False
    id: int | None = None


@dataclass(eq=False)
class LiveDocument:
    """Base live document.

    Attributes:
        key: Last path segment; empty only for the root document.
        parent: Parent document, ``None`` for the root.
        id: Repository id, assigned on first save.
        fields: Field values keyed by name (field-bearing kinds only).
        properties: Own properties keyed by name.
        settings: Plain per-kind settings keyed by setting name.
    """

    kind: ClassVar[DocumentKind] = "folder"

    key: str
    parent: LiveDocument | None = field(default=None, repr=False)
    id: int | None = None
    fields: dict[str, LiveField] = field(default_factory=dict)
    properties: dict[str, LiveProperty] = field(default_factory=dict)
    settings: dict[str, object] = field(default_factory=dict)

    @property
    def path(self) -> str:
        """Return the canonical tree path derived from the parent chain."""
        if self.parent is None:
            return ROOT_PATH if not self.key else join_path(ROOT_PATH, self.key)
        return join_path(self.parent.path, self.key)

    @property
    def carries_fields(self) -> bool:
        """Return whether this kind stores editable fields."""
        return self.kind in FIELD_BEARING_KINDS

    def supported_settings(self) -> tuple[str, ...]:
        """Return the plain setting names this kind exposes."""
        return KIND_SETTINGS[self.kind]

    def get_setting(self, name: str) -> object:
        """Return a plain setting value, ``None`` when unset."""
        return self.settings.get(name)

    def set_setting(self, name: str, value: object) -> bool:
        """Set a plain setting if this kind exposes it.

        Returns:
            Whether the setting was applied.
        """
        if name not in self.supported_settings():
            return False
        self.settings[name] = value
        return True

    def set_field(self, name: str, field_type: str, data: object) -> None:
        """Store a field value."""
        self.fields[name] = LiveField(field_type=field_type, data=data)

    def set_property(
        self,
        name: str,
        property_type: str,
        data: object,
        inheritable: bool = False,
    ) -> None:
        """Store an own property, replacing any previous value."""
        self.properties[name] = LiveProperty(
            name=name,
            property_type=property_type,
            data=data,
            inheritable=inheritable,
        )


@dataclass(eq=False)
class FolderDocument(LiveDocument):
    kind: ClassVar[DocumentKind] = "folder"


@dataclass(eq=False)
class PageLikeDocument(LiveDocument):
    """Shared base for kinds that render fields."""

    content_master_id: int | None = None


@dataclass(eq=False)
class PageDocument(PageLikeDocument):
    kind: ClassVar[DocumentKind] = "page"


@dataclass(eq=False)
class SnippetDocument(PageLikeDocument):
    kind: ClassVar[DocumentKind] = "snippet"


@dataclass(eq=False)
class EmailDocument(PageLikeDocument):
    kind: ClassVar[DocumentKind] = "email"


@dataclass(eq=False)
class LinkDocument(LiveDocument):
    """Link to another document (internal) or to a URL (direct)."""

    kind: ClassVar[DocumentKind] = "link"

    internal_id: int | None = None
    direct_link: str | None = None


@dataclass(eq=False)
class HardlinkDocument(LiveDocument):
    """Hardlink that mirrors a source document."""

    kind: ClassVar[DocumentKind] = "hardlink"

    source_id: int | None = None

    @property
    def children_from_source(self) -> bool:
        return bool(self.settings.get("childrenFromSource"))


DOCUMENT_CLASSES: dict[str, type[LiveDocument]] = {
    "folder": FolderDocument,
    "page": PageDocument,
    "snippet": SnippetDocument,
    "email": EmailDocument,
    "link": LinkDocument,
    "hardlink": HardlinkDocument,
}


def create_document(kind: str, key: str) -> LiveDocument:
    """Create an unsaved document of the given kind.

    Args:
        kind: Document kind tag.
        key: Last path segment of the new document.

    Returns:
        New unsaved document without a parent.

    Raises:
        CopierValidationError: If the kind is not supported.
    """
    document_class = DOCUMENT_CLASSES.get(kind)
    if document_class is None:
        supported = ", ".join(DOCUMENT_CLASSES)
        raise CopierValidationError(
            f"Unsupported document kind '{kind}'. Choose one of: {supported}."
        )
    return document_class(key=key)
