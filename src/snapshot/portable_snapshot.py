"""Portable snapshot value model.

A ``PortableSnapshot`` is the unit of transfer between environments.
Every setter filters its input against the supported tag sets, so a
snapshot never holds entries outside its allow-lists, no matter whether
it was built by the exporter or decoded from a file.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, cast

from core.constants import (
    SUPPORTED_DEPENDENCY_KINDS,
    SUPPORTED_DOCUMENT_KINDS,
    SUPPORTED_FIELD_TYPES,
    SUPPORTED_PROPERTY_TYPES,
    SUPPORTED_SETTINGS,
)
from core.errors import CopierValidationError
from core.paths import canonical_path
from core.types import (
    AncestorStub,
    DependencyRecord,
    DocumentKind,
    SnapshotField,
    SnapshotProperty,
)


class PortableSnapshot:
    """Validated, filtered projection of one live document."""

    def __init__(
        self,
        path: str,
        kind: str,
        fields: Mapping[str, object] | None = None,
        properties: Mapping[str, object] | None = None,
        settings: Mapping[str, object] | None = None,
        ancestors: Iterable[object] | Mapping[str, str] | None = None,
        dependencies: Iterable[object] | None = None,
    ) -> None:
        self.path = path
        self.kind = kind
        self.fields = fields or {}
        self.properties = properties or {}
        self.settings = settings or {}
        self.ancestors = ancestors or ()
        self.dependencies = dependencies or ()

    @property
    def path(self) -> str:
        """Canonical tree path of the document."""
        return self._path

    @path.setter
    def path(self, value: str) -> None:
        self._path = canonical_path(value)

    @property
    def kind(self) -> DocumentKind:
        """Document kind tag."""
        return self._kind

    @kind.setter
    def kind(self, value: str) -> None:
        if value not in SUPPORTED_DOCUMENT_KINDS:
            supported = ", ".join(SUPPORTED_DOCUMENT_KINDS)
            raise CopierValidationError(
                f"Unsupported document kind '{value}' for {self._path}. "
                f"Choose one of: {supported}."
            )
        self._kind = cast(DocumentKind, value)

    @property
    def fields(self) -> dict[str, SnapshotField]:
        """Field values keyed by name (returns a copy)."""
        return dict(self._fields)

    @fields.setter
    def fields(self, value: Mapping[str, object]) -> None:
        filtered: dict[str, SnapshotField] = {}
        for name, raw_field in value.items():
            snapshot_field = _coerce_field(raw_field)
            if snapshot_field is not None:
                filtered[str(name)] = snapshot_field
        self._fields = filtered

    @property
    def properties(self) -> dict[str, SnapshotProperty]:
        """Non-inherited properties keyed by name (returns a copy)."""
        return dict(self._properties)

    @properties.setter
    def properties(self, value: Mapping[str, object]) -> None:
        filtered: dict[str, SnapshotProperty] = {}
        for name, raw_property in value.items():
            snapshot_property = _coerce_property(raw_property)
            if snapshot_property is not None:
                filtered[str(name)] = snapshot_property
        self._properties = filtered

    @property
    def settings(self) -> dict[str, object]:
        """Allow-listed settings (returns a copy)."""
        return dict(self._settings)

    @settings.setter
    def settings(self, value: Mapping[str, object]) -> None:
        self._settings = {
            str(name): setting for name, setting in value.items() if name in SUPPORTED_SETTINGS
        }

    @property
    def ancestors(self) -> tuple[AncestorStub, ...]:
        """Ancestor stubs ordered root-to-parent."""
        return self._ancestors

    @ancestors.setter
    def ancestors(self, value: Iterable[object] | Mapping[str, str]) -> None:
        if isinstance(value, Mapping):
            items: Iterable[object] = [
                AncestorStub(path=str(path), kind=cast(DocumentKind, kind))
                for path, kind in value.items()
            ]
        else:
            items = value
        stubs: list[AncestorStub] = []
        for item in items:
            if not isinstance(item, AncestorStub):
                raise CopierValidationError(
                    f"Invalid ancestor entry {item!r} for {self._path}: expected (path, kind)."
                )
            if item.kind not in SUPPORTED_DOCUMENT_KINDS:
                raise CopierValidationError(
                    f"Unsupported ancestor kind '{item.kind}' at {item.path}."
                )
            stubs.append(AncestorStub(path=canonical_path(item.path), kind=item.kind))
        self._ancestors = tuple(stubs)

    @property
    def dependencies(self) -> tuple[DependencyRecord, ...]:
        """Direct dependency records computed at export time."""
        return self._dependencies

    @dependencies.setter
    def dependencies(self, value: Iterable[object]) -> None:
        records: list[DependencyRecord] = []
        for raw_record in value:
            record = _coerce_dependency(raw_record)
            if record is not None:
                records.append(record)
        self._dependencies = tuple(records)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PortableSnapshot):
            return NotImplemented
        return (
            self._path == other._path
            and self._kind == other._kind
            and self._fields == other._fields
            and self._properties == other._properties
            and self._settings == other._settings
            and self._ancestors == other._ancestors
            and self._dependencies == other._dependencies
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"PortableSnapshot(path={self._path!r}, kind={self._kind!r})"


def _coerce_field(raw_field: object) -> SnapshotField | None:
    if isinstance(raw_field, SnapshotField):
        field_type: Any = raw_field.field_type
        data = raw_field.data
    elif isinstance(raw_field, Mapping) and "type" in raw_field and "data" in raw_field:
        field_type = raw_field["type"]
        data = raw_field["data"]
    else:
        return None
    if field_type not in SUPPORTED_FIELD_TYPES:
        return None
    return SnapshotField(field_type=field_type, data=data)


def _coerce_property(raw_property: object) -> SnapshotProperty | None:
    if isinstance(raw_property, SnapshotProperty):
        property_type: Any = raw_property.property_type
        data = raw_property.data
        inheritable = raw_property.inheritable
    elif isinstance(raw_property, Mapping) and {"type", "data", "inheritable"} <= set(raw_property):
        property_type = raw_property["type"]
        data = raw_property["data"]
        inheritable = bool(raw_property["inheritable"])
    else:
        return None
    if property_type not in SUPPORTED_PROPERTY_TYPES:
        return None
    return SnapshotProperty(property_type=property_type, data=data, inheritable=inheritable)


def _coerce_dependency(raw_record: object) -> DependencyRecord | None:
    if isinstance(raw_record, DependencyRecord):
        kind: Any = raw_record.kind
        path: object = raw_record.path
        reason: object = raw_record.reason
    elif isinstance(raw_record, Mapping) and "type" in raw_record and "path" in raw_record:
        kind = raw_record["type"]
        path = raw_record["path"]
        reason = raw_record.get("reason", "")
    else:
        return None
    if kind not in SUPPORTED_DEPENDENCY_KINDS:
        return None
    try:
        canonical = canonical_path(path)
    except CopierValidationError:
        return None
    return DependencyRecord(kind=kind, path=canonical, reason=str(reason))
