"""Core constants used across document copier modules.

This module centralizes transfer layout names and closed tag sets.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_TRANSFER_ROOT = Path(".doc_copier") / "transfer"
DEFAULT_STATE_FILE = Path(".doc_copier") / "state.json"
DOCUMENTS_DIR_NAME = "documents"
ASSETS_DIR_NAME = "assets"
SNAPSHOT_FILE_SUFFIX = ".json"
ROOT_PATH = "/"
MIN_DEPTH = 0
MAX_DEPTH = 10
DEFAULT_DEPTH = 0
TRANSFER_PLAN_VERSION = 1

SUPPORTED_DOCUMENT_KINDS = ("folder", "page", "snippet", "link", "hardlink", "email")
FIELD_BEARING_KINDS = ("page", "snippet", "email")
SUPPORTED_FIELD_TYPES = (
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
)
SUPPORTED_PROPERTY_TYPES = ("text", "bool", "document", "asset")
REFERENCE_PROPERTY_TYPES = ("document", "asset")
SUPPORTED_DEPENDENCY_KINDS = ("asset", "document")
SUPPORTED_SETTINGS = (
    "title",
    "description",
    "module",
    "controller",
    "action",
    "template",
    "published",
    "prettyUrl",
    "_link",
    "linkType",
    "_source",
    "childrenFromSource",
    "propertiesFromSource",
    "subject",
    "from",
    "replyTo",
    "to",
    "cc",
    "bcc",
)
LINK_TARGET_SETTING = "_link"
HARDLINK_SOURCE_SETTING = "_source"
LINK_TYPE_SETTING = "linkType"
INTERNAL_LINK_TYPE = "internal"
DIRECT_LINK_TYPE = "direct"

_RENDERED_SETTINGS = ("module", "controller", "action", "template", "published")
KIND_SETTINGS: dict[str, tuple[str, ...]] = {
    "folder": ("published",),
    "page": ("title", "description") + _RENDERED_SETTINGS + ("prettyUrl",),
    "snippet": _RENDERED_SETTINGS,
    "email": _RENDERED_SETTINGS + ("subject", "from", "replyTo", "to", "cc", "bcc"),
    "link": ("published", "linkType"),
    "hardlink": ("published", "childrenFromSource", "propertiesFromSource"),
}

CHILD_DOCUMENT_REASON = "Child document"
INTERNAL_LINK_REASON = "Internal link"
HARDLINK_SOURCE_REASON = "Internal hardlink"
CONTENT_MASTER_REASON = "Content master document"
