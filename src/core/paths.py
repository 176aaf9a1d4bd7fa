"""Tree path and depth validation helpers.

Paths are the stable identity of documents and assets across
environments, so every boundary normalizes them the same way.
"""

from __future__ import annotations

from core.constants import MAX_DEPTH, MIN_DEPTH, ROOT_PATH
from core.errors import CopierValidationError


def canonical_path(raw_path: object) -> str:
    """Normalize a tree path into canonical form.

    Args:
        raw_path: Caller-supplied path.

    Returns:
        Path with a leading slash, no duplicate or trailing slashes.

    Raises:
        CopierValidationError: If the path is empty or contains traversal segments.
    """
    if not isinstance(raw_path, str) or not raw_path.strip():
        raise CopierValidationError(
            f"Invalid document path {raw_path!r}: expected a non-empty string like '/a/b'."
        )
    segments = [segment for segment in raw_path.strip().split("/") if segment]
    for segment in segments:
        if segment in (".", ".."):
            raise CopierValidationError(
                f"Invalid document path '{raw_path}': traversal segment '{segment}' is not allowed."
            )
    if not segments:
        return ROOT_PATH
    return ROOT_PATH + "/".join(segments)


def validate_depth(raw_depth: object) -> int:
    """Validate a dependency depth bound.

    Raises:
        CopierValidationError: If depth is not an integer in the supported range.
    """
    if isinstance(raw_depth, bool) or not isinstance(raw_depth, int):
        raise CopierValidationError(f"Invalid depth {raw_depth!r}: expected an integer.")
    if raw_depth < MIN_DEPTH or raw_depth > MAX_DEPTH:
        raise CopierValidationError(
            f"Depth must be between {MIN_DEPTH} and {MAX_DEPTH}, got {raw_depth}."
        )
    return raw_depth


def path_key(path: str) -> str:
    """Return the last segment of a canonical path."""
    return path.rsplit("/", 1)[-1]


def parent_path(path: str) -> str:
    """Return the parent of a canonical path; the root is its own parent."""
    head = path.rsplit("/", 1)[0]
    return head or ROOT_PATH


def join_path(parent: str, key: str) -> str:
    """Join a canonical parent path and a child key."""
    if parent == ROOT_PATH:
        return ROOT_PATH + key
    return f"{parent}/{key}"
