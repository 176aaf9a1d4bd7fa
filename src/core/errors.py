"""Document copier exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Soft errors (reference, codec) are caught and logged close to where
they are raised; hard errors surface per affected document.
"""

from __future__ import annotations


class CopierError(Exception):
    """Base exception for all document copier failures."""


class CopierConfigError(CopierError):
    """Raised for invalid runtime configuration."""


class CopierValidationError(CopierError):
    """Raised for malformed caller input such as paths, kinds, or depths."""


class CopierReferenceError(CopierError):
    """Raised when a referenced document or asset cannot be resolved."""


class CopierCodecError(CopierError):
    """Raised when a live field value does not match its codec."""


class CopierIOError(CopierError):
    """Raised when transfer files cannot be read or written."""


class CopierSnapshotError(CopierError):
    """Raised when a stored snapshot cannot be decoded."""


class CopierStoreError(CopierError):
    """Raised when the document repository rejects a save or delete."""


class CopierPlanError(CopierError):
    """Raised for invalid or unsupported transfer plan files."""


class CopierDependencyError(CopierError):
    """Raised when an optional runtime dependency is missing."""
