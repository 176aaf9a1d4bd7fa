"""On-disk transfer root layout.

A transfer root holds ``documents/<path>.json`` snapshot files and
``assets/<path>`` raw asset bytes, both mirroring the live tree paths.
"""

from __future__ import annotations

from pathlib import Path

from core.constants import ASSETS_DIR_NAME, DOCUMENTS_DIR_NAME, SNAPSHOT_FILE_SUFFIX
from core.errors import CopierIOError, CopierSnapshotError
from core.logging_config import get_logger
from core.paths import canonical_path
from repository.memory_repository import DocumentRepository
from repository.models import LiveAsset
from snapshot.portable_snapshot import PortableSnapshot
from snapshot.snapshot_payload import snapshot_from_json, snapshot_to_json

_LOGGER = get_logger(__name__)


class TransferFileStore:
    """Reads and writes snapshots and asset bytes under one directory."""

    def __init__(self, root: Path) -> None:
        """Initialize the store.

        Args:
            root: Transfer root directory; created lazily on first write.
        """
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def snapshot_file(self, path: str) -> Path:
        """Return the snapshot file location for a document path."""
        canonical = canonical_path(path)
        relative = canonical.lstrip("/")
        return self._root / DOCUMENTS_DIR_NAME / f"{relative}{SNAPSHOT_FILE_SUFFIX}"

    def asset_file(self, path: str) -> Path:
        """Return the byte file location for an asset path."""
        return self._root / ASSETS_DIR_NAME / canonical_path(path).lstrip("/")

    def save_snapshot(self, snapshot: PortableSnapshot) -> Path:
        """Write a snapshot as JSON.

        Returns:
            Written file path.

        Raises:
            CopierIOError: If the file cannot be written.
        """
        file_path = self.snapshot_file(snapshot.path)
        _write_file(file_path, snapshot_to_json(snapshot).encode("utf-8"), "snapshot")
        _LOGGER.info("snapshot_saved", path=snapshot.path, file=str(file_path))
        return file_path

    def load_snapshot(self, path: str) -> PortableSnapshot:
        """Read the snapshot stored for a document path.

        Raises:
            CopierIOError: If the file is missing or unreadable.
            CopierSnapshotError: If the file cannot be decoded.
        """
        file_path = self.snapshot_file(path)
        try:
            text = _read_file(file_path, "snapshot").decode("utf-8")
        except UnicodeDecodeError as error:
            raise CopierSnapshotError(
                f"Snapshot file {file_path} is not valid UTF-8: {error.reason} at byte {error.start}. "
                "Re-export the document to regenerate the file."
            ) from error
        return snapshot_from_json(text, source=str(file_path))

    def save_asset(self, asset: LiveAsset) -> Path:
        """Write an asset's bytes.

        Raises:
            CopierIOError: If the asset is a folder or the file cannot be written.
        """
        if asset.is_folder:
            raise CopierIOError(
                f"Cannot export asset folder {asset.path}: only file assets carry data."
            )
        file_path = self.asset_file(asset.path)
        _write_file(file_path, asset.data, "asset")
        _LOGGER.info("asset_saved", path=asset.path, file=str(file_path), size=len(asset.data))
        return file_path

    def load_asset(self, path: str, repository: DocumentRepository) -> LiveAsset:
        """Copy stored asset bytes into a repository.

        Missing asset folders are created by the repository.

        Raises:
            CopierIOError: If the file is missing or unreadable.
            CopierStoreError: If the repository rejects the asset.
        """
        file_path = self.asset_file(path)
        asset = repository.save_asset(canonical_path(path), _read_file(file_path, "asset"))
        _LOGGER.info("asset_loaded", path=asset.path, id=asset.id, size=len(asset.data))
        return asset


def _write_file(file_path: Path, data: bytes, label: str) -> None:
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(data)
    except OSError as error:
        raise CopierIOError(
            f"Could not save {label} to {file_path}: {error}. "
            "Check that the transfer root is writable."
        ) from error


def _read_file(file_path: Path, label: str) -> bytes:
    if not file_path.is_file():
        raise CopierIOError(
            f"{label.capitalize()} file {file_path} does not exist. "
            "Export it first or check the transfer root."
        )
    try:
        return file_path.read_bytes()
    except OSError as error:
        raise CopierIOError(f"Could not read {label} file {file_path}: {error}.") from error
