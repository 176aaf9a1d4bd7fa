"""Transfer root push and pull against S3.

A transfer root is moved between environments as a plain prefix of
objects whose keys mirror the ``documents/`` and ``assets/`` layout.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from core.config import CopierConfig
from core.errors import CopierDependencyError, CopierIOError
from core.logging_config import get_logger
from core.s3_uri import parse_s3_uri

_LOGGER = get_logger(__name__)


def push_transfer_root(
    transfer_root: Path,
    output_uri: str,
    config: CopierConfig,
    s3_client: Any | None = None,
) -> int:
    """Upload every file under a transfer root.

    Args:
        transfer_root: Local transfer root directory.
        output_uri: Destination ``s3://bucket/prefix``.
        config: Runtime config with optional session settings.
        s3_client: Preconfigured client; created from config when omitted.

    Returns:
        Number of uploaded files.

    Raises:
        CopierIOError: If the root is missing or an upload fails.
        CopierDependencyError: If boto3 is missing.
    """
    location = parse_s3_uri(output_uri)
    if not transfer_root.is_dir():
        raise CopierIOError(
            f"Transfer root {transfer_root} does not exist. Export documents before pushing."
        )
    client = s3_client or _create_s3_client(config)
    uploaded = _upload_directory(client, transfer_root, location.bucket, location.prefix)
    _LOGGER.info("transfer_root_pushed", transfer_root=str(transfer_root), uri=output_uri, files=uploaded)
    return uploaded


def pull_transfer_root(
    input_uri: str,
    transfer_root: Path,
    config: CopierConfig,
    s3_client: Any | None = None,
) -> int:
    """Download every object under an S3 prefix into a transfer root.

    Args:
        input_uri: Source ``s3://bucket/prefix``.
        transfer_root: Local destination directory.
        config: Runtime config with optional session settings.
        s3_client: Preconfigured client; created from config when omitted.

    Returns:
        Number of downloaded files.

    Raises:
        CopierIOError: If listing or a download fails.
        CopierDependencyError: If boto3 is missing.
    """
    location = parse_s3_uri(input_uri)
    client = s3_client or _create_s3_client(config)
    downloaded = _download_prefix(client, location.bucket, location.prefix, transfer_root)
    _LOGGER.info("transfer_root_pulled", transfer_root=str(transfer_root), uri=input_uri, files=downloaded)
    return downloaded


def _create_s3_client(config: CopierConfig) -> Any:
    """Create boto3 S3 client for transfer sync.

    Raises:
        CopierDependencyError: If boto3 is missing.
    """
    try:
        import boto3
    except ImportError as error:
        raise CopierDependencyError(
            "S3 sync requires boto3, but it is not installed. "
            "Install boto3 to push or pull s3:// transfer roots."
        ) from error
    session_kwargs: dict[str, str] = {}
    if config.s3_profile:
        session_kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        session_kwargs["region_name"] = config.s3_region
    session = boto3.session.Session(**session_kwargs)
    return session.client("s3")


def _upload_directory(s3_client: Any, local_root: Path, bucket: str, prefix: str) -> int:
    """Upload all files below a directory.

    Raises:
        CopierIOError: If upload fails.
    """
    uploaded = 0
    for local_file in sorted(local_root.rglob("*")):
        if not local_file.is_file():
            continue
        relative_path = local_file.relative_to(local_root)
        object_key = f"{prefix}/{relative_path.as_posix()}"
        try:
            s3_client.upload_file(str(local_file), bucket, object_key)
        except Exception as error:
            raise CopierIOError(
                f"Failed to push transfer file {local_file} to s3://{bucket}/{object_key}: {error}. "
                "Check AWS credentials and retry the push."
            ) from error
        uploaded += 1
    return uploaded


def _download_prefix(s3_client: Any, bucket: str, prefix: str, local_root: Path) -> int:
    """Download all objects below a key prefix.

    Raises:
        CopierIOError: If listing or download fails.
    """
    downloaded = 0
    key_prefix = f"{prefix}/"
    try:
        paginator = s3_client.get_paginator("list_objects_v2")
        pages = list(paginator.paginate(Bucket=bucket, Prefix=key_prefix))
    except Exception as error:
        raise CopierIOError(
            f"Failed to list s3://{bucket}/{key_prefix}: {error}. "
            "Check AWS credentials and the bucket name."
        ) from error
    for page in pages:
        for item in page.get("Contents", []):
            object_key = str(item["Key"])
            relative_key = object_key[len(key_prefix):]
            if not relative_key or relative_key.endswith("/"):
                continue
            local_file = local_root / relative_key
            if ".." in Path(relative_key).parts:
                raise CopierIOError(
                    f"Refusing to pull s3://{bucket}/{object_key}: key escapes the transfer root."
                )
            try:
                local_file.parent.mkdir(parents=True, exist_ok=True)
                s3_client.download_file(bucket, object_key, str(local_file))
            except Exception as error:
                raise CopierIOError(
                    f"Failed to pull s3://{bucket}/{object_key} to {local_file}: {error}. "
                    "Check AWS credentials and local permissions."
                ) from error
            downloaded += 1
    return downloaded
