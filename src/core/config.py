"""Runtime configuration model for the document copier.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_DEPTH,
    DEFAULT_STATE_FILE,
    DEFAULT_TRANSFER_ROOT,
    MAX_DEPTH,
    MIN_DEPTH,
)
from core.errors import CopierConfigError


@dataclass(frozen=True)
class CopierConfig:
    """Validated runtime configuration.

    Attributes:
        transfer_root: Local directory holding documents/ and assets/.
        state_file: JSON file holding the CLI live repository.
        default_depth: Dependency depth used when a caller omits one.
        s3_region: Optional default AWS region for S3 sync.
        s3_profile: Optional AWS profile for boto3 session initialization.
    """

    transfer_root: Path
    state_file: Path
    default_depth: int
    s3_region: str | None
    s3_profile: str | None

    @classmethod
    def from_env(cls) -> "CopierConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            CopierConfigError: If environment values are invalid.
        """
        transfer_root_value = os.getenv("DOC_COPIER_TRANSFER_ROOT", str(DEFAULT_TRANSFER_ROOT))
        state_file_value = os.getenv("DOC_COPIER_STATE_FILE", str(DEFAULT_STATE_FILE))
        default_depth_value = os.getenv("DOC_COPIER_DEFAULT_DEPTH", str(DEFAULT_DEPTH))
        return cls(
            transfer_root=Path(transfer_root_value).expanduser().resolve(),
            state_file=Path(state_file_value).expanduser().resolve(),
            default_depth=_parse_default_depth(default_depth_value),
            s3_region=os.getenv("DOC_COPIER_S3_REGION"),
            s3_profile=os.getenv("DOC_COPIER_S3_PROFILE"),
        )


def _parse_default_depth(raw_value: str) -> int:
    """Parse the default depth environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Parsed depth in the supported range.

    Raises:
        CopierConfigError: If value is not an integer or out of range.
    """
    try:
        depth = int(raw_value)
    except ValueError as error:
        raise CopierConfigError(
            "Invalid DOC_COPIER_DEFAULT_DEPTH value: "
            f"expected integer, got '{raw_value}'. "
            "Set DOC_COPIER_DEFAULT_DEPTH to a numeric value."
        ) from error
    if depth < MIN_DEPTH or depth > MAX_DEPTH:
        raise CopierConfigError(
            f"Invalid DOC_COPIER_DEFAULT_DEPTH value {depth}: "
            f"expected a depth between {MIN_DEPTH} and {MAX_DEPTH}."
        )
    return depth
