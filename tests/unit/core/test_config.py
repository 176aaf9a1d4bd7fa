"""Unit tests for core config parsing."""

from __future__ import annotations

import os

import pytest

from core.config import CopierConfig
from core.errors import CopierConfigError


def test_from_env_reads_transfer_root(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should resolve transfer root from environment."""
    monkeypatch.setenv("DOC_COPIER_TRANSFER_ROOT", "./.tmp-transfer")

    config = CopierConfig.from_env()

    assert config.transfer_root.name == ".tmp-transfer" and config.transfer_root.is_absolute()


def test_from_env_defaults_depth_to_zero() -> None:
    """Default depth should be zero when unset."""
    config = CopierConfig.from_env()

    assert config.default_depth == 0


def test_from_env_reads_s3_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """S3 region and profile should pass through unchanged."""
    monkeypatch.setenv("DOC_COPIER_S3_REGION", "eu-central-1")
    monkeypatch.setenv("DOC_COPIER_S3_PROFILE", "staging")

    config = CopierConfig.from_env()

    assert (config.s3_region, config.s3_profile) == ("eu-central-1", "staging")


def test_from_env_raises_for_invalid_depth(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for non-numeric default depth."""
    monkeypatch.setenv("DOC_COPIER_DEFAULT_DEPTH", "deep")

    with pytest.raises(CopierConfigError):
        CopierConfig.from_env()

    assert os.getenv("DOC_COPIER_DEFAULT_DEPTH") == "deep"


def test_from_env_raises_for_out_of_range_depth(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for depth above the supported maximum."""
    monkeypatch.setenv("DOC_COPIER_DEFAULT_DEPTH", "11")

    with pytest.raises(CopierConfigError):
        CopierConfig.from_env()
    assert True
