"""Shared pytest fixtures for Scrubline tests."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest

from core.config import ScrublineConfig


@pytest.fixture
def config(tmp_path: Path) -> ScrublineConfig:
    """Return environment config rooted in a per-test data directory."""
    return replace(ScrublineConfig.from_env(), data_root=tmp_path / "data")
