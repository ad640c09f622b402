"""Pytest configuration and fixtures."""

from __future__ import annotations

from collections.abc import Generator

import pytest

from shellscan.config import Settings, get_settings


@pytest.fixture  # type: ignore[misc]
def test_settings() -> Settings:
    """Create test settings with compact output and a small length limit."""
    return Settings(
        log_level="DEBUG",
        json_indent=None,
        max_command_length=64,
    )


@pytest.fixture(autouse=True)  # type: ignore[misc]
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache before and after each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
