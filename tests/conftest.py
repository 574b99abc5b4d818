"""Pytest configuration for csp_channel tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from csp_channel import clear_log_hooks

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio backend for async tests."""
    return 'asyncio'


@pytest.fixture(autouse=True)
def cleanup_hooks() -> Generator[None]:
    """Clear log hooks before and after each test."""
    clear_log_hooks()
    yield
    clear_log_hooks()
