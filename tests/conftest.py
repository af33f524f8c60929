"""Pytest configuration shared across the suite."""

import pytest


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO-powered tests to run against asyncio backend only."""
    return "asyncio"


@pytest.fixture(autouse=True)
def _fresh_token_store():
    """Drop the process-wide token store so no test inherits another's token."""
    yield
    from consent_bridge.dependencies import get_token_store

    get_token_store.cache_clear()
