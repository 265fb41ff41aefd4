"""
Pytest Configuration and Shared Test Fixtures

This module provides pytest configuration and reusable fixtures for all tests.
All fixtures defined here are automatically available to all test files.
"""

import os
import sys
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add project root to sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from tests.test_fixtures.backend_factory import BackendTestFactory  # noqa: E402


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def redis_settings():
    """Session settings with no connect backoff so retry tests run instantly."""
    from redis_web_manager.core.config.settings import RedisSettings

    return RedisSettings(REDIS_CONNECT_RETRIES=2, REDIS_CONNECT_RETRY_DELAY=0)


@pytest.fixture
def browser_settings():
    from redis_web_manager.core.config.settings import BrowserSettings

    return BrowserSettings()


# ============================================================================
# Backend Fixtures
# ============================================================================


@pytest.fixture
def mock_client():
    """
    Mock redis.asyncio client.

    Every command is an AsyncMock; `pipeline()` is synchronous in redis-py
    and returns a MagicMock pipeline whose `execute` is awaitable.
    """
    return BackendTestFactory.mock_client()


@pytest.fixture
def session(mock_client, redis_settings):
    """A real Session (real error translation) whose client is a mock."""
    return BackendTestFactory.session(mock_client, settings=redis_settings)


@pytest.fixture
def mock_registry(session):
    """Registry stub whose acquire() always hands out `session`."""
    from redis_web_manager.infrastructure.redis.registry import ConnectionRegistry

    registry = MagicMock(spec=ConnectionRegistry)
    registry.acquire = AsyncMock(return_value=session)
    registry.stats = MagicMock(return_value={"sessions": [], "pending": 0})
    return registry


@pytest.fixture
def target():
    from redis_web_manager.keyspace.models import SessionTarget

    return SessionTarget(connection_id="local", db=None)


# ============================================================================
# Storage Fixtures
# ============================================================================


@pytest.fixture
def profile_store(tmp_path):
    """Profile store backed by a fresh connections.json under tmp_path."""
    from redis_web_manager.infrastructure.storage.profile_store import ConnectionProfileStore

    return ConnectionProfileStore(base_dir=tmp_path)


@pytest.fixture
def sample_profile():
    from redis_web_manager.infrastructure.storage.profile_store import ConnectionProfile

    return ConnectionProfile(
        id="local",
        name="Local",
        host="127.0.0.1",
        port=6379,
        password="s3cret",
        db=2,
        created_at=1700000000000,
    )
