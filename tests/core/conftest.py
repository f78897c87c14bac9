# tests/core/conftest.py
"""
Shared fixtures for session store and CSRF tests.
"""

import pytest
from unittest.mock import Mock, MagicMock

from formsafe.core.security import CsrfGuard, InMemorySessionStore
from formsafe.services.redis_service import RedisService


@pytest.fixture
def session():
    """Fresh in-memory session"""
    return InMemorySessionStore("test-session-0001")


@pytest.fixture
def guard():
    """Guard with explicit settings so tests don't depend on the environment"""
    return CsrfGuard(key_prefix="csrf:", name_bytes=16, token_bytes=32)


@pytest.fixture
def mock_redis_service():
    """RedisService double backed by a plain dict of hashes"""
    hashes = {}
    service = Mock(spec=RedisService)

    def hget(key, field):
        return hashes.get(key, {}).get(field)

    def hset(key, field, value, ttl=None):
        hashes.setdefault(key, {})[field] = value

    def hdel(key, field):
        return 1 if hashes.get(key, {}).pop(field, None) is not None else 0

    service.hget.side_effect = hget
    service.hset.side_effect = hset
    service.hdel.side_effect = hdel

    redis_lock = MagicMock()
    redis_lock.acquire.return_value = True
    service.lock.return_value = redis_lock

    service.hashes = hashes
    return service
