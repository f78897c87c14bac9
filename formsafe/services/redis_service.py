# formsafe/services/redis_service.py
"""
Redis Service for formsafe.

Thin synchronous wrapper around redis-py used by the Redis session store:
- Flexible configuration for multiple Redis providers
- Per-session hashes with TTL support
- Session-level locks
- Errors surfaced as RedisServiceError
"""
import os
import logging
from dataclasses import dataclass
from typing import Optional

import redis
from redis.lock import Lock

from formsafe.core.service_base import BaseService
from formsafe.core.exceptions import RedisServiceError, ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class RedisConfig:
    """Configuration for Redis Service"""
    url: Optional[str] = None
    decode_responses: bool = True
    socket_timeout: float = 5.0
    max_connections: int = 10
    retry_on_timeout: bool = True
    health_check_interval: int = 30


class RedisService(BaseService[RedisConfig]):
    """
    Synchronous Redis service for session storage.

    Unlike a cache, session data must not silently disappear, so every
    failed command raises RedisServiceError instead of returning a default.
    """

    # Priority order for Redis URLs
    URL_ENV_VARS = (
        "REDIS_URL",
        "REDIS_DIRECT_URI",
        "REDIS_TLS_URL",
    )

    def __init__(self, config: Optional[RedisConfig] = None):
        """
        Initialize Redis Service.

        Args:
            config: Redis configuration. If not provided, uses environment variables.
        """
        self._url_source = None
        if config is None:
            config = RedisConfig(url=self._get_redis_url())
        super().__init__(config, logger)

    def _get_redis_url(self) -> Optional[str]:
        """Get Redis URL from environment variables."""
        for var in self.URL_ENV_VARS:
            if url := os.environ.get(var):
                self._url_source = var
                logger.info(f"Using Redis URL from {var}")
                return url
        return None

    def _validate_config(self) -> None:
        super()._validate_config()

        if not self.config.url:
            raise ConfigurationError(
                "No Redis URL configured. Set one of: " + ", ".join(self.URL_ENV_VARS),
                component=self.service_name
            )

    def _initialize_client(self) -> redis.Redis:
        client = redis.Redis.from_url(
            self.config.url,
            decode_responses=self.config.decode_responses,
            socket_timeout=self.config.socket_timeout,
            max_connections=self.config.max_connections,
            retry_on_timeout=self.config.retry_on_timeout,
            health_check_interval=self.config.health_check_interval
        )

        # Test connection
        client.ping()
        self.logger.info("Redis connection successful")
        return client

    def hget(self, key: str, field: str) -> Optional[str]:
        """
        Get one field of a hash.

        Returns:
            The stored value or None
        """
        try:
            return self.client.hget(key, field)
        except redis.RedisError as e:
            raise RedisServiceError(f"Redis hget failed: {e}", key=key, operation="hget") from e

    def hset(self, key: str, field: str, value: str, ttl: Optional[int] = None) -> None:
        """
        Set one field of a hash.

        Args:
            key: Hash key
            field: Field inside the hash
            value: Value to store
            ttl: Time to live in seconds for the whole hash, refreshed on write
        """
        try:
            pipe = self.client.pipeline()
            pipe.hset(key, field, value)
            if ttl:
                pipe.expire(key, ttl)
            pipe.execute()
        except redis.RedisError as e:
            raise RedisServiceError(f"Redis hset failed: {e}", key=key, operation="hset") from e

    def hdel(self, key: str, field: str) -> int:
        """
        Delete one field of a hash.

        Returns:
            Number of fields removed
        """
        try:
            return self.client.hdel(key, field)
        except redis.RedisError as e:
            raise RedisServiceError(f"Redis hdel failed: {e}", key=key, operation="hdel") from e

    def lock(self, name: str, timeout: Optional[float] = None, blocking_timeout: Optional[float] = None) -> Lock:
        """
        Distributed lock shared by every process using the same Redis.

        Args:
            name: Lock key
            timeout: Auto-release after this many seconds
            blocking_timeout: Give up acquiring after this many seconds
        """
        return self.client.lock(name, timeout=timeout, blocking_timeout=blocking_timeout)

    def _cleanup(self) -> None:
        """Clean up Redis connection"""
        if self._client:
            self._client.close()


def create_redis_service(url: Optional[str] = None, **kwargs) -> RedisService:
    """
    Create and initialize a Redis service instance.

    Args:
        url: Redis URL (uses env vars if not provided)
        **kwargs: Additional config parameters

    Returns:
        Initialized RedisService
    """
    config = RedisConfig(url=url, **kwargs) if url else None
    service = RedisService(config)
    service.initialize()
    return service
