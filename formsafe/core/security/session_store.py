"""
Server-side session storage for the CSRF handshake.

A SessionStore is the state of ONE user session. The CSRF guard only needs
get / set / delete plus lock(), which serializes read-compare-delete
sequences so that concurrent requests from the same session cannot both
consume the same token.

Backends:
- InMemorySessionStore: process-local dict guarded by an RLock
- RedisSessionStore: one Redis hash per session, Redis lock per session

SessionRegistry hands out one store per session id and evicts idle
in-memory sessions.
"""

from abc import ABC, abstractmethod
from collections import OrderedDict
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterator, Optional
import logging
import threading

from redis.exceptions import LockError

from formsafe.core.config import settings
from formsafe.core.exceptions import SessionStoreError
from formsafe.services.redis_service import RedisService, create_redis_service

logger = logging.getLogger(__name__)


class SessionStore(ABC):
    """Key/value state of a single user session"""

    def __init__(self, session_id: str):
        self.session_id = session_id

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value or None"""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one"""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove a key; returns whether it existed"""

    @abstractmethod
    def lock(self):
        """Context manager holding the session-level lock"""


class InMemorySessionStore(SessionStore):
    """Process-local session; lost on restart, not shared between workers."""

    def __init__(self, session_id: str):
        super().__init__(session_id)
        self._data: Dict[str, str] = {}
        self._lock = threading.RLock()
        self.last_activity = datetime.now(timezone.utc)

    def touch(self) -> None:
        self.last_activity = datetime.now(timezone.utc)

    def is_expired(self, ttl: timedelta) -> bool:
        """Idle for longer than ttl"""
        return datetime.now(timezone.utc) - self.last_activity > ttl

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    @contextmanager
    def lock(self) -> Iterator[None]:
        with self._lock:
            yield

    def __len__(self) -> int:
        return len(self._data)


class RedisSessionStore(SessionStore):
    """
    Session kept in the Redis hash `<prefix>:<session_id>`.

    The lock lives next to it under `<prefix>:<session_id>:lock` so every
    worker process sharing the Redis instance serializes on it.
    """

    def __init__(
        self,
        session_id: str,
        redis_service: RedisService,
        key_prefix: Optional[str] = None,
        ttl: Optional[int] = None,
        lock_timeout: Optional[float] = None
    ):
        super().__init__(session_id)
        self._redis = redis_service
        prefix = key_prefix or settings.SESSION_KEY_PREFIX
        self.key = f"{prefix}:{session_id}"
        self.lock_key = f"{self.key}:lock"
        self._ttl = ttl if ttl is not None else settings.SESSION_TTL_SECONDS
        self._lock_timeout = lock_timeout or settings.SESSION_LOCK_TIMEOUT

    def get(self, key: str) -> Optional[str]:
        return self._redis.hget(self.key, key)

    def set(self, key: str, value: str) -> None:
        self._redis.hset(self.key, key, value, ttl=self._ttl)

    def delete(self, key: str) -> bool:
        return self._redis.hdel(self.key, key) > 0

    @contextmanager
    def lock(self) -> Iterator[None]:
        redis_lock = self._redis.lock(
            self.lock_key,
            timeout=self._lock_timeout,
            blocking_timeout=self._lock_timeout
        )
        if not redis_lock.acquire():
            raise SessionStoreError(
                "Timed out waiting for session lock",
                session_id=self.session_id
            )
        try:
            yield
        finally:
            try:
                redis_lock.release()
            except LockError:
                # Lock expired while held; the next holder already owns it
                logger.warning(f"⏰ Session lock for {self.session_id[:8]}... expired before release")


class SessionRegistry:
    """
    Hands out one SessionStore per session id.

    With a RedisService the stores are stateless views onto Redis and expire
    through the hash TTL. Without one, in-memory stores are kept until they
    have been idle for the session TTL; when max_sessions is reached the
    least recently used session is evicted to make room.
    """

    def __init__(
        self,
        redis_service: Optional[RedisService] = None,
        ttl_seconds: Optional[int] = None,
        max_sessions: Optional[int] = None
    ):
        self._redis = redis_service
        self._stores: "OrderedDict[str, InMemorySessionStore]" = OrderedDict()
        self._lock = threading.RLock()

        self._ttl = timedelta(seconds=ttl_seconds or settings.SESSION_TTL_SECONDS)
        self._max_sessions = max_sessions or settings.SESSION_MAX_IN_MEMORY
        self._cleanup_interval = timedelta(minutes=1)
        self._last_cleanup = datetime.now(timezone.utc)

    @property
    def backend(self) -> str:
        return "redis" if self._redis is not None else "memory"

    def get(self, session_id: str) -> SessionStore:
        if not session_id:
            raise SessionStoreError("Session id is required")

        if self._redis is not None:
            return RedisSessionStore(session_id, self._redis)

        with self._lock:
            if datetime.now(timezone.utc) - self._last_cleanup >= self._cleanup_interval:
                self.cleanup_expired()

            store = self._stores.get(session_id)
            if store is not None and store.is_expired(self._ttl):
                logger.info(f"⏰ Session {session_id[:8]}... expired")
                del self._stores[session_id]
                store = None

            if store is None:
                if len(self._stores) >= self._max_sessions:
                    evicted_id, _ = self._stores.popitem(last=False)
                    logger.warning(f"🧹 Session limit reached, evicted {evicted_id[:8]}...")
                store = InMemorySessionStore(session_id)
                self._stores[session_id] = store
                logger.debug(f"Created in-memory session {session_id[:8]}...")
            else:
                store.touch()
                self._stores.move_to_end(session_id)
            return store

    def cleanup_expired(self) -> int:
        """Drop idle in-memory sessions; returns how many were removed"""
        with self._lock:
            expired_ids = [
                sid for sid, store in self._stores.items()
                if store.is_expired(self._ttl)
            ]
            for sid in expired_ids:
                del self._stores[sid]
            self._last_cleanup = datetime.now(timezone.utc)

        if expired_ids:
            logger.info(f"🧹 Cleaned up {len(expired_ids)} expired sessions")
        return len(expired_ids)

    def discard(self, session_id: str) -> None:
        """Forget an in-memory session, e.g. on logout"""
        with self._lock:
            self._stores.pop(session_id, None)

    def close(self) -> None:
        """Drop in-memory sessions and release the Redis connection"""
        with self._lock:
            self._stores.clear()
        if self._redis is not None:
            self._redis.shutdown()

    def __len__(self) -> int:
        return len(self._stores)


# Global instance - set up by init_session_registry()
session_registry: Optional[SessionRegistry] = None


def get_session_registry() -> SessionRegistry:
    """
    Get the global session registry.

    Follows FastAPI dependency injection pattern.
    """
    if session_registry is None:
        raise SessionStoreError("SessionRegistry not initialized")
    return session_registry


def init_session_registry(redis_service: Optional[RedisService] = None) -> SessionRegistry:
    """
    Initialize the global session registry.

    Args:
        redis_service: Shared Redis backend; when omitted and REDIS_URL is
            configured, one is created and connected here
    """
    global session_registry
    if redis_service is None and settings.REDIS_URL:
        redis_service = create_redis_service(settings.REDIS_URL)

    session_registry = SessionRegistry(redis_service)
    logger.info(f"🔐 Initialized SessionRegistry ({session_registry.backend})")
    return session_registry


def close_session_registry() -> None:
    """Shut down the global session registry, e.g. from an app's shutdown hook"""
    global session_registry
    if session_registry is not None:
        session_registry.close()
        session_registry = None
        logger.info("🔐 SessionRegistry closed")
